"""Unit tests for the Lambertian material module.

Tests cover:
- Host-side validation
- Scattering always happens, from the hit point, toward normal + unit-sphere sample
- Attenuation equals the albedo
- Material registry operations
"""

import numpy as np
import pytest
import taichi as ti


class TestLambertianConfig:
    """Tests for the Lambertian dataclass."""

    def test_albedo_stored_as_floats(self):
        from src.spheretrace.materials import Lambertian, MaterialType

        mat = Lambertian((1, 0, 0.5))
        assert mat.albedo == (1.0, 0.0, 0.5)
        assert mat.material_type == MaterialType.LAMBERTIAN

    @pytest.mark.parametrize("albedo", [(1.1, 0.5, 0.5), (0.5, -0.1, 0.5), (0.5, 0.5)])
    def test_invalid_albedo(self, albedo):
        from src.spheretrace.materials import Lambertian

        with pytest.raises(ValueError):
            Lambertian(albedo)

    def test_equal_materials_are_distinct_objects(self):
        """Equality is by value but sharing is by identity."""
        from src.spheretrace.materials import Lambertian

        a = Lambertian((0.5, 0.5, 0.5))
        b = Lambertian((0.5, 0.5, 0.5))
        assert a == b
        assert a is not b


class TestLambertianScatter:
    """Tests for scatter_lambertian."""

    def test_always_scatters_above_surface(self):
        """Every scattered direction lies within the unit sphere around the normal."""
        from src.spheretrace.core.ray import make_ray
        from src.spheretrace.core.vector import vec3
        from src.spheretrace.geometry.sphere import HitRecord
        from src.spheretrace.materials.lambertian import scatter_lambertian

        n = 1024
        scattered = ti.field(dtype=ti.i32, shape=n)
        origins = ti.Vector.field(3, dtype=ti.f32, shape=n)
        directions = ti.Vector.field(3, dtype=ti.f32, shape=n)
        attenuations = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                ray = make_ray(vec3(0.0, 1.0, 0.0), vec3(0.0, -1.0, 0.0))
                rec = HitRecord(
                    hit=1,
                    t=1.0,
                    point=vec3(0.0, 0.0, 0.0),
                    normal=vec3(0.0, 1.0, 0.0),
                    material_id=0,
                )
                srec = scatter_lambertian(vec3(0.8, 0.3, 0.3), ray, rec)
                scattered[i] = srec.did_scatter
                origins[i] = srec.scattered.origin
                directions[i] = srec.scattered.direction
                attenuations[i] = srec.attenuation

        test_kernel()
        assert np.all(scattered.to_numpy() == 1)
        assert np.allclose(origins.to_numpy(), 0.0)
        d = directions.to_numpy()
        offset = d - np.array([0.0, 1.0, 0.0])
        assert np.all(np.sum(offset**2, axis=1) < 1.0)
        assert np.all(d[:, 1] > 0.0)
        assert np.allclose(attenuations.to_numpy(), [0.8, 0.3, 0.3])

    def test_fixed_random_direction(self, fixed_random):
        """With the stub at 0.7 the direction is normal + (0.4, 0.4, 0.4)."""
        from src.spheretrace.core.ray import make_ray
        from src.spheretrace.core.vector import vec3
        from src.spheretrace.geometry.sphere import HitRecord
        from src.spheretrace.materials.lambertian import scatter_lambertian

        direction = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 1.0, 0.0), vec3(0.0, -1.0, 0.0))
            rec = HitRecord(
                hit=1,
                t=1.0,
                point=vec3(0.0, 0.0, 0.0),
                normal=vec3(0.0, 1.0, 0.0),
                material_id=0,
            )
            direction[None] = scatter_lambertian(vec3(0.5, 0.5, 0.5), ray, rec).scattered.direction

        fixed_random(0.7)
        test_kernel()
        assert np.allclose(direction[None].to_numpy(), [0.4, 1.4, 0.4], atol=1e-6)


class TestLambertianRegistry:
    """Tests for the Lambertian type registry."""

    def test_add_and_read_back(self):
        from src.spheretrace.materials.lambertian import (
            add_lambertian_material,
            get_lambertian_albedo,
            get_lambertian_material_count,
        )

        first = add_lambertian_material((0.1, 0.2, 0.3))
        second = add_lambertian_material((0.4, 0.5, 0.6))
        assert (first, second) == (0, 1)
        assert get_lambertian_material_count() == 2

        albedo = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            albedo[None] = get_lambertian_albedo(1)

        test_kernel()
        assert np.allclose(albedo[None].to_numpy(), [0.4, 0.5, 0.6])

    def test_clear(self):
        from src.spheretrace.materials.lambertian import (
            add_lambertian_material,
            clear_lambertian_materials,
            get_lambertian_material_count,
        )

        add_lambertian_material((0.1, 0.2, 0.3))
        clear_lambertian_materials()
        assert get_lambertian_material_count() == 0

    def test_overflow(self):
        from src.spheretrace.materials.lambertian import (
            MAX_LAMBERTIAN_MATERIALS,
            add_lambertian_material,
        )

        for _ in range(MAX_LAMBERTIAN_MATERIALS):
            add_lambertian_material((0.5, 0.5, 0.5))
        with pytest.raises(RuntimeError, match="Maximum"):
            add_lambertian_material((0.5, 0.5, 0.5))
