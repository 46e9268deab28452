"""Unit tests for the Dielectric material module.

Tests cover:
- Refraction vs reflection choice by Schlick probability
- Total internal reflection when leaving the medium at a grazing angle
- Attenuation is always white and the ray always scatters
- Material registry operations
"""

import numpy as np
import pytest
import taichi as ti


def _scatter_once(ref_idx, direction, normal):
    """Scatter one ray off a dielectric surface at the origin."""
    from src.spheretrace.core.ray import make_ray
    from src.spheretrace.core.vector import vec3
    from src.spheretrace.geometry.sphere import HitRecord
    from src.spheretrace.materials.dielectric import scatter_dielectric

    did_scatter = ti.field(dtype=ti.i32, shape=())
    out_dir = ti.Vector.field(3, dtype=ti.f32, shape=())
    out_att = ti.Vector.field(3, dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(r: ti.f32, d: vec3, n: vec3):
        rec = HitRecord(hit=1, t=1.0, point=vec3(0.0, 0.0, 0.0), normal=n, material_id=0)
        srec = scatter_dielectric(r, make_ray(-d, d), rec)
        did_scatter[None] = srec.did_scatter
        out_dir[None] = srec.scattered.direction
        out_att[None] = srec.attenuation

    test_kernel(ref_idx, vec3(*direction), vec3(*normal))
    return did_scatter[None], out_dir[None].to_numpy(), out_att[None].to_numpy()


class TestDielectricConfig:
    """Tests for the Dielectric dataclass."""

    def test_ref_idx(self):
        from src.spheretrace.materials import Dielectric, MaterialType

        glass = Dielectric(1.5)
        assert glass.ref_idx == 1.5
        assert glass.material_type == MaterialType.DIELECTRIC

    @pytest.mark.parametrize("ref_idx", [0.0, -1.5])
    def test_invalid_ref_idx(self, ref_idx):
        from src.spheretrace.materials import Dielectric

        with pytest.raises(ValueError, match="refraction"):
            Dielectric(ref_idx)


class TestDielectricScatter:
    """Tests for scatter_dielectric."""

    def test_head_on_refracts_straight_through(self, fixed_random):
        """A draw above the Schlick reflectance refracts; head-on it does not bend."""
        fixed_random(0.5)
        did_scatter, d, att = _scatter_once(1.5, (0.0, -1.0, 0.0), (0.0, 1.0, 0.0))
        assert did_scatter == 1
        assert np.allclose(d, [0.0, -1.0, 0.0], atol=1e-5)
        assert np.allclose(att, [1.0, 1.0, 1.0])

    def test_grazing_entry_reflects_below_schlick(self, fixed_random):
        """A draw below the Schlick reflectance (about 0.61 here) reflects."""
        fixed_random(0.25)
        did_scatter, d, att = _scatter_once(1.5, (1.0, -0.1, 0.0), (0.0, 1.0, 0.0))
        assert did_scatter == 1
        assert np.allclose(d, [1.0, 0.1, 0.0], atol=1e-5)
        assert np.allclose(att, [1.0, 1.0, 1.0])

    def test_total_internal_reflection(self, fixed_random):
        """Leaving glass at a grazing angle reflects regardless of the draw."""
        fixed_random(0.75)
        did_scatter, d, att = _scatter_once(1.5, (1.0, 0.1, 0.0), (0.0, 1.0, 0.0))
        assert did_scatter == 1
        assert np.allclose(d, [1.0, -0.1, 0.0], atol=1e-5)
        assert np.allclose(att, [1.0, 1.0, 1.0])

    def test_exiting_refraction_bends_away_from_normal(self, fixed_random):
        """Leaving the medium steeply refracts, with a larger tangential component."""
        fixed_random(0.75)
        did_scatter, d, _ = _scatter_once(1.5, (0.2, 1.0, 0.0), (0.0, 1.0, 0.0))
        assert did_scatter == 1
        assert d[1] > 0.0
        unit_in = 0.2 / np.hypot(0.2, 1.0)
        assert d[0] / np.linalg.norm(d) > unit_in

    def test_never_absorbs(self):
        """Every sample scatters with white attenuation."""
        from src.spheretrace.core.ray import make_ray
        from src.spheretrace.core.vector import vec3
        from src.spheretrace.geometry.sphere import HitRecord
        from src.spheretrace.materials.dielectric import scatter_dielectric

        n = 512
        results = ti.field(dtype=ti.i32, shape=n)
        attenuations = ti.Vector.field(3, dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                d = vec3(1.0, -1.0, 0.3)
                rec = HitRecord(
                    hit=1,
                    t=1.0,
                    point=vec3(0.0, 0.0, 0.0),
                    normal=vec3(0.0, 1.0, 0.0),
                    material_id=0,
                )
                srec = scatter_dielectric(1.5, make_ray(-d, d), rec)
                results[i] = srec.did_scatter
                attenuations[i] = srec.attenuation

        test_kernel()
        assert np.all(results.to_numpy() == 1)
        assert np.allclose(attenuations.to_numpy(), 1.0)


class TestDielectricRegistry:
    """Tests for the dielectric type registry."""

    def test_add_and_read_back(self):
        from src.spheretrace.materials.dielectric import (
            add_dielectric_material,
            get_dielectric_material_count,
            get_dielectric_ref_idx,
        )

        add_dielectric_material()
        add_dielectric_material(2.4)
        assert get_dielectric_material_count() == 2

        value = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            value[None] = get_dielectric_ref_idx(1)

        test_kernel()
        assert value[None] == pytest.approx(2.4)

    def test_rejects_non_positive(self):
        from src.spheretrace.materials.dielectric import add_dielectric_material

        with pytest.raises(ValueError):
            add_dielectric_material(0.0)
