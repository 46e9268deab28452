"""Unit tests for the ready-made scenes.

Tests cover:
- Reproducible random layouts from a seeded generator
- Ground sphere first, big spheres last
- Clearance around the big spheres
- Material parameter ranges
- The three sphere scene and both cameras
"""

import numpy as np
import pytest


def _random_world(seed=7):
    from src.spheretrace.scene.random_scene import create_random_scene

    return create_random_scene(np.random.default_rng(seed))


class TestRandomScene:
    """Tests for create_random_scene."""

    def test_same_seed_same_layout(self):
        first = list(_random_world(3).spheres())
        second = list(_random_world(3).spheres())
        assert len(first) == len(second)
        for a, b in zip(first, second):
            assert a.center == b.center
            assert a.material == b.material

    def test_different_seeds_differ(self):
        first = [s.center for s in _random_world(1).spheres()]
        second = [s.center for s in _random_world(2).spheres()]
        assert first != second

    def test_ground_first_big_spheres_last(self):
        from src.spheretrace.materials import Dielectric, Lambertian, Metal

        spheres = list(_random_world().spheres())
        ground = spheres[0]
        assert ground.center == (0.0, -1000.0, 0.0)
        assert ground.radius == 1000.0
        assert ground.material == Lambertian((0.5, 0.5, 0.5))

        glass, diffuse, metal = spheres[-3:]
        assert glass.center == (0.0, 1.0, 0.0)
        assert glass.material == Dielectric(1.5)
        assert diffuse.center == (-4.0, 1.0, 0.0)
        assert diffuse.material == Lambertian((0.1, 0.8, 0.1))
        assert metal.center == (4.0, 1.0, 0.0)
        assert metal.material == Metal((0.7, 0.6, 0.5), 0.0)
        assert all(s.radius == 1.0 for s in (glass, diffuse, metal))

    def test_small_spheres(self):
        from src.spheretrace.scene.random_scene import CLEARANCE

        small = list(_random_world().spheres())[1:-3]
        # 22 x 22 grid cells, a few dropped near the big spheres
        assert 400 < len(small) <= 484
        for sphere in small:
            assert sphere.radius == pytest.approx(0.2)
            assert sphere.center[1] == pytest.approx(0.2)
            assert -11.0 <= sphere.center[0] < 10.6
            assert -11.0 <= sphere.center[2] < 10.6
            for big in ((4.0, 1.0, 0.0), (-4.0, 1.0, 0.0), (0.0, 1.0, 0.0)):
                assert np.linalg.norm(np.subtract(sphere.center, big)) > CLEARANCE

    def test_material_parameters(self):
        from src.spheretrace.materials import Dielectric, Lambertian, Metal

        small = list(_random_world(11).spheres())[1:-3]
        kinds = set()
        for sphere in small:
            material = sphere.material
            kinds.add(type(material))
            if isinstance(material, Lambertian):
                assert all(0.0 <= c < 1.0 for c in material.albedo)
            elif isinstance(material, Metal):
                assert all(0.5 <= c < 1.0 for c in material.albedo)
                assert 0.0 <= material.fuzz < 0.5
            else:
                assert material == Dielectric(1.5)
        assert kinds == {Lambertian, Metal, Dielectric}

    def test_mostly_diffuse(self):
        from src.spheretrace.materials import Lambertian

        small = list(_random_world(5).spheres())[1:-3]
        diffuse = sum(isinstance(s.material, Lambertian) for s in small)
        assert 0.65 < diffuse / len(small) < 0.95

    def test_loads_within_capacity(self):
        from src.spheretrace.scene.manager import SceneManager

        world = _random_world()
        infos = SceneManager().load(world)
        assert len(infos) == len(world)


class TestThreeSphereScene:
    """Tests for create_three_sphere_scene."""

    def test_layout(self):
        from src.spheretrace.materials import Dielectric, Lambertian, Metal
        from src.spheretrace.scene.random_scene import create_three_sphere_scene

        spheres = list(create_three_sphere_scene().spheres())
        assert [s.center for s in spheres] == [
            (0.0, 0.0, -1.0),
            (0.0, -100.5, -1.0),
            (1.0, 0.0, -1.0),
            (-1.0, 0.0, -1.0),
        ]
        assert [s.radius for s in spheres] == [0.5, 100.0, 0.5, 0.5]
        assert isinstance(spheres[0].material, Lambertian)
        assert isinstance(spheres[2].material, Metal)
        assert spheres[2].material.fuzz == pytest.approx(0.03)
        assert isinstance(spheres[3].material, Dielectric)


class TestCameras:
    """Tests for the scene cameras."""

    def test_cover_camera(self):
        from src.spheretrace.scene.random_scene import create_cover_camera

        camera = create_cover_camera(1200, 800)
        assert camera.lookfrom == (13.0, 2.0, 3.0)
        assert camera.lookat == (0.0, 0.0, 0.0)
        assert camera.vfov == 20.0
        assert camera.aspect_ratio == pytest.approx(1.5)
        assert camera.aperture == pytest.approx(0.1)
        assert camera.focus_dist == 10.0

    def test_three_sphere_camera(self):
        from src.spheretrace.scene.random_scene import create_three_sphere_camera

        camera = create_three_sphere_camera(400, 200)
        assert camera.lookfrom == (0.0, 0.0, 0.0)
        assert camera.lookat == (0.0, 0.0, -1.0)
        assert camera.vfov == 90.0
        assert camera.aspect_ratio == pytest.approx(2.0)
        assert camera.aperture == 0.0

    def test_cover_camera_aperture_override(self):
        from src.spheretrace.scene.random_scene import create_cover_camera

        assert create_cover_camera(100, 100, aperture=0.0).aperture == 0.0
