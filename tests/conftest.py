"""Pytest configuration for spheretrace tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so that Taichi is initialized before fields are created
    from src.spheretrace.core.integrator import reset_render_target
    from src.spheretrace.core.sampler import use_thread_random
    from src.spheretrace.materials.dielectric import clear_dielectric_materials
    from src.spheretrace.materials.lambertian import clear_lambertian_materials
    from src.spheretrace.materials.material import clear_material_tracking
    from src.spheretrace.materials.metal import clear_metal_materials
    from src.spheretrace.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        clear_material_tracking()
        reset_render_target()
        use_thread_random()

    _clear_all()

    yield

    _clear_all()


@pytest.fixture
def fixed_random():
    """Install a constant random stream; the autouse fixture restores it."""
    from src.spheretrace.core.sampler import use_fixed_random

    return use_fixed_random
