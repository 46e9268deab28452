"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    vector: vec3 operations (dot, cross, reflect, refract, schlick)
    ray: Ray data structure
    sampler: Random number source and rejection samplers
    integrator: Path tracing and the render target
    renderer: Band-by-band render loop with progress and cancellation

All compute-intensive operations use Taichi kernels, so the package must
be imported after ti.init().
"""

from .ray import Ray, make_ray, point_at_parameter
from .sampler import (
    is_fixed_random,
    random_float,
    random_in_unit_disk,
    random_in_unit_sphere,
    use_fixed_random,
    use_thread_random,
)
from .vector import (
    cross,
    dot,
    length,
    reflect,
    refract,
    schlick,
    squared_length,
    unit_vector,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports
# (the integrator depends on the camera, materials and scene packages).
# Import directly from src.spheretrace.core.integrator or src.spheretrace.core.renderer.

__all__ = [
    "Ray",
    "make_ray",
    "point_at_parameter",
    "vec3",
    "dot",
    "cross",
    "squared_length",
    "length",
    "unit_vector",
    "reflect",
    "refract",
    "schlick",
    "random_float",
    "random_in_unit_sphere",
    "random_in_unit_disk",
    "use_fixed_random",
    "use_thread_random",
    "is_fixed_random",
]
