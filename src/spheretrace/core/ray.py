"""Ray data structure.

A ray is the parametric line ``origin + t * direction``. The direction is
kept exactly as given; nothing in the renderer relies on it being unit
length.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.core.ray import make_ray, point_at_parameter, vec3
    >>> @ti.kernel
    ... def k() -> vec3:
    ...     ray = make_ray(vec3(0.0, 0.0, 0.0), vec3(1.0, 0.0, 0.0))
    ...     return point_at_parameter(ray, 5.0)  # (5, 0, 0)
"""

import taichi as ti

from src.spheretrace.core.vector import vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not normalized.
    """

    origin: vec3
    direction: vec3


@ti.func
def point_at_parameter(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a Taichi kernel."""
    return Ray(origin=origin, direction=direction)
