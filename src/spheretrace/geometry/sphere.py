"""Sphere primitive with analytic ray-sphere intersection.

The intersection solves ``|origin + t * direction - center|^2 = radius^2``
using the half-b form of the quadratic:

    a = dot(direction, direction)
    b = dot(oc, direction)          (half of the textbook b)
    c = dot(oc, oc) - radius^2
    oc = origin - center
    discriminant = b^2 - a*c

The smaller root is tried first, then the larger one; each must lie in the
open interval (t_min, t_max). The reported normal is the outward normal
``(point - center) / radius``. It is not flipped to face the ray; materials
that care about the side of the surface (dielectrics) work that out from
the ray direction themselves.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.geometry.sphere import SphereGeometry, hit_sphere
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti

from src.spheretrace.core.ray import Ray, point_at_parameter
from src.spheretrace.core.vector import dot, vec3


@ti.dataclass
class SphereGeometry:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-surface intersection.

    Attributes:
        hit: Whether the ray intersected the surface (1 if hit, 0 if miss).
            The remaining fields are only valid if hit == 1.
        t: The ray parameter of the intersection.
        point: The world-space intersection point.
        normal: The unit outward surface normal at the intersection point.
        material_id: The unified material ID of the intersected object.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )


@ti.func
def hit_sphere(
    ray: Ray,
    sphere: SphereGeometry,
    t_min: ti.f32,
    t_max: ti.f32,
    material_id: ti.i32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray: The ray to test. The direction need not be normalized.
        sphere: The sphere to test intersection against.
        t_min: Exclusive lower bound for a valid hit (avoids self-intersection).
        t_max: Exclusive upper bound for a valid hit.
        material_id: Material ID copied into the record on a hit.

    Returns:
        A HitRecord for the nearest root in (t_min, t_max). Check the hit
        field to determine if an intersection occurred.
    """
    oc = ray.origin - sphere.center
    a = dot(ray.direction, ray.direction)
    b = dot(oc, ray.direction)
    c = dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - a * c

    result = make_miss_record()

    if discriminant > 0.0:
        sqrt_d = ti.sqrt(discriminant)

        # Smaller root first
        t = (-b - sqrt_d) / a
        valid = t_min < t < t_max
        if not valid:
            t = (-b + sqrt_d) / a
            valid = t_min < t < t_max

        if valid:
            point = point_at_parameter(ray, t)
            result = HitRecord(
                hit=1,
                t=t,
                point=point,
                normal=(point - sphere.center) / sphere.radius,
                material_id=material_id,
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> SphereGeometry:
    """Create a sphere from center and radius inside a Taichi kernel."""
    return SphereGeometry(center=center, radius=radius)
