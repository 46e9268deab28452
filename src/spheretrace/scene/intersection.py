"""Scene-level ray intersection testing.

The loaded scene is a flat list of spheres stored in Taichi fields. Each
sphere carries the unified ID of its material.

intersect_scene() scans the spheres in insertion order. The upper bound
of the search window starts at t_max and shrinks to the parameter of each
accepted hit, so the record left at the end of the scan is the closest
one. A later sphere only replaces the current hit if it is strictly
closer, so exact ties keep the earlier sphere. The scan is linear: there
is no spatial acceleration structure.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
    0
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti

from src.spheretrace.core.ray import Ray
from src.spheretrace.geometry.sphere import HitRecord, SphereGeometry, hit_sphere, make_miss_record

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Resets the sphere count to zero. The field data is overwritten when new
    spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(center: tuple[float, float, float], radius: float, material_id: int = 0) -> int:
    """Append a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        material_id: The unified material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [center[0], center[1], center[2]]
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def intersect_scene(ray: Ray, t_min: ti.f32, t_max: ti.f32) -> HitRecord:
    """Find the closest intersection of a ray with the scene.

    Args:
        ray: The ray to test.
        t_min: Exclusive lower bound of the search window.
        t_max: Exclusive upper bound of the search window.

    Returns:
        The HitRecord of the closest sphere hit in (t_min, t_max), or a
        miss record (hit == 0).
    """
    closest_so_far = t_max
    result = make_miss_record()

    for i in range(num_spheres[None]):
        sphere = SphereGeometry(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray, sphere, t_min, closest_so_far, sphere_material_ids[i])
        if rec.hit == 1:
            closest_so_far = rec.t
            result = rec

    return result
