"""Lambertian (ideal diffuse) material implementation.

A diffuse surface scatters the incoming ray toward
``hit.normal + random_in_unit_sphere()``: the target point is drawn
uniformly from the unit sphere tangent to the surface at the hit point.
The scattered ray always exists and is attenuated by the albedo.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.materials.lambertian import Lambertian
    >>> red = Lambertian((0.8, 0.3, 0.3))
    >>> # Inside a kernel: record = scatter_lambertian(albedo, ray, hit)
"""

from dataclasses import dataclass
from typing import ClassVar

import taichi as ti

from src.spheretrace.core.ray import Ray, make_ray
from src.spheretrace.core.sampler import random_in_unit_sphere
from src.spheretrace.core.vector import vec3
from src.spheretrace.geometry.sphere import HitRecord
from src.spheretrace.materials.material import (
    Material,
    MaterialType,
    ScatterRecord,
    validate_albedo,
)


@dataclass(frozen=True)
class Lambertian(Material):
    """Diffuse material.

    Attributes:
        albedo: The diffuse reflectance (R, G, B), each component in [0, 1].
    """

    material_type: ClassVar[MaterialType] = MaterialType.LAMBERTIAN

    albedo: tuple[float, float, float]

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", validate_albedo(self.albedo))

    def upload(self) -> int:
        return add_lambertian_material(self.albedo)


@ti.func
def scatter_lambertian(albedo: vec3, ray: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter a ray off a diffuse surface.

    Args:
        albedo: The diffuse reflectance color (RGB).
        ray: The incoming ray (unused; diffuse scattering ignores it).
        rec: The hit being shaded.

    Returns:
        A ScatterRecord with did_scatter == 1, the scattered ray from the
        hit point toward ``normal + random_in_unit_sphere()`` and the albedo
        as attenuation.
    """
    direction = rec.normal + random_in_unit_sphere()
    return ScatterRecord(
        did_scatter=1,
        scattered=make_ray(rec.point, direction),
        attenuation=albedo,
    )


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of Lambertian materials in the scene
MAX_LAMBERTIAN_MATERIALS = 1024

lambertian_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LAMBERTIAN_MATERIALS)
num_lambertian_materials = ti.field(dtype=ti.i32, shape=())


def clear_lambertian_materials() -> None:
    """Clear all Lambertian materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_lambertian_materials[None] = 0


def add_lambertian_material(albedo: tuple[float, float, float]) -> int:
    """Add a Lambertian material to the registry.

    Args:
        albedo: The diffuse reflectance as (R, G, B), each in [0, 1].

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
    """
    albedo = validate_albedo(albedo)

    idx = num_lambertian_materials[None]
    if idx >= MAX_LAMBERTIAN_MATERIALS:
        raise RuntimeError(
            f"Maximum number of Lambertian materials ({MAX_LAMBERTIAN_MATERIALS}) exceeded"
        )

    lambertian_albedos[idx] = list(albedo)
    num_lambertian_materials[None] = idx + 1
    return idx


def get_lambertian_material_count() -> int:
    """Get the number of Lambertian materials in the registry."""
    return int(num_lambertian_materials[None])


@ti.func
def get_lambertian_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a Lambertian material by registry index."""
    return lambertian_albedos[material_idx]
