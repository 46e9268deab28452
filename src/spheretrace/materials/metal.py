"""Metal (specular reflective) material implementation.

The incoming direction is normalized and mirrored about the surface normal:

    R = I - 2(I . N)N

and then perturbed by ``fuzz * random_in_unit_sphere()``. A fuzz of 0 is a
perfect mirror; larger values blur the reflection. When the perturbed
direction points into the surface (``dot(R, N) <= 0``) the ray is absorbed.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.materials.metal import Metal
    >>> brushed_steel = Metal((0.7, 0.6, 0.5), fuzz=0.3)
"""

from dataclasses import dataclass
from typing import ClassVar

import taichi as ti

from src.spheretrace.core.ray import Ray, make_ray
from src.spheretrace.core.sampler import random_in_unit_sphere
from src.spheretrace.core.vector import dot, reflect, unit_vector, vec3
from src.spheretrace.geometry.sphere import HitRecord
from src.spheretrace.materials.material import (
    Material,
    MaterialType,
    ScatterRecord,
    make_absorbed_record,
    validate_albedo,
)


@dataclass(frozen=True)
class Metal(Material):
    """Reflective material.

    Attributes:
        albedo: The reflective color (R, G, B), each component in [0, 1].
        fuzz: Perturbation radius of the reflected direction. Values outside
            [0, 1] are clamped into it at construction.
    """

    material_type: ClassVar[MaterialType] = MaterialType.METAL

    albedo: tuple[float, float, float]
    fuzz: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "albedo", validate_albedo(self.albedo))
        object.__setattr__(self, "fuzz", min(max(float(self.fuzz), 0.0), 1.0))

    def upload(self) -> int:
        return add_metal_material(self.albedo, self.fuzz)


@ti.func
def scatter_metal(albedo: vec3, fuzz: ti.f32, ray: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter a ray off a metal surface.

    Args:
        albedo: The reflective color (RGB).
        fuzz: The perturbation radius in [0, 1]. 0 = perfect mirror.
        ray: The incoming ray.
        rec: The hit being shaded.

    Returns:
        A ScatterRecord. did_scatter is 0 when the perturbed reflection
        points into the surface.
    """
    reflected = reflect(unit_vector(ray.direction), rec.normal)
    direction = reflected + fuzz * random_in_unit_sphere()

    result = make_absorbed_record()
    if dot(direction, rec.normal) > 0.0:
        result = ScatterRecord(
            did_scatter=1,
            scattered=make_ray(rec.point, direction),
            attenuation=albedo,
        )
    return result


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of metal materials in the scene
MAX_METAL_MATERIALS = 1024

metal_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_METAL_MATERIALS)
metal_fuzzes = ti.field(dtype=ti.f32, shape=MAX_METAL_MATERIALS)
num_metal_materials = ti.field(dtype=ti.i32, shape=())


def clear_metal_materials() -> None:
    """Clear all metal materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_metal_materials[None] = 0


def add_metal_material(albedo: tuple[float, float, float], fuzz: float = 0.0) -> int:
    """Add a metal material to the registry.

    Args:
        albedo: The reflective color as (R, G, B), each in [0, 1].
        fuzz: The perturbation radius, clamped into [0, 1].

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any albedo component is outside [0, 1].
    """
    albedo = validate_albedo(albedo)

    idx = num_metal_materials[None]
    if idx >= MAX_METAL_MATERIALS:
        raise RuntimeError(f"Maximum number of metal materials ({MAX_METAL_MATERIALS}) exceeded")

    metal_albedos[idx] = list(albedo)
    metal_fuzzes[idx] = min(max(fuzz, 0.0), 1.0)
    num_metal_materials[None] = idx + 1
    return idx


def get_metal_material_count() -> int:
    """Get the number of metal materials in the registry."""
    return int(num_metal_materials[None])


@ti.func
def get_metal_albedo(material_idx: ti.i32) -> vec3:
    """Get the albedo for a metal material by registry index."""
    return metal_albedos[material_idx]


@ti.func
def get_metal_fuzz(material_idx: ti.i32) -> ti.f32:
    """Get the fuzz for a metal material by registry index."""
    return metal_fuzzes[material_idx]
