"""Dielectric (glass/water) material implementation.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when Snell's law has no solution

Sphere normals always point outward, so the side of the surface is read
from the ray: ``dot(direction, normal) > 0`` means the ray is leaving the
medium. In that case the normal is flipped and the index ratio inverted.
When refraction is possible the material picks reflection with probability
``schlick(cosine, ref_idx)`` and refraction otherwise. Clear glass absorbs
nothing, so the attenuation is always white and the ray always scatters.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.materials.dielectric import Dielectric
    >>> glass = Dielectric(1.5)
"""

from dataclasses import dataclass
from typing import ClassVar

import taichi as ti

from src.spheretrace.core.ray import Ray, make_ray
from src.spheretrace.core.sampler import random_float
from src.spheretrace.core.vector import dot, length, reflect, refract, schlick, vec3
from src.spheretrace.geometry.sphere import HitRecord
from src.spheretrace.materials.material import Material, MaterialType, ScatterRecord


@dataclass(frozen=True)
class Dielectric(Material):
    """Transparent material.

    Attributes:
        ref_idx: Index of refraction. Common values:
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    material_type: ClassVar[MaterialType] = MaterialType.DIELECTRIC

    ref_idx: float

    def __post_init__(self) -> None:
        if self.ref_idx <= 0.0:
            raise ValueError(f"Index of refraction {self.ref_idx} must be positive")
        object.__setattr__(self, "ref_idx", float(self.ref_idx))

    def upload(self) -> int:
        return add_dielectric_material(self.ref_idx)


@ti.func
def scatter_dielectric(ref_idx: ti.f32, ray: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter a ray off a dielectric surface.

    Args:
        ref_idx: Index of refraction of the material.
        ray: The incoming ray (direction need not be normalized).
        rec: The hit being shaded; its normal points out of the medium.

    Returns:
        A ScatterRecord with did_scatter == 1, white attenuation and either
        the reflected or the refracted ray.
    """
    direction = ray.direction
    reflected = reflect(direction, rec.normal)
    normal_dir = dot(direction, rec.normal)

    outward_normal = rec.normal
    ni_over_nt = 1.0 / ref_idx
    cosine = -normal_dir / length(direction)
    if normal_dir > 0.0:
        # Leaving the medium
        outward_normal = -rec.normal
        ni_over_nt = ref_idx
        cosine = ref_idx * normal_dir / length(direction)

    scattered_direction = reflected
    ok, refracted = refract(direction, outward_normal, ni_over_nt)
    if ok == 1:
        if random_float() >= schlick(cosine, ref_idx):
            scattered_direction = refracted

    return ScatterRecord(
        did_scatter=1,
        scattered=make_ray(rec.point, scattered_direction),
        attenuation=vec3(1.0, 1.0, 1.0),
    )


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of dielectric materials in the scene
MAX_DIELECTRIC_MATERIALS = 512

dielectric_ref_indices = ti.field(dtype=ti.f32, shape=MAX_DIELECTRIC_MATERIALS)
num_dielectric_materials = ti.field(dtype=ti.i32, shape=())


def clear_dielectric_materials() -> None:
    """Clear all dielectric materials.

    Resets the material count to zero. Existing data in the field will be
    overwritten when new materials are added.
    """
    num_dielectric_materials[None] = 0


def add_dielectric_material(ref_idx: float = 1.5) -> int:
    """Add a dielectric material to the registry.

    Args:
        ref_idx: Index of refraction. Default is 1.5 (typical glass).

    Returns:
        The index of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If the index of refraction is not positive.
    """
    if ref_idx <= 0.0:
        raise ValueError(f"Index of refraction {ref_idx} must be positive")

    idx = num_dielectric_materials[None]
    if idx >= MAX_DIELECTRIC_MATERIALS:
        raise RuntimeError(
            f"Maximum number of dielectric materials ({MAX_DIELECTRIC_MATERIALS}) exceeded"
        )

    dielectric_ref_indices[idx] = ref_idx
    num_dielectric_materials[None] = idx + 1
    return idx


def get_dielectric_material_count() -> int:
    """Get the number of dielectric materials in the registry."""
    return int(num_dielectric_materials[None])


@ti.func
def get_dielectric_ref_idx(material_idx: ti.i32) -> ti.f32:
    """Get the index of refraction for a dielectric material by registry index."""
    return dielectric_ref_indices[material_idx]
