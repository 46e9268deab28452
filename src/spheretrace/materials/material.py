"""Material protocol and the unified material arena.

On the host a material is an immutable Python object (Lambertian, Metal,
Dielectric) that any number of spheres can reference. When a scene is
loaded each distinct material object is uploaded once into the registry of
its type and receives a unified material ID. Spheres store only that ID,
so every sphere sharing a material object shares one read-only entry.

On the device the variant set is closed, so dispatch is a switch on the
material type stored for the ID (see materials.scatter).

Example:
    >>> from src.spheretrace.materials import Lambertian, register_material
    >>> grey = Lambertian((0.5, 0.5, 0.5))
    >>> material_id = register_material(grey)
"""

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import ClassVar

import taichi as ti

from src.spheretrace.core.ray import Ray
from src.spheretrace.core.vector import vec3


class MaterialType(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the path tracer to determine which
    scattering function to call.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


class Material(ABC):
    """Base class for host-side material descriptions.

    Subclasses are frozen dataclasses. They are never mutated after
    construction, which is what allows one instance to be shared by many
    spheres and read concurrently by every rendering thread.
    """

    material_type: ClassVar[MaterialType]

    @abstractmethod
    def upload(self) -> int:
        """Store the material parameters in its type registry.

        Returns:
            The index of the material within its type registry.
        """


def validate_albedo(albedo: tuple[float, float, float]) -> tuple[float, float, float]:
    """Check an RGB reflectance and return it as a tuple of floats.

    Raises:
        ValueError: If albedo does not have three components or any
            component is outside [0, 1].
    """
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
    return (float(albedo[0]), float(albedo[1]), float(albedo[2]))


@ti.dataclass
class ScatterRecord:
    """Result of scattering a ray off a surface.

    Attributes:
        did_scatter: 1 if a scattered ray was produced, 0 if the ray was
            absorbed. The remaining fields are only valid if did_scatter == 1.
        scattered: The outgoing ray, starting at the hit point.
        attenuation: Per-channel multiplicative light loss for this bounce.
    """

    did_scatter: ti.i32
    scattered: Ray
    attenuation: vec3


@ti.func
def make_absorbed_record() -> ScatterRecord:
    """Create a ScatterRecord for an absorbed ray."""
    return ScatterRecord(
        did_scatter=0,
        scattered=Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, 0.0)),
        attenuation=vec3(0.0, 0.0, 0.0),
    )


# =============================================================================
# Unified Material Arena
# =============================================================================

# Maximum number of materials across all types
MAX_MATERIALS = 2048

# material_types[i] stores the MaterialType for material_id i
material_types = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
# material_type_indices[i] stores the type-local index for material_id i
# (e.g., if material_id 5 is the 2nd metal material, material_type_indices[5] = 1)
material_type_indices = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_material_tracking() -> None:
    """Forget all unified material IDs.

    The per-type registries are cleared separately by their modules.
    """
    num_materials[None] = 0


def register_material(material: Material) -> int:
    """Upload a material and assign it a unified material ID.

    Each call uploads a new entry. Callers that want sharing (the scene
    manager) register each distinct material object once and reuse the ID.

    Args:
        material: The material to register.

    Returns:
        The unified material ID.

    Raises:
        TypeError: If material is not a Material.
        RuntimeError: If the maximum number of materials is exceeded.
    """
    if not isinstance(material, Material):
        raise TypeError(f"Expected a Material, got {type(material).__name__}")

    material_id = num_materials[None]
    if material_id >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    type_index = material.upload()

    material_types[material_id] = int(material.material_type)
    material_type_indices[material_id] = type_index
    num_materials[None] = material_id + 1
    return material_id


def get_material_count() -> int:
    """Get the number of registered materials."""
    return int(num_materials[None])


@ti.func
def get_material_type(material_id: ti.i32) -> ti.i32:
    """Get the material type for a given material ID.

    Args:
        material_id: The unified material ID.

    Returns:
        The material type as an integer (see MaterialType enum).
        Returns -1 for invalid material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_types[material_id]
    return result


@ti.func
def get_material_type_index(material_id: ti.i32) -> ti.i32:
    """Get the index into the type-specific registry for a material ID.

    Returns:
        The type-local index, or -1 for invalid material IDs.
    """
    result = -1
    if 0 <= material_id < num_materials[None]:
        result = material_type_indices[material_id]
    return result
