"""Scene manager: uploads a host-side world into Taichi fields.

The SceneManager is the bridge between the scene construction API in
scene.world and the device-side storage used by the path tracer. Loading a
world:

- clears the sphere storage, the per-type material registries and the
  unified material arena
- registers each distinct material object once, so spheres built with the
  same Material share one material ID
- uploads the spheres in scan order

Materials are not modified after upload; kernels only read them.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretrace.materials import Lambertian
    >>> from src.spheretrace.scene.manager import SceneManager
    >>> from src.spheretrace.scene.world import HittableList, Sphere
    >>> red = Lambertian((0.8, 0.3, 0.3))
    >>> world = HittableList([Sphere((0, 0, -1), 0.5, red), Sphere((1, 0, -1), 0.5, red)])
    >>> scene = SceneManager()
    >>> infos = scene.load(world)
    >>> scene.get_material_count()
    1
"""

from dataclasses import dataclass
from typing import Any

from src.spheretrace.materials.dielectric import (
    MAX_DIELECTRIC_MATERIALS,
    Dielectric,
    clear_dielectric_materials,
)
from src.spheretrace.materials.lambertian import (
    MAX_LAMBERTIAN_MATERIALS,
    Lambertian,
    clear_lambertian_materials,
)
from src.spheretrace.materials.material import (
    MAX_MATERIALS,
    Material,
    MaterialType,
    clear_material_tracking,
    register_material,
)
from src.spheretrace.materials.metal import MAX_METAL_MATERIALS, Metal, clear_metal_materials
from src.spheretrace.scene.intersection import MAX_SPHERES, add_sphere, clear_scene
from src.spheretrace.scene.world import Hittable, Sphere


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The unified material ID.
        material_type: The type of material (Lambertian, Metal, Dielectric).
        material: The host-side material object.
    """

    material_id: int
    material_type: MaterialType
    material: Material


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


_TYPE_CAPACITY = {
    MaterialType.LAMBERTIAN: MAX_LAMBERTIAN_MATERIALS,
    MaterialType.METAL: MAX_METAL_MATERIALS,
    MaterialType.DIELECTRIC: MAX_DIELECTRIC_MATERIALS,
}


def _check_capacity(sphere_count: int, materials: list[Material]) -> None:
    """Raise RuntimeError if a world does not fit in the device storage."""
    if sphere_count > MAX_SPHERES:
        raise RuntimeError(
            f"Scene has {sphere_count} spheres; maximum is {MAX_SPHERES}"
        )
    if len(materials) > MAX_MATERIALS:
        raise RuntimeError(
            f"Scene has {len(materials)} materials; maximum is {MAX_MATERIALS}"
        )
    for material_type, capacity in _TYPE_CAPACITY.items():
        count = sum(1 for m in materials if m.material_type == material_type)
        if count > capacity:
            raise RuntimeError(
                f"Scene has {count} {material_type.name.lower()} materials; "
                f"maximum is {capacity}"
            )


def _material_params(material: Material) -> dict[str, Any]:
    if isinstance(material, Lambertian):
        return {"type": "lambertian", "albedo": list(material.albedo)}
    if isinstance(material, Metal):
        return {"type": "metal", "albedo": list(material.albedo), "fuzz": material.fuzz}
    if isinstance(material, Dielectric):
        return {"type": "dielectric", "ref_idx": material.ref_idx}
    raise TypeError(f"Unsupported material {type(material).__name__}")


class SceneManager:
    """Uploads scenes and keeps track of what is on the device.

    Only one scene is resident at a time: the Taichi fields are module-level
    globals, so loading a world replaces whatever was loaded before, even
    through another SceneManager instance.

    Attributes:
        materials: MaterialInfo for every registered material, by ID.
        spheres: SphereInfo for every sphere, in scan order.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self._material_ids: dict[int, int] = {}
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        # Clear primitive storage
        clear_scene()
        # Clear material registries
        clear_lambertian_materials()
        clear_metal_materials()
        clear_dielectric_materials()
        # Clear material tracking
        clear_material_tracking()
        # Clear local tracking
        self.materials.clear()
        self.spheres.clear()
        self._material_ids.clear()

    def clear(self) -> None:
        """Clear the entire scene (spheres and materials)."""
        self._clear_all()

    def load(self, world: Hittable) -> list[SphereInfo]:
        """Replace the resident scene with a world.

        Args:
            world: The root hittable, typically a HittableList.

        Returns:
            SphereInfo for each uploaded sphere, in scan order.

        Raises:
            TypeError: If world is not a Hittable.
            RuntimeError: If the scene exceeds the sphere or material
                capacity. The resident scene is left untouched.
        """
        if not isinstance(world, Hittable):
            raise TypeError(f"Expected a Hittable, got {type(world).__name__}")

        materials = world.materials()
        _check_capacity(len(world), materials)

        self._clear_all()
        for material in materials:
            self.add_material(material)
        for sphere in world.spheres():
            self.add_sphere(sphere)
        return list(self.spheres)

    def add_material(self, material: Material) -> int:
        """Register a material, reusing the ID if this object is already known.

        Args:
            material: The material object.

        Returns:
            The unified material ID.
        """
        key = id(material)
        if key in self._material_ids:
            return self._material_ids[key]

        material_id = register_material(material)
        self._material_ids[key] = material_id
        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                material_type=material.material_type,
                material=material,
            )
        )
        return material_id

    def add_sphere(self, sphere: Sphere) -> int:
        """Append a sphere at the end of the scan order.

        Args:
            sphere: The sphere to upload. Its material is registered on
                first use.

        Returns:
            The index of the sphere in storage.
        """
        material_id = self.add_material(sphere.material)
        sphere_index = add_sphere(sphere.center, sphere.radius, material_id)
        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=sphere.center,
                radius=sphere.radius,
                material_id=material_id,
            )
        )
        return sphere_index

    def get_material_count(self) -> int:
        """Get the number of materials registered by this manager."""
        return len(self.materials)

    def get_sphere_count(self) -> int:
        """Get the number of spheres uploaded by this manager."""
        return len(self.spheres)

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by its unified ID.

        Returns:
            The MaterialInfo, or None if the ID is not registered.
        """
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def to_dict(self) -> dict[str, Any]:
        """Describe the resident scene as plain data.

        Returns:
            A dictionary with "materials" (in ID order) and "spheres" (in
            scan order) suitable for logging or JSON output.
        """
        return {
            "materials": [_material_params(info.material) for info in self.materials],
            "spheres": [
                {
                    "center": list(info.center),
                    "radius": info.radius,
                    "material_id": info.material_id,
                }
                for info in self.spheres
            ],
        }

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS
