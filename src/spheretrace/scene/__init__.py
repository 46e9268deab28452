"""Scene module: scene construction, upload and ray-scene queries.

Components:
    world: Host-side Hittable, Sphere and HittableList
    intersection: Sphere storage in Taichi fields and closest-hit scan
    manager: Uploads a world and assigns shared material IDs
    random_scene: Ready-made scenes and the cameras that frame them

Scene data is organized for efficient device access:
    - Structure-of-Arrays layout for sphere data
    - One unified material ID per distinct material object
"""

from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
    intersect_scene,
)
from .manager import MaterialInfo, SceneManager, SphereInfo
from .random_scene import (
    create_cover_camera,
    create_random_scene,
    create_three_sphere_camera,
    create_three_sphere_scene,
)
from .world import Hittable, HittableList, Sphere

__all__ = [
    # World module
    "Hittable",
    "Sphere",
    "HittableList",
    # Intersection module
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "intersect_scene",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "MaterialInfo",
    "SphereInfo",
    # Ready-made scenes
    "create_random_scene",
    "create_cover_camera",
    "create_three_sphere_scene",
    "create_three_sphere_camera",
]
