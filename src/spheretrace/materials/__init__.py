"""Materials module: the scattering protocol and its variants.

Components:
    material: Material base class, ScatterRecord and the unified material arena
    lambertian: Ideal diffuse reflection
    metal: Mirror reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance
    scatter: Device-side dispatch on the material type

Each variant provides:
    - A frozen host-side dataclass (Lambertian, Metal, Dielectric) that
      scenes reference and share
    - A type registry (Taichi fields) filled when the material is uploaded
    - A scatter_* Taichi function returning a ScatterRecord
"""

from .dielectric import (
    Dielectric,
    add_dielectric_material,
    clear_dielectric_materials,
    get_dielectric_material_count,
    get_dielectric_ref_idx,
    scatter_dielectric,
)
from .lambertian import (
    Lambertian,
    add_lambertian_material,
    clear_lambertian_materials,
    get_lambertian_albedo,
    get_lambertian_material_count,
    scatter_lambertian,
)
from .material import (
    MAX_MATERIALS,
    Material,
    MaterialType,
    ScatterRecord,
    clear_material_tracking,
    get_material_count,
    get_material_type,
    get_material_type_index,
    register_material,
)
from .metal import (
    Metal,
    add_metal_material,
    clear_metal_materials,
    get_metal_albedo,
    get_metal_fuzz,
    get_metal_material_count,
    scatter_metal,
)
from .scatter import scatter

__all__ = [
    # Protocol
    "Material",
    "MaterialType",
    "ScatterRecord",
    "MAX_MATERIALS",
    "register_material",
    "clear_material_tracking",
    "get_material_count",
    "get_material_type",
    "get_material_type_index",
    "scatter",
    # Lambertian
    "Lambertian",
    "scatter_lambertian",
    "add_lambertian_material",
    "clear_lambertian_materials",
    "get_lambertian_material_count",
    "get_lambertian_albedo",
    # Metal
    "Metal",
    "scatter_metal",
    "add_metal_material",
    "clear_metal_materials",
    "get_metal_material_count",
    "get_metal_albedo",
    "get_metal_fuzz",
    # Dielectric
    "Dielectric",
    "scatter_dielectric",
    "add_dielectric_material",
    "clear_dielectric_materials",
    "get_dielectric_material_count",
    "get_dielectric_ref_idx",
]
