"""Material dispatch.

Looks up the type of the material attached to a hit and forwards to the
matching scatter function. The variant set is closed (Lambertian, Metal,
Dielectric), so a switch on MaterialType replaces dynamic dispatch inside
Taichi kernels.
"""

import taichi as ti

from src.spheretrace.core.ray import Ray
from src.spheretrace.geometry.sphere import HitRecord
from src.spheretrace.materials.dielectric import get_dielectric_ref_idx, scatter_dielectric
from src.spheretrace.materials.lambertian import get_lambertian_albedo, scatter_lambertian
from src.spheretrace.materials.material import (
    MaterialType,
    ScatterRecord,
    get_material_type,
    get_material_type_index,
    make_absorbed_record,
)
from src.spheretrace.materials.metal import get_metal_albedo, get_metal_fuzz, scatter_metal


@ti.func
def scatter(ray: Ray, rec: HitRecord) -> ScatterRecord:
    """Scatter a ray off the material of the hit surface.

    Args:
        ray: The incoming ray.
        rec: A hit record with hit == 1.

    Returns:
        The material's ScatterRecord. Hits with an unknown material ID are
        absorbed.
    """
    mat_type = get_material_type(rec.material_id)
    type_index = get_material_type_index(rec.material_id)

    result = make_absorbed_record()

    if mat_type == int(MaterialType.LAMBERTIAN):
        result = scatter_lambertian(get_lambertian_albedo(type_index), ray, rec)

    elif mat_type == int(MaterialType.METAL):
        result = scatter_metal(
            get_metal_albedo(type_index), get_metal_fuzz(type_index), ray, rec
        )

    elif mat_type == int(MaterialType.DIELECTRIC):
        result = scatter_dielectric(get_dielectric_ref_idx(type_index), ray, rec)

    return result
