"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with analytic ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) and follow the pattern:
    record = hit_shape(ray, shape_data, t_min, t_max, material_id)

where record.hit == 0 encodes "no intersection".
"""

from .sphere import HitRecord, SphereGeometry, hit_sphere, make_miss_record, make_sphere

__all__ = [
    "SphereGeometry",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "make_miss_record",
]
