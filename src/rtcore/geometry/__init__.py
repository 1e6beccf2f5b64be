"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive, hit records and ray-sphere intersection
"""

from .sphere import HitRecord, Sphere, hit_sphere, make_sphere, miss_record

__all__ = ["Sphere", "HitRecord", "hit_sphere", "make_sphere", "miss_record"]
