"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive, the shared HitRecord and ray-sphere intersection
    plane: Infinite one-sided plane and ray-plane intersection

Each primitive has a host-side frozen dataclass describing it and a
device-side Taichi struct used by the intersection routine:
    record = hit_shape(ray_origin, ray_direction, shape, material, t_min, t_max)
"""

from .plane import Plane, PlaneShape, hit_plane
from .sphere import HitRecord, Sphere, SphereShape, hit_sphere, make_miss_record, make_sphere

__all__ = [
    "Sphere",
    "SphereShape",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "make_miss_record",
    "Plane",
    "PlaneShape",
    "hit_plane",
]
