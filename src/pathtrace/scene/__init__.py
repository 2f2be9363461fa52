"""Scene module.

Components:
    scene: Host-side ordered Scene container
    intersection: Device-side primitive table and closest-hit query
    showcase: Example scene with a ring of spheres around a glass sphere

Scene data is stored in Structure-of-Arrays Taichi fields, one row per
primitive in scene order.
"""

from .intersection import (
    PrimitiveType,
    add_primitive,
    clear_scene,
    get_primitive_count,
    intersect_scene,
    load_scene,
)
from .scene import MAX_PRIMITIVES, Primitive, Scene
from .showcase import ShowcaseParams, create_showcase_scene

__all__ = [
    "Scene",
    "Primitive",
    "MAX_PRIMITIVES",
    "PrimitiveType",
    "add_primitive",
    "clear_scene",
    "get_primitive_count",
    "intersect_scene",
    "load_scene",
    "ShowcaseParams",
    "create_showcase_scene",
]
