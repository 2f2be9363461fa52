"""Scene-level primitive intersection testing.

This module stores the loaded scene in Taichi fields and provides the
closest-hit query used by the integrator. Primitives of every kind share one
ordered table, so the scan visits them in scene order.

The query is a linear scan: each primitive is tested against the interval
(t_min, closest) and a hit shrinks ``closest``. Cost is O(primitives) per ray.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtrace.scene.intersection import load_scene, intersect_scene
    >>> load_scene(scene)
    >>> # Use intersect_scene within a Taichi kernel
"""

import logging
from enum import IntEnum

import taichi as ti

from pathtrace.core.ray import real, vec3
from pathtrace.geometry.plane import Plane, PlaneShape, hit_plane
from pathtrace.geometry.sphere import HitRecord, Sphere, SphereShape, hit_sphere, make_miss_record
from pathtrace.materials.record import MaterialRecord
from pathtrace.materials.scatter import material_to_record_values
from pathtrace.scene.scene import MAX_PRIMITIVES, Primitive, Scene

logger = logging.getLogger(__name__)


class PrimitiveType(IntEnum):
    """Enumeration of supported primitive kinds."""

    SPHERE = 0
    PLANE = 1


# Primitive storage: Structure of Arrays layout, one row per primitive.
# positions holds the sphere center or a point on the plane.
_prim_kinds = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
_prim_positions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_PRIMITIVES)
_prim_normals = ti.Vector.field(3, dtype=ti.f64, shape=MAX_PRIMITIVES)
_prim_radii = ti.field(dtype=ti.f64, shape=MAX_PRIMITIVES)

# Material copy of each primitive
_material_kinds = ti.field(dtype=ti.i32, shape=MAX_PRIMITIVES)
_material_albedos = ti.Vector.field(3, dtype=ti.f64, shape=MAX_PRIMITIVES)
_material_fuzz = ti.field(dtype=ti.f64, shape=MAX_PRIMITIVES)
_material_iors = ti.field(dtype=ti.f64, shape=MAX_PRIMITIVES)

num_primitives = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all primitives from the device-side scene.

    Resets the primitive count to zero. Existing rows are overwritten when
    new primitives are added.
    """
    num_primitives[None] = 0


def add_primitive(primitive: Primitive) -> int:
    """Append one primitive to the device-side scene.

    Args:
        primitive: A Sphere or Plane.

    Returns:
        The index of the added primitive.

    Raises:
        RuntimeError: If the maximum number of primitives is exceeded.
        TypeError: If the primitive kind is not supported.
    """
    idx = num_primitives[None]
    if idx >= MAX_PRIMITIVES:
        raise RuntimeError(f"Maximum number of primitives ({MAX_PRIMITIVES}) exceeded")

    if isinstance(primitive, Sphere):
        _prim_kinds[idx] = int(PrimitiveType.SPHERE)
        _prim_positions[idx] = primitive.center.to_list()
        _prim_normals[idx] = [0.0, 0.0, 0.0]
        _prim_radii[idx] = primitive.radius
    elif isinstance(primitive, Plane):
        _prim_kinds[idx] = int(PrimitiveType.PLANE)
        _prim_positions[idx] = primitive.point.to_list()
        _prim_normals[idx] = primitive.normal.to_list()
        _prim_radii[idx] = 0.0
    else:
        raise TypeError(f"Unsupported primitive: {primitive!r}")

    kind, albedo, fuzz, ior = material_to_record_values(primitive.material)
    _material_kinds[idx] = kind
    _material_albedos[idx] = albedo
    _material_fuzz[idx] = fuzz
    _material_iors[idx] = ior

    num_primitives[None] = idx + 1
    return idx


def load_scene(scene: Scene) -> None:
    """Replace the device-side scene with ``scene`` and freeze it.

    Args:
        scene: The scene to render. It is frozen so it cannot change while
            its copy is being rendered.
    """
    scene.freeze()
    clear_scene()
    for primitive in scene:
        add_primitive(primitive)
    logger.info("Loaded scene with %d primitives", len(scene))


def get_primitive_count() -> int:
    """Get the number of primitives in the device-side scene."""
    return int(num_primitives[None])


@ti.func
def _material_record(i: ti.i32) -> MaterialRecord:
    return MaterialRecord(
        kind=_material_kinds[i],
        albedo=_material_albedos[i],
        fuzz=_material_fuzz[i],
        refractive_index=_material_iors[i],
    )


@ti.func
def intersect_scene(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: real,
    t_max: real,
) -> HitRecord:
    """Find the closest primitive hit along a ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Exclusive lower bound on t.
        t_max: Exclusive upper bound on t.

    Returns:
        The HitRecord of the closest intersection, or a miss record if no
        primitive is hit inside (t_min, t_max).
    """
    closest_t = t_max
    result = make_miss_record()

    for i in range(num_primitives[None]):
        rec = make_miss_record()
        if _prim_kinds[i] == int(PrimitiveType.SPHERE):
            sphere = SphereShape(center=_prim_positions[i], radius=_prim_radii[i])
            rec = hit_sphere(ray_origin, ray_direction, sphere, _material_record(i), t_min, closest_t)
        elif _prim_kinds[i] == int(PrimitiveType.PLANE):
            plane = PlaneShape(point=_prim_positions[i], normal=_prim_normals[i])
            rec = hit_plane(ray_origin, ray_direction, plane, _material_record(i), t_min, closest_t)

        if rec.hit == 1:
            closest_t = rec.t
            result = rec

    return result
