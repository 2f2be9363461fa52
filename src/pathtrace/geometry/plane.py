"""Infinite plane primitive with a one-sided intersection test.

A plane is defined by a point on it and a normal. A ray registers a hit only
when its direction has a positive component along the plane normal
(``dot(direction, normal) > 0``); rays arriving from the other side pass
through. The reported surface normal is the negated plane normal, so a plane
is seen from the side its normal points away from.

    t = dot(point - origin, normal) / dot(direction, normal)

Example:
    >>> from pathtrace.geometry.plane import Plane
    >>> from pathtrace.materials.lambertian import Lambertian
    >>> floor = Plane(point=(0, 0, 0), normal=(0, -1, 0), material=Lambertian((0.5, 0.5, 0.5)))
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from pathtrace.core.ray import make_ray, ray_at, real, vec3
from pathtrace.core.vector import Vector3, VectorLike
from pathtrace.geometry.sphere import HitRecord, make_miss_record
from pathtrace.materials.record import MaterialRecord

if TYPE_CHECKING:
    from pathtrace.materials.scatter import Material


@dataclass(frozen=True)
class Plane:
    """Host-side plane description.

    Attributes:
        point: Any point on the plane.
        normal: The plane normal (non-zero, normalized at construction).
        material: The material of the plane's visible side.
    """

    point: VectorLike
    normal: VectorLike
    material: "Material"

    def __post_init__(self) -> None:
        normal = Vector3.of(self.normal)
        if normal.length() == 0.0:
            raise ValueError("Plane normal must be non-zero")
        object.__setattr__(self, "point", Vector3.of(self.point))
        object.__setattr__(self, "normal", normal.normalize())


@ti.dataclass
class PlaneShape:
    """Device-side plane geometry.

    Attributes:
        point: A point on the plane (vec3).
        normal: The unit plane normal (vec3).
    """

    point: vec3
    normal: vec3


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: PlaneShape,
    material: MaterialRecord,
    t_min: real,
    t_max: real,
) -> HitRecord:
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        plane: The plane to test intersection against.
        material: The plane's material, copied into the hit record.
        t_min: Exclusive lower bound on t.
        t_max: Exclusive upper bound on t.

    Returns:
        A HitRecord whose normal is ``-plane.normal`` on a hit.
    """
    result = make_miss_record()

    denom = tm.dot(ray_direction, plane.normal)
    if denom > 0.0:
        t = tm.dot(plane.point - ray_origin, plane.normal) / denom
        if t > t_min and t < t_max:
            result = HitRecord(
                hit=1,
                t=t,
                point=ray_at(make_ray(ray_origin, ray_direction), t),
                normal=-plane.normal,
                material=material,
            )

    return result
