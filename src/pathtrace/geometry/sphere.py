"""Sphere primitive and ray-sphere intersection.

This module provides the host-side Sphere description, the device-side
SphereShape, the HitRecord shared by all primitives, and the quadratic
intersection test.

The ray-sphere intersection is found by solving:
    |origin + t * direction - center|^2 = radius^2

which, with oc = origin - center, gives the half-b quadratic
    a*t^2 + 2*b*t + c = 0
    a = dot(direction, direction)
    b = dot(oc, direction)
    c = dot(oc, oc) - radius^2

The nearer root is preferred; the farther root is used only when the nearer
one lies outside the open interval (t_min, t_max).

Example:
    >>> from pathtrace.geometry.sphere import Sphere
    >>> from pathtrace.materials.lambertian import Lambertian
    >>> Sphere(center=(0, -1000, 0), radius=1000.0, material=Lambertian((0.5, 0.5, 0.5)))
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from pathtrace.core.ray import make_ray, ray_at, real, vec3
from pathtrace.core.vector import Vector3, VectorLike
from pathtrace.materials.record import MaterialRecord

if TYPE_CHECKING:
    from pathtrace.materials.scatter import Material


@dataclass(frozen=True)
class Sphere:
    """Host-side sphere description.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (must be positive).
        material: The material of the sphere's surface.
    """

    center: VectorLike
    radius: float
    material: "Material"

    def __post_init__(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")
        object.__setattr__(self, "center", Vector3.of(self.center))
        object.__setattr__(self, "radius", float(self.radius))


@ti.dataclass
class SphereShape:
    """Device-side sphere geometry.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: real


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The unit surface normal at the intersection point. For
            spheres it always points away from the center, whichever side
            the ray came from. Only valid if hit == 1.
        material: A copy of the hit primitive's material.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: real
    point: vec3
    normal: vec3
    material: MaterialRecord


@ti.func
def make_miss_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material=MaterialRecord(
            kind=-1,
            albedo=vec3(0.0, 0.0, 0.0),
            fuzz=0.0,
            refractive_index=0.0,
        ),
    )


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: SphereShape,
    material: MaterialRecord,
    t_min: real,
    t_max: real,
) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        sphere: The sphere to test intersection against.
        material: The sphere's material, copied into the hit record.
        t_min: Exclusive lower bound on t (avoids self-intersection).
        t_max: Exclusive upper bound on t (closest hit found so far).

    Returns:
        A HitRecord; check the hit field to determine if intersection occurred.
    """
    result = make_miss_record()

    oc = ray_origin - sphere.center
    a = tm.dot(ray_direction, ray_direction)
    b = tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - a * c

    if discriminant > 0.0:
        sqrt_d = ti.sqrt(discriminant)
        ray = make_ray(ray_origin, ray_direction)

        t = (-b - sqrt_d) / a
        valid = t > t_min and t < t_max
        if not valid:
            t = (-b + sqrt_d) / a
            valid = t > t_min and t < t_max

        if valid:
            point = ray_at(ray, t)
            result = HitRecord(
                hit=1,
                t=t,
                point=point,
                normal=(point - sphere.center) / sphere.radius,
                material=material,
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: real) -> SphereShape:
    """Create a sphere shape within a Taichi kernel."""
    return SphereShape(center=center, radius=radius)
