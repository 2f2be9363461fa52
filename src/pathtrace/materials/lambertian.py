"""Lambertian (ideal diffuse) material implementation.

A diffuse surface scatters toward a random point in the unit sphere placed
tangent to the surface at the hit point:

    target = point + normal + random_in_unit_sphere()
    scattered = Ray(point, target - point)

The attenuation is the albedo, and a Lambertian surface never absorbs a ray
outright.

Example:
    >>> from pathtrace.materials.lambertian import Lambertian
    >>> Lambertian(albedo=(0.8, 0.3, 0.3))
    Lambertian(albedo=Vector3(x=0.8, y=0.3, z=0.3))
"""

from dataclasses import dataclass

import taichi as ti

from pathtrace.core.ray import random_in_unit_sphere, vec3
from pathtrace.core.vector import Vector3, VectorLike
from pathtrace.materials.record import MaterialType


def validate_albedo(albedo: Vector3) -> None:
    """Reject albedo colors that would create energy.

    Raises:
        ValueError: If any component is outside [0, 1].
    """
    for i, component in enumerate(albedo):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )


@dataclass(frozen=True)
class Lambertian:
    """Ideal diffuse material.

    Attributes:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
    """

    albedo: VectorLike

    kind = MaterialType.LAMBERTIAN

    def __post_init__(self) -> None:
        albedo = Vector3.of(self.albedo)
        validate_albedo(albedo)
        object.__setattr__(self, "albedo", albedo)


@ti.func
def scatter_lambertian(albedo: vec3, hit_point: vec3, normal: vec3, stream: ti.i32):
    """Sample a scattered ray direction for a Lambertian surface.

    Args:
        albedo: The diffuse reflectance color (RGB).
        hit_point: The intersection point.
        normal: The unit surface normal at the hit point.
        stream: The random stream of the calling pixel.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where
        did_scatter is always 1.
    """
    target = hit_point + normal + random_in_unit_sphere(stream)
    return target - hit_point, albedo, 1
