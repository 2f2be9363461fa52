"""Metal (specular reflective) material implementation.

This module implements specular reflection with optional fuzz. A perfect
metal (fuzz=0) produces mirror reflections; a fuzzy metal perturbs the
mirror direction by a random offset scaled by the fuzz parameter:

    reflected = I - 2(I . N)N
    scattered = reflected + fuzz * random_in_unit_sphere()

The ray is absorbed when the mirror direction does not leave the surface,
i.e. when dot(reflected, N) <= 0.

Example:
    >>> from pathtrace.materials.metal import Metal
    >>> Metal(albedo=(0.8, 0.8, 0.8), fuzz=3.0).fuzz  # clamped
    1.0
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from pathtrace.core.ray import random_in_unit_sphere, real, reflect, vec3
from pathtrace.core.vector import Vector3, VectorLike
from pathtrace.materials.lambertian import validate_albedo
from pathtrace.materials.record import MaterialType


@dataclass(frozen=True)
class Metal:
    """Specular reflective material.

    Attributes:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Reflection roughness. Values above 1 are clamped to 1.
            0 = perfect mirror.
    """

    albedo: VectorLike
    fuzz: float = 0.0

    kind = MaterialType.METAL

    def __post_init__(self) -> None:
        albedo = Vector3.of(self.albedo)
        validate_albedo(albedo)
        if self.fuzz < 0.0:
            raise ValueError(
                f"Fuzz = {self.fuzz} is negative. "
                "Fuzz must be between 0 (perfect mirror) and 1 (maximum fuzz)."
            )
        object.__setattr__(self, "albedo", albedo)
        object.__setattr__(self, "fuzz", min(float(self.fuzz), 1.0))


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: real,
    incident_direction: vec3,
    normal: vec3,
    stream: ti.i32,
):
    """Compute the scattered direction for a metal surface.

    Args:
        albedo: The reflective color (RGB).
        fuzz: The surface roughness in [0, 1]. 0 = perfect mirror.
        incident_direction: The incoming ray direction (any length).
        normal: The unit surface normal.
        stream: The random stream of the calling pixel.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The fuzzed reflection direction.
        - attenuation: The albedo.
        - did_scatter: 1 if the mirror direction leaves the surface, 0 if absorbed.
    """
    reflected = reflect(incident_direction, normal)
    scattered_direction = reflected + fuzz * random_in_unit_sphere(stream)

    did_scatter = 0
    if tm.dot(reflected, normal) > 0.0:
        did_scatter = 1

    return scattered_direction, albedo, did_scatter
