"""Dielectric (glass/water) material implementation.

This module implements transparent materials with refraction and Fresnel
reflectance.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when no refracted direction exists

The side of the surface is decided by the sign of dot(direction, normal)
against the outward geometric normal: a positive sign means the ray is
leaving the material. The material then reflects with the Schlick
probability (probability 1 under total internal reflection) and refracts
otherwise. The glass is colorless, so attenuation is always white.

Example:
    >>> from pathtrace.materials.dielectric import Dielectric
    >>> Dielectric(refractive_index=1.5)
    Dielectric(refractive_index=1.5)
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from pathtrace.core.ray import length, real, reflect, refract, schlick, vec3
from pathtrace.core.sampler import next_random
from pathtrace.materials.record import MaterialType


@dataclass(frozen=True)
class Dielectric:
    """Transparent refractive material.

    Attributes:
        refractive_index: Index of refraction, must be positive. Common values:
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4
    """

    refractive_index: float = 1.5

    kind = MaterialType.DIELECTRIC

    def __post_init__(self) -> None:
        if self.refractive_index <= 0.0:
            raise ValueError(
                f"Index of refraction = {self.refractive_index} must be positive."
            )
        object.__setattr__(self, "refractive_index", float(self.refractive_index))


@ti.func
def reflect_probability(refractive_index: real, incident_direction: vec3, normal: vec3):
    """Decide the refraction geometry and the probability of reflecting.

    Args:
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The outward unit surface normal.

    Returns:
        A tuple of (probability, refracted_direction) where probability is the
        Schlick reflectance, or 1.0 under total internal reflection.
    """
    d = tm.dot(incident_direction, normal)
    outward_normal = normal
    ni_over_nt = 1.0 / refractive_index
    cosine = -d / length(incident_direction)
    if d > 0.0:
        # Leaving the material
        outward_normal = -normal
        ni_over_nt = refractive_index
        cosine = refractive_index * d / length(incident_direction)

    refracted, did_refract = refract(incident_direction, outward_normal, ni_over_nt)
    probability = 1.0
    if did_refract == 1:
        probability = schlick(cosine, refractive_index)
    return probability, refracted


@ti.func
def scatter_dielectric(
    refractive_index: real,
    incident_direction: vec3,
    normal: vec3,
    stream: ti.i32,
):
    """Compute the scattered direction for a dielectric surface.

    Exactly one random value is drawn per call, whichever branch is taken.

    Args:
        refractive_index: Index of refraction of the material.
        incident_direction: The incoming ray direction (any length).
        normal: The outward unit surface normal.
        stream: The random stream of the calling pixel.

    Returns:
        A tuple of (scattered_direction, attenuation, did_scatter) where:
        - scattered_direction: The reflected or refracted direction.
        - attenuation: White, the glass does not absorb.
        - did_scatter: Always 1 for dielectrics.
    """
    probability, refracted = reflect_probability(refractive_index, incident_direction, normal)

    scattered_direction = refracted
    if next_random(stream) < probability:
        scattered_direction = reflect(incident_direction, normal)

    return scattered_direction, vec3(1.0, 1.0, 1.0), 1
