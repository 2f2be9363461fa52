"""Ray data structure and device-side vector utilities.

This module provides the Ray dataclass and the vector algebra used inside
Taichi kernels: lengths, safe normalization, reflection, refraction, the
Schlick reflectance approximation and rejection sampling of the unit sphere
and unit disk. All arithmetic is double precision.

Random sampling functions take a ``stream`` argument, the index of the random
stream (see :mod:`pathtrace.core.sampler`) owned by the calling pixel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtrace.core.ray import Ray, ray_at, vec3
    >>> @ti.kernel
    ... def midpoint() -> ti.f64:
    ...     ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    ...     return ray_at(ray, 5.0).z
"""

import taichi as ti
import taichi.math as tm

from pathtrace.core.sampler import next_random

# Double precision scalar and 3D vector types used by every kernel
real = ti.f64
vec3 = ti.types.vector(3, ti.f64)

# Upper bound on rejection sampling attempts before falling back to the center
MAX_REJECTION_ATTEMPTS = 64


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            normalized; functions that need a unit direction normalize it.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: real) -> vec3:
    """Compute the point ``ray.origin + t * ray.direction``."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a Taichi kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> real:
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    return tm.cross(a, b)


@ti.func
def length_squared(v: vec3) -> real:
    """Squared Euclidean length, ``dot(v, v)``."""
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> real:
    return ti.sqrt(length_squared(v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Unlike ``tm.normalize``, a zero-length input returns the zero vector
    instead of NaNs.

    Args:
        v: The input vector.

    Returns:
        ``v / length(v)``, or the zero vector when ``length(v) == 0``.
    """
    result = vec3(0.0, 0.0, 0.0)
    len_v = length(v)
    if len_v != 0.0:
        result = v / len_v
    return result


@ti.func
def product(a: vec3, b: vec3) -> vec3:
    """Componentwise multiply, used to apply attenuation to a color."""
    return vec3(a.x * b.x, a.y * b.y, a.z * b.z)


@ti.func
def elementwise_sqrt(v: vec3) -> vec3:
    """Square root of each component (gamma 2 correction of a color)."""
    return vec3(ti.sqrt(v.x), ti.sqrt(v.y), ti.sqrt(v.z))


@ti.func
def lerp(a: vec3, b: vec3, t: real) -> vec3:
    """Linear blend ``(1 - t) * a + t * b``."""
    return (1.0 - t) * a + t * b


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes ``v - 2 * dot(v, n) * n``. The normal should be unit length for
    a length-preserving reflection.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal.

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, ni_over_nt: real):
    """Refract an incident vector through a surface using Snell's law.

    Args:
        incident: The incoming direction vector (any length).
        normal: The unit normal on the side the ray arrives from.
        ni_over_nt: Ratio of refractive indices (incident side / transmitted side).

    Returns:
        A tuple of (refracted_direction, did_refract) where:
        - refracted_direction: The refracted direction, or the zero vector
          when no refraction exists.
        - did_refract: 1 if a refracted direction exists, 0 on total
          internal reflection.
    """
    unit_incident = normalize(incident)
    dt = tm.dot(unit_incident, normal)
    discriminant = 1.0 - ni_over_nt * ni_over_nt * (1.0 - dt * dt)
    refracted = vec3(0.0, 0.0, 0.0)
    did_refract = 0
    if discriminant > 0.0:
        refracted = ni_over_nt * (unit_incident - normal * dt) - normal * ti.sqrt(discriminant)
        did_refract = 1
    return refracted, did_refract


@ti.func
def schlick(cosine: real, refractive_index: real) -> real:
    """Fresnel reflectance using Schlick's approximation.

    ``r0 + (1 - r0) * (1 - cosine)^5`` with ``r0 = ((1 - ior) / (1 + ior))^2``.
    At normal incidence (``cosine == 1``) this is exactly ``r0``.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        refractive_index: Refractive index of the material.

    Returns:
        The approximate reflectance in [0, 1].
    """
    r0 = (1.0 - refractive_index) / (1.0 + refractive_index)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


# =============================================================================
# Random Sampling Utilities for Monte Carlo
# =============================================================================


@ti.func
def random_in_unit_sphere(stream: ti.i32) -> vec3:
    """Generate a random point strictly inside the unit sphere.

    Uses rejection sampling of ``2 * rand - 1`` per component. If no candidate
    is accepted within MAX_REJECTION_ATTEMPTS (only a degenerate random
    source can cause this), the center is returned.

    Args:
        stream: The random stream to draw from.

    Returns:
        A point with squared length < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            candidate = vec3(
                2.0 * next_random(stream) - 1.0,
                2.0 * next_random(stream) - 1.0,
                2.0 * next_random(stream) - 1.0,
            )
            if length_squared(candidate) < 1.0:
                p = candidate
                found = True
    return p


@ti.func
def random_in_unit_disk(stream: ti.i32) -> vec3:
    """Generate a random point inside the unit disk in the xy-plane.

    Used for lens sampling (depth of field). Falls back to the center like
    :func:`random_in_unit_sphere`.

    Args:
        stream: The random stream to draw from.

    Returns:
        A point (x, y, 0) with x^2 + y^2 < 1.
    """
    p = vec3(0.0, 0.0, 0.0)
    found = False
    for _ in range(MAX_REJECTION_ATTEMPTS):
        if not found:
            candidate = vec3(
                2.0 * next_random(stream) - 1.0,
                2.0 * next_random(stream) - 1.0,
                0.0,
            )
            if candidate.x * candidate.x + candidate.y * candidate.y < 1.0:
                p = candidate
                found = True
    return p
