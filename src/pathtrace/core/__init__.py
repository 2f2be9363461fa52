"""Core rendering module.

Components:
    vector: Host-side Vector3 value type
    ray: Ray data structure, vector helpers, reflection/refraction, sampling
    sampler: Pluggable random source (seeded streams or fixed sequence)
    settings: Render settings and image size limits
    integrator: Radiance along a ray (loop form of the bounded recursion)
    accumulator: Render target, per-pixel averaging and raster resolve
    renderer: Sector partitioning and the Renderer class

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    Ray,
    cross,
    dot,
    elementwise_sqrt,
    length,
    length_squared,
    lerp,
    make_ray,
    normalize,
    product,
    random_in_unit_disk,
    random_in_unit_sphere,
    ray_at,
    real,
    reflect,
    refract,
    schlick,
    vec3,
)
from .sampler import FixedSequenceRandom, RandomSource, SeededRandom, configure_random, next_random
from .settings import MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH, RenderSettings
from .vector import Vector3

# Note: integrator, accumulator and renderer are NOT imported here to avoid circular imports.
# Import directly from pathtrace.core.renderer when needed:
#   from pathtrace.core.renderer import Renderer

__all__ = [
    "Vector3",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "real",
    "dot",
    "cross",
    "length",
    "length_squared",
    "normalize",
    "product",
    "elementwise_sqrt",
    "lerp",
    "reflect",
    "refract",
    "schlick",
    "random_in_unit_sphere",
    "random_in_unit_disk",
    "SeededRandom",
    "FixedSequenceRandom",
    "RandomSource",
    "configure_random",
    "next_random",
    "RenderSettings",
    "MAX_IMAGE_WIDTH",
    "MAX_IMAGE_HEIGHT",
]
