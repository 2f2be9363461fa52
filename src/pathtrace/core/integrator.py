"""Radiance integrator for Monte Carlo path tracing.

This module computes the color seen along a ray. A ray that escapes the scene
sees a vertical white-to-blue sky gradient. A ray that hits a surface is
scattered by the surface material and the scattered ray's color is multiplied
by the material attenuation, up to ``max_depth`` bounces.

The recursion is written as a loop carrying the running attenuation product
and an active flag:

    trace(ray, depth) = sky(ray)                                  no hit
                      = 0                                         hit, depth == 0
                      = 0                                         hit, absorbed
                      = attenuation * trace(scattered, depth - 1) hit, scattered

Terminal states: absorbed (black), depth exhausted (black), escaped (sky).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtrace.core.integrator import trace_ray
    >>> trace_ray((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), max_depth=0)
    (0.5, 0.7, 1.0)
"""

import taichi as ti

from pathtrace.core.ray import Ray, lerp, make_ray, normalize, product, vec3
from pathtrace.materials.scatter import scatter_material
from pathtrace.scene.intersection import intersect_scene

# =============================================================================
# Rendering Constants
# =============================================================================

# t_min and t_max for ray intersection
T_MIN = 0.001
T_MAX = 25000.0


@ti.func
def sky_color(direction: vec3) -> vec3:
    """Background color seen along ``direction``.

    Blends linearly from white at ``y = -1`` to light blue at ``y = +1`` of
    the normalized direction.
    """
    t = 0.5 * (normalize(direction).y + 1.0)
    return lerp(vec3(1.0, 1.0, 1.0), vec3(0.5, 0.7, 1.0), t)


@ti.func
def trace(ray: Ray, max_depth: ti.i32, stream: ti.i32) -> vec3:
    """Compute the color seen along a ray.

    Args:
        ray: The ray to trace.
        max_depth: Maximum number of scattering bounces.
        stream: Random stream of the pixel being rendered.

    Returns:
        The linear RGB color carried back along the ray.
    """
    color = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    current = ray
    remaining = max_depth

    # Every iteration either terminates or consumes one bounce, so
    # max_depth + 1 iterations always reach a terminal state.
    active = 1
    for _ in range(max_depth + 1):
        if active == 1:
            hit = intersect_scene(current.origin, current.direction, T_MIN, T_MAX)

            if hit.hit == 0:
                color = product(throughput, sky_color(current.direction))
                active = 0
            elif remaining == 0:
                active = 0
            else:
                scattered = scatter_material(current, hit, stream)
                if scattered.scattered == 0:
                    active = 0
                else:
                    throughput = product(throughput, scattered.attenuation)
                    current = scattered.ray
                    remaining -= 1

    return color


@ti.kernel
def _trace_single_ray(
    origin: vec3, direction: vec3, max_depth: ti.i32, stream: ti.i32
) -> vec3:
    return trace(make_ray(origin, direction), max_depth, stream)


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int,
    stream: int = 0,
) -> tuple[float, float, float]:
    """Trace one ray against the loaded scene.

    This is a Python-callable function for testing and debugging. Rendering
    goes through the region kernel in :mod:`pathtrace.core.accumulator`.

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be normalized).
        max_depth: Maximum number of scattering bounces (non-negative).
        stream: Random stream to draw from.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        ValueError: If max_depth is negative.
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")
    color = _trace_single_ray(vec3(*origin), vec3(*direction), max_depth, stream)
    return (float(color[0]), float(color[1]), float(color[2]))
