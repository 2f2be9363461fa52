"""Taichi-based Monte Carlo path tracer.

This package renders scenes of spheres and planes by recursive path tracing,
with support for:
- Diffuse, fuzzy metal and refractive dielectric materials
- A thin-lens camera with depth of field
- Per-pixel sample averaging with gamma correction
- Reproducible rendering through seeded per-pixel random streams

Subpackages:
    core: Vector algebra, rays, random streams, integrator and renderer
    geometry: Sphere and plane primitives and their intersection tests
    materials: Material models and scattering
    scene: Scene container, device-side scene and the showcase scene
    camera: Thin-lens camera with ray generation
    output: Rasters and PPM/PNG export
"""

__version__ = "0.1.0"
