"""Showcase scene: a ring of spheres around a glass sphere.

The scene consists of:
- A huge dull green sphere acting as the ground
- Eight unit spheres on a ring, alternating diffuse and rough metal, rising
  and falling along a half sine wave
- A large glass sphere in the middle of the ring

The camera looks at the glass sphere from slightly above, with a small
aperture focused on the target.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtrace.scene.showcase import create_showcase_scene
    >>> from pathtrace.core.renderer import Renderer
    >>> from pathtrace.core.settings import RenderSettings
    >>>
    >>> scene, camera = create_showcase_scene(640, 480)
    >>> raster = Renderer(scene, camera, RenderSettings(640, 480, 25, 50)).render()
"""

import math
from dataclasses import dataclass

from pathtrace.camera.thin_lens import ThinLensCamera
from pathtrace.core.vector import Vector3
from pathtrace.geometry.sphere import Sphere
from pathtrace.materials.dielectric import Dielectric
from pathtrace.materials.lambertian import Lambertian
from pathtrace.materials.metal import Metal
from pathtrace.scene.scene import Scene

# =============================================================================
# Scene Constants
# =============================================================================

GROUND_CENTER = (0.0, -1000.0, 0.0)
GROUND_RADIUS = 1000.0
GROUND_ALBEDO = (0.1, 0.3, 0.1)

# Ring sphere colors, one per sphere, in ring order
RING_COLORS = (
    (1.0, 0.1, 0.1),
    (0.1, 1.0, 0.1),
    (0.1, 0.1, 1.0),
    (1.0, 1.0, 0.1),
    (1.0, 0.1, 1.0),
    (0.1, 1.0, 1.0),
    (0.8, 0.8, 0.8),
    (0.2, 0.2, 0.2),
)
RING_SPHERE_RADIUS = 1.0

CAMERA_POSITION = (5.5, 3.0, 1.0)
CAMERA_TARGET = (0.0, 2.0, 0.0)
CAMERA_FOV = 75.0
CAMERA_APERTURE = 0.1


@dataclass(frozen=True)
class ShowcaseParams:
    """Parameters for configuring the showcase scene.

    Attributes:
        ring_radius: Distance of the ring spheres from the vertical axis.
        wave_height: Amplitude of the ring's vertical sine wave.
        metal_fuzz: Fuzz of the metal ring spheres (clamped to [0, 1]).
        glass_center: Center of the glass sphere.
        glass_radius: Radius of the glass sphere.
        glass_ior: Refractive index of the glass sphere.
    """

    ring_radius: float = 4.0
    wave_height: float = 2.0
    metal_fuzz: float = 1.0
    glass_center: tuple[float, float, float] = (0.0, 3.0, 0.0)
    glass_radius: float = 2.0
    glass_ior: float = 1.1


def ring_sphere_center(index: int, count: int, ring_radius: float, wave_height: float) -> Vector3:
    """Center of the ``index``-th of ``count`` spheres on the ring.

    The spheres go once around the ring while their height follows half a
    sine period, so the first sphere sits at y = 1 and the middle one is
    highest.
    """
    around = (index / count) * 2.0 * math.pi
    along = (index / count) * math.pi
    return Vector3(
        math.cos(around) * ring_radius,
        RING_SPHERE_RADIUS + math.sin(along) * wave_height,
        math.sin(around) * ring_radius,
    )


def create_showcase_scene(
    width: int = 640,
    height: int = 480,
    params: ShowcaseParams | None = None,
) -> tuple[Scene, ThinLensCamera]:
    """Create the showcase scene and its camera.

    Args:
        width: Image width, used for the camera aspect ratio.
        height: Image height, used for the camera aspect ratio.
        params: Optional ShowcaseParams. If None, uses ShowcaseParams().

    Returns:
        A tuple of (Scene, ThinLensCamera). The scene holds 10 spheres:
        the ground, the eight ring spheres and the glass sphere.

    Raises:
        ValueError: If width or height is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if params is None:
        params = ShowcaseParams()

    scene = Scene()
    scene.add(Sphere(GROUND_CENTER, GROUND_RADIUS, Lambertian(GROUND_ALBEDO)))

    count = len(RING_COLORS)
    for index, color in enumerate(RING_COLORS):
        center = ring_sphere_center(index, count, params.ring_radius, params.wave_height)
        if index % 2 == 0:
            material = Lambertian(color)
        else:
            material = Metal(color, fuzz=params.metal_fuzz)
        scene.add(Sphere(center, RING_SPHERE_RADIUS, material))

    scene.add(Sphere(params.glass_center, params.glass_radius, Dielectric(params.glass_ior)))

    position = Vector3.of(CAMERA_POSITION)
    target = Vector3.of(CAMERA_TARGET)
    camera = ThinLensCamera(
        position=position,
        target=target,
        vertical_fov=CAMERA_FOV,
        aspect_ratio=width / height,
        aperture=CAMERA_APERTURE,
        focus_distance=(position - target).length(),
    )
    return scene, camera
