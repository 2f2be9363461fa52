"""Thin-lens camera model with depth of field.

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from target toward position (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport is placed at ``focus_distance`` in front of the camera, so points
at that distance are in sharpest focus. Each primary ray starts at a random
point on a lens disk of radius ``aperture / 2`` and passes through the
viewport point for its normalized image coordinates (s, t). An aperture of
zero gives a pinhole camera.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtrace.camera.thin_lens import ThinLensCamera, setup_camera, get_ray
    >>>
    >>> camera = ThinLensCamera(
    ...     position=(5.5, 3.0, 1.0),
    ...     target=(0.0, 2.0, 0.0),
    ...     vertical_fov=75.0,
    ...     aspect_ratio=4.0 / 3.0,
    ...     aperture=0.1,
    ...     focus_distance=5.68,
    ... )
    >>> setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0.5, 0.5, 0)  # Ray through image center
"""

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Any

import taichi as ti

from pathtrace.core.ray import Ray, make_ray, random_in_unit_disk, real
from pathtrace.core.sampler import next_random
from pathtrace.core.vector import Vector3, VectorLike

logger = logging.getLogger(__name__)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class ThinLensCamera:
    """Configuration for a thin-lens (perspective, depth of field) camera.

    The configuration is immutable; use :meth:`with_changes` to derive a
    modified copy.

    Attributes:
        position: Camera position in world space.
        target: Point the camera is looking at in world space.
        view_up: Up direction for camera orientation (typically (0, 1, 0)).
        vertical_fov: Vertical field of view in degrees, in (0, 180).
        aspect_ratio: Width divided by height of the output image.
        aperture: Lens diameter. Zero disables depth of field.
        focus_distance: Distance from the camera to the plane in focus.
    """

    position: VectorLike = (0.0, 0.0, 0.0)
    target: VectorLike = (1.0, 0.0, 0.0)
    view_up: VectorLike = (0.0, 1.0, 0.0)
    vertical_fov: float = 90.0
    aspect_ratio: float = 1.0
    aperture: float = 1.0
    focus_distance: float = 1.0

    def __post_init__(self) -> None:
        position = Vector3.of(self.position)
        target = Vector3.of(self.target)
        view_up = Vector3.of(self.view_up)

        if not 0.0 < self.vertical_fov < 180.0:
            raise ValueError(f"vertical_fov must be in (0, 180), got {self.vertical_fov}")
        if self.aspect_ratio <= 0.0:
            raise ValueError(f"aspect_ratio must be positive, got {self.aspect_ratio}")
        if self.aperture < 0.0:
            raise ValueError(f"aperture must be non-negative, got {self.aperture}")
        if self.focus_distance <= 0.0:
            raise ValueError(f"focus_distance must be positive, got {self.focus_distance}")
        if position == target:
            raise ValueError("Camera position and target must differ")
        if view_up.cross(position - target).length() == 0.0:
            raise ValueError("view_up must not be parallel to the view direction")

        object.__setattr__(self, "position", position)
        object.__setattr__(self, "target", target)
        object.__setattr__(self, "view_up", view_up)
        object.__setattr__(self, "vertical_fov", float(self.vertical_fov))
        object.__setattr__(self, "aspect_ratio", float(self.aspect_ratio))
        object.__setattr__(self, "aperture", float(self.aperture))
        object.__setattr__(self, "focus_distance", float(self.focus_distance))

    def with_changes(self, **changes: Any) -> "ThinLensCamera":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    @property
    def lens_radius(self) -> float:
        return self.aperture / 2.0


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f64, shape=())

# Orthonormal basis vectors
_camera_u = ti.Vector.field(3, dtype=ti.f64, shape=())  # Right
_camera_v = ti.Vector.field(3, dtype=ti.f64, shape=())  # Up
_camera_w = ti.Vector.field(3, dtype=ti.f64, shape=())  # Backward (opposite view)

# Viewport at focus distance
_viewport_horizontal = ti.Vector.field(3, dtype=ti.f64, shape=())
_viewport_vertical = ti.Vector.field(3, dtype=ti.f64, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f64, shape=())

_lens_radius = ti.field(dtype=ti.f64, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: ThinLensCamera) -> None:
    """Compute the basis and viewport of ``camera`` and upload them.

    Args:
        camera: Camera configuration.

    Note:
        This function writes to Taichi fields and should be called from
        Python (not from within a Taichi kernel).
    """
    half_height = math.tan(math.radians(camera.vertical_fov) / 2.0)
    half_width = camera.aspect_ratio * half_height
    focus = camera.focus_distance

    w = (camera.position - camera.target).normalize()
    u = camera.view_up.cross(w).normalize()
    v = w.cross(u)

    lower_left = (
        camera.position - u * (half_width * focus) - v * (half_height * focus) - w * focus
    )
    horizontal = u * (2.0 * half_width * focus)
    vertical = v * (2.0 * half_height * focus)

    _camera_origin[None] = camera.position.to_list()
    _camera_u[None] = u.to_list()
    _camera_v[None] = v.to_list()
    _camera_w[None] = w.to_list()
    _viewport_horizontal[None] = horizontal.to_list()
    _viewport_vertical[None] = vertical.to_list()
    _lower_left_corner[None] = lower_left.to_list()
    _lens_radius[None] = camera.lens_radius

    logger.debug("Camera basis u=%s v=%s w=%s", u.to_tuple(), v.to_tuple(), w.to_tuple())


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_ray(s: real, t: real, stream: ti.i32) -> Ray:
    """Generate a ray through normalized image coordinates (s, t).

    Args:
        s: Horizontal coordinate in [0, 1] (left to right).
        t: Vertical coordinate in [0, 1] (bottom to top).
        stream: Random stream used for the lens sample.

    Returns:
        A Ray starting on the lens disk. The direction is not normalized.
    """
    rd = _lens_radius[None] * random_in_unit_disk(stream)
    origin = _camera_origin[None] + _camera_u[None] * rd.x + _camera_v[None] * rd.y
    direction = (
        _lower_left_corner[None]
        + s * _viewport_horizontal[None]
        + t * _viewport_vertical[None]
        - origin
    )
    return make_ray(origin, direction)


@ti.func
def get_ray_jittered(
    pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32, stream: ti.i32
) -> Ray:
    """Generate a ray with a random sub-pixel offset for anti-aliasing.

    The horizontal jitter is drawn before the vertical one, then the lens
    sample.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
        stream: Random stream of the pixel.
    """
    s = (ti.cast(pixel_i, ti.f64) + next_random(stream)) / ti.cast(width, ti.f64)
    t = (ti.cast(pixel_j, ti.f64) + next_random(stream)) / ti.cast(height, ti.f64)
    return get_ray(s, t, stream)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin, u, v, w, horizontal, vertical, lower_left.
    """
    fields = {
        "origin": _camera_origin,
        "u": _camera_u,
        "v": _camera_v,
        "w": _camera_w,
        "horizontal": _viewport_horizontal,
        "vertical": _viewport_vertical,
        "lower_left": _lower_left_corner,
    }
    info = {}
    for name, field in fields.items():
        value = field[None]
        info[name] = (float(value[0]), float(value[1]), float(value[2]))
    return info


def get_lens_radius() -> float:
    return float(_lens_radius[None])
