"""Per-pixel sample accumulation and raster resolve.

The render target is a preallocated color buffer indexed ``[i, j]`` with
``i`` running left to right and ``j`` bottom to top. ``render_region`` fills
a rectangle of it in parallel: every pixel averages its samples and is
written by exactly one loop iteration, so disjoint regions can be rendered
in any order. ``resolve_raster`` then gamma-corrects (gamma 2, a square root)
and quantizes the whole buffer into an 8-bit raster, top row first.

Example:
    >>> from pathtrace.core.accumulator import setup_render_target, render_region, resolve_raster
    >>> setup_render_target(320, 240)
    >>> render_region(0, 0, 320, 240, samples_per_pixel=4, max_depth=50)
    >>> raster = resolve_raster()
"""

import numpy as np
import taichi as ti

from pathtrace.camera.thin_lens import get_ray, get_ray_jittered
from pathtrace.core.integrator import trace
from pathtrace.core.ray import vec3
from pathtrace.core.sampler import stream_index
from pathtrace.core.settings import MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH
from pathtrace.output.raster import Raster

# Channel scale applied after gamma correction, then truncated
QUANTIZE_SCALE = 255.99

# =============================================================================
# Render Target State
# =============================================================================

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Averaged linear color per pixel (preallocated to max size)
_color_buffer = ti.Vector.field(3, dtype=ti.f64, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.
    The buffers are preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT
    to avoid Taichi kernel recompilation issues.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to zero."""
    _color_buffer.fill(0.0)


def reset_render_target() -> None:
    """Forget the render target dimensions and clear the buffer."""
    _render_target_initialized[None] = 0
    _image_width[None] = 0
    _image_height[None] = 0
    clear_render_target()


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.func
def render_pixel(
    pixel_i: ti.i32,
    pixel_j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples: ti.i32,
    max_depth: ti.i32,
) -> vec3:
    """Average the samples of one pixel.

    With ``samples == 0`` a single unjittered ray through ``(i / width,
    j / height)`` is traced; otherwise ``samples`` jittered rays are averaged.
    """
    stream = stream_index(pixel_i, pixel_j)
    color = vec3(0.0, 0.0, 0.0)
    count = samples

    if samples == 0:
        s = ti.cast(pixel_i, ti.f64) / ti.cast(width, ti.f64)
        t = ti.cast(pixel_j, ti.f64) / ti.cast(height, ti.f64)
        color = trace(get_ray(s, t, stream), max_depth, stream)
        count = 1
    else:
        for _ in range(samples):
            ray = get_ray_jittered(pixel_i, pixel_j, width, height, stream)
            color += trace(ray, max_depth, stream)

    return color / ti.cast(count, ti.f64)


@ti.kernel
def _render_region(
    x0: ti.i32,
    y0: ti.i32,
    x1: ti.i32,
    y1: ti.i32,
    width: ti.i32,
    height: ti.i32,
    samples: ti.i32,
    max_depth: ti.i32,
):
    for i, j in ti.ndrange((x0, x1), (y0, y1)):
        _color_buffer[i, j] = render_pixel(i, j, width, height, samples, max_depth)


@ti.kernel
def _copy_colors(out: ti.types.ndarray(), width: ti.i32, height: ti.i32):
    for i, j in ti.ndrange(width, height):
        row = height - 1 - j
        for c in ti.static(range(3)):
            out[row, i, c] = _color_buffer[i, j][c]


# =============================================================================
# Public Rendering API
# =============================================================================


def render_region(
    x0: int, y0: int, x1: int, y1: int, samples_per_pixel: int, max_depth: int
) -> None:
    """Render the half-open pixel rectangle [x0, x1) x [y0, y1).

    ``y`` counts pixels from the bottom of the image. The scene, camera and
    random source must already be loaded.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If the rectangle is not inside the render target.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    if not (0 <= x0 <= x1 <= width and 0 <= y0 <= y1 <= height):
        raise ValueError(
            f"Region [{x0}, {x1}) x [{y0}, {y1}) outside render target {width}x{height}"
        )
    if x0 == x1 or y0 == y1:
        return

    _render_region(x0, y0, x1, y1, width, height, samples_per_pixel, max_depth)


def get_color_numpy() -> np.ndarray:
    """Get the averaged linear colors as a NumPy array.

    Returns:
        float64 array of shape (height, width, 3), top row first, before
        gamma correction.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    out = np.zeros((height, width, 3), dtype=np.float64)
    _copy_colors(out, width, height)
    return out


def quantize(colors: np.ndarray) -> np.ndarray:
    """Gamma-correct and quantize linear colors to uint8.

    Each channel becomes ``floor(255.99 * sqrt(c))`` clipped to [0, 255].
    Non-finite values are treated as black.
    """
    colors = np.nan_to_num(colors, nan=0.0, posinf=0.0, neginf=0.0)
    colors = np.maximum(colors, 0.0)
    scaled = np.floor(QUANTIZE_SCALE * np.sqrt(colors))
    return np.clip(scaled, 0, 255).astype(np.uint8)


def resolve_raster() -> Raster:
    """Convert the render target into an 8-bit raster.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    width, height = get_image_dimensions()
    colors = get_color_numpy()
    return Raster(width=width, height=height, pixels=quantize(colors))
