"""Render settings and fixed capacity limits.

Taichi fields are preallocated to fixed maxima so that kernels are compiled
once regardless of the requested image size. The limits live here so that the
sampler, the accumulator and the settings validation agree on them.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Bounce budgets above this still render, but get slow fast
DEPTH_WARNING_THRESHOLD = 100

DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 480
DEFAULT_SAMPLES_PER_PIXEL = 1
DEFAULT_MAX_DEPTH = 50


@dataclass(frozen=True)
class RenderSettings:
    """Output and sampling configuration for one render.

    Attributes:
        width: Image width in pixels (1 to MAX_IMAGE_WIDTH).
        height: Image height in pixels (1 to MAX_IMAGE_HEIGHT).
        samples_per_pixel: Jittered samples averaged per pixel. 0 means a
            single unjittered sample.
        max_depth: Maximum number of scattering bounces per camera ray.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    samples_per_pixel: int = DEFAULT_SAMPLES_PER_PIXEL
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.width > MAX_IMAGE_WIDTH or self.height > MAX_IMAGE_HEIGHT:
            raise ValueError(
                f"Image dimensions ({self.width}x{self.height}) exceed maximum supported "
                f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
            )
        if self.samples_per_pixel < 0:
            raise ValueError(
                f"samples_per_pixel must be >= 0, got {self.samples_per_pixel}"
            )
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.max_depth > DEPTH_WARNING_THRESHOLD:
            logger.warning(
                "max_depth=%d exceeds %d; rendering may be very slow",
                self.max_depth,
                DEPTH_WARNING_THRESHOLD,
            )

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height

    @property
    def effective_samples(self) -> int:
        """Number of samples actually traced per pixel."""
        return max(self.samples_per_pixel, 1)
