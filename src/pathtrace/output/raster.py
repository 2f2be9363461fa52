"""8-bit RGB raster produced by a render."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class Raster:
    """A dense 8-bit RGB image, top row first.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        pixels: uint8 array of shape (height, width, 3). Row 0 is the top
            of the image; columns run left to right.
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Raster dimensions must be positive, got {self.width}x{self.height}")
        pixels = np.ascontiguousarray(self.pixels, dtype=np.uint8)
        if pixels.shape != (self.height, self.width, 3):
            raise ValueError(
                f"Raster pixels must have shape ({self.height}, {self.width}, 3), "
                f"got {pixels.shape}"
            )
        object.__setattr__(self, "pixels", pixels)

    def to_bytes(self) -> bytes:
        """Row-major RGB bytes, ``width * height * 3`` long."""
        return self.pixels.tobytes()

    def pixel(self, x: int, y: int) -> tuple[int, int, int]:
        """RGB of the pixel at column ``x`` and raster row ``y`` (0 = top)."""
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Raster):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.pixels, other.pixels)
        )
