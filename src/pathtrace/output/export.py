"""Image export utilities for rendered rasters.

Supported formats:
    - PPM, binary (P6) or plain text (P3)
    - PNG (8-bit RGB via Pillow)

Every exporter writes to a temporary file next to the destination and moves
it into place only after the whole image has been written, so a failed
export never leaves a truncated file behind.

Example:
    >>> from pathtrace.output.export import save_ppm, save_png
    >>> raster = renderer.render()
    >>> save_ppm(raster, "showcase.ppm")
    >>> save_png(raster, "showcase.png")
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

from PIL import Image as PILImage

from pathtrace.output.raster import Raster

logger = logging.getLogger(__name__)

MAX_CHANNEL_VALUE = 255

PathLike = str | os.PathLike[str]


class ExportError(RuntimeError):
    """Raised when an image cannot be encoded or written."""


def _check_raster(raster: Raster) -> bytes:
    data = raster.to_bytes()
    expected = raster.width * raster.height * 3
    if len(data) != expected:
        raise ValueError(
            f"Raster holds {len(data)} bytes, expected {expected} "
            f"for {raster.width}x{raster.height}"
        )
    return data


def encode_ppm(raster: Raster, binary: bool = True) -> bytes:
    """Encode a raster as a PPM image.

    Args:
        raster: The image to encode.
        binary: If True, produce P6 (raw bytes); otherwise P3 with one
            ``r g b`` line per pixel.

    Raises:
        ValueError: If the raster byte length does not match its size.
    """
    data = _check_raster(raster)
    magic = "P6" if binary else "P3"
    header = f"{magic}\n{raster.width} {raster.height}\n{MAX_CHANNEL_VALUE}\n".encode("ascii")
    if binary:
        return header + data

    lines = [
        f"{data[k]} {data[k + 1]} {data[k + 2]}" for k in range(0, len(data), 3)
    ]
    return header + ("\n".join(lines) + "\n").encode("ascii")


def _write_atomically(path: PathLike, write: Callable[[BinaryIO], None]) -> Path:
    target = Path(path)
    tmp_name = None
    replaced = False
    try:
        with tempfile.NamedTemporaryFile(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            write(tmp)
        os.replace(tmp_name, target)
        replaced = True
    except OSError as e:
        raise ExportError(f"Failed to write {target}: {e}") from e
    finally:
        if not replaced and tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
    return target


def save_ppm(raster: Raster, path: PathLike, binary: bool = True) -> Path:
    """Save a raster as a PPM file.

    Args:
        raster: The image to save.
        path: Output file path.
        binary: If True write P6, otherwise P3.

    Returns:
        The path written.

    Raises:
        ValueError: If the raster byte length does not match its size.
        ExportError: If the file cannot be written.
    """
    encoded = encode_ppm(raster, binary=binary)
    written = _write_atomically(path, lambda f: f.write(encoded))
    logger.info("Saved %s PPM to %s", "binary" if binary else "plain", written)
    return written


def save_png(raster: Raster, path: PathLike) -> Path:
    """Save a raster as an 8-bit RGB PNG file.

    Args:
        raster: The image to save.
        path: Output file path.

    Returns:
        The path written.

    Raises:
        ValueError: If the raster byte length does not match its size.
        ExportError: If the image cannot be encoded or written.
    """
    _check_raster(raster)
    pil_image = PILImage.fromarray(raster.pixels)

    def write(f: BinaryIO) -> None:
        try:
            pil_image.save(f, format="PNG")
        except ValueError as e:
            raise ExportError(f"Failed to encode PNG: {e}") from e

    written = _write_atomically(path, write)
    logger.info("Saved PNG to %s", written)
    return written


def save_image(raster: Raster, path: PathLike, *, ascii_ppm: bool = False) -> Path:
    """Save a raster, choosing the format from the file suffix.

    ``.png`` is written with Pillow; anything else is written as PPM.

    Args:
        raster: The image to save.
        path: Output file path.
        ascii_ppm: Write plain-text P3 instead of binary P6 for PPM output.

    Raises:
        ValueError: If the raster byte length does not match its size.
        ExportError: If the file cannot be written.
    """
    if Path(path).suffix.lower() == ".png":
        return save_png(raster, path)
    return save_ppm(raster, path, binary=not ascii_ppm)
