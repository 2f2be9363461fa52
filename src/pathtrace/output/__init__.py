"""Output module for rendered images.

Components:
    raster: 8-bit RGB raster, top row first
    export: PPM (P3/P6) and PNG writers
"""

from .export import ExportError, encode_ppm, save_image, save_png, save_ppm
from .raster import Raster

__all__ = [
    "Raster",
    "ExportError",
    "encode_ppm",
    "save_ppm",
    "save_png",
    "save_image",
]
