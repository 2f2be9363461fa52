"""Tests for raster values and image export.

Tests cover:
- Raster validation and pixel access
- PPM encoding (binary P6 and plain P3)
- PNG export read back with Pillow
- Atomic writes and error reporting
"""

import numpy as np
import pytest
from PIL import Image as PILImage

from pathtrace.output.export import (
    ExportError,
    encode_ppm,
    save_image,
    save_png,
    save_ppm,
)
from pathtrace.output.raster import Raster


@pytest.fixture
def raster():
    """A 2x2 raster: red, green on top; blue, white below."""
    pixels = np.array(
        [
            [[255, 0, 0], [0, 255, 0]],
            [[0, 0, 255], [255, 255, 255]],
        ],
        dtype=np.uint8,
    )
    return Raster(width=2, height=2, pixels=pixels)


class TestRaster:
    """Tests for the Raster value."""

    def test_pixel_access(self, raster):
        assert raster.pixel(0, 0) == (255, 0, 0)
        assert raster.pixel(1, 1) == (255, 255, 255)
        assert len(raster.to_bytes()) == 12

    def test_wrong_shape_raises(self):
        with pytest.raises(ValueError, match="shape"):
            Raster(width=3, height=2, pixels=np.zeros((2, 2, 3)))

    def test_non_positive_size_raises(self):
        with pytest.raises(ValueError):
            Raster(width=0, height=2, pixels=np.zeros((2, 0, 3)))

    def test_equality(self, raster):
        same = Raster(width=2, height=2, pixels=raster.pixels.copy())
        other = Raster(width=2, height=2, pixels=np.zeros((2, 2, 3)))
        assert raster == same
        assert raster != other


class TestPPM:
    """Tests for PPM encoding."""

    def test_binary(self, raster):
        data = encode_ppm(raster)
        assert data.startswith(b"P6\n2 2\n255\n")
        assert data[len(b"P6\n2 2\n255\n"):] == raster.to_bytes()

    def test_plain(self, raster):
        data = encode_ppm(raster, binary=False)
        assert data.decode("ascii") == (
            "P3\n2 2\n255\n255 0 0\n0 255 0\n0 0 255\n255 255 255\n"
        )

    def test_save_ppm(self, raster, tmp_path):
        path = save_ppm(raster, tmp_path / "out.ppm")
        assert path.read_bytes() == encode_ppm(raster)
        # No temporary files left behind
        assert [p.name for p in tmp_path.iterdir()] == ["out.ppm"]

    def test_overwrites_existing_file(self, raster, tmp_path):
        target = tmp_path / "out.ppm"
        target.write_bytes(b"old")
        save_ppm(raster, target, binary=False)
        assert target.read_bytes().startswith(b"P3\n")


class TestPNG:
    """Tests for PNG export."""

    def test_round_trip_through_pillow(self, raster, tmp_path):
        path = save_png(raster, tmp_path / "out.png")

        with PILImage.open(path) as image:
            assert image.size == (2, 2)
            assert image.mode == "RGB"
            assert np.array_equal(np.asarray(image), raster.pixels)


class TestSaveImage:
    """Tests for format dispatch and error handling."""

    def test_dispatch_on_suffix(self, raster, tmp_path):
        save_image(raster, tmp_path / "a.PNG")
        save_image(raster, tmp_path / "b.ppm")
        save_image(raster, tmp_path / "c.ppm", ascii_ppm=True)

        assert (tmp_path / "a.PNG").read_bytes().startswith(b"\x89PNG")
        assert (tmp_path / "b.ppm").read_bytes().startswith(b"P6")
        assert (tmp_path / "c.ppm").read_bytes().startswith(b"P3")

    def test_missing_directory_raises_export_error(self, raster, tmp_path):
        with pytest.raises(ExportError):
            save_image(raster, tmp_path / "missing" / "out.ppm")
        assert list(tmp_path.iterdir()) == []
