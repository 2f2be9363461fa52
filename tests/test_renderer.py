"""Tests for the region-partitioned renderer.

Tests cover:
- Sector partitioning
- Render settings validation
- Pixel orientation and unjittered sampling
- A fully deterministic render with a fixed random sequence
- Reproducibility across re-renders and sector counts
"""

import logging
import math

import numpy as np
import pytest


def _sky(direction):
    x, y, z = direction
    a = 0.5 * (y / math.sqrt(x * x + y * y + z * z) + 1.0)
    return (1.0 - 0.5 * a, 1.0 - 0.3 * a, 1.0)


class TestPartitionSectors:
    """Tests for splitting an image into bands."""

    def test_covers_every_row_once(self):
        from pathtrace.core.renderer import partition_sectors

        sectors = partition_sectors(7, 10, 3)

        assert [s.height for s in sectors] == [4, 3, 3]
        assert sectors[0].y0 == 0
        assert sectors[-1].y1 == 10
        for lower, upper in zip(sectors, sectors[1:]):
            assert lower.y1 == upper.y0
        assert all(s.x0 == 0 and s.x1 == 7 for s in sectors)
        assert sum(s.pixel_count for s in sectors) == 70

    @pytest.mark.parametrize("count, expected", [(0, 1), (-3, 1), (50, 4)])
    def test_count_is_clamped(self, count, expected):
        from pathtrace.core.renderer import partition_sectors

        assert len(partition_sectors(5, 4, count)) == expected

    def test_invalid_dimensions(self):
        from pathtrace.core.renderer import partition_sectors

        with pytest.raises(ValueError):
            partition_sectors(0, 4, 1)


class TestRenderSettings:
    """Tests for RenderSettings validation."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"width": 0},
            {"height": -1},
            {"width": 4096},
            {"samples_per_pixel": -1},
            {"max_depth": -1},
        ],
    )
    def test_invalid_settings_raise(self, kwargs):
        from pathtrace.core.settings import RenderSettings

        with pytest.raises(ValueError):
            RenderSettings(**kwargs)

    def test_deep_paths_log_warning(self, caplog):
        from pathtrace.core.settings import RenderSettings

        with caplog.at_level(logging.WARNING, logger="pathtrace.core.settings"):
            RenderSettings(max_depth=500)

        assert "max_depth=500" in caplog.text

    def test_effective_samples(self):
        from pathtrace.core.settings import RenderSettings

        assert RenderSettings(samples_per_pixel=0).effective_samples == 1
        assert RenderSettings(samples_per_pixel=9).effective_samples == 9
        assert RenderSettings(width=640, height=480).aspect_ratio == pytest.approx(4.0 / 3.0)


class TestRenderer:
    """Tests for full renders."""

    def test_color_before_render_raises(self):
        from pathtrace.camera.thin_lens import ThinLensCamera
        from pathtrace.core.renderer import Renderer
        from pathtrace.core.settings import RenderSettings
        from pathtrace.scene.scene import Scene

        renderer = Renderer(Scene(), ThinLensCamera(), RenderSettings(4, 4, 1, 1))
        with pytest.raises(RuntimeError, match="Nothing rendered"):
            renderer.get_color_numpy()

    def test_invalid_sector_count(self):
        from pathtrace.camera.thin_lens import ThinLensCamera
        from pathtrace.core.renderer import Renderer
        from pathtrace.core.settings import RenderSettings
        from pathtrace.scene.scene import Scene

        with pytest.raises(ValueError, match="sectors"):
            Renderer(Scene(), ThinLensCamera(), RenderSettings(4, 4, 1, 1), sectors=0)

    def test_unjittered_depth_zero_ground_and_sky(self):
        from pathtrace.camera.thin_lens import ThinLensCamera
        from pathtrace.core.renderer import Renderer
        from pathtrace.core.settings import RenderSettings
        from pathtrace.geometry.sphere import Sphere
        from pathtrace.materials.lambertian import Lambertian
        from pathtrace.scene.scene import Scene

        size = 8
        scene = Scene([Sphere((0, -1000, 0), 1000.0, Lambertian((0.5, 0.5, 0.5)))])
        camera = ThinLensCamera(position=(0, 1, 0), target=(0, 1, -1), aperture=0.0)
        renderer = Renderer(scene, camera, RenderSettings(size, size, 0, 0))
        raster = renderer.render()
        colors = renderer.get_color_numpy()

        assert colors.shape == (size, size, 3)
        assert raster.width == size and raster.height == size
        for j in range(size):
            row = colors[size - 1 - j]
            if j < size // 2:
                # Below the horizon every ray hits the ground at depth 0
                assert np.all(row == 0.0)
                continue
            for i in range(size):
                direction = (2.0 * i / size - 1.0, 2.0 * j / size - 1.0, -1.0)
                assert row[i] == pytest.approx(_sky(direction), abs=1e-9)

    def test_fixed_sequence_render(self):
        from pathtrace.camera.thin_lens import ThinLensCamera
        from pathtrace.core.renderer import Renderer
        from pathtrace.core.sampler import FixedSequenceRandom
        from pathtrace.core.settings import RenderSettings
        from pathtrace.geometry.sphere import Sphere
        from pathtrace.materials.lambertian import Lambertian
        from pathtrace.scene.scene import Scene

        size = 4
        scene = Scene([Sphere((-2, -2, -2), 1.0, Lambertian((0.5, 0.5, 0.5)))])
        camera = ThinLensCamera(target=(0, 0, -1), aperture=0.0)
        renderer = Renderer(
            scene, camera, RenderSettings(size, size, 1, 1), FixedSequenceRandom((0.0,))
        )
        raster = renderer.render()

        # Bottom-left pixel looks along (-1, -1, -1) into the sphere. The
        # scatter sample falls back to zero, so the bounce leaves along the
        # normal (1, 1, 1) / sqrt(3) and sees the sky through a 0.5 albedo.
        expected = tuple(0.5 * c for c in _sky((1.0, 1.0, 1.0)))
        assert renderer.get_color_numpy()[size - 1, 0] == pytest.approx(expected, abs=1e-9)
        expected_bytes = tuple(int(math.floor(255.99 * math.sqrt(c))) for c in expected)
        assert expected_bytes == (140, 158, 181)
        assert raster.pixel(0, size - 1) == expected_bytes

    def test_render_is_reproducible(self):
        from pathtrace.core.renderer import Renderer
        from pathtrace.core.sampler import SeededRandom
        from pathtrace.core.settings import RenderSettings
        from pathtrace.scene.showcase import create_showcase_scene

        scene, camera = create_showcase_scene(16, 12)
        renderer = Renderer(scene, camera, RenderSettings(16, 12, 2, 8), SeededRandom(7))

        first = renderer.render()
        second = renderer.render()
        assert first == second

    def test_sector_count_does_not_change_result(self):
        from pathtrace.core.renderer import Renderer
        from pathtrace.core.sampler import SeededRandom
        from pathtrace.core.settings import RenderSettings
        from pathtrace.scene.showcase import create_showcase_scene

        settings = RenderSettings(16, 12, 2, 8)
        scene, camera = create_showcase_scene(16, 12)
        whole = Renderer(scene, camera, settings, SeededRandom(3), sectors=1).render()
        banded = Renderer(scene, camera, settings, SeededRandom(3), sectors=5).render()

        assert whole == banded

    def test_progress_callback(self):
        from pathtrace.camera.thin_lens import ThinLensCamera
        from pathtrace.core.renderer import Renderer
        from pathtrace.core.settings import RenderSettings
        from pathtrace.scene.scene import Scene

        calls = []
        renderer = Renderer(Scene(), ThinLensCamera(), RenderSettings(4, 6, 1, 1), sectors=3)
        raster = renderer.render(callback=lambda done, total: calls.append((done, total)))

        assert calls == [(1, 3), (2, 3), (3, 3)]
        assert raster.pixels.shape == (6, 4, 3)

    def test_empty_scene_is_sky_everywhere(self):
        from pathtrace.camera.thin_lens import ThinLensCamera
        from pathtrace.core.renderer import Renderer
        from pathtrace.core.settings import RenderSettings
        from pathtrace.scene.scene import Scene

        renderer = Renderer(Scene(), ThinLensCamera(target=(0, 0, -1)), RenderSettings(4, 4, 3, 5))
        renderer.render()
        colors = renderer.get_color_numpy()

        # Sky is never darker than light blue and the blue channel is always 1
        assert np.all(colors >= 0.5 - 1e-12)
        assert np.allclose(colors[..., 2], 1.0)


class TestQuantize:
    """Tests for gamma correction and quantization."""

    def test_quantize(self):
        from pathtrace.core.accumulator import quantize

        colors = np.array([[[0.0, 0.25, 1.0], [4.0, -1.0, np.nan]]])
        assert quantize(colors).tolist() == [[[0, 127, 255], [255, 0, 0]]]
        assert quantize(colors).dtype == np.uint8

    def test_render_region_bounds(self):
        from pathtrace.core.accumulator import render_region, setup_render_target

        setup_render_target(4, 4)
        with pytest.raises(ValueError, match="outside render target"):
            render_region(0, 0, 5, 4, 1, 1)

    def test_render_region_requires_target(self):
        from pathtrace.core.accumulator import render_region

        with pytest.raises(RuntimeError, match="Render target not set up"):
            render_region(0, 0, 1, 1, 1, 1)
