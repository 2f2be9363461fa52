"""Region-partitioned renderer.

This module wraps the accumulator in a convenient interface:
- Splits the image into sectors (disjoint horizontal bands)
- Renders each sector with the parallel region kernel
- Reports progress through a callback or a generator
- Resolves the finished image into an 8-bit raster

Every pixel owns its random stream and is written exactly once, so the
result is the same for any number of sectors.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from pathtrace.core.renderer import Renderer
    >>> from pathtrace.core.settings import RenderSettings
    >>> from pathtrace.scene.showcase import create_showcase_scene
    >>>
    >>> scene, camera = create_showcase_scene(320, 240)
    >>> renderer = Renderer(scene, camera, RenderSettings(320, 240, 8, 50), sectors=4)
    >>> raster = renderer.render(callback=lambda done, total: print(f"{done}/{total}"))
"""

import logging
import time
from collections.abc import Callable, Generator
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from pathtrace.camera.thin_lens import ThinLensCamera, setup_camera
from pathtrace.core.accumulator import (
    get_color_numpy,
    render_region,
    resolve_raster,
    setup_render_target,
)
from pathtrace.core.sampler import RandomSource, SeededRandom, configure_random
from pathtrace.core.settings import RenderSettings
from pathtrace.output.raster import Raster
from pathtrace.scene.intersection import load_scene
from pathtrace.scene.scene import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (sectors_done, sectors_total)
ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class Sector:
    """A half-open pixel rectangle [x0, x1) x [y0, y1).

    ``y`` counts pixels from the bottom of the image.
    """

    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def pixel_count(self) -> int:
        return self.width * self.height


def partition_sectors(width: int, height: int, count: int) -> list[Sector]:
    """Split an image into ``count`` full-width horizontal bands.

    The bands are disjoint, ordered bottom to top, and together cover every
    pixel exactly once. Band heights differ by at most one row.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        count: Requested number of bands, clamped to [1, height].

    Raises:
        ValueError: If width or height is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    count = max(1, min(count, height))
    base, extra = divmod(height, count)

    sectors = []
    y0 = 0
    for index in range(count):
        rows = base + (1 if index < extra else 0)
        sectors.append(Sector(0, y0, width, y0 + rows))
        y0 += rows
    return sectors


class Renderer:
    """Renders a scene through a camera into an 8-bit raster.

    The scene, camera and random source are uploaded at the start of every
    render, so a Renderer can be rendered repeatedly; with a seeded random
    source each render reproduces the same raster.

    Attributes:
        scene: The scene to render (frozen on first render).
        camera: The camera configuration.
        settings: Image size, samples per pixel and depth limit.
        random_source: Random source used for every render.
    """

    def __init__(
        self,
        scene: Scene,
        camera: ThinLensCamera,
        settings: RenderSettings,
        random_source: RandomSource | None = None,
        sectors: int = 1,
    ) -> None:
        """Initialize the renderer.

        Args:
            scene: The scene to render.
            camera: The camera configuration.
            settings: Render settings.
            random_source: Random source; defaults to ``SeededRandom(0)``.
            sectors: Number of horizontal bands rendered one after another.

        Raises:
            ValueError: If sectors is not positive.
        """
        if sectors <= 0:
            raise ValueError(f"sectors must be positive, got {sectors}")

        self._scene = scene
        self._camera = camera
        self._settings = settings
        self._random_source = random_source if random_source is not None else SeededRandom(0)
        self._sectors = partition_sectors(settings.width, settings.height, sectors)
        self._rendered = False

    @property
    def scene(self) -> Scene:
        return self._scene

    @property
    def camera(self) -> ThinLensCamera:
        return self._camera

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    @property
    def random_source(self) -> RandomSource:
        return self._random_source

    @property
    def sectors(self) -> list[Sector]:
        """Get the sectors in render order."""
        return list(self._sectors)

    def _prepare(self) -> None:
        load_scene(self._scene)
        setup_camera(self._camera)
        configure_random(self._random_source)
        setup_render_target(self._settings.width, self._settings.height)

    def render_progressive(self) -> Generator[tuple[int, int], None, None]:
        """Render sector by sector, yielding progress after each one.

        Yields:
            Tuple of (sectors_done, sectors_total).
        """
        self._prepare()
        settings = self._settings
        total = len(self._sectors)

        logger.info(
            "Rendering %dx%d, %d spp, max depth %d, %d sector(s)",
            settings.width,
            settings.height,
            settings.samples_per_pixel,
            settings.max_depth,
            total,
        )
        start = time.perf_counter()

        for done, sector in enumerate(self._sectors, start=1):
            render_region(
                sector.x0,
                sector.y0,
                sector.x1,
                sector.y1,
                settings.samples_per_pixel,
                settings.max_depth,
            )
            logger.debug("Sector %d/%d done (rows %d-%d)", done, total, sector.y0, sector.y1 - 1)
            yield (done, total)

        self._rendered = True
        logger.info("Render finished in %.2fs", time.perf_counter() - start)

    def render(self, callback: ProgressCallback | None = None) -> Raster:
        """Render the whole image.

        Args:
            callback: Optional callback called after each sector with
                (sectors_done, sectors_total).

        Returns:
            The finished 8-bit raster.
        """
        for done, total in self.render_progressive():
            if callback is not None:
                callback(done, total)
        return resolve_raster()

    def get_color_numpy(self) -> npt.NDArray[np.float64]:
        """Get the averaged linear colors of the last render.

        Returns:
            NumPy array of shape (height, width, 3), top row first.

        Raises:
            RuntimeError: If nothing has been rendered yet.
        """
        if not self._rendered:
            raise RuntimeError("Nothing rendered yet. Call render() first.")
        return get_color_numpy()

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        settings = self._settings
        return (
            f"Renderer(width={settings.width}, height={settings.height}, "
            f"samples={settings.samples_per_pixel}, max_depth={settings.max_depth}, "
            f"sectors={len(self._sectors)}, primitives={len(self._scene)})"
        )
