#!/usr/bin/env python3
"""Render the showcase scene.

This script renders a ring of diffuse and metal spheres around a glass sphere
standing on a huge ground sphere, and writes the result as PPM or PNG.

Usage:
    python -m examples.render_showcase [options]

Options:
    --width WIDTH         Image width in pixels (default: 640)
    --height HEIGHT       Image height in pixels (default: 480)
    --samples SAMPLES     Samples per pixel, 0 for one unjittered sample (default: 25)
    --max-depth DEPTH     Maximum number of bounces per ray (default: 50)
    --seed SEED           Seed of the per-pixel random streams (default: 0)
    --sectors COUNT       Number of horizontal bands rendered in turn (default: 8)
    --output OUTPUT       Output file path, .ppm or .png (default: showcase.ppm)
    --ascii               Write plain-text P3 instead of binary P6 PPM
    --cpu                 Force the CPU backend
    --quiet               Only log warnings and errors
    --verbose             Log debug output

Example:
    python -m examples.render_showcase --width 320 --height 240 --samples 8 --output small.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_showcase")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the showcase scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=640,
        help="Image width in pixels (default: 640)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=480,
        help="Image height in pixels (default: 480)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=25,
        help="Samples per pixel, 0 for one unjittered sample (default: 25)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum number of bounces per ray (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed of the per-pixel random streams (default: 0)",
    )
    parser.add_argument(
        "--sectors",
        type=int,
        default=8,
        help="Number of horizontal bands rendered in turn (default: 8)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="showcase.ppm",
        help="Output file path, .ppm or .png (default: showcase.ppm)",
    )
    parser.add_argument(
        "--ascii",
        action="store_true",
        help="Write plain-text P3 instead of binary P6 PPM",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    return parser.parse_args(argv)


def configure_logging(quiet: bool, verbose: bool) -> None:
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def render_showcase(
    width: int = 640,
    height: int = 480,
    samples_per_pixel: int = 25,
    max_depth: int = 50,
    seed: int = 0,
    sectors: int = 8,
    output_path: str = "showcase.ppm",
    ascii_ppm: bool = False,
) -> Path:
    """Render the showcase scene and save it to a file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        samples_per_pixel: Samples per pixel (0 for one unjittered sample).
        max_depth: Maximum number of bounces per ray.
        seed: Seed of the per-pixel random streams.
        sectors: Number of horizontal bands rendered in turn.
        output_path: Output file path (.ppm or .png).
        ascii_ppm: Write P3 instead of P6 for PPM output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from pathtrace.core.renderer import Renderer
    from pathtrace.core.sampler import SeededRandom
    from pathtrace.core.settings import RenderSettings
    from pathtrace.output.export import save_image
    from pathtrace.scene.showcase import create_showcase_scene

    settings = RenderSettings(
        width=width,
        height=height,
        samples_per_pixel=samples_per_pixel,
        max_depth=max_depth,
    )
    scene, camera = create_showcase_scene(width, height)
    renderer = Renderer(scene, camera, settings, SeededRandom(seed), sectors=sectors)

    def progress_callback(done: int, total: int) -> None:
        logger.info("Progress: %d/%d sectors (%.0f%%)", done, total, 100.0 * done / total)

    raster = renderer.render(callback=progress_callback)
    output_file = save_image(raster, output_path, ascii_ppm=ascii_ppm)
    logger.info("Saved to: %s", output_file.absolute())
    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(args.quiet, args.verbose)

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu, default_fp=ti.f64)
        logger.info("Using CPU backend")
    else:
        try:
            ti.init(arch=ti.gpu, default_fp=ti.f64)
            logger.info("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu, default_fp=ti.f64)
            logger.info("Using CPU backend")

    try:
        render_showcase(
            width=args.width,
            height=args.height,
            samples_per_pixel=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
            sectors=args.sectors,
            output_path=args.output,
            ascii_ppm=args.ascii,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
