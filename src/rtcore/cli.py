"""Render the random sphere scene from the command line.

Usage:
    rtcore [options]
    python -m rtcore [options]

Options:
    --width WIDTH             Image width in pixels (default: 1200)
    --aspect-ratio RATIO      Width / height (default: 1.5)
    --samples SAMPLES         Samples per pixel (default: 500)
    --max-depth DEPTH         Maximum bounces per ray (default: 50)
    --seed SEED               Render seed (default: random)
    --scene-seed SEED         Scene layout seed (default: random)
    --arch ARCH               Taichi backend (default: cpu)
    --output OUTPUT           Output file path (default: out.png)
    --quiet                   Suppress progress output
    --verbose                 Enable debug logging

Example:
    rtcore --width 400 --samples 50 --seed 1 --scene-seed 1 --output small.png
"""

import argparse
import logging
import sys
import time
from collections.abc import Sequence
from pathlib import Path

from rtcore.config import RenderSettings, available_archs, init_taichi

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="rtcore",
        description="Render the random sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1200,
        help="Image width in pixels (default: 1200)",
    )
    parser.add_argument(
        "--aspect-ratio",
        type=float,
        default=1.5,
        help="Image width divided by height (default: 1.5)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=500,
        help="Number of samples per pixel (default: 500)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum bounces per ray (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Render seed (default: drawn at random and logged)",
    )
    parser.add_argument(
        "--scene-seed",
        type=int,
        default=None,
        help="Seed for the random scene layout (default: random)",
    )
    parser.add_argument(
        "--arch",
        choices=available_archs(),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="out.png",
        help="Output file path (default: out.png)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def render_random_scene(
    settings: RenderSettings,
    scene_seed: int | None = None,
    output_path: str = "out.png",
    quiet: bool = False,
) -> Path:
    """Render the random sphere scene and save it to a PNG.

    Args:
        settings: Image size, sampling and seed.
        scene_seed: Seed for the scene layout.
        output_path: Output file path (PNG).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Imported here so Taichi is initialised before any field is allocated
    from rtcore.core.renderer import Renderer
    from rtcore.preview.export import save_png
    from rtcore.scene.random_scene import random_scene, random_scene_camera
    from rtcore.scene.world import World

    start_time = time.time()

    world = World(random_scene(scene_seed))
    camera = random_scene_camera(settings.aspect_ratio)
    renderer = Renderer(world, camera, settings)

    if not quiet:
        print(
            f"Rendering {settings.width}x{settings.height}, "
            f"{settings.samples_per_pixel} samples per pixel, {len(world)} spheres "
            f"(seed {renderer.seed})..."
        )

    def progress_callback(done: int, total: int) -> None:
        if not quiet:
            print(f"[{done}/{total}] rows")

    image = renderer.render(callback=progress_callback)

    output_file = Path(output_path)
    save_png(image, output_file)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Elapsed: {time.time() - start_time:.2f}s")

    return output_file


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = RenderSettings.from_aspect_ratio(
            args.width,
            args.aspect_ratio,
            samples_per_pixel=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
        )
        init_taichi(args.arch)
        render_random_scene(
            settings,
            scene_seed=args.scene_seed,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        logger.debug("Render failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
