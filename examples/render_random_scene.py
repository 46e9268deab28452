#!/usr/bin/env python3
"""Render the random spheres scene.

This script renders the classic random spheres scene (or the small three
sphere scene) end to end: it builds the world, uploads it, sets up the
camera and renders band by band with a progress line.

Usage:
    python -m examples.render_random_scene [options]

Options:
    --width WIDTH         Image width in pixels (default: 1200)
    --height HEIGHT       Image height in pixels (default: 800)
    --samples SAMPLES     Number of samples per pixel (default: 150)
    --output OUTPUT       Output file path (default: output/image.png)
    --band-height ROWS    Rows rendered per progress update (default: 16)
    --seed SEED           Seed for the scene layout and the renderer
    --aperture APERTURE   Lens diameter (default: 0.1 for the random scene)
    --scene {random,three}
                          Scene to render (default: random)
    --cpu                 Force the CPU backend
    --show                Show the result in a Matplotlib window
    --quiet               Suppress progress output
    --verbose             Show Taichi's informational log messages

Example:
    python -m examples.render_random_scene --width 300 --height 200 --samples 20
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import numpy as np
import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the random spheres scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1200,
        help="Image width in pixels (default: 1200)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=800,
        help="Image height in pixels (default: 800)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=150,
        help="Number of samples per pixel (default: 150)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="output/image.png",
        help="Output file path (default: output/image.png)",
    )
    parser.add_argument(
        "--band-height",
        type=int,
        default=16,
        help="Rows rendered per progress update (default: 16)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the scene layout and the renderer (default: random)",
    )
    parser.add_argument(
        "--aperture",
        type=float,
        default=None,
        help="Lens diameter (default: 0.1 for the random scene, 0 for the three sphere scene)",
    )
    parser.add_argument(
        "--scene",
        choices=("random", "three"),
        default="random",
        help="Scene to render (default: random)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show Taichi's informational log messages",
    )
    return parser.parse_args()


def render_scene(
    width: int = 1200,
    height: int = 800,
    num_samples: int = 150,
    output_path: str = "output/image.png",
    band_height: int = 16,
    scene_name: str = "random",
    seed: int | None = None,
    aperture: float | None = None,
    quiet: bool = False,
) -> tuple[Path, np.ndarray]:
    """Render a scene and save it to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_samples: Number of samples per pixel.
        output_path: Output file path (PNG).
        band_height: Number of rows to render between progress updates.
        scene_name: "random" or "three".
        seed: Seed for the random scene layout.
        aperture: Lens diameter, or None for the scene's default.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file and the image array.
    """
    # Lazy imports to allow Taichi initialization first
    from src.spheretrace.camera import setup_camera
    from src.spheretrace.core.renderer import Renderer, RenderSettings
    from src.spheretrace.scene.manager import SceneManager
    from src.spheretrace.scene.random_scene import (
        create_cover_camera,
        create_random_scene,
        create_three_sphere_camera,
        create_three_sphere_scene,
    )

    settings = RenderSettings(
        width=width,
        height=height,
        samples_per_pixel=num_samples,
        band_height=band_height,
    )

    if not quiet:
        print(f"Creating {scene_name} scene ({width}x{height})...")

    if scene_name == "random":
        world = create_random_scene(np.random.default_rng(seed))
        camera = create_cover_camera(width, height, 0.1 if aperture is None else aperture)
    else:
        world = create_three_sphere_scene()
        camera = create_three_sphere_camera(width, height, 0.0 if aperture is None else aperture)

    scene = SceneManager()
    scene.load(world)
    setup_camera(camera)

    if not quiet:
        print(
            f"Loaded {scene.get_sphere_count()} spheres, "
            f"{scene.get_material_count()} materials"
        )
        print(f"Rendering {num_samples} samples per pixel...")

    renderer = Renderer(settings)
    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (rows_done / total_rows) * 100 if total_rows > 0 else 0
            rows_per_sec = rows_done / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {rows_done}/{total_rows} rows "
                f"({progress_pct:.1f}%) - {rows_per_sec:.1f} rows/s",
                end="",
                flush=True,
            )

    renderer.render(callback=progress_callback)

    if not quiet:
        print()  # Newline after progress

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    renderer.save_image(str(output_file))

    total_time = time.time() - start_time
    if not quiet:
        print(f"Image written to {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file, renderer.get_image_uint8()


def main() -> int:
    """Main entry point."""
    args = parse_args()

    log_level = ti.INFO if args.verbose else ti.WARN
    init_kwargs = {"log_level": log_level}
    if args.seed is not None:
        init_kwargs["random_seed"] = args.seed

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu, **init_kwargs)
    else:
        try:
            ti.init(arch=ti.gpu, **init_kwargs)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu, **init_kwargs)
            if not args.quiet:
                print("Using CPU backend")

    try:
        _, image = render_scene(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            output_path=args.output,
            band_height=args.band_height,
            scene_name=args.scene,
            seed=args.seed,
            aperture=args.aperture,
            quiet=args.quiet,
        )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.show:
        from src.spheretrace.preview.display import show_preview

        show_preview(image, title=f"{args.scene} scene - {args.samples} SPP")

    return 0


if __name__ == "__main__":
    sys.exit(main())
