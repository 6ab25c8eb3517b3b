#!/usr/bin/env python3
"""Render the random-spheres final scene.

Builds the showcase scene (or loads one from JSON), renders it with the
thin-lens camera and writes the image as PPM. Progress goes to stderr so
the image can be piped from stdout.

Usage:
    python -m examples.render_final_scene [options]

Options:
    --width WIDTH           Image width in pixels (default: 400)
    --samples SAMPLES       Samples per pixel (default: 100)
    --max-depth DEPTH       Maximum ray bounces (default: 50)
    --seed SEED             Seed for scene generation and rendering (default: 0)
    --output OUTPUT         Output file, .ppm or .png; "-" writes PPM to stdout
                            (default: -)
    --scene SCENE           Load the scene from a JSON file instead
    --save-scene PATH       Save the generated scene as JSON
    --cpu                   Force the CPU backend
    --quiet                 Suppress progress output

Example:
    python -m examples.render_final_scene --width 200 --samples 10 > image.ppm
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the random-spheres final scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=400,
        help="Image width in pixels (default: 400)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum ray bounces (default: 50)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed for scene generation and rendering (default: 0)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="-",
        help='Output file, .ppm or .png; "-" writes PPM to stdout (default: -)',
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="Load the scene from a JSON file instead of generating it",
    )
    parser.add_argument(
        "--save-scene",
        type=str,
        default=None,
        help="Save the generated scene as JSON",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_final_scene(
    width: int = 400,
    num_samples: int = 100,
    max_depth: int = 50,
    seed: int = 0,
    output_path: str = "-",
    scene_path: str | None = None,
    save_scene_path: str | None = None,
    quiet: bool = False,
) -> None:
    """Render the final scene and write the image.

    Args:
        width: Image width in pixels.
        num_samples: Samples per pixel.
        max_depth: Maximum ray bounces.
        seed: Seed for scene generation.
        output_path: Output file path, or "-" for PPM on stdout.
        scene_path: Optional JSON scene to render instead of the generated one.
        save_scene_path: Optional path to write the rendered scene as JSON.
        quiet: If True, suppress progress output.
    """
    # Lazy imports to allow Taichi initialization first
    from glimmer.camera.camera import Camera
    from glimmer.output.export import save_image
    from glimmer.scene.final_scene import FINAL_CAMERA, create_final_scene
    from glimmer.scene.world import world_from_dict, world_to_dict

    if scene_path is None:
        world, camera_config = create_final_scene(seed=seed)
    else:
        with open(scene_path, encoding="utf-8") as f:
            world = world_from_dict(json.load(f))
        camera_config = FINAL_CAMERA

    if save_scene_path is not None:
        with open(save_scene_path, "w", encoding="utf-8") as f:
            json.dump(world_to_dict(world), f, indent=2)

    camera_config = dataclasses.replace(
        camera_config,
        image_width=width,
        samples_per_pixel=num_samples,
        max_depth=max_depth,
    )
    camera = Camera(camera_config)

    if not quiet:
        print(
            f"Rendering {camera.image_width}x{camera.image_height}, "
            f"{num_samples} spp, depth {max_depth}...",
            file=sys.stderr,
        )

    start_time = time.time()

    def progress_callback(remaining: int) -> None:
        if not quiet:
            print(f"\rScanlines remaining: {remaining} ", end="", file=sys.stderr, flush=True)

    if output_path == "-":
        camera.render(world, output=sys.stdout, progress=progress_callback)
        sys.stdout.flush()
    else:
        image = camera.render(world, progress=progress_callback)
        save_image(image, output_path)

    if not quiet:
        print("\rDone.                    ", file=sys.stderr)
        if output_path != "-":
            print(f"Saved to: {Path(output_path).absolute()}", file=sys.stderr)
        print(f"Total time: {time.time() - start_time:.2f}s", file=sys.stderr)


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize Taichi
    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu, random_seed=args.seed)
    else:
        try:
            ti.init(arch=ti.gpu, random_seed=args.seed)
            if not args.quiet:
                print("Using GPU backend", file=sys.stderr)
        except Exception:
            ti.init(arch=ti.cpu, random_seed=args.seed)
            if not args.quiet:
                print("Using CPU backend", file=sys.stderr)

    try:
        render_final_scene(
            width=args.width,
            num_samples=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
            output_path=args.output,
            scene_path=args.scene,
            save_scene_path=args.save_scene,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
