"""
CLI entry point for the sticker flowfield.

Usage:
    stickerfield [options]                        # interactive window
    stickerfield --record out.mp4 --frames 600    # headless MP4
    stickerfield --snapshot out.png --frames 120  # headless still
    python -m stickerfield [options]
"""

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from stickerfield.config import FieldConfig, FlowDirection, config_from_dict, load_config

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp"}


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  frame {current}/{total}", flush=True)


def expand_sticker_paths(entries: list[Path]) -> list[str]:
    """Expand directories into their image files (sorted); keep plain files."""
    paths = []
    for entry in entries:
        if entry.is_dir():
            paths.extend(
                str(p) for p in sorted(entry.iterdir())
                if p.suffix.lower() in IMAGE_SUFFIXES
            )
        else:
            paths.append(str(entry))
    return paths


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stickerfield",
        description="Flowfield-driven sticker animation",
    )

    # Canvas
    parser.add_argument("--width", type=int, default=None, help="Canvas width (default: 1280)")
    parser.add_argument("--height", type=int, default=None, help="Canvas height (default: 720)")
    parser.add_argument("-f", "--fps", type=int, default=None, help="Frames per second (default: 60)")

    # Visual
    parser.add_argument(
        "-d", "--direction", type=str, default=None,
        choices=[d.value for d in FlowDirection],
        help="Flow direction bias (default: up)",
    )
    parser.add_argument(
        "--stickers", type=Path, nargs="+", default=None,
        help="Sticker image files or directories of images",
    )
    parser.add_argument("--no-images", action="store_true", help="Use generated shapes instead of images")
    parser.add_argument("--reduced-motion", action="store_true", help="Fewer, slower stickers")
    parser.add_argument("--no-mouse", action="store_true", help="Disable pointer attraction")
    parser.add_argument("--no-legend", action="store_true", help="Hide the key legend")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")

    # Config file (explicit flags above still win)
    parser.add_argument(
        "--config", type=Path, default=None,
        help="JSON config file with FieldConfig keys",
    )

    # Headless output
    parser.add_argument("--record", type=Path, default=None, help="Render an MP4 instead of opening a window")
    parser.add_argument("--snapshot", type=Path, default=None, help="Render a PNG of the last frame")
    parser.add_argument("--frames", type=int, default=300, help="Frames to render headless (default: 300)")
    parser.add_argument(
        "-q", "--quality", type=str, default="medium",
        choices=["high", "medium", "fast"],
        help="Encoding quality (default: medium)",
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Log lifecycle events")
    return parser


def config_from_args(args: argparse.Namespace) -> FieldConfig:
    overrides = {
        "width": args.width,
        "height": args.height,
        "fps": args.fps,
        "flow_direction": args.direction,
    }
    if args.stickers:
        overrides["sticker_paths"] = expand_sticker_paths(args.stickers)
    if args.no_images:
        overrides["use_sticker_images"] = False
    if args.reduced_motion:
        overrides["reduced_motion"] = True
    if args.no_mouse:
        overrides["mouse_enabled"] = False
    if args.no_legend:
        overrides["show_legend"] = False

    if args.config:
        return load_config(args.config, **overrides)
    return config_from_dict({}, **overrides)


def render_headless(args: argparse.Namespace, config: FieldConfig):
    from stickerfield.visualizers.flowfield import FlowfieldRenderer

    print(f"Rendering {args.frames} frames at {config.width}x{config.height} @ {config.fps}fps")
    renderer = FlowfieldRenderer(config, seed=args.seed)
    print(f"  Particles: {len(renderer.field.particles)}, Sprites: {len(renderer.sprites)}")
    t0 = time.time()

    if args.record:
        from stickerfield.io.encoder import encode_video

        output = encode_video(
            frame_iterator=renderer.render_frames(args.frames),
            output_path=args.record,
            width=config.width,
            height=config.height,
            fps=config.fps,
            quality=args.quality,
            total_frames=args.frames,
            progress_callback=_progress_bar,
        )
        file_size_mb = output.stat().st_size / 1024 / 1024
        print(f"\nDone! {file_size_mb:.1f} MB")
        print(f"  Output: {output}")
    else:
        for _ in renderer.render_frames(args.frames, progress_callback=_progress_bar):
            pass

    if args.snapshot:
        from PIL import Image

        args.snapshot.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(renderer.surface_to_array(renderer.surface)).save(args.snapshot)
        print(f"  Snapshot: {args.snapshot}")

    elapsed = time.time() - t0
    print(f"  Took {elapsed:.1f}s ({args.frames / max(elapsed, 0.01):.1f} fps)")


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    if args.config and not args.config.exists():
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        sys.exit(1)
    if args.frames < 1:
        print("Error: --frames must be at least 1", file=sys.stderr)
        sys.exit(1)

    try:
        config = config_from_args(args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.record or args.snapshot:
        # Initialize pygame without display for headless rendering
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        try:
            render_headless(args, config)
        except RuntimeError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        return

    from stickerfield.app import FlowfieldApp

    FlowfieldApp(config, seed=args.seed).run()


if __name__ == "__main__":
    main()
