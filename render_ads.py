import argparse
import sys
from pathlib import Path
from typing import List, Optional

from adrender.config import load_settings
from adrender.core import AdPipeline
from adrender.encoder import ImageWriteError
from adrender.logging_setup import configure_logging
from adrender.scenes import LAYOUTS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render the fixed EnvGuard Pro marketing ads to PNG files."
    )
    parser.add_argument(
        "--output-root",
        type=Path,
        default=None,
        help="Folder the PNG files are written to (default: marketing/ads).",
    )
    parser.add_argument("--width", type=int, default=None, help="Canvas width in pixels.")
    parser.add_argument("--height", type=int, default=None, help="Canvas height in pixels.")
    parser.add_argument(
        "--only",
        action="append",
        choices=sorted(LAYOUTS),
        default=None,
        help="Render only this layout; may be repeated.",
    )
    parser.add_argument(
        "--fonts-dir",
        type=Path,
        default=None,
        help="Extra folder searched for fonts before system fonts.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = configure_logging(verbose=args.verbose)

    # Environment (and a local .env file) provide defaults; flags win.
    settings = load_settings()
    if args.output_root is not None:
        settings.output_root = args.output_root
    if args.width is not None:
        settings.width = max(1, args.width)
    if args.height is not None:
        settings.height = max(1, args.height)
    if args.fonts_dir is not None:
        settings.fonts_dir = args.fonts_dir
    settings.layouts = args.only or []

    pipeline = AdPipeline.from_settings(settings)
    try:
        written = pipeline.run(settings.layouts)
    except ImageWriteError as exc:
        logger.error("render failed: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print("Wrote:")
    for path in written:
        print(f"- {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
