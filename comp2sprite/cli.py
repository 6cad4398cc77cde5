"""Command-line entry point for composition-to-sprite-sheet exports."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .core import CompositionInfo, ExportSettings
from .core import exporter, frame_loader
from .core.composition import load_composition
from .core.errors import EncodeError, InputError, ValidationError
from .core.layout_planner import plan_layout
from .utils import validators

logger = logging.getLogger(__name__)

WORKERS_ENV = "C2S_DECODE_WORKERS"


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="comp2sprite",
        description="Pack rendered composition frames into a sprite sheet and metadata.",
    )
    parser.add_argument("frames", type=Path, help="Folder holding the rendered frame images")
    parser.add_argument("output", type=Path, help="Destination folder for the sheet and manifest")
    parser.add_argument(
        "--composition",
        type=Path,
        help="JSON file with name, width, height, frameRate, duration[, frameCount]",
    )
    parser.add_argument("--name", help="Composition name (used for output file names)")
    parser.add_argument("--width", help="Composition width in px")
    parser.add_argument("--height", help="Composition height in px")
    parser.add_argument("--fps", help="Composition frame rate (default: 30)")
    parser.add_argument("--duration", help="Composition duration in seconds (default: 1)")
    parser.add_argument(
        "--workers",
        help=f"Frame decode threads (default: ${WORKERS_ENV} or 1)",
    )
    parser.add_argument(
        "--ext",
        action="append",
        default=None,
        help="Frame file extension to pick up; repeatable (default: png)",
    )
    parser.add_argument(
        "--cleanup-frames",
        action="store_true",
        help="Delete the source frames after exporting, even on failure",
    )
    parser.add_argument(
        "--no-usage-examples",
        action="store_true",
        help="Skip writing the usage examples Markdown file",
    )
    parser.add_argument(
        "--canonical-names",
        action="store_true",
        help="Write spritesheet.png and metadata.json instead of names derived from the composition",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the frame order and planned grid without writing outputs",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _composition_from_args(args: argparse.Namespace) -> CompositionInfo:
    if args.composition:
        return load_composition(args.composition)

    payload = {"name": args.name or args.frames.name}
    for key, value, parse in (
        ("width", args.width, validators.parse_optional_int),
        ("height", args.height, validators.parse_optional_int),
        ("frameRate", args.fps, validators.parse_optional_float),
        ("duration", args.duration, validators.parse_optional_float),
    ):
        parsed = parse(value, key)
        if parsed is not None:
            payload[key] = parsed
    return load_composition(payload)


def _settings_from_args(args: argparse.Namespace) -> ExportSettings:
    workers = validators.parse_optional_int(args.workers or os.environ.get(WORKERS_ENV), "Workers") or 1
    settings = ExportSettings(
        output_dir=validators.validate_output_dir(args.output),
        cleanup_frames=args.cleanup_frames,
        decode_workers=validators.validate_workers(workers),
        write_usage_examples=not args.no_usage_examples,
        prefix_with_composition=not args.canonical_names,
    )
    if args.ext:
        settings.allowed_extensions = validators.normalize_extensions(args.ext)
    return settings


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        comp_info = _composition_from_args(args)
        settings = _settings_from_args(args)

        if args.dry_run:
            ordered = frame_loader.list_frame_files(args.frames, settings.allowed_extensions)
            layout = plan_layout(len(ordered))
            print(f"{comp_info.name}: {len(ordered)} frames -> {layout.cols}x{layout.rows} grid")
            for index, path in enumerate(ordered):
                print(f"  {index:4d}  {path.name}")
            return 0

        result = exporter.export_from_folder(args.frames, comp_info, settings)
    except (InputError, ValidationError) as exc:
        logger.error("Export failed: %s", exc)
        return 2
    except EncodeError as exc:
        logger.error("Export failed: %s", exc)
        return 1

    report = exporter.validate_exported_files(result)
    for error in report.errors:
        logger.error(error)
    if not report.ok:
        return 1

    logger.info(
        "Export completed: %s frames, %sx%s sheet",
        result.frame_count,
        result.manifest.sheet_width,
        result.manifest.sheet_height,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
