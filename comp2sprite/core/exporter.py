"""End-to-end export: ordered frames in, sprite sheet and manifest out."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image

from . import CompositionInfo, ExportResult, ExportSettings, ValidationReport
from . import frame_loader, manifest_writer, spritesheet_builder, usage_examples
from .errors import EncodeError, InputError
from .layout_planner import plan_layout
from ..utils import file_tools, validators

logger = logging.getLogger(__name__)

METHOD = "pillow"
OUTPUT_FORMAT = "PNG"


def export_spritesheet(
    frame_paths: Sequence[Path],
    comp_info: CompositionInfo,
    settings: ExportSettings,
) -> ExportResult:
    """Pack frame_paths into a sheet and write it with its manifest.

    Nothing is written unless every frame decodes and matches the first
    frame's size. Source frames are deleted afterwards when
    ``settings.cleanup_frames`` is set, whether or not the export succeeded.
    """

    frames: list[Image.Image] = []
    sheet: Optional[Image.Image] = None
    try:
        if not frame_paths:
            raise InputError("no frames to pack")
        validators.validate_output_dir(settings.output_dir)
        validators.validate_workers(settings.decode_workers)

        ordered = frame_loader.order_frame_files(frame_paths)
        source_format = frame_loader.detect_image_format(ordered)
        layout = plan_layout(len(ordered))
        logger.info(
            "Packing %s %s frames of %s into a %sx%s grid",
            len(ordered),
            source_format,
            comp_info.name,
            layout.cols,
            layout.rows,
        )

        frames = frame_loader.load_frames(ordered, workers=settings.decode_workers)
        sheet = spritesheet_builder.composite(frames, layout)
        frame_width, frame_height = frames[0].size

        manifest = manifest_writer.build_manifest(
            comp_info,
            layout,
            frame_width,
            frame_height,
            [p.name for p in ordered],
            method=METHOD,
            output_format=OUTPUT_FORMAT,
        )

        names = file_tools.output_filenames(comp_info.name, settings.prefix_with_composition)
        payloads: list[tuple[Path, bytes]] = [
            (settings.output_dir / names["spritesheet"], spritesheet_builder.encode_spritesheet(sheet, OUTPUT_FORMAT)),
            (settings.output_dir / names["manifest"], manifest_writer.serialize_manifest(manifest).encode("utf-8")),
        ]
        usage_path = None
        if settings.write_usage_examples:
            usage_path = settings.output_dir / names["usage_examples"]
            text = usage_examples.render_usage_examples(manifest, names["spritesheet"], names["manifest"])
            payloads.append((usage_path, text.encode("utf-8")))

        _write_outputs(payloads)
        result = ExportResult(
            spritesheet_path=payloads[0][0],
            manifest_path=payloads[1][0],
            usage_examples_path=usage_path,
            layout=layout,
            frame_width=frame_width,
            frame_height=frame_height,
            frame_count=len(ordered),
            manifest=manifest,
            method=METHOD,
            output_format=OUTPUT_FORMAT,
        )
        logger.info("Wrote sprite sheet to %s", result.spritesheet_path)
        logger.info("Wrote manifest to %s", result.manifest_path)
        return result
    finally:
        frame_loader.close_frames(frames)
        if sheet is not None:
            sheet.close()
        if settings.cleanup_frames:
            _cleanup_frames(frame_paths)


def export_from_folder(
    frame_dir: Path,
    comp_info: CompositionInfo,
    settings: ExportSettings,
) -> ExportResult:
    """List the rendered frames in frame_dir and export them."""

    try:
        frame_paths = frame_loader.list_frame_files(frame_dir, settings.allowed_extensions)
    except InputError:
        if settings.cleanup_frames and frame_dir.is_dir():
            file_tools.remove_directory_if_empty(frame_dir)
        raise
    return export_spritesheet(frame_paths, comp_info, settings)


def _write_outputs(payloads: Sequence[tuple[Path, bytes]]) -> None:
    """Write every payload or none of them."""

    written: list[Path] = []
    try:
        for path, data in payloads:
            file_tools.atomic_write_bytes(path, data)
            written.append(path)
    except OSError as exc:
        file_tools.remove_files(written)
        raise EncodeError(f"Failed to write {path}: {exc}") from exc


def _cleanup_frames(frame_paths: Sequence[Path]) -> None:
    removed = file_tools.remove_files(frame_paths)
    logger.info("Removed %s temporary frame files", removed)
    for folder in {p.parent for p in frame_paths}:
        file_tools.remove_directory_if_empty(folder)


def validate_exported_files(result: ExportResult) -> ValidationReport:
    """Check the written sheet and manifest look usable."""

    report = ValidationReport()

    sheet_path = result.spritesheet_path
    if not sheet_path.exists():
        report.errors.append(f"Sprite sheet file not found: {sheet_path}")
    elif sheet_path.stat().st_size == 0:
        report.errors.append("Sprite sheet file is empty")
    else:
        logger.debug("Sprite sheet file validated: %sKB", round(sheet_path.stat().st_size / 1024))

    manifest_path = result.manifest_path
    if not manifest_path.exists():
        report.errors.append(f"Metadata file not found: {manifest_path}")
        return report

    try:
        data = manifest_writer.read_manifest(manifest_path)
    except EncodeError as exc:
        report.errors.append(str(exc))
        return report

    frames = data.get("frames") if isinstance(data, dict) else None
    if not isinstance(frames, list):
        report.errors.append("Metadata file missing frames array")
    elif len(frames) != result.frame_count:
        report.warnings.append(
            f"Frame count mismatch: expected {result.frame_count}, got {len(frames)}"
        )
    else:
        logger.debug("Metadata file validated: %s frames", len(frames))

    for warning in report.warnings:
        logger.warning(warning)
    return report
