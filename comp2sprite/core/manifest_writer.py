"""Manifest building and serialization."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Sequence

from . import CompositionInfo, FrameRecord, GridLayout, Manifest
from .errors import EncodeError, InputError

logger = logging.getLogger(__name__)

EXPORTER_NAME = "comp2sprite"


def _exporter_label() -> str:
    from .. import __version__

    return f"{EXPORTER_NAME} {__version__}"


def build_frame_records(
    layout: GridLayout,
    frame_width: int,
    frame_height: int,
    filenames: Sequence[str],
) -> tuple[FrameRecord, ...]:
    """Describe where each frame sits, in pixels and normalized units."""

    sheet_width = layout.cols * frame_width
    sheet_height = layout.rows * frame_height
    records = []
    for index, filename in enumerate(filenames):
        x, y = layout.cell_origin(index, frame_width, frame_height)
        records.append(
            FrameRecord(
                index=index,
                filename=filename,
                x=x,
                y=y,
                width=frame_width,
                height=frame_height,
                normalized_x=x / sheet_width,
                normalized_y=y / sheet_height,
                normalized_width=frame_width / sheet_width,
                normalized_height=frame_height / sheet_height,
            )
        )
    return tuple(records)


def build_manifest(
    comp_info: CompositionInfo,
    layout: GridLayout,
    frame_width: int,
    frame_height: int,
    filenames: Sequence[str],
    *,
    method: str = "pillow",
    output_format: str = "PNG",
    timestamp: Optional[str] = None,
) -> Manifest:
    """Create the manifest for a packed sheet.

    Everything except ``timestamp`` is a function of the arguments. Pass a
    timestamp to get fully reproducible output.
    """

    if not filenames:
        raise InputError("no frames to pack")
    if len(filenames) > layout.cells:
        raise InputError(f"{len(filenames)} frames do not fit a {layout.cols}x{layout.rows} grid")
    if frame_width <= 0 or frame_height <= 0:
        raise InputError(f"invalid frame size {frame_width}x{frame_height}")

    if timestamp is None:
        timestamp = datetime.now(timezone.utc).isoformat()

    return Manifest(
        composition=comp_info,
        layout=layout,
        frame_width=frame_width,
        frame_height=frame_height,
        frames=build_frame_records(layout, frame_width, frame_height, filenames),
        timestamp=timestamp,
        exporter=_exporter_label(),
        method=method,
        output_format=output_format,
    )


def serialize_manifest(manifest: Manifest) -> str:
    """Return indented JSON with keys in their declared order."""

    try:
        return json.dumps(manifest.to_dict(), indent=2) + "\n"
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"Failed to serialize manifest: {exc}") from exc


def read_manifest(path: Path) -> dict[str, Any]:
    """Parse a manifest previously written to disk."""

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, ValueError) as exc:
        raise EncodeError(f"Could not read manifest {path}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise EncodeError(f"Manifest is not valid JSON: {exc}") from exc
