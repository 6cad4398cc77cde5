"""Sprite sheet composition using Pillow."""

from __future__ import annotations

import io
import logging
from typing import Sequence

from PIL import Image

from . import GridLayout
from .errors import EncodeError, InputError
from .frame_loader import check_frame_sizes

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


def composite(frames: Sequence[Image.Image], layout: GridLayout) -> Image.Image:
    """Paste every frame unscaled into its grid cell on a transparent canvas."""

    if not frames:
        raise InputError("no frames to pack")
    if len(frames) > layout.cells:
        raise InputError(f"{len(frames)} frames do not fit a {layout.cols}x{layout.rows} grid")

    frame_width, frame_height = check_frame_sizes(frames)
    sheet_size = (layout.cols * frame_width, layout.rows * frame_height)
    sheet = Image.new("RGBA", sheet_size, TRANSPARENT)

    for index, frame in enumerate(frames):
        x, y = layout.cell_origin(index, frame_width, frame_height)
        # No mask: source pixels overwrite the cell, alpha included.
        if frame.mode == "RGBA":
            sheet.paste(frame, (x, y))
        else:
            converted = frame.convert("RGBA")
            try:
                sheet.paste(converted, (x, y))
            finally:
                converted.close()
        logger.debug("Placed frame %s at (%s, %s)", index, x, y)

    logger.info(
        "Composited %s frames into %sx%s sheet (%sx%s grid)",
        len(frames),
        sheet_size[0],
        sheet_size[1],
        layout.cols,
        layout.rows,
    )
    return sheet


def encode_spritesheet(sheet: Image.Image, image_format: str = "PNG") -> bytes:
    """Encode the sheet losslessly into memory."""

    buffer = io.BytesIO()
    try:
        sheet.save(buffer, format=image_format)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"Failed to encode sprite sheet as {image_format}: {exc}") from exc
    return buffer.getvalue()
