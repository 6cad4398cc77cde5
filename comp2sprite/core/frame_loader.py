"""Frame discovery, ordering and decoding using Pillow."""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path
from typing import Iterable, List, Sequence

from PIL import Image, UnidentifiedImageError

from . import DEFAULT_FRAME_EXTENSIONS
from .errors import DimensionMismatchError, InputError
from ..utils import file_tools, validators

logger = logging.getLogger(__name__)

_DIGIT_RUN = re.compile(r"\d+")

IMAGE_FORMATS = {
    ".png": "PNG",
    ".tif": "TIFF",
    ".tiff": "TIFF",
    ".psd": "PSD",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
}


def frame_sort_key(name: str) -> int:
    """Return the last run of digits in a file name, or 0 when there is none."""

    runs = _DIGIT_RUN.findall(name)
    return int(runs[-1]) if runs else 0


def order_frame_files(paths: Iterable[Path]) -> list[Path]:
    """Sort frames by their trailing frame number; ties keep enumeration order."""

    return sorted(paths, key=lambda p: frame_sort_key(p.name))


def list_frame_files(folder: Path, extensions: Iterable[str] = DEFAULT_FRAME_EXTENSIONS) -> list[Path]:
    """Return the ordered frame files found in folder."""

    validators.validate_frame_dir(folder)
    files = file_tools.list_files_with_extensions(folder, extensions)
    if not files:
        found = ", ".join(sorted(p.name for p in folder.iterdir())) or "nothing"
        raise InputError(f"No frame files found in {folder}. Found: {found}")
    ordered = order_frame_files(files)
    logger.debug("Ordered frames: %s", [p.name for p in ordered])
    return ordered


def detect_image_format(paths: Sequence[Path]) -> str:
    """Name the image format of the first frame from its suffix."""

    if not paths:
        return "unknown"
    suffix = paths[0].suffix.lower()
    return IMAGE_FORMATS.get(suffix) or suffix.lstrip(".").upper() or "unknown"


def load_frame(path: Path) -> Image.Image:
    """Decode one frame into an RGBA image."""

    try:
        with Image.open(path) as image:
            image.load()
            return image.convert("RGBA")
    except FileNotFoundError as exc:
        raise InputError("Frame file not found", path) from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise InputError(f"Failed to decode frame ({exc})", path) from exc


def check_frame_sizes(frames: Sequence[Image.Image]) -> tuple[int, int]:
    """Return the canonical frame size, raising on the first frame that differs."""

    if not frames:
        raise InputError("no frames to pack")
    expected = frames[0].size
    for index, frame in enumerate(frames):
        if frame.size != expected:
            raise DimensionMismatchError(index, expected, frame.size)
    return expected


def load_frames(paths: Sequence[Path], workers: int = 1) -> List[Image.Image]:
    """Decode frames in index order, optionally on a thread pool."""

    if not paths:
        raise InputError("no frames to pack")

    frames: list[Image.Image] = []
    try:
        if workers > 1 and len(paths) > 1:
            logger.info("Decoding %s frames with %s workers", len(paths), workers)
            frames = _load_frames_threaded(paths, workers)
        else:
            logger.info("Decoding %s frames", len(paths))
            for path in paths:
                frames.append(load_frame(path))
        check_frame_sizes(frames)
    except Exception:
        close_frames(frames)
        raise
    return frames


def _load_frames_threaded(paths: Sequence[Path], workers: int) -> list[Image.Image]:
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(load_frame, path) for path in paths]
        try:
            # Results are collected in submission order, so index order is kept.
            return [future.result() for future in futures]
        except Exception:
            for future in futures:
                future.cancel()
            wait(futures)
            close_frames(
                future.result()
                for future in futures
                if not future.cancelled() and future.exception() is None
            )
            raise


def close_frames(frames: Iterable[Image.Image]) -> None:
    """Release decoded frame buffers."""

    for frame in frames:
        frame.close()
