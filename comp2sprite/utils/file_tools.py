"""Filesystem helpers."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_-]")
PART_SUFFIX = ".part"


def ensure_directory(path: Path) -> Path:
    """Create a directory if it does not exist."""

    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)
    return path


def clean_name(name: str) -> str:
    """Replace every character outside [A-Za-z0-9_-] with an underscore."""

    return _UNSAFE_NAME_CHARS.sub("_", name or "")


def output_filenames(composition_name: str, prefixed: bool = True) -> dict[str, str]:
    """Return the sheet, manifest and usage file names for a composition."""

    stem = clean_name(composition_name) if prefixed else ""
    prefix = f"{stem}_" if stem else ""
    return {
        "spritesheet": f"{prefix}spritesheet.png",
        "manifest": f"{prefix}metadata.json",
        "usage_examples": f"{prefix}usage_examples.md",
    }


def list_files_with_extensions(root: Path, extensions: Iterable[str]) -> list[Path]:
    """Return files in root with given extensions, in directory enumeration order."""

    if not root.exists():
        return []
    wanted = {ext.lower() for ext in extensions}
    return [p for p in root.iterdir() if p.is_file() and p.suffix.lower() in wanted]


def atomic_write_bytes(path: Path, data: bytes) -> Path:
    """Write data next to path then rename it into place."""

    ensure_directory(path.parent)
    part = path.with_name(path.name + PART_SUFFIX)
    try:
        part.write_bytes(data)
        os.replace(part, path)
    except OSError:
        part.unlink(missing_ok=True)
        raise
    logger.debug("Wrote %s bytes to %s", len(data), path)
    return path


def remove_files(paths: Iterable[Path]) -> int:
    """Delete files, ignoring ones already gone. Returns how many were removed."""

    removed = 0
    for path in paths:
        try:
            path.unlink()
            removed += 1
        except FileNotFoundError:
            continue
        except OSError as exc:
            logger.warning("Could not delete %s: %s", path, exc)
    return removed


def remove_directory_if_empty(path: Path) -> bool:
    """Remove path when it exists and holds nothing."""

    try:
        if path.is_dir() and not any(path.iterdir()):
            path.rmdir()
            logger.debug("Removed empty directory %s", path)
            return True
    except OSError as exc:
        logger.warning("Could not remove directory %s: %s", path, exc)
    return False
