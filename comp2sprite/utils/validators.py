"""Validation helpers for user inputs."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Optional

from ..core.errors import InputError, ValidationError


def validate_frame_dir(path: Path) -> Path:
    """Ensure the frame folder exists and is a directory."""

    if not path:
        raise InputError("No frame folder provided")
    if not path.exists():
        raise InputError("Frame folder does not exist", path)
    if not path.is_dir():
        raise InputError("Frame folder is not a directory", path)
    return path


def validate_output_dir(path: Path) -> Path:
    """Ensure the destination is a directory or can be created as one."""

    if path.exists() and not path.is_dir():
        raise ValidationError(f"Output path is not a directory: {path}")
    return path


def parse_optional_int(value: str | None, field: str) -> Optional[int]:
    """Parse a positive integer from a string value, if provided."""

    if value is None or value == "":
        return None
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValidationError(f"{field} must be an integer") from exc
    if parsed <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return parsed


def parse_optional_float(value: str | None, field: str) -> Optional[float]:
    """Parse a positive float from a string value, if provided."""

    if value is None or value == "":
        return None
    try:
        parsed = float(value)
    except ValueError as exc:
        raise ValidationError(f"{field} must be a number") from exc
    if not math.isfinite(parsed):
        raise ValidationError(f"{field} must be a finite number")
    if parsed <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return parsed


def validate_workers(value: int) -> int:
    """Ensure the decode worker count is usable."""

    if value < 1:
        raise ValidationError("Workers must be at least 1")
    return value


def normalize_extensions(extensions: list[str]) -> frozenset[str]:
    """Turn 'png', '.PNG' and friends into a set of lowercase dotted suffixes."""

    normalized = set()
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        normalized.add(ext)
    if not normalized:
        raise ValidationError("At least one frame extension is required")
    return frozenset(normalized)
