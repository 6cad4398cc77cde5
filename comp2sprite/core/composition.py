"""Parsing of composition metadata handed over by the host application."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from . import CompositionInfo
from .errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_FRAME_RATE = 30.0
DEFAULT_DURATION = 1.0


class CompositionPayload(BaseModel):
    """Composition metadata as reported by the host scripting bridge."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = "Untitled"
    width: int = Field(..., ge=1)
    height: int = Field(..., ge=1)
    frame_rate: float = Field(DEFAULT_FRAME_RATE, gt=0, allow_inf_nan=False, alias="frameRate")
    duration: float = Field(DEFAULT_DURATION, gt=0, allow_inf_nan=False)
    frame_count: Optional[int] = Field(None, ge=1, alias="frameCount")

    @field_validator("frame_rate", "duration", mode="before")
    @classmethod
    def _fallback_on_empty(cls, value, info):
        # The bridge reports 0 or "" when the host could not read the value.
        if value in (None, "", 0, "0"):
            return DEFAULT_FRAME_RATE if info.field_name == "frame_rate" else DEFAULT_DURATION
        return value

    @field_validator("frame_count", mode="before")
    @classmethod
    def _derive_when_empty(cls, value):
        if value in (None, "", 0, "0"):
            return None
        return value

    def to_info(self) -> CompositionInfo:
        if self.frame_count is None:
            return CompositionInfo.from_timing(
                name=self.name,
                width=self.width,
                height=self.height,
                frame_rate=self.frame_rate,
                duration=self.duration,
            )
        return CompositionInfo(
            name=self.name,
            width=self.width,
            height=self.height,
            frame_rate=self.frame_rate,
            duration=self.duration,
            frame_count=self.frame_count,
        )


def load_composition(source: Union[dict[str, Any], str, Path]) -> CompositionInfo:
    """Build CompositionInfo from a dict, a JSON string or a JSON file."""

    if isinstance(source, Path):
        try:
            source = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise ValidationError(f"Could not read composition file {source}: {exc}") from exc
    if isinstance(source, str):
        try:
            source = json.loads(source)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid composition JSON: {exc}") from exc
    if not isinstance(source, dict):
        raise ValidationError("Composition metadata must be a JSON object")

    try:
        payload = CompositionPayload.model_validate(source)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid composition metadata: {exc}") from exc

    info = payload.to_info()
    logger.debug(
        "Loaded composition %s -> %sx%s @ %sfps, %ss, %s frames",
        info.name,
        info.width,
        info.height,
        info.frame_rate,
        info.duration,
        info.frame_count,
    )
    return info
