"""Core data model for sprite sheet export."""

__all__ = [
    "CompositionInfo",
    "GridLayout",
    "FrameRecord",
    "Manifest",
    "ExportSettings",
    "ExportResult",
    "ValidationReport",
]

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .errors import ValidationError

DEFAULT_FRAME_EXTENSIONS = frozenset({".png"})


@dataclass(frozen=True)
class CompositionInfo:
    """Metadata of the rendered composition, supplied by the host."""

    name: str
    width: int
    height: int
    frame_rate: float
    duration: float
    frame_count: int

    @classmethod
    def from_timing(
        cls,
        name: str,
        width: int,
        height: int,
        frame_rate: float,
        duration: float,
    ) -> "CompositionInfo":
        """Build the record, deriving frame_count as floor(duration * fps), minimum 1."""

        product = duration * frame_rate
        if not math.isfinite(product) or frame_rate <= 0 or duration <= 0:
            raise ValidationError(
                f"frame rate and duration must be finite and positive, got {frame_rate!r} and {duration!r}"
            )
        # Rounding first keeps products such as 2.3 * 10 from flooring to 22.
        frames = math.floor(round(product, 6))
        return cls(
            name=name,
            width=width,
            height=height,
            frame_rate=frame_rate,
            duration=duration,
            frame_count=max(1, frames),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "frameRate": self.frame_rate,
            "duration": self.duration,
            "frameCount": self.frame_count,
        }


@dataclass(frozen=True)
class GridLayout:
    """Grid shape used to arrange frames on the sheet."""

    cols: int
    rows: int

    @property
    def cells(self) -> int:
        return self.cols * self.rows

    def slack(self, frame_count: int) -> int:
        """Number of empty trailing cells for frame_count frames."""

        return self.cells - frame_count

    def cell_origin(self, index: int, frame_width: int, frame_height: int) -> tuple[int, int]:
        """Top-left pixel offset of the cell holding frame index."""

        return (index % self.cols) * frame_width, (index // self.cols) * frame_height


@dataclass(frozen=True)
class FrameRecord:
    """Placement of one frame inside the sprite sheet."""

    index: int
    filename: str
    x: int
    y: int
    width: int
    height: int
    normalized_x: float
    normalized_y: float
    normalized_width: float
    normalized_height: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "filename": self.filename,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "normalizedX": self.normalized_x,
            "normalizedY": self.normalized_y,
            "normalizedWidth": self.normalized_width,
            "normalizedHeight": self.normalized_height,
        }


@dataclass(frozen=True)
class Manifest:
    """Coordinate manifest describing a packed sprite sheet."""

    composition: CompositionInfo
    layout: GridLayout
    frame_width: int
    frame_height: int
    frames: tuple[FrameRecord, ...]
    timestamp: str
    exporter: str
    method: str = "pillow"
    output_format: str = "PNG"

    @property
    def sheet_width(self) -> int:
        return self.layout.cols * self.frame_width

    @property
    def sheet_height(self) -> int:
        return self.layout.rows * self.frame_height

    @property
    def aspect_ratio(self) -> float:
        return self.sheet_width / self.sheet_height

    @property
    def efficiency(self) -> float:
        return len(self.frames) / self.layout.cells

    @property
    def frame_time(self) -> float:
        return 1.0 / self.composition.frame_rate

    @property
    def sequence(self) -> list[int]:
        return [record.index for record in self.frames]

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON structure written to the metadata file."""

        return {
            "composition": self.composition.to_dict(),
            "spriteSheet": {
                "width": self.sheet_width,
                "height": self.sheet_height,
                "cols": self.layout.cols,
                "rows": self.layout.rows,
                "frameWidth": self.frame_width,
                "frameHeight": self.frame_height,
                "aspectRatio": self.aspect_ratio,
                "efficiency": self.efficiency,
            },
            "frames": [record.to_dict() for record in self.frames],
            "animation": {
                "frameTime": self.frame_time,
                "totalDuration": self.composition.duration,
                "loop": True,
                "sequence": self.sequence,
            },
            "exportInfo": {
                "timestamp": self.timestamp,
                "totalFrames": len(self.frames),
                "successfulFrames": len(self.frames),
                "exporter": self.exporter,
                "method": self.method,
                "outputFormat": self.output_format,
            },
        }


@dataclass
class ExportSettings:
    """User-configurable settings for one export run."""

    output_dir: Path
    cleanup_frames: bool = False
    decode_workers: int = 1
    write_usage_examples: bool = True
    prefix_with_composition: bool = True
    allowed_extensions: frozenset[str] = DEFAULT_FRAME_EXTENSIONS


@dataclass
class ExportResult:
    """Paths and summary produced by an export run."""

    spritesheet_path: Path
    manifest_path: Path
    usage_examples_path: Optional[Path]
    layout: GridLayout
    frame_width: int
    frame_height: int
    frame_count: int
    manifest: Manifest
    method: str = "pillow"
    output_format: str = "PNG"

    @property
    def output_paths(self) -> list[Path]:
        paths = [self.spritesheet_path, self.manifest_path]
        if self.usage_examples_path is not None:
            paths.append(self.usage_examples_path)
        return paths


@dataclass
class ValidationReport:
    """Outcome of checking the files written by an export."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
