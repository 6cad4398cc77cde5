"""Pack rendered composition frames into a sprite sheet with a JSON manifest."""

__version__ = "0.1.0"

from .core import CompositionInfo, ExportResult, ExportSettings, GridLayout, Manifest
from .core.errors import DimensionMismatchError, EncodeError, InputError, ValidationError

__all__ = [
    "__version__",
    "CompositionInfo",
    "ExportResult",
    "ExportSettings",
    "GridLayout",
    "Manifest",
    "InputError",
    "DimensionMismatchError",
    "EncodeError",
    "ValidationError",
]
