"""Domain-specific exceptions for the sprite sheet exporter."""

from pathlib import Path


class InputError(ValueError):
    """Raised when there is nothing to pack or a frame file cannot be read."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        if path is not None:
            message = f"{message}: {path}"
        super().__init__(message)


class DimensionMismatchError(InputError):
    """Raised when a frame's size differs from the first frame's size."""

    def __init__(self, index: int, expected: tuple[int, int], actual: tuple[int, int]):
        self.index = index
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"frame dimension mismatch at index {index}, "
            f"expected {expected[0]}x{expected[1]} got {actual[0]}x{actual[1]}"
        )


class EncodeError(RuntimeError):
    """Raised when the sheet or manifest cannot be encoded or written."""


class ValidationError(ValueError):
    """Raised when user-provided settings or metadata fail validation."""
