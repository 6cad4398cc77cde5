"""Grid layout planning for sprite sheets."""

from __future__ import annotations

import logging
import math

from . import GridLayout
from .errors import InputError

logger = logging.getLogger(__name__)


def _ceil_sqrt(value: int) -> int:
    root = math.isqrt(value)
    return root if root * root == value else root + 1


def plan_layout(frame_count: int) -> GridLayout:
    """Return the near-square grid for frame_count frames.

    ``cols = ceil(sqrt(n))`` and ``rows = ceil(n / cols)``. The rule has no
    special cases so the same count always yields the same grid.
    """

    if isinstance(frame_count, bool) or not isinstance(frame_count, int):
        raise InputError(f"frame count must be an integer, got {frame_count!r}")
    if frame_count <= 0:
        raise InputError("no frames to pack")

    cols = _ceil_sqrt(frame_count)
    rows = -(-frame_count // cols)
    layout = GridLayout(cols=cols, rows=rows)
    logger.debug("Planned %sx%s grid for %s frames", cols, rows, frame_count)
    return layout
