import math

import pytest

from comp2sprite.core import GridLayout
from comp2sprite.core.errors import InputError
from comp2sprite.core.layout_planner import plan_layout


@pytest.mark.parametrize(
    "count, expected",
    [(1, (1, 1)), (2, (2, 1)), (4, (2, 2)), (5, (3, 2)), (8, (3, 3)), (10, (4, 3)), (17, (5, 4))],
)
def test_plan_layout_known_counts(count, expected):
    layout = plan_layout(count)
    assert (layout.cols, layout.rows) == expected


def test_plan_layout_always_fits_with_ceil_sqrt_columns():
    for count in range(1, 500):
        layout = plan_layout(count)
        assert layout.cols == math.ceil(math.sqrt(count))
        assert layout.cells >= count
        assert layout.slack(count) >= 0


def test_plan_layout_is_deterministic():
    assert plan_layout(37) == plan_layout(37)


def test_plan_layout_handles_large_perfect_squares():
    layout = plan_layout(10**12)
    assert layout == GridLayout(cols=10**6, rows=10**6)


@pytest.mark.parametrize("count", [0, -3])
def test_plan_layout_rejects_empty(count):
    with pytest.raises(InputError, match="no frames to pack"):
        plan_layout(count)


@pytest.mark.parametrize("count", [2.5, "4", True])
def test_plan_layout_rejects_non_integers(count):
    with pytest.raises(InputError):
        plan_layout(count)


def test_cell_origin_walks_rows():
    layout = GridLayout(cols=3, rows=2)
    assert layout.cell_origin(0, 10, 20) == (0, 0)
    assert layout.cell_origin(2, 10, 20) == (20, 0)
    assert layout.cell_origin(4, 10, 20) == (10, 20)
