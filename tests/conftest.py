import pytest

from arrowslide.services.board import Direction, Layout, Tile


def build_layout(rows, cols, *specs):
    """specs: (id, anchor_row, anchor_col, direction)."""
    tiles = tuple(Tile(tid, r, c, Direction(d)) for tid, r, c, d in specs)
    return Layout(rows, cols, tiles)


@pytest.fixture
def make_layout():
    return build_layout


@pytest.fixture
def facing_pair(make_layout):
    # Row 2 of a 6x6: cols 0-1 slide right, cols 3-4 slide left.
    return make_layout(6, 6, ("a", 2, 0, "right"), ("b", 2, 3, "left"))


@pytest.fixture
def three_tile_ring(make_layout):
    # a waits on c, c waits on a, b waits on c and a, a waits on b.
    return make_layout(
        4, 8,
        ("a", 0, 0, "right"),
        ("b", 0, 6, "left"),
        ("c", 0, 3, "left"),
    )
