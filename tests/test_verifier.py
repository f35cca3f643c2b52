import pytest

from arrowslide.services.verifier import (
    can_slide, find_clearing_order, movable_tiles, stuck_tiles, verify,
)


def test_facing_pair_is_unsolvable(facing_pair):
    assert not verify(facing_pair)
    assert movable_tiles(facing_pair) == set()
    assert stuck_tiles(facing_pair) == ["a", "b"]


@pytest.mark.parametrize("row, col", [(0, 0), (2, 3), (4, 5)])
def test_single_vertical_tile_is_solvable(make_layout, row, col):
    layout = make_layout(6, 6, ("a", row, col, "down"))
    assert verify(layout)
    assert find_clearing_order(layout) == ["a"]


def test_three_tile_ring_is_unsolvable(three_tile_ring):
    assert not verify(three_tile_ring)
    assert not verify(three_tile_ring, exhaustive=True)


def test_empty_layout_is_solvable(make_layout):
    assert find_clearing_order(make_layout(3, 3)) == []


def test_chain_clears_front_to_back(make_layout):
    layout = make_layout(
        3, 8,
        ("a", 0, 0, "right"), ("b", 0, 3, "right"), ("c", 0, 6, "right"),
        ("d", 1, 6, "up"),
    )
    assert movable_tiles(layout) == {"c"}
    assert can_slide(layout, "c")
    assert not can_slide(layout, "d")
    assert not can_slide(layout, "missing")

    order = find_clearing_order(layout)
    assert order[0] == "c"
    assert order.index("b") < order.index("a")
    assert sorted(order) == ["a", "b", "c", "d"]


def test_exhaustive_agrees_with_default(make_layout):
    layout = make_layout(
        6, 6,
        ("a", 0, 0, "down"), ("b", 2, 0, "right"), ("c", 2, 3, "up"),
        ("d", 4, 4, "left"), ("e", 5, 0, "right"),
    )
    assert verify(layout) == verify(layout, exhaustive=True)


def test_partial_deadlock_leaves_stuck_tiles(make_layout):
    layout = make_layout(
        6, 6,
        ("a", 2, 0, "right"), ("b", 2, 2, "left"), ("c", 4, 5, "up"),
    )
    assert not verify(layout)
    assert stuck_tiles(layout) == ["a", "b"]
