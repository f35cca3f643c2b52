from arrowslide.services.board import Direction, Orientation, Tile
from arrowslide.services.directions import DirectionAssigner
from arrowslide.services.errors import DirectionConflict
from arrowslide.services.grid import OccupancyGrid
from arrowslide.services.placement import Placement
from arrowslide.services.seeded_random import SeededRandom

import pytest


def _setup(tiles, placement, rows=6, cols=6, **kwargs):
    grid = OccupancyGrid.from_tiles(rows, cols, tiles)
    grid.occupy(placement.cells, placement.id)
    return grid, DirectionAssigner(grid, SeededRandom(9), **kwargs)


def test_free_tile_gets_a_direction_for_its_orientation():
    placement = Placement("x", 2, 2, Orientation.VERTICAL)
    _, assigner = _setup([], placement)

    tile = assigner.assign(placement, [])
    assert tile.direction in (Direction.UP, Direction.DOWN)
    assert tile.anchor == (2, 2)


def test_avoids_the_face_off_direction():
    accepted = [Tile("a", 2, 0, Direction.RIGHT)]
    placement = Placement("x", 2, 2, Orientation.HORIZONTAL)
    _, assigner = _setup(accepted, placement)

    assert assigner.assign(placement, accepted).direction is Direction.RIGHT


def test_boxed_in_tile_flips_when_it_can():
    accepted = [Tile("a", 2, 4, Direction.LEFT), Tile("b", 2, 0, Direction.RIGHT)]
    placement = Placement("x", 2, 2, Orientation.HORIZONTAL)
    grid, assigner = _setup(accepted, placement)

    tile = assigner.assign(placement, accepted)

    assert tile.orientation is Orientation.VERTICAL
    assert placement.orientation is Orientation.VERTICAL
    assert grid.owner((3, 2)) == "x"
    assert grid.owner((2, 3)) is None


def test_boxed_in_tile_raises_conflict():
    accepted = [
        Tile("a", 2, 4, Direction.LEFT),
        Tile("b", 2, 0, Direction.RIGHT),
        Tile("c", 3, 2, Direction.DOWN),
    ]
    placement = Placement("x", 2, 2, Orientation.HORIZONTAL)
    _, assigner = _setup(accepted, placement)

    with pytest.raises(DirectionConflict) as info:
        assigner.assign(placement, accepted)
    assert info.value.tile_id == "x"
    assert info.value.conflicts == ["a", "b"]


def test_flip_can_be_disabled():
    accepted = [Tile("a", 2, 4, Direction.LEFT), Tile("b", 2, 0, Direction.RIGHT)]
    placement = Placement("x", 2, 2, Orientation.HORIZONTAL)
    _, assigner = _setup(accepted, placement, allow_flip=False)

    with pytest.raises(DirectionConflict):
        assigner.assign(placement, accepted)


def test_axis_imbalance_limit():
    accepted = [Tile("a", 0, 0, Direction.RIGHT)]
    grid = OccupancyGrid.from_tiles(4, 8, accepted)

    strict = DirectionAssigner(grid, SeededRandom(1), axis_imbalance_limit=1)
    assert strict.is_disfavored(Tile("b", 0, 4, Direction.RIGHT), accepted)
    assert not strict.is_disfavored(Tile("b", 0, 4, Direction.LEFT), accepted)

    off = DirectionAssigner(grid, SeededRandom(1), axis_imbalance_limit=0)
    assert not off.is_disfavored(Tile("b", 0, 4, Direction.RIGHT), accepted)


def test_disfavored_direction_goes_last():
    accepted = [Tile("a", 0, 0, Direction.RIGHT)]
    grid = OccupancyGrid.from_tiles(4, 8, accepted)
    assigner = DirectionAssigner(grid, SeededRandom(4), axis_imbalance_limit=1)

    for _ in range(5):
        ordered = assigner.candidates("b", (0, 4), Orientation.HORIZONTAL, accepted)
        assert [t.direction for t in ordered] == [Direction.LEFT, Direction.RIGHT]
