"""
Arrow Slide - Solvability Verifier

Backtracking search for a full clearing order, independent of the deadlock
heuristics. A tile is movable when no other remaining tile stands anywhere on
its path to the board edge.

Removing a tile never blocks anything, so once one removal from a state
leads to a dead end every other removal from that state does too. The
default search uses that to cut siblings; exhaustive=True tries them all.
Failed remaining-sets are memoized in both modes.
"""

import logging
from typing import Dict, FrozenSet, List, Optional, Set

from .board import Layout, Tile
from .grid import OccupancyGrid

logger = logging.getLogger(__name__)


def _path_clear(tile: Tile, grid: OccupancyGrid) -> bool:
    for cell in tile.ray(grid.rows, grid.cols):
        owner = grid.owner(cell)
        if owner is not None and owner != tile.id:
            return False
    return True


def movable_tiles(layout: Layout) -> Set[str]:
    """Ids of the tiles that can slide off right now."""
    grid = OccupancyGrid.from_tiles(layout.rows, layout.cols, layout.tiles)
    return {t.id for t in layout.tiles if _path_clear(t, grid)}


def can_slide(layout: Layout, tile_id: str) -> bool:
    tile = layout.get(tile_id)
    if tile is None:
        return False
    grid = OccupancyGrid.from_tiles(layout.rows, layout.cols, layout.tiles)
    return _path_clear(tile, grid)


def find_clearing_order(layout: Layout, exhaustive: bool = False) -> Optional[List[str]]:
    """
    Removal order that empties the board, or None if there is none.

    Works on a private grid; `layout` is never touched.
    """
    tiles: Dict[str, Tile] = {t.id: t for t in layout.tiles}
    ids_in_order = [t.id for t in layout.tiles]
    grid = OccupancyGrid.from_tiles(layout.rows, layout.cols, layout.tiles)

    def movable_ids(remaining: FrozenSet[str]) -> List[str]:
        return [i for i in ids_in_order if i in remaining and _path_clear(tiles[i], grid)]

    start = frozenset(ids_in_order)
    dead: Set[FrozenSet[str]] = set()
    order: List[str] = []
    # frame: [remaining, iterator over movable ids, a child already failed]
    frames = [[start, iter(movable_ids(start)), False]]
    visited = 0

    while frames:
        frame = frames[-1]
        remaining, choices, child_failed = frame
        if not remaining:
            logger.debug("Clearing order found after %d states", visited)
            return list(order)

        nxt = None if (child_failed and not exhaustive) else next(choices, None)
        if nxt is None:
            dead.add(remaining)
            frames.pop()
            if frames:
                grid.place_tile(tiles[order.pop()])
                frames[-1][2] = True
            continue

        child = remaining - {nxt}
        if child in dead:
            frame[2] = True
            continue

        visited += 1
        grid.remove_tile(tiles[nxt])
        order.append(nxt)
        frames.append([child, iter(movable_ids(child)), False])

    logger.debug("No clearing order after %d states", visited)
    return None


def verify(layout: Layout, exhaustive: bool = False) -> bool:
    """True iff some removal order clears the board."""
    return find_clearing_order(layout, exhaustive=exhaustive) is not None


def stuck_tiles(layout: Layout) -> List[str]:
    """Tiles left once every movable tile has been removed greedily."""
    remaining = layout
    while remaining.tiles:
        free = movable_tiles(remaining)
        if not free:
            break
        remaining = remaining.without(free)
    return remaining.tile_ids
