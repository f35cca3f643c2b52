"""
Arrow Slide - Direction Assigner

Picks one of the two slide directions allowed by a placed footprint. A
direction is kept only if it causes no adjacent or long-distance deadlock
with the tiles accepted so far, nor anything `extra_check` reports. When
both fail, the footprint is flipped in place (same anchor) if the grid
allows, and the pair of directions for the new orientation is tried.
"""

import logging
from typing import Callable, List, Optional, Sequence, Set

from .board import ORIENTATION_DIRECTIONS, Direction, Orientation, Tile, footprint
from .deadlock import DeadlockFinding, find_local_conflicts
from .errors import DirectionConflict
from .grid import OccupancyGrid
from .placement import Placement
from .seeded_random import SeededRandom

logger = logging.getLogger(__name__)

ExtraCheck = Callable[[Tile, Sequence[Tile]], List[DeadlockFinding]]


class DirectionAssigner:

    def __init__(
        self,
        grid: OccupancyGrid,
        rng: SeededRandom,
        axis_imbalance_limit: int = 3,
        allow_flip: bool = True,
        extra_check: Optional[ExtraCheck] = None,
    ):
        self.grid = grid
        self.rng = rng
        self.axis_imbalance_limit = axis_imbalance_limit
        self.allow_flip = allow_flip
        self.extra_check = extra_check

    def is_disfavored(self, tile: Tile, accepted: Sequence[Tile]) -> bool:
        """
        True when the tile's row or column already holds `axis_imbalance_limit`
        tiles sliding the same way. A limit of 0 or less turns this off.
        """
        if self.axis_imbalance_limit <= 0:
            return False
        rows = {cell[0] for cell in tile.cells}
        cols = {cell[1] for cell in tile.cells}
        same_row = same_col = 0
        for other in accepted:
            if other.direction is not tile.direction:
                continue
            if any(cell[0] in rows for cell in other.cells):
                same_row += 1
            if any(cell[1] in cols for cell in other.cells):
                same_col += 1
        return max(same_row, same_col) >= self.axis_imbalance_limit

    def candidates(self, tile_id: str, anchor, orientation: Orientation, accepted: Sequence[Tile]) -> List[Tile]:
        """Both directions, shuffled, disfavored ones moved to the back."""
        directions: List[Direction] = self.rng.shuffle(ORIENTATION_DIRECTIONS[orientation])
        tiles = [Tile(tile_id, anchor[0], anchor[1], d) for d in directions]
        # stable sort keeps the shuffled order inside each group
        return sorted(tiles, key=lambda t: self.is_disfavored(t, accepted))

    def _first_safe(self, tiles: List[Tile], accepted: Sequence[Tile], conflicts: Set[str]) -> Optional[Tile]:
        for tile in tiles:
            findings: List[DeadlockFinding] = find_local_conflicts(
                tile, accepted, self.grid.rows, self.grid.cols
            )
            if not findings and self.extra_check is not None:
                findings = self.extra_check(tile, accepted)
            if not findings:
                return tile
            for finding in findings:
                conflicts.update(i for i in finding.tile_ids if i != tile.id)
        return None

    def assign(self, placement: Placement, accepted: Sequence[Tile]) -> Tile:
        """
        Return the directed tile for `placement`.

        The grid must already hold the placement's cells. If the flipped
        orientation is chosen the grid is updated to match. Raises
        DirectionConflict when nothing is safe; the caller frees the cells.
        """
        conflicts: Set[str] = set()
        tile = self._first_safe(
            self.candidates(placement.id, placement.anchor, placement.orientation, accepted),
            accepted, conflicts,
        )
        if tile is not None:
            return tile

        if self.allow_flip:
            tile = self._try_flipped(placement, accepted, conflicts)
            if tile is not None:
                return tile

        raise DirectionConflict(placement.id, sorted(conflicts))

    def _try_flipped(self, placement: Placement, accepted: Sequence[Tile], conflicts: Set[str]) -> Optional[Tile]:
        flipped = placement.orientation.flipped()
        old_cells = placement.cells
        new_cells = footprint(placement.anchor, flipped)
        extra = [c for c in new_cells if c not in old_cells]
        if not self.grid.all_empty(extra):
            return None

        tile = self._first_safe(
            self.candidates(placement.id, placement.anchor, flipped, accepted),
            accepted, conflicts,
        )
        if tile is None:
            return None

        self.grid.clear([c for c in old_cells if c not in new_cells])
        self.grid.occupy(extra, placement.id)
        placement.orientation = flipped
        logger.debug("Tile %s flipped to %s at %s", placement.id, flipped.value, placement.anchor)
        return tile
