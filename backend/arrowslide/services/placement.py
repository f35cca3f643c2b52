"""
Arrow Slide - Spiral Tile Placement

Packs two-cell tiles outward from the grid center, ring by ring, alternating
the orientation of consecutive tiles. Directions are assigned later.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .board import Cell, Orientation, footprint
from .errors import PlacementExhausted
from .grid import OccupancyGrid
from .seeded_random import SeededRandom

logger = logging.getLogger(__name__)


@dataclass
class Placement:
    """A placed footprint that has no direction yet."""
    id: str
    row: int
    col: int
    orientation: Orientation

    @property
    def anchor(self) -> Cell:
        return (self.row, self.col)

    @property
    def cells(self) -> Tuple[Cell, Cell]:
        return footprint(self.anchor, self.orientation)


# ============================================
# SPIRAL ORDER
# ============================================

def grid_center(rows: int, cols: int) -> Cell:
    # Even sizes round down.
    return (rows // 2, cols // 2)


def ring_cells(rows: int, cols: int, radius: int) -> List[Cell]:
    """In-bounds cells at Chebyshev distance exactly `radius`, clockwise from top-left."""
    cr, cc = grid_center(rows, cols)
    if radius == 0:
        return [(cr, cc)]

    top, bottom = cr - radius, cr + radius
    left, right = cc - radius, cc + radius
    ring: List[Cell] = []
    ring.extend((top, c) for c in range(left, right + 1))
    ring.extend((r, right) for r in range(top + 1, bottom + 1))
    ring.extend((bottom, c) for c in range(right - 1, left - 1, -1))
    ring.extend((r, left) for r in range(bottom - 1, top, -1))
    return [(r, c) for r, c in ring if 0 <= r < rows and 0 <= c < cols]


def spiral_cells(rows: int, cols: int) -> Iterator[Cell]:
    """Center first, then every ring up to max(rows, cols)."""
    for radius in range(0, max(rows, cols) + 1):
        yield from ring_cells(rows, cols, radius)


# ============================================
# PACKER
# ============================================

class SpiralPacker:
    """
    Places tiles on a shared OccupancyGrid. Keeps the id counter and the last
    orientation between passes so top-up sweeps continue the alternation.
    """

    def __init__(self, grid: OccupancyGrid, rng: SeededRandom, id_prefix: str = "t"):
        self.grid = grid
        self.rng = rng
        self.id_prefix = id_prefix
        self.last_orientation: Optional[Orientation] = None
        self._next_id = 0

    def _new_id(self) -> str:
        tile_id = f"{self.id_prefix}{self._next_id}"
        self._next_id += 1
        return tile_id

    def preferred_orientation(self) -> Orientation:
        if self.last_orientation is None:
            return Orientation.HORIZONTAL if self.rng.coin() else Orientation.VERTICAL
        return self.last_orientation.flipped()

    def try_place(self, anchor: Cell) -> Optional[Placement]:
        """Preferred orientation first, then the other one."""
        preferred = self.preferred_orientation()
        for orientation in (preferred, preferred.flipped()):
            cells = footprint(anchor, orientation)
            if self.grid.all_empty(cells):
                placement = Placement(self._new_id(), anchor[0], anchor[1], orientation)
                self.grid.occupy(cells, placement.id)
                self.last_orientation = orientation
                return placement
        return None

    def pack(self, count: int) -> List[Placement]:
        """
        Sweep the spiral until `count` tiles are placed.

        Raises PlacementExhausted (carrying the partial list) when the sweep
        ends first. The placed cells stay marked on the grid either way.
        """
        placed: List[Placement] = []
        if count <= 0:
            return placed

        for anchor in spiral_cells(self.grid.rows, self.grid.cols):
            placement = self.try_place(anchor)
            if placement is None:
                continue
            placed.append(placement)
            if len(placed) >= count:
                return placed

        logger.debug("Spiral sweep placed %d of %d tiles", len(placed), count)
        raise PlacementExhausted(count, placed)
