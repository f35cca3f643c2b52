"""
Arrow Slide - Occupancy Grid

Mutable cell -> tile id map shared by placement, direction assignment and the
solvability search. Callers keep it consistent with their tile list; occupy()
does not reject overlaps.
"""

from typing import Iterable, List, Optional, Union

from .board import Cell, Tile


class _Blocked:
    """Owner sentinel for cells outside the board."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "BLOCKED"

    def __bool__(self) -> bool:
        return False


BLOCKED = _Blocked()

Owner = Union[str, None, _Blocked]


class OccupancyGrid:
    """rows x cols array of tile ids (None = empty)."""

    def __init__(self, rows: int, cols: int):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid size must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self._cells: List[List[Optional[str]]] = [[None] * cols for _ in range(rows)]
        self._occupied = 0

    @classmethod
    def from_tiles(cls, rows: int, cols: int, tiles: Iterable[Tile]) -> "OccupancyGrid":
        grid = cls(rows, cols)
        for tile in tiles:
            grid.place_tile(tile)
        return grid

    def in_bounds(self, cell: Cell) -> bool:
        return 0 <= cell[0] < self.rows and 0 <= cell[1] < self.cols

    def is_empty(self, cell: Cell) -> bool:
        """False for out-of-bounds cells."""
        if not self.in_bounds(cell):
            return False
        return self._cells[cell[0]][cell[1]] is None

    def owner(self, cell: Cell) -> Owner:
        """Tile id, None when empty, BLOCKED outside the board."""
        if not self.in_bounds(cell):
            return BLOCKED
        return self._cells[cell[0]][cell[1]]

    def occupy(self, cells: Iterable[Cell], tile_id: str) -> None:
        for r, c in cells:
            if self._cells[r][c] is None:
                self._occupied += 1
            self._cells[r][c] = tile_id

    def clear(self, cells: Iterable[Cell]) -> None:
        for r, c in cells:
            if self._cells[r][c] is not None:
                self._occupied -= 1
            self._cells[r][c] = None

    def reset(self) -> None:
        self._cells = [[None] * self.cols for _ in range(self.rows)]
        self._occupied = 0

    def place_tile(self, tile: Tile) -> None:
        self.occupy(tile.cells, tile.id)

    def remove_tile(self, tile: Tile) -> None:
        self.clear(tile.cells)

    def all_empty(self, cells: Iterable[Cell]) -> bool:
        return all(self.is_empty(cell) for cell in cells)

    @property
    def occupied_count(self) -> int:
        return self._occupied

    @property
    def free_count(self) -> int:
        return self.rows * self.cols - self._occupied

    def copy(self) -> "OccupancyGrid":
        clone = OccupancyGrid(self.rows, self.cols)
        clone._cells = [list(row) for row in self._cells]
        clone._occupied = self._occupied
        return clone

    def render(self) -> str:
        """ASCII dump for debug logs: '.' empty, otherwise the id's last char."""
        lines = []
        for row in self._cells:
            lines.append("".join("." if v is None else str(v)[-1] for v in row))
        return "\n".join(lines)
