"""
Arrow Slide - Board Model

Cells, directions, tiles and layouts, plus the plain record shape used by level
files and the HTTP layer:

    {"rows": R, "cols": C, "tiles": [{"id", "direction", "anchorRow", "anchorCol"}]}

A tile's footprint is always derived from its anchor (top-left cell) and the
orientation implied by its direction. The runtime collision layer must use the
same formula.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from .errors import LayoutError

Cell = Tuple[int, int]  # (row, col)


# ============================================
# DIRECTIONS
# ============================================

class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class Orientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    def flipped(self) -> "Orientation":
        if self is Orientation.HORIZONTAL:
            return Orientation.VERTICAL
        return Orientation.HORIZONTAL


DIRECTION_VECTORS: Dict[Direction, Cell] = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}

OPPOSITE: Dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

ORIENTATION_DIRECTIONS: Dict[Orientation, Tuple[Direction, Direction]] = {
    Orientation.HORIZONTAL: (Direction.LEFT, Direction.RIGHT),
    Orientation.VERTICAL: (Direction.UP, Direction.DOWN),
}

# Offset of the second footprint cell from the anchor.
ORIENTATION_OFFSETS: Dict[Orientation, Cell] = {
    Orientation.HORIZONTAL: (0, 1),
    Orientation.VERTICAL: (1, 0),
}


def orientation_of(direction: Direction) -> Orientation:
    if direction in (Direction.LEFT, Direction.RIGHT):
        return Orientation.HORIZONTAL
    return Orientation.VERTICAL


def parse_direction(value: Any) -> Direction:
    """Case-insensitive parse, raises LayoutError on junk."""
    if isinstance(value, Direction):
        return value
    if isinstance(value, str):
        try:
            return Direction(value.strip().lower())
        except ValueError:
            pass
    raise LayoutError(f"Unknown direction: {value!r}")


def move_in_direction(cell: Cell, direction: Direction) -> Cell:
    dr, dc = DIRECTION_VECTORS[direction]
    return (cell[0] + dr, cell[1] + dc)


def footprint(anchor: Cell, orientation: Orientation) -> Tuple[Cell, Cell]:
    dr, dc = ORIENTATION_OFFSETS[orientation]
    return (anchor, (anchor[0] + dr, anchor[1] + dc))


def in_bounds(cell: Cell, rows: int, cols: int) -> bool:
    return 0 <= cell[0] < rows and 0 <= cell[1] < cols


# ============================================
# TILE
# ============================================

@dataclass(frozen=True)
class Tile:
    id: str
    row: int
    col: int
    direction: Direction

    @property
    def anchor(self) -> Cell:
        return (self.row, self.col)

    @property
    def orientation(self) -> Orientation:
        return orientation_of(self.direction)

    @property
    def cells(self) -> Tuple[Cell, Cell]:
        return footprint(self.anchor, self.orientation)

    @property
    def leading_cell(self) -> Cell:
        """Footprint cell that faces the slide direction."""
        first, second = self.cells
        if self.direction in (Direction.UP, Direction.LEFT):
            return first
        return second

    @property
    def line(self) -> int:
        """Row for horizontal tiles, column for vertical ones."""
        if self.orientation is Orientation.HORIZONTAL:
            return self.row
        return self.col

    @property
    def position(self) -> int:
        """Anchor coordinate along the slide axis."""
        if self.orientation is Orientation.HORIZONTAL:
            return self.col
        return self.row

    def with_direction(self, direction: Direction) -> "Tile":
        return Tile(self.id, self.row, self.col, direction)

    def ray(self, rows: int, cols: int) -> Iterator[Cell]:
        """Cells ahead of the leading edge, up to the board boundary."""
        cell = move_in_direction(self.leading_cell, self.direction)
        while in_bounds(cell, rows, cols):
            yield cell
            cell = move_in_direction(cell, self.direction)


# ============================================
# LAYOUT
# ============================================

@dataclass(frozen=True)
class Layout:
    rows: int
    cols: int
    tiles: Tuple[Tile, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    @property
    def tile_ids(self) -> List[str]:
        return [t.id for t in self.tiles]

    def get(self, tile_id: str) -> Optional[Tile]:
        for tile in self.tiles:
            if tile.id == tile_id:
                return tile
        return None

    def without(self, tile_ids: Set[str]) -> "Layout":
        return Layout(self.rows, self.cols, tuple(t for t in self.tiles if t.id not in tile_ids))

    def structural_errors(self, rows: Optional[int] = None, cols: Optional[int] = None) -> List[str]:
        """Packing, containment and id checks. Empty list means well formed."""
        errors: List[str] = []
        if rows is not None and rows != self.rows:
            errors.append(f"Layout has {self.rows} rows, expected {rows}")
        if cols is not None and cols != self.cols:
            errors.append(f"Layout has {self.cols} cols, expected {cols}")

        seen_ids: Set[str] = set()
        owners: Dict[Cell, str] = {}
        for tile in self.tiles:
            if tile.id in seen_ids:
                errors.append(f"Duplicate tile id {tile.id}")
            seen_ids.add(tile.id)
            for cell in tile.cells:
                if not in_bounds(cell, self.rows, self.cols):
                    errors.append(f"Tile {tile.id} leaves the board at {cell}")
                elif cell in owners:
                    errors.append(f"Tile {tile.id} overlaps tile {owners[cell]} at {cell}")
                else:
                    owners[cell] = tile.id
        return errors


# ============================================
# RECORD CONVERSION
# ============================================

def tile_to_record(tile: Tile) -> Dict[str, Any]:
    return {
        "id": tile.id,
        "direction": tile.direction.value,
        "anchorRow": tile.row,
        "anchorCol": tile.col,
    }


def layout_to_record(layout: Layout) -> Dict[str, Any]:
    return {
        "rows": layout.rows,
        "cols": layout.cols,
        "tiles": [tile_to_record(t) for t in layout.tiles],
    }


def _to_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise LayoutError(f"{what} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise LayoutError(f"{what} must be an integer, got {value!r}") from exc


def layout_from_record(record: Dict[str, Any]) -> Layout:
    """Build a Layout from a plain record. Does not check solvability."""
    if not isinstance(record, dict):
        raise LayoutError("Level record must be an object")

    rows = _to_int(record.get("rows"), "rows")
    cols = _to_int(record.get("cols"), "cols")
    if rows <= 0 or cols <= 0:
        raise LayoutError(f"Grid size must be positive, got {rows}x{cols}")

    raw_tiles = record.get("tiles", [])
    if not isinstance(raw_tiles, list):
        raise LayoutError("tiles must be a list")

    tiles: List[Tile] = []
    for idx, raw in enumerate(raw_tiles):
        if not isinstance(raw, dict):
            raise LayoutError(f"tiles[{idx}] must be an object")
        raw_id = raw.get("id", idx)
        tiles.append(Tile(
            id=str(raw_id),
            row=_to_int(raw.get("anchorRow"), f"tiles[{idx}].anchorRow"),
            col=_to_int(raw.get("anchorCol"), f"tiles[{idx}].anchorCol"),
            direction=parse_direction(raw.get("direction")),
        ))

    layout = Layout(rows, cols, tuple(tiles))
    errors = layout.structural_errors()
    if errors:
        raise LayoutError("; ".join(errors))
    return layout
