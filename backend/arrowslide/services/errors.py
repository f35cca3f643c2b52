"""
Arrow Slide - Engine Errors

Local failures (placement, direction, verification) are recovered inside the
generator. Only GenerationExhausted and LayoutError cross the engine boundary.
"""

from typing import List, Optional, Sequence


class EngineError(Exception):
    """Base class for every engine failure."""


class LayoutError(EngineError, ValueError):
    """Malformed layout or level record."""


class PlacementExhausted(EngineError):
    """The spiral sweep ran out of room before reaching the requested count."""

    def __init__(self, requested: int, placed: Optional[list] = None):
        self.requested = requested
        self.placed = list(placed or [])
        super().__init__(
            f"Placed {len(self.placed)} of {requested} tiles after a full sweep"
        )


class DirectionConflict(EngineError):
    """Every direction for a tile deadlocks against the accepted tiles."""

    def __init__(self, tile_id: str, conflicts: Sequence[str] = ()):
        self.tile_id = tile_id
        self.conflicts: List[str] = list(conflicts)
        super().__init__(
            f"Tile {tile_id} has no safe direction (conflicts: {', '.join(self.conflicts) or '-'})"
        )


class VerificationFailed(EngineError):
    """The assembled layout has no clearing order."""

    def __init__(self, attempt: int, remaining: Sequence[str] = ()):
        self.attempt = attempt
        self.remaining = list(remaining)
        super().__init__(
            f"Attempt {attempt}: layout is not solvable ({len(self.remaining)} tiles stuck)"
        )


class GenerationExhausted(EngineError):
    """No solvable layout was found within the attempt budget."""

    def __init__(self, rows: int, cols: int, tile_count: int, attempts: int, best_count: int = 0):
        self.rows = rows
        self.cols = cols
        self.tile_count = tile_count
        self.attempts = attempts
        self.best_count = best_count
        super().__init__(
            f"No solvable {rows}x{cols} layout with {tile_count} tiles "
            f"after {attempts} attempts (best: {best_count})"
        )
