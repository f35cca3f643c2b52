"""
Arrow Slide - Gameplay Helpers

Hints and server-side replay of a player's move list. The live collision
layer asks `can_slide` before starting an animation.
"""

from typing import Dict, List, Optional, Sequence, Set, Tuple

from .board import Layout
from .deadlock import blocking_graph
from .verifier import can_slide, find_clearing_order, movable_tiles

__all__ = ["can_slide", "get_hint", "get_full_solution", "validate_moves"]


def get_hint(layout: Layout) -> Optional[str]:
    """First movable tile in layout order, or None when nothing can move."""
    free = movable_tiles(layout)
    for tile in layout.tiles:
        if tile.id in free:
            return tile.id
    return None


def get_full_solution(layout: Layout) -> List[str]:
    """A complete removal order; empty if the layout cannot be cleared."""
    return find_clearing_order(layout) or []


def validate_moves(layout: Layout, moves: Sequence[str]) -> Tuple[bool, Optional[str]]:
    """
    Replay `moves` against the blocking graph.

    Each step must name a tile whose blockers have all been removed already.
    """
    all_ids = set(layout.tile_ids)
    moves = [str(m) for m in moves]

    if len(moves) != len(all_ids):
        return False, f"Expected {len(all_ids)} moves, got {len(moves)}"

    blockers_of = blocking_graph(layout.tiles, layout.rows, layout.cols)
    dependents_of: Dict[str, Set[str]] = {tid: set() for tid in all_ids}
    for tid, blockers in blockers_of.items():
        for blocker in blockers:
            dependents_of[blocker].add(tid)

    blocker_count = {tid: len(blockers) for tid, blockers in blockers_of.items()}
    removed: Set[str] = set()

    for step, move_id in enumerate(moves, start=1):
        if move_id not in all_ids:
            return False, f"Step {step}: unknown tile '{move_id}'"
        if move_id in removed:
            return False, f"Step {step}: tile '{move_id}' already removed"
        if blocker_count[move_id] > 0:
            return False, f"Step {step}: tile '{move_id}' is blocked"

        removed.add(move_id)
        for dep_id in dependents_of[move_id]:
            blocker_count[dep_id] -= 1

    return True, None
