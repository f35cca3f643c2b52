"""
Arrow Slide - Deadlock Analyzer

Three checks, cheapest first:

1. adjacent face-off      two opposite tiles on one line whose footprints touch
2. long-distance block    two opposite tiles on one line whose travel paths meet
3. cyclic mutual block    a ring in the "A waits for B" graph

Every finding names the tiles involved so the generator can drop the newest
tile instead of throwing away the whole layout.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from itertools import combinations
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from .board import Cell, Direction, Tile, in_bounds, move_in_direction

logger = logging.getLogger(__name__)


class DeadlockKind(str, Enum):
    ADJACENT = "adjacent"
    LONG_DISTANCE = "long-distance"
    CYCLIC = "cyclic"
    NONE = "none"


@dataclass(frozen=True)
class DeadlockFinding:
    kind: DeadlockKind
    tile_ids: Tuple[str, ...]
    description: str

    def to_dict(self) -> Dict:
        return {
            "kind": self.kind.value,
            "tile_ids": list(self.tile_ids),
            "description": self.description,
        }


@dataclass
class DeadlockReport:
    """All findings in escalation order; the first one is the headline."""
    findings: List[DeadlockFinding] = field(default_factory=list)

    @property
    def has_deadlock(self) -> bool:
        return bool(self.findings)

    @property
    def kind(self) -> DeadlockKind:
        return self.findings[0].kind if self.findings else DeadlockKind.NONE

    @property
    def tile_ids(self) -> Tuple[str, ...]:
        return self.findings[0].tile_ids if self.findings else ()

    @property
    def description(self) -> str:
        return self.findings[0].description if self.findings else "No deadlock"

    def of_kind(self, kind: DeadlockKind) -> List[DeadlockFinding]:
        return [f for f in self.findings if f.kind is kind]

    def implicated(self) -> Set[str]:
        ids: Set[str] = set()
        for finding in self.findings:
            ids.update(finding.tile_ids)
        return ids

    def to_dict(self) -> Dict:
        return {
            "has_deadlock": self.has_deadlock,
            "kind": self.kind.value,
            "tile_ids": list(self.tile_ids),
            "description": self.description,
            "findings": [f.to_dict() for f in self.findings],
        }


# ============================================
# GEOMETRY HELPERS
# ============================================

def build_cell_map(tiles: Iterable[Tile]) -> Dict[Cell, str]:
    cell_map: Dict[Cell, str] = {}
    for tile in tiles:
        for cell in tile.cells:
            cell_map[cell] = tile.id
    return cell_map


def is_facing(a: Tile, b: Tile) -> bool:
    """Opposite directions on the same line, each heading toward the other."""
    if a.orientation is not b.orientation or a.line != b.line:
        return False
    if a.direction in (Direction.RIGHT, Direction.DOWN):
        return b.direction in (Direction.LEFT, Direction.UP) and a.position < b.position
    return b.direction in (Direction.RIGHT, Direction.DOWN) and a.position > b.position


def is_adjacent_faceoff(a: Tile, b: Tile) -> bool:
    return is_facing(a, b) and abs(a.position - b.position) == 2


def travel_path(tile: Tile, cell_map: Dict[Cell, str], rows: int, cols: int) -> List[Cell]:
    """From the leading cell toward the boundary, stopping at another tile."""
    path: List[Cell] = []
    cell = tile.leading_cell
    while in_bounds(cell, rows, cols):
        owner = cell_map.get(cell)
        if owner is not None and owner != tile.id:
            break
        path.append(cell)
        cell = move_in_direction(cell, tile.direction)
    return path


def blocking_graph(tiles: Sequence[Tile], rows: int, cols: int) -> Dict[str, List[str]]:
    """
    tile id -> ids of tiles standing on its way out, nearest first.

    The first entry, when present, is the tile right in front of the leading
    edge if one is there; tiles further along the path are included as well.
    """
    cell_map = build_cell_map(tiles)
    graph: Dict[str, List[str]] = {}
    for tile in tiles:
        blockers: List[str] = []
        for cell in tile.ray(rows, cols):
            owner = cell_map.get(cell)
            if owner is not None and owner != tile.id and owner not in blockers:
                blockers.append(owner)
        graph[tile.id] = blockers
    return graph


# ============================================
# DETECTORS
# ============================================

def _pair_description(kind: str, a: Tile, b: Tile) -> str:
    return (
        f"{kind}: {a.id} ({a.direction.value} at {a.anchor}) "
        f"and {b.id} ({b.direction.value} at {b.anchor}) block each other"
    )


def _facing_pairs(tiles: Sequence[Tile]) -> Iterable[Tuple[Tile, Tile]]:
    by_line: Dict[Tuple[str, int], List[Tile]] = {}
    for tile in tiles:
        by_line.setdefault((tile.orientation.value, tile.line), []).append(tile)
    for group in by_line.values():
        for a, b in combinations(group, 2):
            if is_facing(a, b):
                yield a, b


def find_adjacent_faceoffs(tiles: Sequence[Tile]) -> List[DeadlockFinding]:
    findings = []
    for a, b in _facing_pairs(tiles):
        if abs(a.position - b.position) == 2:
            findings.append(DeadlockFinding(
                DeadlockKind.ADJACENT, (a.id, b.id),
                _pair_description(f"{a.orientation.value} adjacent face-off", a, b),
            ))
    return findings


def find_long_distance_blocks(tiles: Sequence[Tile], rows: int, cols: int) -> List[DeadlockFinding]:
    cell_map = build_cell_map(tiles)
    findings = []
    for a, b in _facing_pairs(tiles):
        if abs(a.position - b.position) == 2:
            continue
        path_a = set(travel_path(a, cell_map, rows, cols))
        if path_a & set(travel_path(b, cell_map, rows, cols)):
            findings.append(DeadlockFinding(
                DeadlockKind.LONG_DISTANCE, (a.id, b.id),
                _pair_description(f"{a.orientation.value} long-distance block", a, b),
            ))
    return findings


def strongly_connected_cycles(graph: Dict[str, List[str]]) -> List[List[str]]:
    """
    Tarjan's algorithm with explicit stacks: every component of two or more
    nodes is a set of tiles that wait on each other forever.
    """
    index: Dict[str, int] = {}
    low: Dict[str, int] = {}
    path: List[str] = []
    on_path: Set[str] = set()
    cycles: List[List[str]] = []
    counter = 0

    for root in graph:
        if root in index:
            continue
        index[root] = low[root] = counter
        counter += 1
        path.append(root)
        on_path.add(root)
        work = [(root, iter(graph.get(root, ())))]

        while work:
            node, neighbours = work[-1]
            descended = False
            for nxt in neighbours:
                if nxt not in index:
                    index[nxt] = low[nxt] = counter
                    counter += 1
                    path.append(nxt)
                    on_path.add(nxt)
                    work.append((nxt, iter(graph.get(nxt, ()))))
                    descended = True
                    break
                if nxt in on_path:
                    low[node] = min(low[node], index[nxt])
            if descended:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                low[parent] = min(low[parent], low[node])

            if low[node] == index[node]:
                component = []
                while True:
                    member = path.pop()
                    on_path.discard(member)
                    component.append(member)
                    if member == node:
                        break
                if len(component) > 1:
                    cycles.append(component)

    return cycles


def find_cyclic_blocks(tiles: Sequence[Tile], rows: int, cols: int) -> List[DeadlockFinding]:
    order = {t.id: i for i, t in enumerate(tiles)}
    findings = []
    for component in strongly_connected_cycles(blocking_graph(tiles, rows, cols)):
        ids = tuple(sorted(component, key=order.__getitem__))
        findings.append(DeadlockFinding(
            DeadlockKind.CYCLIC, ids,
            f"cyclic block: {' -> '.join(ids)} wait on each other",
        ))
    return findings


# ============================================
# ENTRY POINTS
# ============================================

def get_detailed_deadlock_info(tiles: Sequence[Tile], rows: int, cols: int) -> DeadlockReport:
    """Run all three checks and collect every finding."""
    tiles = list(tiles)
    report = DeadlockReport()
    report.findings.extend(find_adjacent_faceoffs(tiles))
    report.findings.extend(find_long_distance_blocks(tiles, rows, cols))
    report.findings.extend(find_cyclic_blocks(tiles, rows, cols))
    if report.has_deadlock:
        logger.debug("Deadlock analysis: %s", report.description)
    return report


def detect_deadlock(tiles: Sequence[Tile], rows: int, cols: int) -> bool:
    tiles = list(tiles)
    if find_adjacent_faceoffs(tiles):
        return True
    if find_long_distance_blocks(tiles, rows, cols):
        return True
    return bool(find_cyclic_blocks(tiles, rows, cols))


def find_local_conflicts(
    candidate: Tile,
    accepted: Sequence[Tile],
    rows: int,
    cols: int,
) -> List[DeadlockFinding]:
    """Adjacent and long-distance checks between one candidate and the accepted tiles."""
    others = [t for t in accepted if t.id != candidate.id]
    cell_map = build_cell_map(others + [candidate])
    candidate_path = None
    findings = []

    for other in others:
        if not is_facing(candidate, other):
            continue
        if abs(candidate.position - other.position) == 2:
            findings.append(DeadlockFinding(
                DeadlockKind.ADJACENT, (candidate.id, other.id),
                _pair_description("adjacent face-off", candidate, other),
            ))
            continue
        if candidate_path is None:
            candidate_path = set(travel_path(candidate, cell_map, rows, cols))
        if candidate_path & set(travel_path(other, cell_map, rows, cols)):
            findings.append(DeadlockFinding(
                DeadlockKind.LONG_DISTANCE, (candidate.id, other.id),
                _pair_description("long-distance block", candidate, other),
            ))
    return findings


def format_report(report: DeadlockReport, tiles: Sequence[Tile]) -> str:
    """Multi-line human summary, used by the pack checker."""
    lines = [
        f"deadlock: {'yes' if report.has_deadlock else 'no'}",
        f"kind: {report.kind.value}",
        f"description: {report.description}",
    ]
    by_id = {t.id: t for t in tiles}
    for finding in report.findings:
        lines.append(f"- {finding.kind.value}: {', '.join(finding.tile_ids)}")
        for tile_id in finding.tile_ids:
            tile = by_id.get(tile_id)
            if tile is not None:
                lines.append(f"    {tile.id}: anchor {tile.anchor}, {tile.direction.value}")
    return "\n".join(lines)
