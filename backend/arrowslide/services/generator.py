"""
Arrow Slide - Level Generator

Attempt loop:

    packing -> assigning -> local_checking -> accepted | rejected -> [loop]
            -> verifying -> success | retry | exhausted

Each attempt owns a fresh grid. Tiles that cannot get a safe direction are
dropped and their cells freed; short layouts get topped up by extra spiral
passes. A layout that fails verification is thrown away whole.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import Settings, settings as default_settings
from .board import Layout, Tile
from .deadlock import DeadlockFinding, find_cyclic_blocks
from .directions import DirectionAssigner
from .errors import DirectionConflict, GenerationExhausted, PlacementExhausted, VerificationFailed
from .grid import OccupancyGrid
from .placement import Placement, SpiralPacker
from .seeded_random import SeededRandom
from .verifier import stuck_tiles, verify

logger = logging.getLogger(__name__)


# ============================================
# OPTIONS / RESULT
# ============================================

@dataclass
class GeneratorOptions:
    max_attempts: int = 50
    supplemental_passes: int = 3
    axis_imbalance_limit: int = 3
    exhaustive_verify: bool = False

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "GeneratorOptions":
        settings = settings or default_settings
        return cls(
            max_attempts=settings.GENERATOR_MAX_ATTEMPTS,
            supplemental_passes=settings.GENERATOR_SUPPLEMENTAL_PASSES,
            axis_imbalance_limit=settings.AXIS_IMBALANCE_LIMIT,
            exhaustive_verify=settings.VERIFIER_EXHAUSTIVE,
        )


class GenerationState(str, Enum):
    PACKING = "packing"
    ASSIGNING = "assigning"
    LOCAL_CHECKING = "local_checking"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    VERIFYING = "verifying"
    SUCCESS = "success"
    RETRY = "retry"
    EXHAUSTED = "exhausted"


@dataclass
class GenerationResult:
    layout: Layout
    attempts: int
    seed: int
    rejected: int = 0


# ============================================
# LAYOUT BUILDER (one attempt)
# ============================================

class LayoutBuilder:
    """
    Grows one layout on a private grid shared by the packer and the
    direction assigner.
    """

    def __init__(self, rows: int, cols: int, rng: SeededRandom, options: Optional[GeneratorOptions] = None):
        self.options = options or GeneratorOptions()
        self.rows = rows
        self.cols = cols
        self.grid = OccupancyGrid(rows, cols)
        self.packer = SpiralPacker(self.grid, rng)
        self.assigner = DirectionAssigner(
            self.grid, rng, self.options.axis_imbalance_limit, extra_check=self._cycle_findings,
        )
        self.accepted: List[Tile] = []
        self.rejected = 0
        self.state = GenerationState.PACKING

    def _set_state(self, state: GenerationState) -> None:
        self.state = state

    def adopt(self, tiles: Iterable[Tile]) -> None:
        """Take tiles as already accepted, without any checks."""
        for tile in tiles:
            self.grid.place_tile(tile)
            self.accepted.append(tile)

    def _cycle_findings(self, tile: Tile, accepted: Sequence[Tile]) -> List[DeadlockFinding]:
        """Rings the candidate would close; runs only after the pair checks pass."""
        self._set_state(GenerationState.LOCAL_CHECKING)
        findings = find_cyclic_blocks(list(accepted) + [tile], self.rows, self.cols)
        return [f for f in findings if tile.id in f.tile_ids]

    def offer(self, placement: Placement) -> Optional[Tile]:
        """Direct and check one placement. Rejected placements leave no cells behind."""
        self._set_state(GenerationState.ASSIGNING)
        try:
            tile = self.assigner.assign(placement, self.accepted)
        except DirectionConflict as exc:
            self._set_state(GenerationState.REJECTED)
            self.grid.clear(placement.cells)
            self.rejected += 1
            logger.debug("Dropped tile: %s", exc)
            return None

        self._set_state(GenerationState.ACCEPTED)
        self.accepted.append(tile)
        return tile

    def fill(self, count: int) -> int:
        """One spiral pass for up to `count` more tiles. Returns how many were kept."""
        self._set_state(GenerationState.PACKING)
        try:
            placements = self.packer.pack(count)
        except PlacementExhausted as exc:
            placements = exc.placed
            logger.debug("%s", exc)

        kept = 0
        for placement in placements:
            if self.offer(placement) is not None:
                kept += 1
        return kept

    def build(self, tile_count: int) -> Layout:
        """Main pass plus top-up passes while tiles are missing and room remains."""
        for pass_no in range(1 + self.options.supplemental_passes):
            missing = tile_count - len(self.accepted)
            if missing <= 0 or self.grid.free_count < 2:
                break
            kept = self.fill(missing)
            if pass_no and not kept:
                break
        return Layout(self.rows, self.cols, tuple(self.accepted))


# ============================================
# GENERATOR
# ============================================

class LevelGenerator:
    """
    Caller-owned generator. Reusing one instance continues its random
    stream; a fresh instance with the same seed reproduces the same levels.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        seed: Optional[int] = None,
        options: Optional[GeneratorOptions] = None,
    ):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid size must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.options = options or GeneratorOptions.from_settings()
        self.rng = SeededRandom(seed)
        self.seed = self.rng.seed
        self.state = GenerationState.PACKING

    @property
    def capacity(self) -> int:
        return (self.rows * self.cols) // 2

    def _attempt(self, attempt: int, tile_count: int) -> Tuple[Layout, int]:
        builder = LayoutBuilder(self.rows, self.cols, self.rng, self.options)
        layout = builder.build(tile_count)

        self.state = GenerationState.VERIFYING
        if not verify(layout, exhaustive=self.options.exhaustive_verify):
            raise VerificationFailed(attempt, stuck_tiles(layout))
        return layout, builder.rejected

    def generate(self, tile_count: int, max_attempts: Optional[int] = None) -> GenerationResult:
        """
        Build a solvable layout with exactly `tile_count` tiles.

        Raises GenerationExhausted when no attempt succeeds. Never returns a
        short or unsolvable layout.
        """
        max_attempts = self.options.max_attempts if max_attempts is None else max_attempts
        if max_attempts <= 0:
            raise ValueError(f"max_attempts must be positive, got {max_attempts}")
        if tile_count < 0:
            raise ValueError(f"tile_count must not be negative, got {tile_count}")
        if tile_count > self.capacity:
            raise ValueError(
                f"{tile_count} tiles do not fit a {self.rows}x{self.cols} grid (max {self.capacity})"
            )

        best = 0
        for attempt in range(1, max_attempts + 1):
            self.state = GenerationState.PACKING
            try:
                layout, rejected = self._attempt(attempt, tile_count)
            except VerificationFailed as exc:
                self.state = GenerationState.RETRY
                logger.info("%s, retrying", exc)
                continue

            best = max(best, len(layout))
            if len(layout) < tile_count:
                self.state = GenerationState.RETRY
                logger.debug(
                    "Attempt %d: %d of %d tiles (%d rejected), retrying",
                    attempt, len(layout), tile_count, rejected,
                )
                continue

            self.state = GenerationState.SUCCESS
            logger.info(
                "Generated %dx%d layout with %d tiles in %d attempt(s), seed=%d",
                self.rows, self.cols, tile_count, attempt, self.seed,
            )
            return GenerationResult(layout=layout, attempts=attempt, seed=self.seed, rejected=rejected)

        self.state = GenerationState.EXHAUSTED
        logger.warning(
            "Gave up on %dx%d with %d tiles after %d attempts",
            self.rows, self.cols, tile_count, max_attempts,
        )
        raise GenerationExhausted(self.rows, self.cols, tile_count, max_attempts, best)


def generate(
    rows: int,
    cols: int,
    tile_count: int,
    max_attempts: Optional[int] = None,
    seed: Optional[int] = None,
    options: Optional[GeneratorOptions] = None,
) -> GenerationResult:
    """One-shot convenience wrapper around a fresh LevelGenerator."""
    return LevelGenerator(rows, cols, seed=seed, options=options).generate(tile_count, max_attempts)
