"""
Arrow Slide - Levels API

Generation, validation and gameplay checks over plain level records.
Generation is CPU bound and runs in the threadpool.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from ..config import settings
from ..middleware.security import limiter, validate_json_size
from ..schemas import (
    CheckMovesRequest, CheckMovesResponse, GenerateRequest, GenerateResponse,
    GenerationMeta, HintResponse, LevelRecord, MovableResponse,
    PresetLevelResponse, ValidateResponse,
)
from ..services.board import Layout, Tile
from ..services.errors import GenerationExhausted, LayoutError
from ..services.gameplay import get_hint, validate_moves
from ..services.generator import generate
from ..services.levels import DIFFICULTIES, generate_level
from ..services.validation import check_layout
from ..services.verifier import movable_tiles

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/levels",
    tags=["levels"],
    dependencies=[Depends(validate_json_size)],
)


# ============================================
# HELPERS
# ============================================

def _check_grid_size(rows: int, cols: int) -> None:
    limit = settings.MAX_GRID_SIZE
    if rows > limit or cols > limit:
        raise HTTPException(status_code=422, detail=f"Grid larger than {limit}x{limit}")


def _to_layout(level: LevelRecord) -> Layout:
    _check_grid_size(level.rows, level.cols)
    try:
        return level.to_layout()
    except LayoutError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _raw_layout(level: LevelRecord) -> Layout:
    """Layout without structural checks, so /validate can report them."""
    tiles = tuple(
        Tile(id=t.id, row=t.anchor_row, col=t.anchor_col, direction=t.direction)
        for t in level.tiles
    )
    return Layout(level.rows, level.cols, tiles)


# ============================================
# GENERATION
# ============================================

@router.post("/generate", response_model=GenerateResponse)
@limiter.limit(settings.generate_rate_limit)
async def generate_layout(request: Request, body: GenerateRequest):
    """Generate a solvable layout with exactly `tile_count` tiles."""
    _check_grid_size(body.rows, body.cols)

    try:
        result = await run_in_threadpool(
            generate, body.rows, body.cols, body.tile_count,
            max_attempts=body.max_attempts, seed=body.seed,
        )
    except GenerationExhausted as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return GenerateResponse(
        level=LevelRecord.from_layout(result.layout),
        meta=GenerationMeta(
            tile_count=len(result.layout),
            attempts=result.attempts,
            rejected=result.rejected,
            seed=result.seed,
        ),
    )


@router.post("/presets/{difficulty}", response_model=PresetLevelResponse)
@limiter.limit(settings.generate_rate_limit)
async def generate_preset(request: Request, difficulty: str, seed: Optional[int] = None):
    """One level from a difficulty preset."""
    if difficulty not in DIFFICULTIES:
        raise HTTPException(status_code=404, detail=f"Unknown difficulty: {difficulty}")

    try:
        level = await run_in_threadpool(
            generate_level, f"{difficulty}_custom", difficulty, f"{difficulty.capitalize()} level", seed,
        )
    except GenerationExhausted as e:
        raise HTTPException(status_code=422, detail=str(e))

    return PresetLevelResponse.model_validate(level)


# ============================================
# VALIDATION / GAMEPLAY
# ============================================

@router.post("/validate", response_model=ValidateResponse)
async def validate_layout(level: LevelRecord):
    """Structure, deadlocks and solvability of a hand-built layout."""
    _check_grid_size(level.rows, level.cols)
    check = check_layout(_raw_layout(level))
    return ValidateResponse.model_validate(check.to_dict())


@router.post("/movable", response_model=MovableResponse)
async def get_movable(level: LevelRecord):
    layout = _to_layout(level)
    free = movable_tiles(layout)
    return MovableResponse(tile_ids=[tid for tid in layout.tile_ids if tid in free])


@router.post("/hint", response_model=HintResponse)
async def get_hint_tile(level: LevelRecord):
    layout = _to_layout(level)
    tile_id = get_hint(layout)
    if tile_id is None:
        raise HTTPException(status_code=404, detail="No movable tile")
    return HintResponse(tile_id=tile_id)


@router.post("/check-moves", response_model=CheckMovesResponse)
async def check_moves(body: CheckMovesRequest):
    """Replay a player's move list; the error names the first bad step."""
    layout = _to_layout(body.level)
    valid, error = validate_moves(layout, body.moves)
    if not valid:
        logger.info("Rejected move list: %s", error)
    return CheckMovesResponse(valid=valid, error=error)
