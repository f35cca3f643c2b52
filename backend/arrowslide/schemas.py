"""
Arrow Slide - Pydantic Schemas

Request/response models for the HTTP layer. Tile records use the camelCase
keys of the level file format (anchorRow, anchorCol).
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .services.board import Direction, Layout, layout_from_record, layout_to_record


# ============================================
# LEVEL RECORD
# ============================================

class TileRecord(BaseModel):
    """One tile: anchor is the top-left cell of its footprint."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    direction: Direction
    anchor_row: int = Field(alias="anchorRow")
    anchor_col: int = Field(alias="anchorCol")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Union[str, int]) -> str:
        return str(value)

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class LevelRecord(BaseModel):
    """Grid size plus tiles."""
    rows: int = Field(gt=0)
    cols: int = Field(gt=0)
    tiles: List[TileRecord] = []

    def to_layout(self) -> Layout:
        """Raises LayoutError for overlaps, out-of-bounds or duplicate ids."""
        return layout_from_record(self.model_dump(by_alias=True))

    @classmethod
    def from_layout(cls, layout: Layout) -> "LevelRecord":
        return cls.model_validate(layout_to_record(layout))


# ============================================
# GENERATION
# ============================================

class GenerateRequest(BaseModel):
    rows: int = Field(gt=0)
    cols: int = Field(gt=0)
    tile_count: int = Field(ge=0)
    max_attempts: Optional[int] = Field(default=None, gt=0)
    seed: Optional[int] = Field(default=None, ge=0)


class GenerationMeta(BaseModel):
    tile_count: int
    attempts: int
    rejected: int
    seed: int


class GenerateResponse(BaseModel):
    level: LevelRecord
    meta: GenerationMeta


class PresetMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    created_at: str = Field(alias="createdAt")
    generation_attempts: int = Field(alias="generationAttempts")
    is_valid: bool = Field(alias="isValid")
    seed: int


class PresetLevelResponse(LevelRecord):
    id: str
    name: str
    difficulty: str
    metadata: PresetMetadata


# ============================================
# VALIDATION / GAMEPLAY
# ============================================

class DeadlockFindingSchema(BaseModel):
    kind: str
    tile_ids: List[str]
    description: str


class DeadlockReportSchema(BaseModel):
    has_deadlock: bool
    kind: str
    tile_ids: List[str]
    description: str
    findings: List[DeadlockFindingSchema] = []


class ValidateResponse(BaseModel):
    valid: bool
    solvable: bool
    errors: List[str] = []
    deadlock: Optional[DeadlockReportSchema] = None


class MovableResponse(BaseModel):
    tile_ids: List[str]


class HintResponse(BaseModel):
    tile_id: str


class CheckMovesRequest(BaseModel):
    level: LevelRecord
    moves: List[str]

    @field_validator("moves", mode="before")
    @classmethod
    def coerce_moves(cls, value):
        if isinstance(value, list):
            return [str(v) for v in value]
        return value


class CheckMovesResponse(BaseModel):
    valid: bool
    error: Optional[str] = None
