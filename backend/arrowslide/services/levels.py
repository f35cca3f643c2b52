"""
Arrow Slide - Levels and Level Packs

Difficulty presets, batch generation and import checks for level packs.
Everything here works on plain dicts; reading and writing files is left to
the caller (see scripts/generate_level_pack.py).
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..config import settings
from .board import Layout, layout_from_record, layout_to_record
from .errors import GenerationExhausted, LayoutError
from .generator import generate
from .validation import check_layout

logger = logging.getLogger(__name__)

PACK_VERSION = "1.0.0"

# difficulty -> (rows, cols, tile multiplier)
DIFFICULTY_PRESETS: Dict[str, Tuple[int, int, float]] = {
    "easy": (4, 4, 0.5),
    "medium": (6, 6, 0.75),
    "hard": (8, 8, 1.0),
    "expert": (10, 10, 1.25),
}

DIFFICULTIES = tuple(DIFFICULTY_PRESETS)


def get_preset(difficulty: str) -> Tuple[int, int, float]:
    try:
        return DIFFICULTY_PRESETS[difficulty]
    except KeyError:
        raise ValueError(f"Unknown difficulty: {difficulty}") from None


def get_tile_count(difficulty: str, ratio: Optional[float] = None) -> int:
    """About 15% of the cells, scaled by difficulty, at least 2, at most what fits."""
    rows, cols, multiplier = get_preset(difficulty)
    ratio = settings.LEVEL_TILE_RATIO if ratio is None else ratio
    base = math.floor(rows * cols * ratio * multiplier)
    return min(max(2, base), (rows * cols) // 2)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================
# GENERATION
# ============================================

def generate_level(
    level_id: str,
    difficulty: str,
    name: Optional[str] = None,
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """Generate one preset level. Raises GenerationExhausted like generate()."""
    rows, cols, _ = get_preset(difficulty)
    result = generate(rows, cols, get_tile_count(difficulty), seed=seed)
    check = check_layout(result.layout)

    level = {
        "id": level_id,
        "name": name or f"{difficulty}_level_{level_id}",
        "difficulty": difficulty,
        **layout_to_record(result.layout),
        "metadata": {
            "createdAt": _now_iso(),
            "generationAttempts": result.attempts,
            "isValid": check.valid,
            "seed": result.seed,
        },
    }
    return level


def generate_levels(
    count: int,
    difficulty: str,
    name_prefix: str = "Level",
    max_retries: int = 3,
    seed: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Generate `count` levels. A level that keeps failing after `max_retries`
    is logged and skipped, so the result can be shorter than `count`.
    """
    get_preset(difficulty)
    levels: List[Dict[str, Any]] = []

    for i in range(1, count + 1):
        level_id = f"{difficulty}_{i:03d}"
        level_name = f"{name_prefix} {i}"
        level = None

        for retry in range(max_retries):
            level_seed = None if seed is None else seed + i * 1000 + retry
            try:
                level = generate_level(level_id, difficulty, level_name, seed=level_seed)
                break
            except GenerationExhausted as exc:
                logger.warning("Level %s failed (%d/%d): %s", level_id, retry + 1, max_retries, exc)

        if level is None:
            logger.error("Level %s skipped after %d retries", level_id, max_retries)
            continue

        levels.append(level)
        logger.info(
            "Generated level %s (%d attempts)",
            level["name"], level["metadata"]["generationAttempts"],
        )

    return levels


def generate_level_pack(
    pack_id: str,
    name: str,
    description: str,
    level_counts: Dict[str, int],
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """Levels for every difficulty in `level_counts`, in preset order."""
    all_levels: List[Dict[str, Any]] = []
    for offset, difficulty in enumerate(DIFFICULTIES):
        count = level_counts.get(difficulty, 0)
        if count <= 0:
            continue
        logger.info("Generating %d %s level(s)...", count, difficulty)
        pack_seed = None if seed is None else seed + offset * 1_000_000
        all_levels.extend(generate_levels(
            count, difficulty, name_prefix=difficulty.capitalize(), seed=pack_seed,
        ))

    unknown = set(level_counts) - set(DIFFICULTIES)
    if unknown:
        logger.warning("Ignoring unknown difficulties: %s", ", ".join(sorted(unknown)))

    distribution = {d: sum(1 for lvl in all_levels if lvl["difficulty"] == d) for d in DIFFICULTIES}
    return {
        "id": pack_id,
        "name": name,
        "description": description,
        "version": PACK_VERSION,
        "levels": all_levels,
        "metadata": {
            "createdAt": _now_iso(),
            "totalLevels": len(all_levels),
            "difficultyDistribution": distribution,
        },
    }


# ============================================
# IMPORT CHECKS
# ============================================

def _level_errors(level: Any) -> List[str]:
    if not isinstance(level, dict):
        return ["level must be an object"]

    errors = []
    if not isinstance(level.get("id"), str):
        errors.append("id must be a string")
    if not isinstance(level.get("name"), str):
        errors.append("name must be a string")
    if level.get("difficulty") not in DIFFICULTY_PRESETS:
        errors.append(f"unknown difficulty {level.get('difficulty')!r}")

    try:
        layout = layout_from_record(level)
    except LayoutError as exc:
        errors.append(str(exc))
        return errors

    check = check_layout(layout)
    errors.extend(check.errors)
    return errors


def validate_level_pack(pack: Any) -> List[str]:
    """Every problem found in a level pack; empty when the pack is usable."""
    if not isinstance(pack, dict):
        return ["level pack must be an object"]

    errors = []
    if not isinstance(pack.get("id"), str):
        errors.append("pack id must be a string")
    if not isinstance(pack.get("name"), str):
        errors.append("pack name must be a string")

    levels = pack.get("levels")
    if not isinstance(levels, list):
        errors.append("levels must be a list")
        return errors

    seen_ids = set()
    for idx, level in enumerate(levels):
        label = f"levels[{idx}]"
        if isinstance(level, dict) and isinstance(level.get("id"), str):
            label = f"{label} ({level['id']})"
            if level["id"] in seen_ids:
                errors.append(f"{label}: duplicate level id")
            seen_ids.add(level["id"])
        errors.extend(f"{label}: {err}" for err in _level_errors(level))

    return errors


def load_level_pack(pack: Any) -> Dict[str, Layout]:
    """Level id -> Layout. Raises LayoutError listing every problem."""
    errors = validate_level_pack(pack)
    if errors:
        raise LayoutError("; ".join(errors))
    return {level["id"]: layout_from_record(level) for level in pack["levels"]}
