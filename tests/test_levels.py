import copy

import pytest

from arrowslide.services.errors import LayoutError
from arrowslide.services.levels import (
    generate_level, generate_level_pack, generate_levels, get_tile_count,
    load_level_pack, validate_level_pack,
)


@pytest.mark.parametrize("difficulty, expected", [
    ("easy", 2),
    ("medium", 4),
    ("hard", 9),
    ("expert", 18),
])
def test_tile_count(difficulty, expected):
    assert get_tile_count(difficulty, ratio=0.15) == expected


def test_unknown_difficulty():
    with pytest.raises(ValueError):
        get_tile_count("nightmare")


def test_generate_level_shape():
    level = generate_level("easy_001", "easy", name="First", seed=17)

    assert level["id"] == "easy_001"
    assert level["name"] == "First"
    assert (level["rows"], level["cols"]) == (4, 4)
    assert len(level["tiles"]) == 2
    assert level["metadata"]["isValid"] is True
    assert level["metadata"]["seed"] == 17
    assert set(level["tiles"][0]) == {"id", "direction", "anchorRow", "anchorCol"}


def test_generate_levels_ids_and_seeds():
    levels = generate_levels(3, "medium", name_prefix="Medium", seed=100)
    assert [lvl["id"] for lvl in levels] == ["medium_001", "medium_002", "medium_003"]
    assert [lvl["name"] for lvl in levels] == ["Medium 1", "Medium 2", "Medium 3"]
    assert levels[0]["metadata"]["seed"] == 1100


@pytest.fixture(scope="module")
def pack():
    return generate_level_pack(
        "pack_test", "Test Pack", "for tests", {"easy": 2, "medium": 1, "bogus": 3}, seed=5,
    )


def test_pack_metadata(pack):
    assert pack["version"] == "1.0.0"
    assert pack["metadata"]["totalLevels"] == 3
    assert pack["metadata"]["difficultyDistribution"] == {
        "easy": 2, "medium": 1, "hard": 0, "expert": 0,
    }


def test_generated_pack_validates_and_loads(pack):
    assert validate_level_pack(pack) == []
    layouts = load_level_pack(pack)
    assert sorted(layouts) == ["easy_001", "easy_002", "medium_001"]


def test_corrupt_pack_is_rejected(pack):
    broken = copy.deepcopy(pack)
    broken["levels"][1]["id"] = "easy_001"
    broken["levels"][2]["difficulty"] = "impossible"
    broken["levels"][0]["tiles"].append(dict(broken["levels"][0]["tiles"][0], id="dup"))

    errors = validate_level_pack(broken)
    assert any("duplicate level id" in e for e in errors)
    assert any("unknown difficulty 'impossible'" in e for e in errors)
    assert any("overlaps" in e for e in errors)

    with pytest.raises(LayoutError):
        load_level_pack(broken)


def test_unsolvable_level_is_reported(pack):
    broken = copy.deepcopy(pack)
    broken["levels"][0]["tiles"] = [
        {"id": "a", "direction": "right", "anchorRow": 1, "anchorCol": 0},
        {"id": "b", "direction": "left", "anchorRow": 1, "anchorCol": 2},
    ]
    errors = validate_level_pack(broken)
    assert any("no clearing order" in e for e in errors)


@pytest.mark.parametrize("raw", [None, [], {"id": "x", "name": "y"}])
def test_not_a_pack(raw):
    assert validate_level_pack(raw)
