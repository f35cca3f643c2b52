from arrowslide.services.board import Direction, Tile
from arrowslide.services.deadlock import (
    DeadlockKind, blocking_graph, detect_deadlock, find_local_conflicts, format_report,
    get_detailed_deadlock_info, is_adjacent_faceoff, is_facing, strongly_connected_cycles,
)


def test_is_facing_needs_both_heading_inward():
    a = Tile("a", 2, 0, Direction.RIGHT)
    assert is_facing(a, Tile("b", 2, 4, Direction.LEFT))
    assert is_facing(Tile("b", 2, 4, Direction.LEFT), a)
    assert not is_facing(a, Tile("b", 2, 4, Direction.RIGHT))
    assert not is_facing(Tile("a", 2, 0, Direction.LEFT), Tile("b", 2, 2, Direction.RIGHT))
    assert not is_facing(a, Tile("b", 3, 4, Direction.LEFT))


def test_adjacent_face_off_horizontal_and_vertical(make_layout):
    layout = make_layout(
        6, 6,
        ("a", 2, 0, "right"), ("b", 2, 2, "left"),
        ("c", 0, 5, "down"), ("d", 2, 5, "up"),
    )
    report = get_detailed_deadlock_info(layout.tiles, 6, 6)

    assert report.kind is DeadlockKind.ADJACENT
    assert [f.tile_ids for f in report.of_kind(DeadlockKind.ADJACENT)] == [("a", "b"), ("c", "d")]
    assert is_adjacent_faceoff(layout.get("a"), layout.get("b"))


def test_facing_pair_with_gap_is_long_distance(facing_pair):
    report = get_detailed_deadlock_info(facing_pair.tiles, 6, 6)

    assert report.has_deadlock
    assert report.kind is DeadlockKind.LONG_DISTANCE
    assert set(report.tile_ids) == {"a", "b"}


def test_pair_hidden_behind_a_tile_is_cyclic(make_layout):
    # c shields a and b from each other until it leaves; then they face off.
    layout = make_layout(
        6, 8,
        ("a", 0, 0, "right"), ("c", 0, 3, "down"), ("b", 0, 6, "left"),
    )
    assert find_local_conflicts(layout.get("b"), [layout.get("a"), layout.get("c")], 6, 8) == []
    report = get_detailed_deadlock_info(layout.tiles, 6, 8)
    assert report.kind is DeadlockKind.CYCLIC
    assert report.tile_ids == ("a", "b")


def test_three_tile_ring_is_cyclic(three_tile_ring):
    report = get_detailed_deadlock_info(three_tile_ring.tiles, 4, 8)

    cyclic = report.of_kind(DeadlockKind.CYCLIC)
    assert len(cyclic) == 1
    assert cyclic[0].tile_ids == ("a", "b", "c")
    assert report.implicated() == {"a", "b", "c"}
    assert detect_deadlock(three_tile_ring.tiles, 4, 8)


def test_blocking_graph_nearest_first(three_tile_ring):
    graph = blocking_graph(three_tile_ring.tiles, 4, 8)
    assert graph == {"a": ["c", "b"], "b": ["c", "a"], "c": ["a"]}


def test_strongly_connected_cycles():
    graph = {"a": ["b"], "b": ["a"], "c": ["a"], "d": ["d2"], "d2": []}
    cycles = strongly_connected_cycles(graph)
    assert [sorted(c) for c in cycles] == [["a", "b"]]

    ring = {str(i): [str((i + 1) % 50)] for i in range(50)}
    assert [len(c) for c in strongly_connected_cycles(ring)] == [50]


def test_clear_layout_reports_none(make_layout):
    layout = make_layout(6, 6, ("a", 0, 0, "up"), ("b", 3, 3, "right"))
    report = get_detailed_deadlock_info(layout.tiles, 6, 6)

    assert not report.has_deadlock
    assert report.kind is DeadlockKind.NONE
    assert report.to_dict() == {
        "has_deadlock": False,
        "kind": "none",
        "tile_ids": [],
        "description": "No deadlock",
        "findings": [],
    }


def test_format_report_lists_tiles(facing_pair):
    report = get_detailed_deadlock_info(facing_pair.tiles, 6, 6)
    text = format_report(report, facing_pair.tiles)
    assert "deadlock: yes" in text
    assert "a: anchor (2, 0), right" in text
