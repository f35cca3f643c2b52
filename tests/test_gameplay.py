from arrowslide.services.gameplay import get_full_solution, get_hint, validate_moves


def _chain(make_layout):
    return make_layout(3, 8, ("a", 0, 0, "right"), ("b", 0, 3, "right"), ("c", 2, 0, "left"))


def test_hint_is_first_movable_in_layout_order(make_layout):
    assert get_hint(_chain(make_layout)) == "b"


def test_no_hint_on_deadlock(facing_pair):
    assert get_hint(facing_pair) is None
    assert get_full_solution(facing_pair) == []


def test_full_solution_replays(make_layout):
    layout = _chain(make_layout)
    solution = get_full_solution(layout)
    assert validate_moves(layout, solution) == (True, None)


def test_validate_moves_errors_name_the_step(make_layout):
    layout = _chain(make_layout)

    assert validate_moves(layout, ["a", "b", "c"]) == (False, "Step 1: tile 'a' is blocked")
    assert validate_moves(layout, ["b", "b", "c"]) == (False, "Step 2: tile 'b' already removed")
    assert validate_moves(layout, ["b", "z", "c"]) == (False, "Step 2: unknown tile 'z'")
    assert validate_moves(layout, ["b"]) == (False, "Expected 3 moves, got 1")
    assert validate_moves(layout, ["c", "b", "a"]) == (True, None)
