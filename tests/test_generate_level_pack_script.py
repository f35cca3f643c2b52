import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "generate_level_pack.py"


@pytest.fixture(scope="module")
def script():
    spec = importlib.util.spec_from_file_location("generate_level_pack", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_generate_then_check(script, tmp_path, capsys):
    out = tmp_path / "pack.json"
    assert script.main([str(out), "--easy", "2", "--seed", "11", "--name", "Starter"]) == 0

    pack = json.loads(out.read_text(encoding="utf-8"))
    assert pack["name"] == "Starter"
    assert pack["metadata"]["totalLevels"] == 2

    assert script.main(["--check", str(out)]) == 0
    assert "OK, 2 level(s)" in capsys.readouterr().out


def test_check_reports_problems(script, tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"id": "p", "name": "n", "levels": [{"id": "x"}]}), encoding="utf-8")

    assert script.main(["--check", str(bad)]) == 1
    assert "problem(s)" in capsys.readouterr().out


def test_nothing_to_generate(script, tmp_path):
    assert script.main([str(tmp_path / "empty.json")]) == 2


def test_output_required(script):
    with pytest.raises(SystemExit):
        script.main([])


def test_verbose_check_explains_deadlocks(script, tmp_path, capsys):
    level = {
        "id": "easy_001", "name": "Stuck", "difficulty": "easy", "rows": 4, "cols": 4,
        "tiles": [
            {"id": "a", "direction": "right", "anchorRow": 1, "anchorCol": 0},
            {"id": "b", "direction": "left", "anchorRow": 1, "anchorCol": 2},
        ],
    }
    path = tmp_path / "stuck.json"
    path.write_text(json.dumps({"id": "p", "name": "n", "levels": [level]}), encoding="utf-8")

    assert script.main(["--check", str(path), "-v"]) == 1
    out = capsys.readouterr().out
    assert "kind: adjacent" in out
    assert "a: anchor (1, 0), right" in out
