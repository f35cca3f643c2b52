#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from arrowslide.services.board import layout_from_record
from arrowslide.services.deadlock import format_report, get_detailed_deadlock_info
from arrowslide.services.errors import LayoutError
from arrowslide.services.levels import DIFFICULTIES, generate_level_pack, validate_level_pack


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate an Arrow Slide level pack, or check an existing one."
    )
    parser.add_argument(
        "output",
        nargs="?",
        type=Path,
        help="Where to write the generated pack (JSON).",
    )
    parser.add_argument(
        "--check",
        type=Path,
        metavar="FILE",
        help="Validate an existing pack instead of generating one.",
    )
    parser.add_argument("--pack-id", default="pack_001")
    parser.add_argument("--name", default="Arrow Slide Pack")
    parser.add_argument("--description", default="")
    for difficulty in DIFFICULTIES:
        parser.add_argument(
            f"--{difficulty}",
            type=int,
            default=0,
            metavar="N",
            help=f"Number of {difficulty} levels.",
        )
    parser.add_argument("--seed", type=int, default=None, help="Base seed for reproducible packs.")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    if args.check is None and args.output is None:
        parser.error("an output file is required unless --check is given")
    return args


def print_deadlocks(levels: list[Any]) -> None:
    for level in levels:
        try:
            layout = layout_from_record(level)
        except LayoutError:
            continue
        report = get_detailed_deadlock_info(layout.tiles, layout.rows, layout.cols)
        if report.has_deadlock:
            print(f"  {level.get('id')}:")
            for line in format_report(report, layout.tiles).splitlines():
                print(f"    {line}")


def check_pack(path: Path, verbose: bool = False) -> int:
    try:
        raw: Any = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"{path}: cannot read pack: {exc}")
        return 1

    errors = validate_level_pack(raw)
    if errors:
        print(f"{path}: {len(errors)} problem(s)")
        for error in errors:
            print(f"  {error}")
        if verbose and isinstance(raw, dict) and isinstance(raw.get("levels"), list):
            print_deadlocks(raw["levels"])
        return 1

    print(f"{path}: OK, {len(raw['levels'])} level(s)")
    return 0


def write_pack(args: argparse.Namespace) -> int:
    level_counts = {d: getattr(args, d) for d in DIFFICULTIES}
    if sum(level_counts.values()) <= 0:
        print("Nothing to generate: pass at least one of " + ", ".join(f"--{d}" for d in DIFFICULTIES))
        return 2

    pack = generate_level_pack(
        args.pack_id, args.name, args.description, level_counts, seed=args.seed,
    )
    args.output.write_text(
        json.dumps(pack, ensure_ascii=False, indent="\t") + "\n",
        encoding="utf-8",
    )

    requested = sum(level_counts.values())
    total = pack["metadata"]["totalLevels"]
    print(f"Wrote {total} of {requested} level(s) to {args.output}")
    return 0 if total == requested else 1


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.check is not None:
        return check_pack(args.check, args.verbose)
    return write_pack(args)


if __name__ == "__main__":
    raise SystemExit(main())
