"""Comparing two filesystem snapshots, one path per line."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path


def compare_snapshots(old_lines: Iterable[str], new_lines: Iterable[str]) -> tuple[list[str], list[str]]:
    """Paths added and removed between two snapshots, each list sorted."""
    remaining = set(old_lines)
    added: list[str] = []
    for line in new_lines:
        if line in remaining:
            remaining.remove(line)
        else:
            added.append(line)
    return sorted(added), sorted(remaining)


def _read_lines(path: str | Path) -> Iterator[str]:
    with open(path, encoding="utf-8", errors="surrogateescape", newline="") as handle:
        for raw in handle:
            line = raw[:-1] if raw.endswith("\n") else raw
            yield line[:-1] if line.endswith("\r") else line


def compare_filesystems(old_file: str | Path, new_file: str | Path) -> tuple[list[str], list[str]]:
    """Compare two snapshot files; raises OSError if one cannot be read."""
    old_lines = list(_read_lines(old_file))
    new_lines = list(_read_lines(new_file))
    return compare_snapshots(old_lines, new_lines)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compare two filesystem snapshots.")
    parser.add_argument("-old", "--old", default="", help="Path to the old filesystem snapshot")
    parser.add_argument("-new", "--new", default="", help="Path to the new filesystem snapshot")
    args = parser.parse_args(argv)

    if not args.old:
        print("Path to the old filesystem snapshot is required", file=sys.stderr)
        return 1
    if not args.new:
        print("Path to the new filesystem snapshot is required", file=sys.stderr)
        return 1
    try:
        added, removed = compare_filesystems(args.old, args.new)
    except OSError as exc:
        print("Failed to open file:", exc, file=sys.stderr)
        return 1

    for path in added:
        print(f"ADDED {path}")
    for path in removed:
        print(f"REMOVED {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())