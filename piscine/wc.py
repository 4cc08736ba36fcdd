"""Counting lines, bytes and words in files."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path


def count(content: bytes, lines: bool = False, chars: bool = False, words: bool = False) -> list[int]:
    """Selected counts, in the order lines, characters, words.

    Lines are newlines plus one; characters are bytes.
    """
    counts: list[int] = []
    if lines:
        counts.append(content.count(b"\n") + 1)
    if chars:
        counts.append(len(content))
    if words:
        counts.append(len(content.decode("utf-8", errors="replace").split()))
    return counts


def count_file(path: str | Path, lines: bool = False, chars: bool = False, words: bool = False) -> str:
    """Tab-separated counts followed by the file name; raises OSError."""
    counts = count(Path(path).read_bytes(), lines, chars, words)
    return "".join(f"{value}\t" for value in counts) + str(path)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Count lines, characters or words in files.")
    parser.add_argument("-l", dest="lines", action="store_true", help="Count lines")
    parser.add_argument("-m", dest="chars", action="store_true", help="Count characters")
    parser.add_argument("-w", dest="words", action="store_true", help="Count words")
    parser.add_argument("files", nargs="*")
    args = parser.parse_args(argv)

    words = args.words or not (args.lines or args.chars)
    if not args.files:
        print("No files specified.")
        return 1

    def work(name: str) -> tuple[str, bool]:
        try:
            return count_file(name, args.lines, args.chars, words), True
        except OSError as exc:
            return f"Error reading file {name}: {exc}", False

    status = 0
    with ThreadPoolExecutor() as pool:
        for line, ok in pool.map(work, args.files):
            print(line)
            if not ok:
                status = 1
    return status


if __name__ == "__main__":
    sys.exit(main())