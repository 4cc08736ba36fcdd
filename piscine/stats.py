"""Descriptive statistics over integers read one per line from standard input."""

from __future__ import annotations

import argparse
import math
import re
import sys
from collections import Counter
from collections.abc import Iterable, Sequence

LOWER_BOUND = -100_000
UPPER_BOUND = 100_000
INVALID_INPUT_MESSAGE = "Enter valid values in the range from -100.000 to 100.000"

_INTEGER = re.compile(r"[+-]?[0-9]+")


def read_numbers(lines: Iterable[str]) -> list[int]:
    """Parse integers from lines until the first empty line.

    Raises ValueError when a line is not an integer or lies outside the
    accepted range.
    """
    numbers: list[int] = []
    for raw in lines:
        line = raw.rstrip("\n").rstrip("\r")
        if not line:
            break
        if not _INTEGER.fullmatch(line):
            raise ValueError(INVALID_INPUT_MESSAGE)
        value = int(line)
        if not LOWER_BOUND <= value <= UPPER_BOUND:
            raise ValueError(INVALID_INPUT_MESSAGE)
        numbers.append(value)
    return numbers


def _require_data(data: Sequence[int]) -> None:
    if not data:
        raise ValueError("no values to compute statistics on")


def mean(data: Sequence[int]) -> float:
    """Arithmetic mean."""
    _require_data(data)
    return sum(data) / len(data)


def median(data: Sequence[int]) -> float:
    """Median; the average of the two middle values for even-sized data."""
    _require_data(data)
    ordered = sorted(data)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2.0
    return float(ordered[middle])


def mode(data: Sequence[int]) -> int:
    """Most frequent value; the smallest one wins a tie."""
    _require_data(data)
    counts = Counter(data)
    best = max(counts.values())
    return min(value for value, count in counts.items() if count == best)


def standard_deviation(data: Sequence[int], mean: float) -> float:
    """Sample standard deviation around the given mean (NaN for one value)."""
    _require_data(data)
    if len(data) == 1:
        return math.nan
    squared = sum((value - mean) ** 2 for value in data)
    return math.sqrt(squared / (len(data) - 1))


def _format(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print statistics of integers read from stdin.")
    parser.add_argument("-mean", "--mean", action="store_true", help="Print mean")
    parser.add_argument("-median", "--median", action="store_true", help="Print median")
    parser.add_argument("-mode", "--mode", action="store_true", help="Print mode")
    parser.add_argument("-sd", "--sd", action="store_true", help="Print standard deviation")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        data = sorted(read_numbers(sys.stdin))
    except ValueError as exc:
        print(exc)
        return 1
    if not data:
        print("No values entered", file=sys.stderr)
        return 1

    show_all = not (args.mean or args.median or args.mode or args.sd)
    average = mean(data)
    if args.mean or show_all:
        print("Mean:", _format(average))
    if args.median or show_all:
        print("Median:", _format(median(data)))
    if args.mode or show_all:
        print("Mode:", mode(data))
    if args.sd or show_all:
        print("SD:", _format(standard_deviation(data, average)))
    return 0


if __name__ == "__main__":
    sys.exit(main())