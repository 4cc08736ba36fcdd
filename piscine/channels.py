"""Concurrency helpers: sleep sort and merging several sources into one stream."""

from __future__ import annotations

import argparse
import queue
import sys
import threading
from collections.abc import Iterable, Iterator, Sequence
from typing import Any

DEMO_NUMBERS = [1, 8, 2, 3, 9, 7, 4, 6]

_DONE = object()


def sleep_sort(numbers: Sequence[int], unit: float = 1.0) -> Iterator[int]:
    """Yield the numbers in the order their timers fire; ``n`` waits ``n * unit`` seconds.

    Timers start at once. Raises ValueError for an empty sequence.
    """
    values = list(numbers)
    if not values:
        raise ValueError("no numbers to sort")
    results: queue.Queue[int] = queue.Queue()
    for number in values:
        timer = threading.Timer(max(number, 0) * unit, results.put, args=(number,))
        timer.daemon = True
        timer.start()
    return (results.get() for _ in values)


def _drain(merged: queue.Queue, sources: int) -> Iterator[Any]:
    remaining = sources
    while remaining:
        item = merged.get()
        if item is _DONE:
            remaining -= 1
        else:
            yield item


def multiplex(*args: Iterable[Any]) -> Iterator[Any]:
    """Merge several iterables into one stream, consumed concurrently.

    Items of one source keep their order; items of different sources
    interleave as they arrive. The stream ends when every source is done.
    """
    merged: queue.Queue = queue.Queue()

    def pump(source: Iterable[Any]) -> None:
        try:
            for item in source:
                merged.put(item)
        finally:
            merged.put(_DONE)

    for source in args:
        threading.Thread(target=pump, args=(source,), daemon=True).start()
    return _drain(merged, len(args))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Sleep sort numbers or merge sample streams.")
    parser.add_argument("numbers", nargs="*", type=int, help="Numbers to sort")
    parser.add_argument("--unit", type=float, default=1.0, help="Seconds per unit of value")
    parser.add_argument("--multiplex", action="store_true", help="Merge sample streams instead")
    args = parser.parse_args(argv)

    if args.multiplex:
        for value in multiplex(["Hello"], [42], ["Sandra"], [777], [1, 2, 3]):
            print(value)
        return 0
    for number in sleep_sort(args.numbers or DEMO_NUMBERS, args.unit):
        print(number)
    return 0


if __name__ == "__main__":
    sys.exit(main())