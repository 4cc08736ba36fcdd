"""Choosing presents: the n coolest ones and a 0/1 knapsack."""

from __future__ import annotations

import heapq
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Present:
    value: int
    size: int


def _coolness(present: Present) -> tuple[int, int]:
    # Higher value first; among equal values the smaller present first.
    return (-present.value, present.size)


def n_coolest_presents(n: int, presents: Iterable[Present]) -> list[Present]:
    """The ``n`` best presents, best first.

    Raises ValueError when more presents are requested than are available.
    """
    pool = list(presents)
    if n < 0:
        raise ValueError("number of presents must not be negative")
    if n > len(pool):
        raise ValueError("requested more presents than are available")
    return heapq.nsmallest(n, pool, key=_coolness)


def grab_presents(capacity: int, presents: Iterable[Present]) -> int:
    """Greatest total value of presents that fit into ``capacity``."""
    if capacity < 0:
        raise ValueError("capacity must not be negative")
    best = [0] * (capacity + 1)
    for present in presents:
        for room in range(capacity, 0, -1):
            if present.size <= room:
                best[room] = max(best[room], best[room - present.size] + present.value)
    return best[capacity]