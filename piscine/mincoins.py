"""Greedy coin change."""

from __future__ import annotations

from collections.abc import Sequence


def min_coins(val: int, coins: Sequence[int]) -> list[int]:
    """Greedy change assuming ``coins`` is sorted ascending.

    Any remainder that cannot be paid is silently left over.
    """
    result: list[int] = []
    for coin in reversed(coins):
        while val >= coin:
            val -= coin
            result.append(coin)
    return result


def min_coins2(val: int, coins: Sequence[int]) -> list[int]:
    """Greedy change over coins in any order.

    Returns an empty list when the amount cannot be paid exactly.
    """
    result: list[int] = []
    for coin in sorted(coins, reverse=True):
        while val >= coin:
            val -= coin
            result.append(coin)
    if val > 0:
        return []
    return result