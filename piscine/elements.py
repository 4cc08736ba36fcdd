"""Checked element access."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import islice
from typing import TypeVar

T = TypeVar("T")


def get_element(arr: Sequence[T], idx: int) -> T:
    """Element of ``arr`` at ``idx``, raising IndexError with a reason."""
    if len(arr) == 0:
        raise IndexError("slice is empty")
    if idx < 0:
        raise IndexError("index is negative")
    if idx >= len(arr):
        raise IndexError("index is out of bounds")
    return next(islice(arr, idx, None))