import pytest

from piscine.elements import get_element


def test_get_last_element():
    arr = [1, 2, 3, 4, 5]
    assert get_element(arr, 4) == arr[-1]


@pytest.mark.parametrize("idx", range(5))
def test_get_each_element(idx):
    arr = [10, 20, 30, 40, 50]
    assert get_element(arr, idx) == arr[idx]


def test_empty_slice():
    with pytest.raises(IndexError, match="slice is empty"):
        get_element([], 0)


def test_negative_index():
    with pytest.raises(IndexError, match="index is negative"):
        get_element([1, 2, 3], -1)


def test_out_of_bounds():
    with pytest.raises(IndexError, match="index is out of bounds"):
        get_element([1, 2, 3], 3)


def test_works_on_tuples_and_strings():
    assert get_element(("a", "b"), 1) == "b"
    assert get_element("xyz", 2) == "z"