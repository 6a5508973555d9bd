"""Tests for natural sort keys."""

from inkstone.core.utils import natural_sort_key


def test_numbers_sorted_numerically():
    keys = ["list.10", "list.2", "list.1.name", "list.1"]
    assert sorted(keys, key=natural_sort_key) == ["list.1", "list.1.name", "list.2", "list.10"]


def test_case_insensitive():
    assert sorted(["b", "A", "c"], key=natural_sort_key) == ["A", "b", "c"]


def test_numbers_before_text():
    assert sorted(["x.a", "x.0"], key=natural_sort_key) == ["x.0", "x.a"]
