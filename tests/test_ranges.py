"""Tests for the line range helper."""

from __future__ import annotations

import pytest

from refactormenu.core.ranges import LineRange


def test_line_range_membership_is_inclusive() -> None:
    window = LineRange(10, 20)

    assert 10 in window
    assert 15 in window
    assert 20 in window
    assert 9 not in window
    assert 21 not in window
    assert "15" not in window
    assert window.line_count == 11


def test_line_range_normalizes_bounds() -> None:
    window = LineRange(20, 10)

    assert window.to_tuple() == (10, 20)
    assert LineRange(-3, 0).to_tuple() == (1, 1)


def test_line_range_from_value_accepts_common_shapes() -> None:
    assert LineRange.from_value((3, 7)) == LineRange(3, 7)
    assert LineRange.from_value({"first_line": 2, "last_line": 4}) == LineRange(2, 4)
    window = LineRange(1, 2)
    assert LineRange.from_value(window) is window
    with pytest.raises(ValueError):
        LineRange.from_value([1, 2, 3])
    with pytest.raises(TypeError):
        LineRange.from_value("1-2")
