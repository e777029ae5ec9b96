"""
Unit tests for shared geometry helpers.
"""

from fractions import Fraction

import pytest

from slide_mosaic.composition import InvalidArgumentError
from slide_mosaic.composition.geometry import (
    center_offset,
    contain_size,
    max_size,
    round_half_away_from_zero,
)


class TestRoundHalfAwayFromZero:
    """Tests for round_half_away_from_zero()."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (0, 0),
            (0.5, 1),
            (1.5, 2),
            (2.5, 3),  # built-in round() gives 2
            (2.4999, 2),
            (-0.5, -1),
            (-2.5, -3),
            (Fraction(7, 2), 4),
            (Fraction(5, 3), 2),
            (Fraction(-7, 2), -4),
            (10, 10),
        ],
    )
    def test_round_when_value_then_expected(self, value, expected):
        assert round_half_away_from_zero(value) == expected

    def test_round_returns_int(self):
        assert isinstance(round_half_away_from_zero(Fraction(9, 2)), int)


class TestCenterOffset:
    """Tests for center_offset()."""

    def test_center_offset_when_even_difference_then_exact(self):
        assert center_offset(300, 100) == 100

    def test_center_offset_when_odd_difference_then_rounds_up(self):
        """Half pixels round away from zero."""
        assert center_offset(101, 100) == 1
        assert center_offset(103, 100) == 2

    def test_center_offset_when_equal_then_zero(self):
        assert center_offset(300, 300) == 0


class TestMaxSize:
    """Tests for max_size()."""

    def test_max_size_when_mixed_then_per_axis_max(self):
        """Width and height maxima may come from different images."""
        assert max_size([(100, 400), (300, 200)]) == (300, 400)

    def test_max_size_when_empty_then_raises(self):
        with pytest.raises(InvalidArgumentError, match="empty"):
            max_size([])


class TestContainSize:
    """Tests for contain_size()."""

    def test_contain_when_wider_than_box_then_fills_width(self):
        assert contain_size(200, 100, 100, 100) == (100, 50)

    def test_contain_when_taller_than_box_then_fills_height(self):
        assert contain_size(50, 100, 100, 100) == (50, 100)

    def test_contain_when_same_ratio_then_fills_box(self):
        assert contain_size(100, 50, 400, 200) == (400, 200)

    def test_contain_when_rounding_then_half_away_from_zero(self):
        """300x200 into 100x100 scales by 1/3: height 66.67 rounds to 67."""
        assert contain_size(300, 200, 100, 100) == (100, 67)

    def test_contain_when_extreme_ratio_then_at_least_one_pixel(self):
        assert contain_size(10000, 1, 100, 100) == (100, 1)

    def test_contain_when_non_positive_then_raises(self):
        with pytest.raises(InvalidArgumentError, match="positive"):
            contain_size(0, 10, 100, 100)
