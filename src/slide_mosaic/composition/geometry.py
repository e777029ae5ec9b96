"""
Module: composition.geometry

Purpose:
    Shared numeric helpers for layout math. All fractional offsets and
    sizes in both composers are rounded through round_half_away_from_zero
    so layouts are reproducible across platforms.

Key Functions:
    - round_half_away_from_zero(): Integer rounding used everywhere
    - center_offset(): Offset that centers `inner` within `outer`
    - contain_size(): Scaled size for aspect-preserving fit
    - max_size(): Per-axis maximum over a set of sizes

Dependencies:
    - fractions (std): Exact arithmetic for ratios

Used By:
    - composition.grid: Cell sizing and contain resize
    - composition.strip: Canvas growth and centering
"""

from __future__ import annotations

import math
from fractions import Fraction
from numbers import Rational
from typing import Iterable, Tuple, Union

from .errors import InvalidArgumentError

Number = Union[int, float, Fraction]


def round_half_away_from_zero(value: Number) -> int:
    """
    Round to the nearest integer, ties away from zero.

    Python's built-in round() uses banker's rounding (round(2.5) == 2),
    which would make centering offsets depend on parity.

    Example:
        >>> round_half_away_from_zero(2.5)
        3
        >>> round_half_away_from_zero(-2.5)
        -3
        >>> round_half_away_from_zero(Fraction(7, 2))
        4
    """
    if isinstance(value, Rational):
        value = Fraction(value)
        magnitude = math.floor(abs(value) + Fraction(1, 2))
    else:
        magnitude = math.floor(abs(value) + 0.5)
    return int(magnitude) if value >= 0 else -int(magnitude)


def center_offset(outer: int, inner: int) -> int:
    """Offset that centers a span of `inner` pixels inside `outer` pixels."""
    return round_half_away_from_zero(Fraction(outer - inner, 2))


def max_size(sizes: Iterable[Tuple[int, int]]) -> Tuple[int, int]:
    """
    Per-axis maximum over (width, height) pairs.

    Raises:
        InvalidArgumentError: If sizes is empty.
    """
    sizes = list(sizes)
    if not sizes:
        raise InvalidArgumentError("Cannot size an empty group")
    return max(w for w, _ in sizes), max(h for _, h in sizes)


def contain_size(
    width: int,
    height: int,
    box_width: int,
    box_height: int,
) -> Tuple[int, int]:
    """
    Size of (width, height) scaled uniformly to fit inside the box.

    The image either fills the box width or the box height; the other
    axis is rounded and clamped to [1, box]. Uses exact fractions so the
    result never depends on float error.

    Example:
        >>> contain_size(200, 100, 100, 100)
        (100, 50)
        >>> contain_size(50, 100, 100, 100)
        (50, 100)
    """
    if width <= 0 or height <= 0 or box_width <= 0 or box_height <= 0:
        raise InvalidArgumentError(
            f"Dimensions must be positive: image {width}x{height}, box {box_width}x{box_height}"
        )

    scale = min(Fraction(box_width, width), Fraction(box_height, height))
    scaled_w = min(box_width, max(1, round_half_away_from_zero(width * scale)))
    scaled_h = min(box_height, max(1, round_half_away_from_zero(height * scale)))
    return scaled_w, scaled_h
