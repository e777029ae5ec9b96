"""
Module: composition.config

Purpose:
    Validated layout specifications for the two composers. Invalid
    combinations are rejected on construction, before any layout math.

Key Classes:
    - AspectRatio: Positive integer "W:H" target ratio
    - GridLayoutSpec: Grid composer settings (immutable)
    - StripLayoutSpec: Strip composer settings (immutable)

Dependencies:
    - dataclasses (std)
    - fractions (std)

Used By:
    - composition.grid: compose_grid
    - composition.strip: compose_strip
    - pipeline.config: MergeConfig builds these
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Optional, Union

from .errors import InvalidArgumentError
from .models import WHITE, Color

_RATIO_PATTERN = re.compile(r"^\s*(-?\d+)\s*:\s*(-?\d+)\s*$")


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class AspectRatio:
    """
    Target width:height ratio, both components positive integers.

    Example:
        >>> AspectRatio.parse("16:9")
        AspectRatio(width=16, height=9)
        >>> AspectRatio.parse("16:9").as_fraction()
        Fraction(16, 9)
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        if not (_is_int(self.width) and _is_int(self.height)):
            raise InvalidArgumentError(
                f"Aspect ratio components must be integers: {self.width!r}:{self.height!r}"
            )
        if self.width <= 0 or self.height <= 0:
            raise InvalidArgumentError(
                f"Aspect ratio components must be positive: {self.width}:{self.height}"
            )

    @classmethod
    def parse(cls, value: Union["AspectRatio", str]) -> "AspectRatio":
        """
        Parse a "W:H" string.

        Raises:
            InvalidArgumentError: If the string is malformed or either
                component is zero or negative.
        """
        if isinstance(value, AspectRatio):
            return value
        if not isinstance(value, str):
            raise InvalidArgumentError(f"Aspect ratio must be a 'W:H' string: {value!r}")
        match = _RATIO_PATTERN.match(value)
        if match is None:
            raise InvalidArgumentError(f"Malformed aspect ratio {value!r}, expected 'W:H'")
        return cls(int(match.group(1)), int(match.group(2)))

    def as_fraction(self) -> Fraction:
        return Fraction(self.width, self.height)

    def __str__(self) -> str:
        return f"{self.width}:{self.height}"


@dataclass(frozen=True)
class GridLayoutSpec:
    """
    Configuration for grid composition (immutable).

    Attributes:
        columns: Cells per row (>= 1)
        spacing: Pixels between adjacent cells on both axes (>= 0)
        background: Canvas fill and contain-resize padding color

    Example:
        >>> spec = GridLayoutSpec(columns=2, spacing=10)
        >>> spec.background
        Color(r=255, g=255, b=255, a=255)
    """

    columns: int
    spacing: int = 0
    background: Color = field(default=WHITE)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not _is_int(self.columns) or self.columns < 1:
            raise InvalidArgumentError(f"columns must be a positive integer: {self.columns!r}")
        if not _is_int(self.spacing) or self.spacing < 0:
            raise InvalidArgumentError(f"spacing must be a non-negative integer: {self.spacing!r}")
        if not isinstance(self.background, Color):
            object.__setattr__(self, "background", Color.parse(self.background))


@dataclass(frozen=True)
class StripLayoutSpec:
    """
    Configuration for vertical strip composition (immutable).

    Attributes:
        spacing: Vertical pixels between consecutive images (>= 0)
        background: Canvas fill color
        aspect_ratio: Optional target ratio; the canvas grows on one
            axis to match it and is never smaller than the content

    Example:
        >>> spec = StripLayoutSpec(spacing=20, aspect_ratio="3:4")
        >>> spec.aspect_ratio
        AspectRatio(width=3, height=4)
    """

    spacing: int = 0
    background: Color = field(default=WHITE)
    aspect_ratio: Optional[AspectRatio] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not _is_int(self.spacing) or self.spacing < 0:
            raise InvalidArgumentError(f"spacing must be a non-negative integer: {self.spacing!r}")
        if not isinstance(self.background, Color):
            object.__setattr__(self, "background", Color.parse(self.background))
        if self.aspect_ratio is not None and not isinstance(self.aspect_ratio, AspectRatio):
            object.__setattr__(self, "aspect_ratio", AspectRatio.parse(self.aspect_ratio))
