"""
Module: pipeline.config

Purpose:
    Configuration for a merge run: which composition mode to use and the
    settings it needs. Immutable, validated on construction.

Key Classes:
    - MergeMode: Output mode (single / grid-2x2 / grid-3x3 / long)
    - MergeConfig: Main configuration for merge_images / convert_and_merge

Dependencies:
    - dataclasses (std)
    - composition.config: Layout specs built from this config

Used By:
    - pipeline.controller: merge_images, convert_and_merge
    - cli: Built from command line arguments
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from slide_mosaic.composition import (
    AspectRatio,
    Color,
    GridLayoutSpec,
    InvalidArgumentError,
    StripLayoutSpec,
)

DEFAULT_SPACING_PX = 20
DEFAULT_BACKGROUND = "#ffffff"
DEFAULT_SCALE = 2.0
DEFAULT_MAX_WORKERS = 4


class MergeMode(Enum):
    """
    How rendered pages are combined.

    Attributes:
        SINGLE: No composition; only the individual pages are produced.
        GRID_2X2: Every 4 pages become one 2-column grid.
        GRID_3X3: Every 9 pages become one 3-column grid.
        LONG: Every group_size pages become one vertical strip.

    Example:
        >>> MergeMode.parse("grid-2x2")
        <MergeMode.GRID_2X2: 'grid-2x2'>
        >>> MergeMode.GRID_3X3.columns, MergeMode.GRID_3X3.fixed_group_size
        (3, 9)
    """

    SINGLE = "single"
    GRID_2X2 = "grid-2x2"
    GRID_3X3 = "grid-3x3"
    LONG = "long"

    @classmethod
    def parse(cls, value: "MergeMode | str") -> "MergeMode":
        if isinstance(value, MergeMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            choices = ", ".join(m.value for m in cls)
            raise InvalidArgumentError(f"Unknown merge mode {value!r} (choose from {choices})") from e

    @property
    def is_grid(self) -> bool:
        return self in (MergeMode.GRID_2X2, MergeMode.GRID_3X3)

    @property
    def columns(self) -> Optional[int]:
        """Grid column count, None for non-grid modes."""
        return {MergeMode.GRID_2X2: 2, MergeMode.GRID_3X3: 3}.get(self)

    @property
    def fixed_group_size(self) -> Optional[int]:
        """Images per grid (columns squared), None for non-grid modes."""
        columns = self.columns
        return columns * columns if columns else None

    @property
    def output_prefix(self) -> Optional[str]:
        """Filename stem for merged outputs."""
        if self is MergeMode.LONG:
            return "merged"
        if self.is_grid:
            return self.value
        return None


@dataclass(frozen=True)
class MergeConfig:
    """
    Configuration for merging rendered pages (immutable).

    Attributes:
        mode: Composition mode (default SINGLE: pages only)
        group_size: Pages per strip (required, >= 1, for LONG; 1 means
            no merging, pages only). Ignored for grid modes, which use 4 or 9
        spacing: Pixels between images
        background: Background color (hex or "r,g,b")
        aspect_ratio: Optional "W:H" target ratio (LONG only)
        scale: Render scale passed to the page renderer
        max_workers: Groups composed concurrently

    Example:
        >>> config = MergeConfig(mode=MergeMode.LONG, group_size=3, aspect_ratio="9:16")
        >>> config.effective_group_size()
        3
    """

    mode: MergeMode = MergeMode.SINGLE
    group_size: Optional[int] = None
    spacing: int = DEFAULT_SPACING_PX
    background: str = DEFAULT_BACKGROUND
    aspect_ratio: Optional[str] = None
    scale: float = DEFAULT_SCALE
    max_workers: int = DEFAULT_MAX_WORKERS

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        object.__setattr__(self, "mode", MergeMode.parse(self.mode))

        if self.mode is MergeMode.LONG:
            if self.group_size is None:
                raise InvalidArgumentError("group_size is required for long mode")
            if not isinstance(self.group_size, int) or isinstance(self.group_size, bool) or self.group_size < 1:
                raise InvalidArgumentError(f"group_size must be a positive integer: {self.group_size!r}")
        if not isinstance(self.spacing, int) or isinstance(self.spacing, bool) or self.spacing < 0:
            raise InvalidArgumentError(f"spacing must be a non-negative integer: {self.spacing!r}")
        if self.scale <= 0:
            raise InvalidArgumentError(f"scale must be positive: {self.scale}")
        if not isinstance(self.max_workers, int) or isinstance(self.max_workers, bool) or self.max_workers < 1:
            raise InvalidArgumentError(f"max_workers must be a positive integer: {self.max_workers!r}")

        # Fail fast on malformed values rather than at the first group
        Color.parse(self.background)
        if self.aspect_ratio is not None:
            AspectRatio.parse(self.aspect_ratio)

    def effective_group_size(self) -> Optional[int]:
        """Images per composite for this mode (None for SINGLE)."""
        if self.mode.is_grid:
            return self.mode.fixed_group_size
        if self.mode is MergeMode.LONG:
            return self.group_size
        return None

    def grid_spec(self) -> GridLayoutSpec:
        if not self.mode.is_grid:
            raise InvalidArgumentError(f"{self.mode.value} is not a grid mode")
        return GridLayoutSpec(
            columns=self.mode.columns,
            spacing=self.spacing,
            background=Color.parse(self.background),
        )

    def strip_spec(self) -> StripLayoutSpec:
        return StripLayoutSpec(
            spacing=self.spacing,
            background=Color.parse(self.background),
            aspect_ratio=AspectRatio.parse(self.aspect_ratio) if self.aspect_ratio else None,
        )
