"""
Module: composition.strip

Purpose:
    Stack a group of images vertically into one "long image". Images keep
    their native resolution and are each centered horizontally over the
    widest image. An optional target aspect ratio grows the canvas on one
    axis (never shrinking it) and the content block is centered in the
    padding.

Key Functions:
    - plan_strip(): Pure geometry for a group (no pixels touched)
    - grow_to_ratio(): Grow-only canvas adjustment
    - compose_strip(): Render a group into a single raster

Key Classes:
    - StripPlan: Canvas size, content size and per-image origins

Dependencies:
    - composition.canvas: Output buffer
    - fractions (std): Exact ratio comparison

Used By:
    - pipeline.controller: long mode
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .canvas import Canvas
from .config import AspectRatio, StripLayoutSpec
from .errors import InvalidArgumentError
from .geometry import center_offset, round_half_away_from_zero
from .models import Placement, RasterImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StripPlan:
    """
    Geometry of a strip composite.

    Attributes:
        content_width: Widest image in the group
        content_height: Sum of heights plus spacing between images
        canvas_width: Final width (>= content_width)
        canvas_height: Final height (>= content_height)
        offset_x: Left edge of the content block on the canvas
        offset_y: Top edge of the content block on the canvas
        origins: (left, top) of each image, in group order

    Example:
        >>> plan = plan_strip([(300, 100), (300, 200), (300, 150)], StripLayoutSpec(spacing=20))
        >>> plan.canvas_size
        (300, 490)
        >>> [top for _, top in plan.origins]
        [0, 120, 340]
    """

    content_width: int
    content_height: int
    canvas_width: int
    canvas_height: int
    offset_x: int
    offset_y: int
    origins: Tuple[Tuple[int, int], ...]

    @property
    def canvas_size(self) -> Tuple[int, int]:
        return (self.canvas_width, self.canvas_height)

    @property
    def content_size(self) -> Tuple[int, int]:
        return (self.content_width, self.content_height)


def grow_to_ratio(
    content_width: int,
    content_height: int,
    ratio: Optional[AspectRatio],
) -> Tuple[int, int]:
    """
    Grow one canvas axis so width:height matches the ratio.

    Comparison is exact (cross-multiplied integers): content wider than
    the target grows the height, content taller grows the width, and an
    exact match leaves the canvas equal to the content.

    Example:
        >>> grow_to_ratio(300, 490, AspectRatio(1, 1))
        (490, 490)
        >>> grow_to_ratio(300, 100, AspectRatio(1, 1))
        (300, 300)
        >>> grow_to_ratio(160, 90, AspectRatio(16, 9))
        (160, 90)
    """
    if ratio is None:
        return content_width, content_height

    current = content_width * ratio.height
    target = content_height * ratio.width
    target_ratio = ratio.as_fraction()

    if current > target:
        height = round_half_away_from_zero(content_width / target_ratio)
        return content_width, max(content_height, height)
    if current < target:
        width = round_half_away_from_zero(content_height * target_ratio)
        return max(content_width, width), content_height
    return content_width, content_height


def plan_strip(sizes: Sequence[Tuple[int, int]], spec: StripLayoutSpec) -> StripPlan:
    """
    Compute strip geometry for images of the given (width, height).

    Raises:
        InvalidArgumentError: If sizes is empty or any dimension is
            non-positive.
    """
    if not sizes:
        raise InvalidArgumentError("Cannot compose an empty group")
    for index, (width, height) in enumerate(sizes):
        if width <= 0 or height <= 0:
            raise InvalidArgumentError(
                f"Image {index} has non-positive dimensions: {width}x{height}"
            )

    content_width = max(w for w, _ in sizes)
    content_height = sum(h for _, h in sizes) + spec.spacing * (len(sizes) - 1)
    canvas_width, canvas_height = grow_to_ratio(content_width, content_height, spec.aspect_ratio)

    offset_x = center_offset(canvas_width, content_width)
    offset_y = center_offset(canvas_height, content_height)

    origins = []
    cursor = offset_y
    for width, height in sizes:
        origins.append((offset_x + center_offset(content_width, width), cursor))
        cursor += height + spec.spacing

    return StripPlan(
        content_width=content_width,
        content_height=content_height,
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        offset_x=offset_x,
        offset_y=offset_y,
        origins=tuple(origins),
    )


def compose_strip(group: Sequence[RasterImage], spec: StripLayoutSpec) -> RasterImage:
    """
    Render a group of images as a vertical strip.

    Images are placed at native resolution; only the canvas grows to
    meet a target ratio.

    Args:
        group: Images in top-to-bottom order
        spec: Spacing, background and optional aspect ratio

    Returns:
        New raster of size plan_strip(...).canvas_size.

    Raises:
        InvalidArgumentError: If the group is empty or holds an image
            with non-positive dimensions.
        ResourceExhaustedError: If the canvas cannot be allocated.
    """
    plan = plan_strip([img.size for img in group], spec)
    if spec.aspect_ratio is not None:
        logger.debug(
            f"Target ratio {spec.aspect_ratio}: content {plan.content_width}x{plan.content_height} "
            f"-> canvas {plan.canvas_width}x{plan.canvas_height}"
        )
    logger.debug(f"Strip content offset: x={plan.offset_x}, y={plan.offset_y}")

    canvas = Canvas(plan.canvas_width, plan.canvas_height, spec.background)
    for img, (left, top) in zip(group, plan.origins):
        canvas.place(Placement(img, top=top, left=left))

    return canvas.finalize()
