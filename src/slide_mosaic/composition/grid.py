"""
Module: composition.grid

Purpose:
    Lay out a group of images as a fixed-column grid (row-major).
    Every cell is sized to the group's largest width and height and each
    image is contain-resized into its cell, padded with the background.

Key Functions:
    - plan_grid(): Pure geometry for a group (no pixels touched)
    - contain_resize(): Aspect-preserving fit into an exact cell size
    - compose_grid(): Render a group into a single raster

Key Classes:
    - GridPlan: Canvas size, cell size and cell origins

Dependencies:
    - PIL: LANCZOS resampling
    - composition.canvas: Output buffer

Used By:
    - pipeline.controller: grid-2x2 and grid-3x3 modes
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from PIL import Image

from .canvas import Canvas
from .config import GridLayoutSpec
from .errors import CodecFailureError, InvalidArgumentError
from .geometry import center_offset, contain_size, max_size
from .models import RGBA_MODE, Color, Placement, RasterImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridPlan:
    """
    Geometry of a grid composite.

    Attributes:
        columns: Cells per row
        rows: ceil(image_count / columns)
        cell_width: Widest image in the group
        cell_height: Tallest image in the group
        canvas_width: columns * cell_width + (columns - 1) * spacing
        canvas_height: rows * cell_height + (rows - 1) * spacing
        origins: (left, top) of each image's cell, in group order

    Example:
        >>> plan = plan_grid([(100, 100)] * 3, GridLayoutSpec(columns=2, spacing=10))
        >>> plan.rows, plan.canvas_size
        (2, (210, 210))
        >>> plan.origins
        ((0, 0), (110, 0), (0, 110))
    """

    columns: int
    rows: int
    cell_width: int
    cell_height: int
    canvas_width: int
    canvas_height: int
    origins: Tuple[Tuple[int, int], ...]

    @property
    def canvas_size(self) -> Tuple[int, int]:
        return (self.canvas_width, self.canvas_height)

    @property
    def cell_size(self) -> Tuple[int, int]:
        return (self.cell_width, self.cell_height)

    @property
    def cell_count(self) -> int:
        """Total cells on the canvas, including empty trailing ones."""
        return self.rows * self.columns


def plan_grid(sizes: Sequence[Tuple[int, int]], spec: GridLayoutSpec) -> GridPlan:
    """
    Compute grid geometry for images of the given (width, height).

    The row count comes from the actual group size, so a short final
    group produces a smaller grid rather than a fixed one.

    Raises:
        InvalidArgumentError: If sizes is empty or any dimension is
            non-positive.
    """
    _validate_sizes(sizes)
    cell_width, cell_height = max_size(sizes)
    columns = spec.columns
    rows = math.ceil(len(sizes) / columns)
    spacing = spec.spacing

    canvas_width = columns * cell_width + (columns - 1) * spacing
    canvas_height = rows * cell_height + (rows - 1) * spacing

    origins = tuple(
        ((i % columns) * (cell_width + spacing), (i // columns) * (cell_height + spacing))
        for i in range(len(sizes))
    )

    return GridPlan(
        columns=columns,
        rows=rows,
        cell_width=cell_width,
        cell_height=cell_height,
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        origins=origins,
    )


def contain_resize(
    image: RasterImage,
    width: int,
    height: int,
    background: Color,
) -> RasterImage:
    """
    Fit an image into exactly (width, height) without cropping.

    The image is scaled uniformly until it touches the box on one axis,
    then centered on a background-filled cell. An image that already
    has the target size is returned unchanged.

    Raises:
        CodecFailureError: If Pillow cannot resample the source.
    """
    if image.size == (width, height):
        return image

    scaled_w, scaled_h = contain_size(image.width, image.height, width, height)
    try:
        source = image.to_pil()
        if (scaled_w, scaled_h) != image.size:
            source = source.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)
        cell = Image.new(RGBA_MODE, (width, height), background.as_tuple())
        cell.paste(source, (center_offset(width, scaled_w), center_offset(height, scaled_h)))
    except (OSError, ValueError) as e:
        raise CodecFailureError(
            f"Failed to resize {image.width}x{image.height} image to {width}x{height}: {e}"
        ) from e
    return RasterImage._adopt(cell)


def compose_grid(group: Sequence[RasterImage], spec: GridLayoutSpec) -> RasterImage:
    """
    Render a group of images as a grid.

    Args:
        group: Images in display order (row-major)
        spec: Column count, spacing and background

    Returns:
        New raster of size plan_grid(...).canvas_size.

    Raises:
        InvalidArgumentError: If the group is empty or holds an image
            with non-positive dimensions.
        ResourceExhaustedError: If the canvas cannot be allocated.
        CodecFailureError: If any image cannot be resized.

    Example:
        >>> out = compose_grid([page] * 4, GridLayoutSpec(columns=2, spacing=10))
        >>> out.size
        (210, 210)  # four 100x100 pages
    """
    plan = plan_grid([img.size for img in group], spec)
    logger.debug(
        f"Grid {plan.rows}x{plan.columns}: cell {plan.cell_width}x{plan.cell_height}, "
        f"canvas {plan.canvas_width}x{plan.canvas_height}"
    )

    # Resize everything before allocating the canvas so a codec failure
    # never leaves a half-written canvas behind.
    cells = [
        contain_resize(img, plan.cell_width, plan.cell_height, spec.background)
        for img in group
    ]

    canvas = Canvas(plan.canvas_width, plan.canvas_height, spec.background)
    for index, (cell, (left, top)) in enumerate(zip(cells, plan.origins)):
        canvas.place(Placement(cell, top=top, left=left))
        logger.debug(f"Placed image {index + 1} at row {index // plan.columns}, col {index % plan.columns} ({left}, {top})")

    return canvas.finalize()


def _validate_sizes(sizes: Sequence[Tuple[int, int]]) -> None:
    if not sizes:
        raise InvalidArgumentError("Cannot compose an empty group")
    for index, (width, height) in enumerate(sizes):
        if width <= 0 or height <= 0:
            raise InvalidArgumentError(
                f"Image {index} has non-positive dimensions: {width}x{height}"
            )
