"""
Module: composition.canvas

Purpose:
    Fixed-size RGBA buffer that composers write placements into.
    A canvas is created per composition call, filled with a background
    color, receives placements in order and is finalized exactly once.

Key Classes:
    - Canvas: Mutable pixel buffer with placement log

Key Functions:
    - new_canvas(): Allocate a canvas filled with a color

Dependencies:
    - PIL: Pixel buffer and paste

Used By:
    - composition.grid: compose_grid
    - composition.strip: compose_strip
"""

from __future__ import annotations

import logging
from typing import List, Tuple, Union

from PIL import Image

from .errors import InvalidArgumentError, ResourceExhaustedError
from .models import RGBA_MODE, Color, Placement, RasterImage

logger = logging.getLogger(__name__)

# Refuse canvases larger than this many pixels (about 1 GiB of RGBA)
MAX_CANVAS_PIXELS = 268_435_456


class Canvas:
    """
    Mutable RGBA buffer of fixed size.

    Placements are opaque overwrites: the source pixels replace the
    canvas pixels inside the placement rectangle. Placements that
    leave the canvas bounds are rejected rather than clipped, so a
    layout bug surfaces as an error instead of a silently cut image.

    Usage:
        canvas = new_canvas(210, 210, WHITE)
        canvas.place(image, top=0, left=110)
        result = canvas.finalize()

    Attributes:
        width: Canvas width in pixels
        height: Canvas height in pixels
        background: Fill color
    """

    def __init__(self, width: int, height: int, background: Color):
        if width <= 0 or height <= 0:
            raise InvalidArgumentError(f"Canvas dimensions must be positive: {width}x{height}")
        if width * height > MAX_CANVAS_PIXELS:
            raise ResourceExhaustedError(
                f"Canvas {width}x{height} exceeds limit of {MAX_CANVAS_PIXELS} pixels"
            )
        self.width = width
        self.height = height
        self.background = background
        try:
            self._image = Image.new(RGBA_MODE, (width, height), background.as_tuple())
        except MemoryError as e:
            raise ResourceExhaustedError(f"Could not allocate {width}x{height} canvas") from e
        self._placements: List[Placement] = []
        self._finalized = False

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def placements(self) -> Tuple[Placement, ...]:
        """Placements applied so far, in order."""
        return tuple(self._placements)

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    def place(self, source: Union[RasterImage, Placement], top: int = 0, left: int = 0) -> Placement:
        """
        Copy a raster onto the canvas at (top, left).

        Args:
            source: Raster to copy, or a ready-made Placement (its own
                offsets are then used)
            top: Y offset in canvas pixels
            left: X offset in canvas pixels

        Returns:
            The applied Placement.

        Raises:
            InvalidArgumentError: If the placement leaves canvas bounds,
                offsets are not integers, or the canvas is finalized.
        """
        if self._finalized:
            raise InvalidArgumentError("Cannot place onto a finalized canvas")

        placement = source if isinstance(source, Placement) else Placement(source, top, left)
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (placement.top, placement.left)):
            raise InvalidArgumentError(
                f"Placement offsets must be integers: top={placement.top!r}, left={placement.left!r}"
            )
        if (
            placement.left < 0
            or placement.top < 0
            or placement.right > self.width
            or placement.bottom > self.height
        ):
            raise InvalidArgumentError(
                f"Placement {placement.box} lies outside canvas {self.width}x{self.height}"
            )

        # RasterImage pixels are always RGBA, so paste copies them verbatim
        self._image.paste(placement.image.to_pil(), (placement.left, placement.top))
        self._placements.append(placement)
        return placement

    def finalize(self) -> RasterImage:
        """
        Freeze the canvas and return its pixels.

        Raises:
            InvalidArgumentError: If called twice.
        """
        if self._finalized:
            raise InvalidArgumentError("Canvas already finalized")
        self._finalized = True
        logger.debug(
            f"Finalized {self.width}x{self.height} canvas with {len(self._placements)} placements"
        )
        result = RasterImage._adopt(self._image)
        self._image = None
        return result


def new_canvas(width: int, height: int, background: Union[Color, str] = "#ffffff") -> Canvas:
    """
    Allocate a canvas filled with a background color.

    Raises:
        InvalidArgumentError: If dimensions are non-positive.
        ResourceExhaustedError: If the canvas is too large to allocate.
    """
    return Canvas(width, height, Color.parse(background))
