"""
Module: composition

Purpose:
    Image composition engine. Sizes destination canvases, places source
    images into them and batches image sequences into groups.

Key Functions:
    - partition(): Split images into fixed-size groups
    - compose_grid(): Grid mosaic of a group
    - compose_strip(): Vertical long image of a group
    - new_canvas(): Allocate a background-filled canvas

Key Classes:
    - RasterImage, Color, Placement: Value types
    - Canvas: Placement target
    - GridLayoutSpec, StripLayoutSpec, AspectRatio: Validated settings
    - GridPlan, StripPlan: Pure layout geometry

Dependencies:
    - PIL: Pixel buffers and resampling
    - numpy: Array access to pixels

Used By:
    - slide_mosaic.pipeline: Merge controller
"""

from .errors import (
    CompositionError,
    InvalidArgumentError,
    ResourceExhaustedError,
    CodecFailureError,
)
from .models import Color, RasterImage, Placement, WHITE
from .config import AspectRatio, GridLayoutSpec, StripLayoutSpec
from .canvas import Canvas, new_canvas
from .grid import GridPlan, plan_grid, contain_resize, compose_grid
from .strip import StripPlan, plan_strip, grow_to_ratio, compose_strip
from .batcher import partition

__all__ = [
    # Errors
    "CompositionError",
    "InvalidArgumentError",
    "ResourceExhaustedError",
    "CodecFailureError",
    # Models
    "Color",
    "RasterImage",
    "Placement",
    "WHITE",
    # Config
    "AspectRatio",
    "GridLayoutSpec",
    "StripLayoutSpec",
    # Canvas
    "Canvas",
    "new_canvas",
    # Composers
    "GridPlan",
    "plan_grid",
    "contain_resize",
    "compose_grid",
    "StripPlan",
    "plan_strip",
    "grow_to_ratio",
    "compose_strip",
    # Batching
    "partition",
]
