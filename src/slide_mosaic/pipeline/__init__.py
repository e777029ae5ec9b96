"""
Module: pipeline

Purpose:
    Orchestration around the composition engine: render a document into
    pages, batch them and compose each group.

Key Functions:
    - convert_and_merge(): Main entry point
    - merge_images(): Compose already-rendered pages
    - renderer_for_path(): Choose a page renderer by suffix

Key Classes:
    - MergeConfig, MergeMode: Run configuration
    - MergeResult: Run output
    - PdfRenderer, OfficeRenderer: Page renderers

Used By:
    - slide_mosaic.cli
"""

from .config import MergeConfig, MergeMode
from .rendering import (
    PageRenderer,
    PdfRenderer,
    OfficeRenderer,
    RenderError,
    render_page,
    renderer_for_path,
)
from .timing import TimingLog, timed_phase
from .controller import (
    MergeCancelled,
    MergeResult,
    compose_group,
    merge_images,
    convert_and_merge,
)

__all__ = [
    # Config
    "MergeConfig",
    "MergeMode",
    # Rendering
    "PageRenderer",
    "PdfRenderer",
    "OfficeRenderer",
    "RenderError",
    "render_page",
    "renderer_for_path",
    # Timing
    "TimingLog",
    "timed_phase",
    # Controller
    "MergeCancelled",
    "MergeResult",
    "compose_group",
    "merge_images",
    "convert_and_merge",
]
