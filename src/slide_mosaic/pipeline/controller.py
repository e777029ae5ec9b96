"""
Module: pipeline.controller

Purpose:
    Orchestrate a merge run.
    Render → Partition → Compose (fan-out per group) → Join

Key Functions:
    - compose_group(): Compose one group with the mode's composer
    - merge_images(): Batch and compose already-rendered pages
    - convert_and_merge(): Render a document, then merge_images

Key Classes:
    - MergeResult: Pages, composites and timings of a run
    - MergeCancelled: Raised when the cancel token is set between groups

Dependencies:
    - concurrent.futures: Worker pool for independent groups
    - composition: Batcher and composers
    - pipeline.rendering: Injected PageRenderer

Used By:
    - cli: Command line entry point
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from slide_mosaic.composition import (
    InvalidArgumentError,
    RasterImage,
    compose_grid,
    compose_strip,
    partition,
)

from .config import MergeConfig, MergeMode
from .rendering import PageRenderer, RenderError
from .timing import TimingLog, timed_phase

logger = logging.getLogger(__name__)


class MergeCancelled(Exception):
    """Merge run stopped by its cancel token."""
    pass


@dataclass(frozen=True)
class MergeResult:
    """
    Complete merge result (immutable).

    Attributes:
        mode: Mode the run used
        pages: Individual rendered pages, in document order
        merged: One composite per group, in group order
        timing: Timing metrics for the run

    Example:
        >>> result = convert_and_merge(Path("deck.pdf"), PdfRenderer(), config)
        >>> print(f"{result.page_count} pages -> {result.merged_count} images")
    """
    mode: MergeMode
    pages: tuple[RasterImage, ...]
    merged: tuple[RasterImage, ...]
    timing: TimingLog = field(default_factory=TimingLog, compare=False)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def merged_count(self) -> int:
        return len(self.merged)


def compose_group(group: Sequence[RasterImage], config: MergeConfig) -> RasterImage:
    """
    Compose one group with the composer matching config.mode.

    Raises:
        InvalidArgumentError: For SINGLE mode (nothing to compose) or
            an invalid group.
    """
    if config.mode.is_grid:
        return compose_grid(group, config.grid_spec())
    if config.mode is MergeMode.LONG:
        return compose_strip(group, config.strip_spec())
    raise InvalidArgumentError(f"Mode {config.mode.value} does not compose groups")


def merge_images(
    images: Sequence[RasterImage],
    config: MergeConfig,
    *,
    cancel_event: Optional[threading.Event] = None,
    timing: Optional[TimingLog] = None,
) -> List[RasterImage]:
    """
    Partition images and compose every group.

    Groups are independent, so they are composed on a thread pool of
    config.max_workers; results come back in group order. The cancel
    token is checked before each group starts, never while a canvas is
    being written.

    Args:
        images: Rendered pages in order
        config: Merge configuration
        cancel_event: Optional token; when set, pending groups are skipped
        timing: Optional TimingLog receiving per-group durations

    Returns:
        One composite per group (empty for SINGLE mode, a LONG group
        size of 1, or no images).

    Raises:
        MergeCancelled: If cancel_event was set before all groups ran.
        CompositionError: Any composer failure, unchanged.
    """
    if config.mode is MergeMode.SINGLE:
        logger.info("Single mode: skipping composition")
        return []
    if config.mode is MergeMode.LONG and config.group_size == 1:
        logger.info("Group size 1: nothing to merge, keeping pages only")
        return []

    groups = partition(images, config.effective_group_size())
    if not groups:
        return []

    logger.info(
        f"Composing {len(images)} images into {len(groups)} {config.mode.value} "
        f"image(s) ({config.effective_group_size()} per group)"
    )

    def run(index: int, group: Sequence[RasterImage]) -> RasterImage:
        if cancel_event is not None and cancel_event.is_set():
            raise MergeCancelled(f"Cancelled before group {index + 1}/{len(groups)}")
        with timed_phase(timing, "compose", group_index=index):
            composite = compose_group(group, config)
        logger.debug(f"Group {index + 1}/{len(groups)}: {len(group)} images -> {composite.width}x{composite.height}")
        return composite

    workers = min(config.max_workers, len(groups))
    if workers == 1:
        return [run(index, group) for index, group in enumerate(groups)]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(run, index, group) for index, group in enumerate(groups)]
        try:
            return [future.result() for future in futures]
        except BaseException:
            for future in futures:
                future.cancel()
            raise


def convert_and_merge(
    document: Path,
    renderer: PageRenderer,
    config: MergeConfig,
    *,
    cancel_event: Optional[threading.Event] = None,
) -> MergeResult:
    """
    Render a document and merge its pages.

    Pipeline:
    1. Render every page through the injected renderer
    2. Partition pages by the mode's group size
    3. Compose each group (concurrently)

    Args:
        document: Path to a PDF or office document
        renderer: Collaborator producing page rasters
        config: Merge configuration

    Returns:
        MergeResult with pages, composites and timings

    Raises:
        RenderError: If the document yields no pages or cannot be rendered
        MergeCancelled: If cancel_event is set between groups
        CompositionError: If any group fails to compose
    """
    timing = TimingLog()
    logger.info(f"Starting {config.mode.value} merge for {document}")

    with timed_phase(timing, "render"):
        pages = renderer.render(Path(document), config.scale)
    if not pages:
        raise RenderError(f"No pages rendered from {document}")
    logger.info(f"Rendered {len(pages)} pages")

    with timed_phase(timing, "merge"):
        merged = merge_images(pages, config, cancel_event=cancel_event, timing=timing)

    logger.info(f"Produced {len(merged)} merged image(s)")
    logger.debug(timing.summary())

    return MergeResult(
        mode=config.mode,
        pages=tuple(pages),
        merged=tuple(merged),
        timing=timing,
    )
