"""
Module: output.writer

Purpose:
    Persist a MergeResult as PNG files using the conventional names:
    slide-1.png ... for pages, grid-2x2-1.png / grid-3x3-1.png /
    merged-1.png ... for composites.

Key Functions:
    - output_filename(): Name for the n-th output of a kind
    - write_result(): Write pages and composites to a directory

Key Classes:
    - WrittenFiles: Paths that were written
    - OutputError: Raised when any file fails to write

Dependencies:
    - output.write_queue: Background PNG writes

Used By:
    - cli: After convert_and_merge
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from slide_mosaic.composition import RasterImage
from slide_mosaic.pipeline import MergeResult

from .write_queue import WriteQueue

logger = logging.getLogger(__name__)

DEFAULT_PAGE_PREFIX = "slide"


class OutputError(Exception):
    """Output files could not be written."""
    pass


@dataclass(frozen=True)
class WrittenFiles:
    """
    Paths written for a merge run.

    Attributes:
        pages: Page PNGs in document order
        merged: Composite PNGs in group order
    """

    pages: tuple[Path, ...]
    merged: tuple[Path, ...]

    @property
    def all_paths(self) -> tuple[Path, ...]:
        return self.pages + self.merged


def output_filename(prefix: str, index: int) -> str:
    """
    Filename for the index-th (0-based) output with the given prefix.

    Example:
        >>> output_filename("grid-2x2", 0)
        'grid-2x2-1.png'
    """
    return f"{prefix}-{index + 1}.png"


def _queue_all(
    queue: WriteQueue,
    images: Sequence[RasterImage],
    output_dir: Path,
    prefix: str,
) -> List[Path]:
    paths = []
    for index, image in enumerate(images):
        path = output_dir / output_filename(prefix, index)
        queue.queue_image_write(image, path)
        paths.append(path)
    return paths


def write_result(
    result: MergeResult,
    output_dir: Path,
    *,
    page_prefix: str = DEFAULT_PAGE_PREFIX,
    include_pages: bool = True,
    max_workers: int = 4,
) -> WrittenFiles:
    """
    Write pages and composites of a merge run as PNG files.

    Args:
        result: Output of convert_and_merge
        output_dir: Target directory (created if missing)
        page_prefix: Stem for page files ("slide" or "page")
        include_pages: Whether to write individual pages
        max_workers: Concurrent PNG writers

    Returns:
        WrittenFiles with every path written

    Raises:
        OutputError: If any file failed to write (after all writes finish)
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    with WriteQueue(max_workers=max_workers) as queue:
        pages = _queue_all(queue, result.pages, output_dir, page_prefix) if include_pages else []
        merged_prefix = result.mode.output_prefix
        merged = _queue_all(queue, result.merged, output_dir, merged_prefix) if merged_prefix else []
        report = queue.wait_all()

    if not report.ok:
        names = ", ".join(path.name for path, _ in report.failures)
        raise OutputError(
            f"Failed to write {len(report.failures)} file(s): {names}"
        ) from report.failures[0][1]

    logger.info(f"Wrote {report.completed} file(s) to {output_dir}")
    return WrittenFiles(pages=tuple(pages), merged=tuple(merged))
