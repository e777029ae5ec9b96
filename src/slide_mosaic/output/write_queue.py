"""
Module: output.write_queue

Purpose:
    Encode and save rasters as PNG on worker threads. A run can produce
    dozens of large composites; encoding them one after another is the
    slowest part of writing a result.

Key Classes:
    - WriteQueue: Threaded PNG writer
    - WriteReport: Outcome of draining the queue

Dependencies:
    - concurrent.futures: Worker threads
    - PIL.Image: PNG encoding (via RasterImage.to_pil)

Used By:
    - output.writer: write_result
"""

from __future__ import annotations

import logging
import tempfile
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from slide_mosaic.composition import RasterImage

logger = logging.getLogger(__name__)

DEFAULT_COMPRESS_LEVEL = 6


@dataclass(frozen=True)
class PendingWrite:
    path: Path
    future: Future


@dataclass(frozen=True)
class WriteReport:
    """
    Result of WriteQueue.wait_all().

    Attributes:
        written: Paths saved successfully, in queue order
        failures: (path, exception) for each failed save
    """

    written: Tuple[Path, ...] = ()
    failures: Tuple[Tuple[Path, BaseException], ...] = field(default=())

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def completed(self) -> int:
        return len(self.written)


class WriteQueue:
    """
    PNG writer backed by a thread pool.

    Every queued raster is saved atomically: it is encoded into a
    temporary file next to the target and renamed over it, so readers
    never see a truncated PNG.

    Usage:
        with WriteQueue(max_workers=4) as queue:
            for raster, path in outputs:
                queue.queue_image_write(raster, path)
            report = queue.wait_all()
        if not report.ok:
            ...

    Attributes:
        max_workers: Maximum concurrent encoder threads.
    """

    def __init__(self, max_workers: int = 4):
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="png-writer")
        self._pending: List[PendingWrite] = []
        self._synchronous = False

    def queue_image_write(
        self,
        image: RasterImage,
        path: Path,
        compress_level: int = DEFAULT_COMPRESS_LEVEL,
    ) -> Optional[Future]:
        """
        Schedule a raster to be saved as PNG at path.

        Args:
            image: Raster to encode.
            path: Target file; parent directories are created.
            compress_level: zlib level, 1 (fast) to 9 (small).

        Returns:
            The Future of the write, or None in synchronous mode (the
            file is already written and errors propagate directly).
        """
        path = Path(path)
        if self._synchronous:
            _write_image_sync(image, path, compress_level)
            return None

        future = self._executor.submit(_write_image_sync, image, path, compress_level)
        self._pending.append(PendingWrite(path, future))
        return future

    def wait_all(self, timeout: Optional[float] = None) -> WriteReport:
        """
        Block until every queued write has finished.

        Failed writes are logged and collected rather than raised, so one
        bad file does not hide the outcome of the others.

        Args:
            timeout: Max seconds to wait per write (None = indefinite).
        """
        written: List[Path] = []
        failures: List[Tuple[Path, BaseException]] = []
        for pending in self._pending:
            try:
                pending.future.result(timeout=timeout)
            except Exception as e:
                logger.error(f"Write failed for {pending.path}: {e}")
                failures.append((pending.path, e))
            else:
                written.append(pending.path)
        self._pending.clear()
        return WriteReport(written=tuple(written), failures=tuple(failures))

    def shutdown(self) -> None:
        """Drain outstanding writes and stop the worker threads."""
        self.wait_all()
        self._executor.shutdown(wait=True)

    def disable(self) -> None:
        """Write on the calling thread from now on."""
        self._synchronous = True

    def __enter__(self) -> "WriteQueue":
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()


def _write_image_sync(
    image: RasterImage,
    path: Path,
    compress_level: int = DEFAULT_COMPRESS_LEVEL,
) -> None:
    """Encode a raster to a sibling temp file, then rename it into place."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="wb",
        prefix=f".{path.stem}-",
        suffix=".png.tmp",
        dir=path.parent,
        delete=False,
    ) as f:
        temp_path = Path(f.name)
        try:
            image.to_pil().save(f, format="PNG", compress_level=compress_level)
        except BaseException:
            f.close()
            temp_path.unlink(missing_ok=True)
            raise

    temp_path.replace(path)
    logger.debug(f"Wrote {path.name} ({image.width}x{image.height})")
