"""
Module: pipeline.timing

Purpose:
    Timing instrumentation for merge runs, to see where rendering and
    composition time goes.

Key Classes:
    - TimingLog: Collects run-level and per-group timings

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)

Used By:
    - pipeline.controller: merge_images, convert_and_merge
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Optional, Tuple


@dataclass
class TimingLog:
    """
    Timing metrics for a merge run.

    Safe to update from worker threads.

    Attributes:
        run_timings: phase_name -> duration_seconds
        group_timings: group_index -> {phase_name -> duration_seconds}

    Example:
        >>> log = TimingLog()
        >>> log.log_run("render", 1.52)
        >>> log.log_group(0, "compose", 0.08)
        >>> print(log.summary())
    """
    run_timings: Dict[str, float] = field(default_factory=dict)
    group_timings: Dict[int, Dict[str, float]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def log_run(self, phase: str, duration: float) -> None:
        """Log a run-level timing metric."""
        with self._lock:
            self.run_timings[phase] = duration

    def log_group(self, group_index: int, phase: str, duration: float) -> None:
        """Log a per-group timing metric."""
        with self._lock:
            self.group_timings.setdefault(group_index, {})[phase] = duration

    def get_slowest_groups(self, n: int = 3) -> List[Tuple[int, float]]:
        """The N slowest groups as (group_index, total_seconds)."""
        totals = [(idx, sum(phases.values())) for idx, phases in self.group_timings.items()]
        totals.sort(key=lambda x: x[1], reverse=True)
        return totals[:n]

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["", "=== Merge Timing Summary ==="]

        if self.run_timings:
            lines.append("Run:")
            for phase, duration in sorted(self.run_timings.items()):
                lines.append(f"  {phase:20s} {duration:.3f}s")

        slowest = self.get_slowest_groups(3)
        if slowest:
            lines.append("")
            lines.append(f"Groups composed: {len(self.group_timings)}")
            lines.append("Slowest groups:")
            for idx, total in slowest:
                lines.append(f"  group {idx + 1}: {total:.3f}s")

        lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Export timing data as dictionary."""
        return {
            "run_timings": dict(self.run_timings),
            "group_timings": {str(k): dict(v) for k, v in self.group_timings.items()},
        }


@contextmanager
def timed_phase(
    log: Optional[TimingLog],
    phase: str,
    group_index: Optional[int] = None,
) -> Generator[None, None, None]:
    """
    Context manager for timing a code phase.

    Args:
        log: TimingLog to record into (None disables timing)
        phase: Name of the phase being timed
        group_index: If provided, records as a group-level metric;
                    otherwise records as a run-level metric

    Example:
        >>> log = TimingLog()
        >>> with timed_phase(log, "render"):
        ...     pages = renderer.render(path, 2.0)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        if log is not None:
            elapsed = time.perf_counter() - start
            if group_index is not None:
                log.log_group(group_index, phase, elapsed)
            else:
                log.log_run(phase, elapsed)
