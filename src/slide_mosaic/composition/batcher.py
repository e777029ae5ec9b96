"""
Module: composition.batcher

Purpose:
    Partition an ordered image sequence into contiguous groups, each of
    which becomes one composite.

Key Functions:
    - partition(): Fixed-size, order-preserving chunks

Used By:
    - pipeline.controller: Groups pages before composing
"""

from __future__ import annotations

from typing import List, Sequence, Tuple, TypeVar

from .errors import InvalidArgumentError

T = TypeVar("T")


def partition(images: Sequence[T], group_size: int) -> List[Tuple[T, ...]]:
    """
    Split images into contiguous groups of group_size.

    Every group holds exactly group_size items except the last, which
    holds between 1 and group_size. Empty input gives no groups.

    Args:
        images: Ordered items (usually RasterImages)
        group_size: Items per group (>= 1)

    Returns:
        ceil(len(images) / group_size) tuples in input order.

    Raises:
        InvalidArgumentError: If group_size is not a positive integer.

    Example:
        >>> partition([1, 2, 3, 4, 5], 2)
        [(1, 2), (3, 4), (5,)]
        >>> partition([], 3)
        []
    """
    if not isinstance(group_size, int) or isinstance(group_size, bool) or group_size < 1:
        raise InvalidArgumentError(f"group_size must be a positive integer: {group_size!r}")

    items = list(images)
    return [tuple(items[i : i + group_size]) for i in range(0, len(items), group_size)]
