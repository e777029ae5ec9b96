"""
Module: composition.errors

Purpose:
    Exception hierarchy for the composition engine. Every failure raised
    by the batcher, canvas or composers derives from CompositionError so
    callers can catch the whole family at once.

Key Classes:
    - CompositionError: Base class
    - InvalidArgumentError: Bad input (empty group, bad sizes, bad ratio)
    - ResourceExhaustedError: Canvas allocation failed or too large
    - CodecFailureError: Source image could not be converted or resized

Used By:
    - composition.*: All engine modules
    - pipeline.controller: Propagates these unchanged
"""

from __future__ import annotations


class CompositionError(Exception):
    """Base error for the composition engine."""
    pass


class InvalidArgumentError(CompositionError, ValueError):
    """Input rejected before any pixels are written."""
    pass


class ResourceExhaustedError(CompositionError, MemoryError):
    """Canvas could not be allocated."""
    pass


class CodecFailureError(CompositionError):
    """Source image buffer could not be decoded or resized."""
    pass
