"""Exceptions raised by seqd."""

from __future__ import annotations


class SeqdError(Exception):
    """Base class for all seqd errors."""


class AllocationError(SeqdError, MemoryError):
    """A buffer could not grow; it has been reset to an empty state."""


class ModeError(SeqdError, OSError):
    """Reading or changing the terminal configuration failed at the OS level."""
