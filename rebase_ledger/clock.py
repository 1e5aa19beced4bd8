"""
clock.py - Externally Advanced Logical Clock

The ledger never reads wall-clock time. Tests and simulations drive this
clock explicitly; production embeddings can pass any object with a
current_time property instead.
"""

from __future__ import annotations

from .core import Timestamp


class LogicalClock:
    """Monotonic integer-second clock. Time can only move forward."""

    def __init__(self, initial_time: Timestamp = 0):
        if not isinstance(initial_time, int) or isinstance(initial_time, bool) or initial_time < 0:
            raise ValueError(f"initial_time must be a non-negative int, got {initial_time!r}")
        self._current_time = initial_time

    @property
    def current_time(self) -> Timestamp:
        return self._current_time

    def advance_time(self, new_time: Timestamp) -> None:
        """
        Move the clock to new_time.

        Raises:
            ValueError: If new_time is before the current time
        """
        if new_time < self._current_time:
            raise ValueError(
                f"Cannot move time backwards: {new_time} < {self._current_time}"
            )
        self._current_time = new_time

    def advance_by(self, seconds: int) -> Timestamp:
        """Advance by a non-negative number of seconds and return the new time."""
        if seconds < 0:
            raise ValueError(f"Cannot move time backwards by {seconds} seconds")
        self._current_time += seconds
        return self._current_time
