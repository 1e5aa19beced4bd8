"""
rate_policy.py - Global Interest Rate Ceiling

The global rate is the rate new deposits snapshot. It may only ever go down:
every update must be strictly below the current value, and anything else is
rejected outright rather than clamped.

Holders are unaffected by later changes once their rate has been captured.
"""

from __future__ import annotations
from typing import List, Optional

from .core import (
    Rate, Timestamp,
    RateChanged, EventListener,
    RateIncreaseRejected,
)


class GlobalRatePolicy:
    """
    Process-wide rate configuration with a single guarded mutation entry point.

    Authorization is checked by the caller (the token facade) before set_rate()
    is reached. This class only enforces monotonic non-increase.

    Example:
        policy = GlobalRatePolicy(5 * 10**10)
        policy.set_rate(4 * 10**10)       # ok
        policy.set_rate(6 * 10**10)       # raises RateIncreaseRejected
    """

    def __init__(self, initial_rate: Rate, listener: Optional[EventListener] = None):
        if not isinstance(initial_rate, int) or isinstance(initial_rate, bool):
            raise ValueError(f"initial_rate must be int, got {type(initial_rate).__name__}")
        if initial_rate < 0:
            raise ValueError(f"initial_rate cannot be negative, got {initial_rate}")
        self._current_rate: Rate = initial_rate
        self._listener = listener
        # Every value the rate has held, oldest first
        self.history: List[Rate] = [initial_rate]

    def get_rate(self) -> Rate:
        """Return the current global rate."""
        return self._current_rate

    def check_rate(self, new_rate: Rate) -> None:
        """
        Validate a proposed rate without applying it.

        Raises:
            ValueError: If new_rate is not a non-negative int
            RateIncreaseRejected: If new_rate >= current rate
        """
        if not isinstance(new_rate, int) or isinstance(new_rate, bool):
            raise ValueError(f"new_rate must be int, got {type(new_rate).__name__}")
        if new_rate < 0:
            raise ValueError(f"new_rate cannot be negative, got {new_rate}")
        if new_rate >= self._current_rate:
            raise RateIncreaseRejected(self._current_rate, new_rate)

    def set_rate(self, new_rate: Rate, timestamp: Optional[Timestamp] = None) -> RateChanged:
        """
        Lower the global rate.

        Args:
            new_rate: Proposed rate, strictly below the current one
            timestamp: Optional time recorded on the emitted event

        Returns:
            The RateChanged event that was emitted

        Raises:
            RateIncreaseRejected: If new_rate >= current rate (state unchanged)
        """
        self.check_rate(new_rate)
        self._current_rate = new_rate
        self.history.append(new_rate)
        event = RateChanged(new_rate=new_rate, timestamp=timestamp)
        if self._listener is not None:
            self._listener(event)
        return event
