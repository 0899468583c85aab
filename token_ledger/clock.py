"""
clock.py - Logical time sources

Provides the timestamp half of the identity & time source: every message reads
the clock once and uses that value for all of its checks.

Classes:
- Clock: Protocol defining the time interface
- StaticClock: Fixed time, for tests and one-shot scripts
- ManualClock: Forward-only time advanced explicitly by the driver

Timestamps are integer logical milliseconds.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """
    Protocol for time sources.

    Implementations must return a non-decreasing integer timestamp.
    """

    def now(self) -> int:
        ...


class StaticClock:
    """Clock frozen at a single timestamp."""

    def __init__(self, timestamp: int = 0):
        self.timestamp = timestamp

    def now(self) -> int:
        return self.timestamp

    def __repr__(self):
        return f"StaticClock({self.timestamp})"


class ManualClock:
    """
    Clock advanced explicitly by its owner.

    Time can only move forward, never backward.
    """

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError(f"Clock cannot start before 0: {start}")
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, delta: int) -> int:
        """
        Move the clock forward by `delta` and return the new time.

        Raises:
            ValueError: If delta is negative
        """
        if delta < 0:
            raise ValueError(f"Cannot move time backwards by {delta}")
        self._now += delta
        return self._now

    def set(self, timestamp: int) -> None:
        """
        Jump to an absolute timestamp.

        Raises:
            ValueError: If timestamp is before the current time
        """
        if timestamp < self._now:
            raise ValueError(f"Cannot move time backwards: {timestamp} < {self._now}")
        self._now = timestamp

    def __repr__(self):
        return f"ManualClock({self._now})"
