"""Time window value object and the overlap rule.

Windows are half-open: ``[start, end)``. Two windows conflict only when they
share at least one instant, so a window that ends exactly when another begins
does not conflict with it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class TimeWindow:
    """A ``[start, end)`` interval of UTC instants."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: TimeWindow) -> bool:
        return overlaps(self, other)

    def has_started(self, instant: datetime) -> bool:
        """True once ``instant`` is at or past the start."""
        return self.start <= instant


def overlaps(a: TimeWindow, b: TimeWindow) -> bool:
    """Return True if the two windows share at least one instant."""
    return a.start < b.end and a.end > b.start
