"""Booking window policy.

Rules, evaluated in order (first failure wins):
- the window must end after it starts
- the window must start strictly after "now"
- the window must last at least the configured minimum (default 15 minutes)
- the window must last at most the configured maximum (default 8 hours)
"""

from datetime import datetime, timedelta

from slotkeeper.core.exceptions import (
    BookingTooLongError,
    BookingTooShortError,
    InvertedWindowError,
    NotInFutureError,
)
from slotkeeper.domain.time_window import TimeWindow

DEFAULT_MIN_DURATION = timedelta(minutes=15)
DEFAULT_MAX_DURATION = timedelta(hours=8)


def describe_duration(duration: timedelta) -> str:
    """Render a duration limit for error messages ("8 hours", "90 minutes")."""
    total_minutes = int(duration.total_seconds() // 60)
    if total_minutes and total_minutes % 60 == 0:
        hours = total_minutes // 60
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    return f"{total_minutes} minutes"


def validate_window(
    window: TimeWindow,
    now: datetime,
    min_duration: timedelta = DEFAULT_MIN_DURATION,
    max_duration: timedelta = DEFAULT_MAX_DURATION,
) -> None:
    """Check a requested window against the booking policy.

    Args:
        window: Requested booking window
        now: Current instant from the canonical clock
        min_duration: Shortest allowed booking
        max_duration: Longest allowed booking

    Raises:
        InvertedWindowError: start is not before end
        NotInFutureError: start is not strictly after now
        BookingTooShortError: duration below min_duration
        BookingTooLongError: duration above max_duration
    """
    if not window.start < window.end:
        raise InvertedWindowError()

    if not window.start > now:
        raise NotInFutureError()

    if window.duration < min_duration:
        raise BookingTooShortError(int(min_duration.total_seconds() // 60))

    if window.duration > max_duration:
        raise BookingTooLongError(describe_duration(max_duration))
