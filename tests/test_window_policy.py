import warnings
from datetime import timedelta

import pytest

from slotkeeper.core.exceptions import (
    BookingTooLongError,
    BookingTooShortError,
    InvertedWindowError,
    NotInFutureError,
    ValidationError,
)
from slotkeeper.domain.time_window import TimeWindow
from slotkeeper.domain.window_policy import describe_duration, validate_window

from tests.conftest import NOW, tomorrow


def test_valid_window_passes():
    validate_window(TimeWindow(tomorrow(10), tomorrow(11)), NOW)


def test_inverted_window():
    with pytest.raises(InvertedWindowError) as exc_info:
        validate_window(TimeWindow(tomorrow(11), tomorrow(10)), NOW)
    assert exc_info.value.detail == "Start time must be before end time"


def test_zero_length_window_is_inverted():
    with pytest.raises(InvertedWindowError):
        validate_window(TimeWindow(tomorrow(10), tomorrow(10)), NOW)


def test_past_window():
    window = TimeWindow(NOW - timedelta(hours=1), NOW)
    with pytest.raises(NotInFutureError) as exc_info:
        validate_window(window, NOW)
    assert exc_info.value.detail == "Booking must be in the future"


def test_window_starting_now_is_not_in_future():
    with pytest.raises(NotInFutureError):
        validate_window(TimeWindow(NOW, NOW + timedelta(hours=1)), NOW)


def test_inverted_check_runs_before_future_check():
    window = TimeWindow(NOW - timedelta(hours=1), NOW - timedelta(hours=2))
    with pytest.raises(InvertedWindowError):
        validate_window(window, NOW)


def test_too_short_mentions_configured_minutes():
    window = TimeWindow(tomorrow(10), tomorrow(10, 10))
    with pytest.raises(BookingTooShortError) as exc_info:
        validate_window(window, NOW)
    assert exc_info.value.detail == "Booking duration must be at least 15 minutes"


def test_too_short_uses_custom_minimum():
    window = TimeWindow(tomorrow(10), tomorrow(10, 20))
    with pytest.raises(BookingTooShortError) as exc_info:
        validate_window(window, NOW, min_duration=timedelta(minutes=30))
    assert "30 minutes" in exc_info.value.detail


def test_too_long():
    window = TimeWindow(tomorrow(8), tomorrow(16, 1))
    with pytest.raises(BookingTooLongError) as exc_info:
        validate_window(window, NOW)
    assert exc_info.value.detail == "Booking duration cannot exceed 8 hours"


def test_limits_are_inclusive():
    validate_window(TimeWindow(tomorrow(10), tomorrow(10, 15)), NOW)
    validate_window(TimeWindow(tomorrow(8), tomorrow(16)), NOW)


def test_window_errors_are_validation_errors():
    with pytest.raises(ValidationError) as exc_info:
        validate_window(TimeWindow(tomorrow(10), tomorrow(10, 5)), NOW)
    assert exc_info.value.status_code == 422


@pytest.mark.parametrize(
    "duration, text",
    [
        (timedelta(hours=8), "8 hours"),
        (timedelta(hours=1), "1 hour"),
        (timedelta(minutes=90), "90 minutes"),
    ],
)
def test_describe_duration(duration, text):
    assert describe_duration(duration) == text


def test_validation_status_raises_no_deprecation_warning():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert ValidationError().status_code == 422
