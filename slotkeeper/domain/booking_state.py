"""Booking state machine."""

from enum import Enum

from slotkeeper.core.exceptions import BookingAlreadyCanceledError, InvalidBookingStatus


class BookingStatus(str, Enum):
    """Booking lifecycle states."""

    ACTIVE = "active"
    CANCELED = "canceled"


BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.ACTIVE: {BookingStatus.CANCELED},
    BookingStatus.CANCELED: set(),
}


def assert_booking_transition(current: BookingStatus, target: BookingStatus) -> None:
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target in allowed:
        return
    if current == BookingStatus.CANCELED:
        raise BookingAlreadyCanceledError()
    raise InvalidBookingStatus(
        f"Invalid booking transition: {current.value} → {target.value}"
    )
