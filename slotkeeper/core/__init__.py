"""Core utilities and security modules."""

from slotkeeper.core.clock import Clock, SystemClock, system_clock
from slotkeeper.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    BookingAlreadyCanceledError,
    BookingAlreadyStartedError,
    BookingConflictError,
    BookingTooLongError,
    BookingTooShortError,
    InvalidBookingStatus,
    InvertedWindowError,
    NotFoundError,
    NotInFutureError,
    StorageError,
    ValidationError,
)
from slotkeeper.core.permissions import Principal, UserRole

__all__ = [
    "Clock",
    "SystemClock",
    "system_clock",
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "BookingAlreadyCanceledError",
    "BookingAlreadyStartedError",
    "BookingConflictError",
    "BookingTooLongError",
    "BookingTooShortError",
    "InvalidBookingStatus",
    "InvertedWindowError",
    "NotFoundError",
    "NotInFutureError",
    "StorageError",
    "ValidationError",
    "Principal",
    "UserRole",
]
