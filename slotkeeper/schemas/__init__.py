"""Pydantic schemas for request/response validation."""

from slotkeeper.schemas.booking import (
    AvailabilityResponse,
    BookingCreate,
    BookingEvent,
    BookingEventType,
    BookingListResponse,
    BookingResponse,
)

__all__ = [
    "AvailabilityResponse",
    "BookingCreate",
    "BookingEvent",
    "BookingEventType",
    "BookingListResponse",
    "BookingResponse",
]
