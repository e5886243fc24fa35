"""Booking-related Pydantic schemas."""

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from slotkeeper.domain.booking_state import BookingStatus


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are read as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class BookingCreate(BaseModel):
    """Schema for creating a booking.

    Window ordering and duration are checked by the booking service so that
    each rule reports its own error.
    """

    resource_id: UUID
    start_at: datetime
    end_at: datetime
    description: str | None = Field(None, max_length=500)

    @field_validator("start_at", "end_at")
    @classmethod
    def normalize_timezone(cls, v: datetime) -> datetime:
        return as_utc(v)


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    resource_id: UUID
    owner_id: UUID
    start_at: datetime
    end_at: datetime
    status: BookingStatus
    description: str | None
    created_at: datetime
    updated_at: datetime


class BookingListResponse(BaseModel):
    """Schema for paginated booking list."""

    bookings: list[BookingResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class AvailabilityResponse(BaseModel):
    """Schema for a slot availability check."""

    available: bool
    unavailable_reason: str | None = None


class BookingEventType(str, Enum):
    CREATED = "booking.created"
    CANCELED = "booking.canceled"


class BookingEvent(BaseModel):
    """Notification emitted after a booking is created or canceled."""

    event_id: UUID = Field(default_factory=uuid4)
    event_type: BookingEventType
    booking_id: UUID
    resource_id: UUID
    owner_id: UUID
    start_at: datetime
    end_at: datetime
    occurred_at: datetime
