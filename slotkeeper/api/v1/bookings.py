"""Booking endpoints."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from slotkeeper.api.deps import get_booking_service, get_current_principal
from slotkeeper.config import settings
from slotkeeper.core.permissions import Principal
from slotkeeper.domain.booking_state import BookingStatus
from slotkeeper.models.booking import Booking
from slotkeeper.schemas.booking import (
    AvailabilityResponse,
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    as_utc,
)
from slotkeeper.services.booking_query import DEFAULT_SORT, BookingFilter, BookingSort, PageRequest
from slotkeeper.services.booking_service import BookingService

router = APIRouter()


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    principal: Annotated[Principal, Depends(get_current_principal)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Create a new booking."""
    return await service.create_booking(booking_data, principal)


@router.get("/", response_model=BookingListResponse)
async def list_bookings(
    principal: Annotated[Principal, Depends(get_current_principal)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    resource_id: UUID | None = None,
    status_filter: BookingStatus | None = Query(default=None, alias="status"),
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    owner_id: UUID | None = None,
    sort: BookingSort = Query(default=DEFAULT_SORT),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
) -> BookingListResponse:
    """List bookings; non-admins only ever see their own."""
    filters = BookingFilter(
        resource_id=resource_id,
        status=status_filter,
        date_from=as_utc(date_from) if date_from else None,
        date_to=as_utc(date_to) if date_to else None,
        owner_id=owner_id,
    )
    result = await service.list_bookings(
        filters, PageRequest(page=page, page_size=page_size), principal, sort=sort
    )
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@router.get("/availability", response_model=AvailabilityResponse)
async def check_availability(
    principal: Annotated[Principal, Depends(get_current_principal)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    resource_id: UUID,
    start_at: datetime,
    end_at: datetime,
) -> AvailabilityResponse:
    """Check whether a time slot can be booked without creating a booking."""
    return await service.check_availability(resource_id, as_utc(start_at), as_utc(end_at))


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    principal: Annotated[Principal, Depends(get_current_principal)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Get a booking by ID (owner or admin)."""
    return await service.get_booking(booking_id, principal)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: UUID,
    principal: Annotated[Principal, Depends(get_current_principal)],
    service: Annotated[BookingService, Depends(get_booking_service)],
) -> Booking:
    """Cancel a booking (owner or admin, before it starts)."""
    return await service.cancel_booking(booking_id, principal)
