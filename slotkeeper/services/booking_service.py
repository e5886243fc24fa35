"""Booking lifecycle service.

Entry points for creating, reading, canceling and listing bookings. Every
operation receives the calling ``Principal`` explicitly; access rules live in
``slotkeeper.core.permissions``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from uuid import UUID

from slotkeeper.config import Settings
from slotkeeper.core.clock import Clock, system_clock
from slotkeeper.core.exceptions import (
    BookingAlreadyCanceledError,
    BookingAlreadyStartedError,
    BookingConflictError,
    NotFoundError,
    ValidationError,
)
from slotkeeper.core.permissions import (
    Permission,
    Principal,
    require_cancel_access,
    require_permission,
    require_view_access,
)
from slotkeeper.domain.booking_state import BookingStatus, assert_booking_transition
from slotkeeper.domain.time_window import TimeWindow
from slotkeeper.domain.window_policy import (
    DEFAULT_MAX_DURATION,
    DEFAULT_MIN_DURATION,
    validate_window,
)
from slotkeeper.models.booking import Booking
from slotkeeper.repositories.booking_store import BookingStore
from slotkeeper.repositories.resource_catalog import ResourceCatalog
from slotkeeper.schemas.booking import AvailabilityResponse, BookingCreate, BookingEvent, BookingEventType
from slotkeeper.services.booking_query import (
    DEFAULT_SORT,
    BookingFilter,
    BookingPage,
    BookingSort,
    PageRequest,
    compose_criteria,
)
from slotkeeper.services.event_publisher import EventPublisher, NullEventPublisher, publish_safely

logger = logging.getLogger(__name__)


class BookingService:
    """Service enforcing booking rules on top of a conflict-safe store."""

    def __init__(
        self,
        store: BookingStore,
        catalog: ResourceCatalog,
        clock: Clock = system_clock,
        publisher: EventPublisher | None = None,
        min_duration: timedelta = DEFAULT_MIN_DURATION,
        max_duration: timedelta = DEFAULT_MAX_DURATION,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.clock = clock
        self.publisher = publisher or NullEventPublisher()
        self.min_duration = min_duration
        self.max_duration = max_duration

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: BookingStore,
        catalog: ResourceCatalog,
        publisher: EventPublisher | None = None,
        clock: Clock = system_clock,
    ) -> BookingService:
        return cls(
            store=store,
            catalog=catalog,
            clock=clock,
            publisher=publisher,
            min_duration=settings.min_booking_duration,
            max_duration=settings.max_booking_duration,
        )

    async def create_booking(self, request: BookingCreate, principal: Principal) -> Booking:
        """Create an active booking owned by the principal.

        Raises:
            ValidationError: the window breaks a booking rule
            NotFoundError: the resource is missing or inactive
            AuthorizationError: the principal's role may not create bookings
            BookingConflictError: the window overlaps an active booking
        """
        require_permission(principal, Permission.CREATE_BOOKING)

        now = self.clock.now()
        window = TimeWindow(request.start_at, request.end_at)
        validate_window(window, now, self.min_duration, self.max_duration)

        resource = await self.catalog.get_active_resource(request.resource_id)

        booking = Booking(
            id=uuid.uuid4(),
            resource_id=resource.id,
            owner_id=principal.id,
            start_at=window.start,
            end_at=window.end,
            status=BookingStatus.ACTIVE,
            description=request.description,
            created_at=now,
            updated_at=now,
        )
        try:
            booking = await self.store.create_if_no_conflict(booking)
        except BookingConflictError:
            logger.info(
                f"Booking conflict on resource {resource.id} for "
                f"[{window.start.isoformat()}, {window.end.isoformat()}) by {principal.id}"
            )
            raise

        logger.info(f"Created booking {booking.id} on resource {resource.id} for {principal.id}")
        await publish_safely(self.publisher, self._event(BookingEventType.CREATED, booking))
        return booking

    async def get_booking(self, booking_id: UUID, principal: Principal) -> Booking:
        """Return a booking visible to the principal.

        A booking owned by someone else raises AuthorizationError rather than
        NotFoundError.
        """
        booking = await self._load(booking_id)
        require_view_access(principal, booking)
        return booking

    async def cancel_booking(self, booking_id: UUID, principal: Principal) -> Booking:
        """Cancel a booking that has not started yet.

        Raises:
            NotFoundError: no such booking
            AuthorizationError: principal is neither owner nor admin
            BookingAlreadyCanceledError: booking was already canceled
            BookingAlreadyStartedError: booking start is not in the future
        """
        booking = await self._load(booking_id)
        require_cancel_access(principal, booking)

        previous_status = booking.status
        assert_booking_transition(previous_status, BookingStatus.CANCELED)

        now = self.clock.now()
        if booking.window.has_started(now):
            raise BookingAlreadyStartedError()

        booking.status = BookingStatus.CANCELED
        booking.updated_at = now
        if not await self.store.save(booking, expected_status=previous_status):
            # Another request canceled it between our read and write.
            raise BookingAlreadyCanceledError()

        logger.info(f"Canceled booking {booking.id} by {principal.id}")
        await publish_safely(self.publisher, self._event(BookingEventType.CANCELED, booking))
        return booking

    async def list_bookings(
        self,
        filters: BookingFilter,
        page: PageRequest,
        principal: Principal,
        sort: BookingSort = DEFAULT_SORT,
    ) -> BookingPage:
        """List bookings visible to the principal, filtered and paginated."""
        criteria = compose_criteria(filters, principal)
        total = await self.store.count(criteria)
        items = await self.store.query(criteria, offset=page.offset, limit=page.limit, sort=sort)
        return BookingPage(items=items, total=total, page=page.page, page_size=page.page_size)

    async def check_availability(
        self, resource_id: UUID, start_at: datetime, end_at: datetime
    ) -> AvailabilityResponse:
        """Report whether a window could be booked right now, without booking it."""
        window = TimeWindow(start_at, end_at)
        try:
            validate_window(window, self.clock.now(), self.min_duration, self.max_duration)
            await self.catalog.get_active_resource(resource_id)
        except (ValidationError, NotFoundError) as e:
            return AvailabilityResponse(available=False, unavailable_reason=e.detail)

        if await self.store.has_active_overlap(resource_id, window):
            return AvailabilityResponse(
                available=False, unavailable_reason="Selected time slot is already booked"
            )
        return AvailabilityResponse(available=True)

    async def _load(self, booking_id: UUID) -> Booking:
        booking = await self.store.find_by_id(booking_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    def _event(self, event_type: BookingEventType, booking: Booking) -> BookingEvent:
        return BookingEvent(
            event_type=event_type,
            booking_id=booking.id,
            resource_id=booking.resource_id,
            owner_id=booking.owner_id,
            start_at=booking.start_at,
            end_at=booking.end_at,
            occurred_at=self.clock.now(),
        )
