"""Conflict-safe booking store contract and in-memory reference implementation.

Creating a booking is the only operation that needs more than read-then-write:
a separate "is the slot free?" query followed by a separate insert lets two
concurrent requests for the same slot both pass the check. Every store
therefore performs the overlap check and the insert inside one per-resource
critical section. Critical sections for different resources are independent.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Protocol
from uuid import UUID

from slotkeeper.core.exceptions import BookingConflictError
from slotkeeper.domain.booking_state import BookingStatus
from slotkeeper.domain.time_window import TimeWindow, overlaps
from slotkeeper.models.booking import Booking
from slotkeeper.services.booking_query import DEFAULT_SORT, BookingCriteria, BookingSort

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT_SECONDS = 5.0


class BookingStore(Protocol):
    """Storage collaborator required by the booking service."""

    async def has_active_overlap(self, resource_id: UUID, window: TimeWindow) -> bool:
        """True iff an active booking on the resource overlaps the window."""
        ...

    async def create_if_no_conflict(self, booking: Booking) -> Booking:
        """Insert the booking unless it overlaps an active one.

        Raises:
            BookingConflictError: an active overlap exists (or the resource
                lock could not be acquired in time)
        """
        ...

    async def find_by_id(self, booking_id: UUID) -> Booking | None: ...

    async def save(self, booking: Booking, expected_status: BookingStatus) -> bool:
        """Persist status/updated_at if the stored status is still expected_status."""
        ...

    async def query(
        self,
        criteria: BookingCriteria,
        offset: int = 0,
        limit: int = 20,
        sort: BookingSort = DEFAULT_SORT,
    ) -> list[Booking]: ...

    async def count(self, criteria: BookingCriteria) -> int: ...


class ResourceLocks:
    """One asyncio lock per resource id, created on demand.

    Entries disappear once no coroutine holds or waits on the lock.
    """

    def __init__(self, timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS) -> None:
        self.timeout = timeout
        self._locks: weakref.WeakValueDictionary[UUID, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock_for(self, resource_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(resource_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[resource_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, resource_id: UUID) -> AsyncIterator[None]:
        """Hold the resource's lock, giving up after ``timeout`` seconds."""
        lock = self._lock_for(resource_id)
        try:
            await asyncio.wait_for(lock.acquire(), timeout=self.timeout)
        except TimeoutError:
            logger.warning(f"Timed out waiting for booking lock on resource {resource_id}")
            raise BookingConflictError(
                detail="The resource is busy with another booking request, please try again"
            )
        try:
            yield
        finally:
            lock.release()


_ROW_FIELDS = (
    "id",
    "resource_id",
    "owner_id",
    "start_at",
    "end_at",
    "status",
    "description",
    "created_at",
    "updated_at",
)


def _to_row(booking: Booking) -> dict[str, Any]:
    return {name: getattr(booking, name) for name in _ROW_FIELDS}


class InMemoryBookingStore:
    """Process-local store holding booking rows in a dict.

    Rows are copied in and out so callers never share state with the store,
    just as they would not share it with a database.
    """

    def __init__(self, lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS) -> None:
        self._rows: dict[UUID, dict[str, Any]] = {}
        self._locks = ResourceLocks(lock_timeout)

    def _active_overlaps(self, resource_id: UUID, window: TimeWindow) -> list[dict[str, Any]]:
        return [
            row
            for row in self._rows.values()
            if row["resource_id"] == resource_id
            and row["status"] == BookingStatus.ACTIVE
            and overlaps(TimeWindow(row["start_at"], row["end_at"]), window)
        ]

    async def has_active_overlap(self, resource_id: UUID, window: TimeWindow) -> bool:
        return bool(self._active_overlaps(resource_id, window))

    async def create_if_no_conflict(self, booking: Booking) -> Booking:
        async with self._locks.hold(booking.resource_id):
            # Yield once inside the critical section so racing creators interleave here.
            await asyncio.sleep(0)
            if self._active_overlaps(booking.resource_id, booking.window):
                raise BookingConflictError(str(booking.resource_id))
            self._rows[booking.id] = _to_row(booking)
        return Booking(**self._rows[booking.id])

    async def find_by_id(self, booking_id: UUID) -> Booking | None:
        row = self._rows.get(booking_id)
        return Booking(**row) if row else None

    async def save(self, booking: Booking, expected_status: BookingStatus) -> bool:
        row = self._rows.get(booking.id)
        if row is None or row["status"] != expected_status:
            return False
        row["status"] = booking.status
        row["updated_at"] = booking.updated_at
        return True

    async def query(
        self,
        criteria: BookingCriteria,
        offset: int = 0,
        limit: int = 20,
        sort: BookingSort = DEFAULT_SORT,
    ) -> list[Booking]:
        matched = [
            booking
            for booking in (Booking(**row) for row in self._rows.values())
            if criteria.matches(booking)
        ]
        matched.sort(key=sort.sort_key, reverse=sort.descending)
        return matched[offset : offset + limit]

    async def count(self, criteria: BookingCriteria) -> int:
        return sum(1 for row in self._rows.values() if criteria.matches(Booking(**row)))

    def active_bookings(self, resource_id: UUID) -> list[Booking]:
        """Snapshot of the active bookings on one resource."""
        return [
            Booking(**row)
            for row in self._rows.values()
            if row["resource_id"] == resource_id and row["status"] == BookingStatus.ACTIVE
        ]
