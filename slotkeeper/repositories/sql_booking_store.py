"""SQLAlchemy implementation of the booking store.

Creation runs the overlap query and the insert in a single transaction while
holding two locks keyed by the resource:

- an in-process ``asyncio.Lock`` (see ``ResourceLocks``), which serializes
  creators inside one worker on every backend;
- a ``SELECT ... FOR UPDATE`` on the resource row, which serializes creators
  across workers on PostgreSQL until the transaction commits.

Both are released only after commit, so a second creator always sees the first
one's row. Both waits are bounded by the store's lock timeout: the row lock
through PostgreSQL's ``lock_timeout``, and an expired wait is reported as a
conflict.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID

from sqlalchemy import Select, func, select, text, update
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from slotkeeper.core.exceptions import BookingConflictError, NotFoundError, StorageError
from slotkeeper.domain.booking_state import BookingStatus
from slotkeeper.domain.time_window import TimeWindow
from slotkeeper.models.booking import Booking
from slotkeeper.models.resource import Resource
from slotkeeper.repositories.booking_store import DEFAULT_LOCK_TIMEOUT_SECONDS, ResourceLocks
from slotkeeper.services.booking_query import DEFAULT_SORT, BookingCriteria, BookingSort

logger = logging.getLogger(__name__)

# PostgreSQL lock_not_available, raised when lock_timeout expires
LOCK_NOT_AVAILABLE = "55P03"


def active_overlap_query(resource_id: UUID, window: TimeWindow) -> Select[tuple[UUID]]:
    """Active bookings on the resource with ``start < window.end and end > window.start``."""
    return (
        select(Booking.id)
        .where(
            Booking.resource_id == resource_id,
            Booking.status == BookingStatus.ACTIVE,
            Booking.start_at < window.end,
            Booking.end_at > window.start,
        )
        .limit(1)
    )


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Re-raise database failures as an opaque StorageError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Booking store failure during {operation}: {e}")
        raise StorageError(operation) from e


def lock_timeout_statement(timeout_seconds: float) -> str:
    """``SET LOCAL`` bounding row-lock waits for the rest of the transaction."""
    return f"SET LOCAL lock_timeout = '{max(1, int(timeout_seconds * 1000))}ms'"


def _sqlstate(error: OperationalError) -> str | None:
    for candidate in (error.orig, getattr(error.orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return code
    return None


@contextmanager
def lock_wait_conflicts(resource_id: UUID) -> Iterator[None]:
    """Report an expired row-lock wait as a conflict instead of a storage failure."""
    try:
        yield
    except OperationalError as e:
        if _sqlstate(e) != LOCK_NOT_AVAILABLE:
            raise
        logger.warning(f"Timed out waiting for row lock on resource {resource_id}")
        raise BookingConflictError(
            detail="The resource is busy with another booking request, please try again"
        ) from e


class SqlBookingStore:
    """Booking store backed by the ``bookings`` table."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
    ) -> None:
        self._session_factory = session_factory
        self._locks = ResourceLocks(lock_timeout)

    async def has_active_overlap(self, resource_id: UUID, window: TimeWindow) -> bool:
        with storage_errors("overlap check"):
            async with self._session_factory() as session:
                result = await session.execute(active_overlap_query(resource_id, window))
                return result.first() is not None

    async def create_if_no_conflict(self, booking: Booking) -> Booking:
        async with self._locks.hold(booking.resource_id):
            with storage_errors("create booking"), lock_wait_conflicts(booking.resource_id):
                async with self._session_factory() as session, session.begin():
                    if session.bind.dialect.name == "postgresql":
                        await session.execute(text(lock_timeout_statement(self._locks.timeout)))
                    await self._lock_resource_row(session, booking.resource_id)

                    result = await session.execute(
                        active_overlap_query(booking.resource_id, booking.window)
                    )
                    if result.first() is not None:
                        raise BookingConflictError(str(booking.resource_id))

                    session.add(booking)
        return booking

    async def _lock_resource_row(self, session: AsyncSession, resource_id: UUID) -> None:
        """Lock the resource row for the rest of the transaction and re-check it is bookable."""
        result = await session.execute(
            select(Resource.id, Resource.is_active)
            .where(Resource.id == resource_id)
            .with_for_update()
        )
        row = result.one_or_none()
        if row is None or not row.is_active:
            raise NotFoundError("Resource", str(resource_id))

    async def find_by_id(self, booking_id: UUID) -> Booking | None:
        with storage_errors("load booking"):
            async with self._session_factory() as session:
                return await session.get(Booking, booking_id)

    async def save(self, booking: Booking, expected_status: BookingStatus) -> bool:
        with storage_errors("save booking"):
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    update(Booking)
                    .where(Booking.id == booking.id, Booking.status == expected_status)
                    .values(status=booking.status, updated_at=booking.updated_at)
                    .execution_options(synchronize_session=False)
                )
                return result.rowcount == 1

    async def query(
        self,
        criteria: BookingCriteria,
        offset: int = 0,
        limit: int = 20,
        sort: BookingSort = DEFAULT_SORT,
    ) -> list[Booking]:
        stmt = (
            select(Booking)
            .where(*criteria.to_clauses())
            .order_by(*sort.order_by())
            .offset(offset)
            .limit(limit)
        )
        with storage_errors("list bookings"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())

    async def count(self, criteria: BookingCriteria) -> int:
        stmt = select(func.count()).select_from(Booking).where(*criteria.to_clauses())
        with storage_errors("count bookings"):
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return result.scalar() or 0
