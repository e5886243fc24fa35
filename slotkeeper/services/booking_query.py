"""Booking listing filters.

User-supplied filters are optional and combined with AND. Visibility scoping is
applied before them: a non-admin principal is always pinned to their own
bookings, whatever owner filter they pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement

from slotkeeper.core.permissions import Principal, visible_owner_scope
from slotkeeper.domain.booking_state import BookingStatus
from slotkeeper.models.booking import Booking


@dataclass(frozen=True)
class BookingFilter:
    """Optional filters supplied by the caller."""

    resource_id: UUID | None = None
    status: BookingStatus | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    owner_id: UUID | None = None


@dataclass(frozen=True)
class BookingCriteria:
    """Conjunction of equality/range constraints on bookings.

    The same criteria drive the SQL store (``to_clauses``) and the in-memory
    store (``matches``).
    """

    resource_id: UUID | None = None
    status: BookingStatus | None = None
    start_from: datetime | None = None
    end_to: datetime | None = None
    owner_id: UUID | None = None

    def matches(self, booking: Booking) -> bool:
        if self.resource_id is not None and booking.resource_id != self.resource_id:
            return False
        if self.status is not None and booking.status != self.status:
            return False
        if self.start_from is not None and booking.start_at < self.start_from:
            return False
        if self.end_to is not None and booking.end_at > self.end_to:
            return False
        if self.owner_id is not None and booking.owner_id != self.owner_id:
            return False
        return True

    def to_clauses(self) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = []
        if self.resource_id is not None:
            clauses.append(Booking.resource_id == self.resource_id)
        if self.status is not None:
            clauses.append(Booking.status == self.status)
        if self.start_from is not None:
            clauses.append(Booking.start_at >= self.start_from)
        if self.end_to is not None:
            clauses.append(Booking.end_at <= self.end_to)
        if self.owner_id is not None:
            clauses.append(Booking.owner_id == self.owner_id)
        return clauses


def compose_criteria(filters: BookingFilter, principal: Principal) -> BookingCriteria:
    """Apply visibility scoping, then the caller's filters."""
    criteria = BookingCriteria(
        resource_id=filters.resource_id,
        status=filters.status,
        start_from=filters.date_from,
        end_to=filters.date_to,
        owner_id=filters.owner_id,
    )
    scope = visible_owner_scope(principal)
    if scope is not None:
        criteria = replace(criteria, owner_id=scope)
    return criteria


class BookingSort(str, Enum):
    """Supported listing orders; a leading "-" means descending."""

    START_DESC = "-start_at"
    START_ASC = "start_at"
    CREATED_DESC = "-created_at"
    CREATED_ASC = "created_at"

    @property
    def column(self) -> str:
        return self.value.lstrip("-")

    @property
    def descending(self) -> bool:
        return self.value.startswith("-")

    def sort_key(self, booking: Booking) -> tuple[Any, ...]:
        return (getattr(booking, self.column), booking.id)

    def order_by(self) -> list[Any]:
        column = getattr(Booking, self.column)
        if self.descending:
            return [column.desc(), Booking.id.desc()]
        return [column.asc(), Booking.id.asc()]


DEFAULT_SORT = BookingSort.START_DESC


@dataclass(frozen=True)
class PageRequest:
    """1-based page number and page size."""

    page: int = 1
    page_size: int = 20

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be at least 1")
        if self.page_size < 1:
            raise ValueError("page_size must be at least 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


@dataclass
class BookingPage:
    """One page of a booking listing."""

    items: list[Booking] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20

    @property
    def total_pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size
