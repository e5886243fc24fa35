"""Booking database model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Enum, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from slotkeeper.database import Base
from slotkeeper.domain.booking_state import BookingStatus
from slotkeeper.domain.time_window import TimeWindow
from slotkeeper.models.types import UTCDateTime


class Booking(Base):
    """Booking model.

    Window and resource never change after creation; the only mutation is the
    one-way ``active -> canceled`` transition.
    """

    __tablename__ = "bookings"
    __table_args__ = (
        Index("idx_bookings_resource_time", "resource_id", "start_at", "end_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    resource_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("resources.id"), nullable=False
    )
    # Owner comes from the identity service; there is no local users table.
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    start_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    status: Mapped[BookingStatus] = mapped_column(
        Enum(
            BookingStatus,
            name="booking_status",
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=BookingStatus.ACTIVE,
        nullable=False,
        index=True,
    )
    description: Mapped[str | None] = mapped_column(String(500))

    # Timestamps (assigned from the service clock)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(self.start_at, self.end_at)

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id} resource={self.resource_id} "
            f"[{self.start_at.isoformat()}, {self.end_at.isoformat()}) {self.status.value}>"
        )
