"""Shared fixtures for the booking tests."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from slotkeeper.core.permissions import Principal, UserRole
from slotkeeper.models.resource import Resource
from slotkeeper.repositories.booking_store import InMemoryBookingStore
from slotkeeper.repositories.resource_catalog import InMemoryResourceCatalog
from slotkeeper.schemas.booking import BookingCreate, BookingEvent
from slotkeeper.services.booking_service import BookingService

NOW = datetime(2026, 3, 2, 8, 0, tzinfo=UTC)


def tomorrow(hour: int, minute: int = 0) -> datetime:
    """An instant on the day after NOW."""
    return datetime(2026, 3, 3, hour, minute, tzinfo=UTC)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = NOW) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta

    def set(self, instant: datetime) -> None:
        self.current = instant


class RecordingPublisher:
    def __init__(self) -> None:
        self.events: list[BookingEvent] = []

    async def publish(self, event: BookingEvent) -> None:
        self.events.append(event)


class FailingPublisher:
    def __init__(self) -> None:
        self.attempts = 0

    async def publish(self, event: BookingEvent) -> None:
        self.attempts += 1
        raise ConnectionError("broker unreachable")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def alice() -> Principal:
    return Principal(id=uuid4(), role=UserRole.STANDARD)


@pytest.fixture
def bob() -> Principal:
    return Principal(id=uuid4(), role=UserRole.STANDARD)


@pytest.fixture
def admin() -> Principal:
    return Principal(id=uuid4(), role=UserRole.ADMIN)


@pytest.fixture
def room() -> Resource:
    return Resource(id=uuid4(), name="Meeting Room A", is_active=True)


@pytest.fixture
def projector() -> Resource:
    return Resource(id=uuid4(), name="Projector", is_active=True)


@pytest.fixture
def closed_room() -> Resource:
    return Resource(id=uuid4(), name="Closed Room", is_active=False)


@pytest.fixture
def store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def catalog(room: Resource, projector: Resource, closed_room: Resource) -> InMemoryResourceCatalog:
    return InMemoryResourceCatalog([room, projector, closed_room])


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def service(
    store: InMemoryBookingStore,
    catalog: InMemoryResourceCatalog,
    clock: FixedClock,
    publisher: RecordingPublisher,
) -> BookingService:
    return BookingService(store=store, catalog=catalog, clock=clock, publisher=publisher)


@pytest.fixture
def make_request(room: Resource):
    """Build a create request on ``room`` unless another resource is given."""

    def _make(start: datetime, end: datetime, resource: Resource | None = None, description: str | None = None):
        return BookingCreate(
            resource_id=(resource or room).id,
            start_at=start,
            end_at=end,
            description=description,
        )

    return _make
