import json
from uuid import uuid4

import httpx
import pytest

from slotkeeper.config import Settings
from slotkeeper.schemas.booking import BookingEvent, BookingEventType
from slotkeeper.services.event_publisher import (
    NullEventPublisher,
    WebhookEventPublisher,
    build_event_publisher,
    publish_safely,
)

from tests.conftest import NOW, tomorrow

WEBHOOK_URL = "https://hooks.example.com/bookings"


@pytest.fixture
def event() -> BookingEvent:
    return BookingEvent(
        event_type=BookingEventType.CREATED,
        booking_id=uuid4(),
        resource_id=uuid4(),
        owner_id=uuid4(),
        start_at=tomorrow(10),
        end_at=tomorrow(11),
        occurred_at=NOW,
    )


async def test_webhook_posts_event_json(event):
    received: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        received.append(request)
        return httpx.Response(202)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        await WebhookEventPublisher(WEBHOOK_URL, client=client).publish(event)

    assert len(received) == 1
    request = received[0]
    assert str(request.url) == WEBHOOK_URL
    assert request.headers["X-Event-Type"] == "booking.created"
    assert request.headers["X-Event-ID"] == str(event.event_id)
    body = json.loads(request.content)
    assert body["booking_id"] == str(event.booking_id)
    assert body["event_type"] == "booking.created"


async def test_webhook_error_status_raises(event):
    transport = httpx.MockTransport(lambda request: httpx.Response(500))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await WebhookEventPublisher(WEBHOOK_URL, client=client).publish(event)


async def test_publish_safely_logs_failures(event, caplog):
    transport = httpx.MockTransport(lambda request: httpx.Response(500))
    async with httpx.AsyncClient(transport=transport) as client:
        await publish_safely(WebhookEventPublisher(WEBHOOK_URL, client=client), event)

    assert f"Failed to publish booking.created event for booking {event.booking_id}" in caplog.text


async def test_null_publisher_accepts_events(event):
    await NullEventPublisher().publish(event)


def test_publisher_selection():
    assert isinstance(build_event_publisher(Settings(events_enabled=False)), NullEventPublisher)
    assert isinstance(
        build_event_publisher(Settings(events_enabled=True, event_webhook_url=None)), NullEventPublisher
    )

    publisher = build_event_publisher(
        Settings(events_enabled=True, event_webhook_url=WEBHOOK_URL, event_webhook_timeout_seconds=2.0)
    )
    assert isinstance(publisher, WebhookEventPublisher)
    assert publisher.timeout == 2.0
