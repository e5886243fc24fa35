"""Booking event publishing.

Events are notifications for downstream consumers (mail, chat, calendars).
Delivery is best-effort: ``publish_safely`` logs every failure and never lets
it reach the booking operation that produced the event.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from slotkeeper.config import Settings
from slotkeeper.schemas.booking import BookingEvent

logger = logging.getLogger(__name__)


class EventPublisher(Protocol):
    async def publish(self, event: BookingEvent) -> None: ...


class NullEventPublisher:
    """Publisher used when event delivery is disabled."""

    async def publish(self, event: BookingEvent) -> None:
        logger.debug(
            f"Event publishing is disabled, skipping {event.event_type.value} "
            f"for booking {event.booking_id}"
        )


class WebhookEventPublisher:
    """POSTs each event as JSON to a configured URL."""

    def __init__(self, url: str, timeout: float = 5.0, client: httpx.AsyncClient | None = None) -> None:
        self.url = url
        self.timeout = timeout
        self._http_client = client

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()

    async def publish(self, event: BookingEvent) -> None:
        logger.info(
            f"Publishing {event.event_type.value} event: "
            f"booking_id={event.booking_id}, event_id={event.event_id}"
        )
        response = await self.http_client.post(
            self.url,
            content=event.model_dump_json(),
            headers={
                "Content-Type": "application/json",
                "X-Event-Type": event.event_type.value,
                "X-Event-ID": str(event.event_id),
            },
        )
        response.raise_for_status()


def build_event_publisher(settings: Settings) -> EventPublisher:
    if settings.events_enabled and settings.event_webhook_url:
        return WebhookEventPublisher(
            settings.event_webhook_url,
            timeout=settings.event_webhook_timeout_seconds,
        )
    return NullEventPublisher()


async def publish_safely(publisher: EventPublisher, event: BookingEvent) -> None:
    """Publish an event, logging instead of raising on failure.

    The publish is awaited in the caller's request, so a slow webhook adds up
    to ``event_webhook_timeout_seconds`` to the create or cancel response.
    """
    try:
        await publisher.publish(event)
    except Exception as e:
        logger.error(
            f"Failed to publish {event.event_type.value} event "
            f"for booking {event.booking_id}: {e}"
        )
