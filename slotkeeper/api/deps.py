"""API dependencies for authentication and service wiring."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from slotkeeper.config import settings
from slotkeeper.core.exceptions import AuthenticationError
from slotkeeper.core.permissions import Principal
from slotkeeper.core.security import principal_from_claims, verify_token
from slotkeeper.database import async_session_maker
from slotkeeper.repositories.resource_catalog import SqlResourceCatalog
from slotkeeper.repositories.sql_booking_store import SqlBookingStore
from slotkeeper.services.booking_service import BookingService
from slotkeeper.services.event_publisher import build_event_publisher

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Principal:
    """Resolve the calling principal from the bearer token."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    payload = verify_token(credentials.credentials, token_type="access")
    return principal_from_claims(payload)


@lru_cache
def get_booking_service() -> BookingService:
    """Booking service bound to the application database."""
    return BookingService.from_settings(
        settings,
        store=SqlBookingStore(async_session_maker, lock_timeout=settings.booking_lock_timeout_seconds),
        catalog=SqlResourceCatalog(async_session_maker),
        publisher=build_event_publisher(settings),
    )
