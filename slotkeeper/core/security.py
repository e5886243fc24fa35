"""Bearer token verification.

Tokens are issued by the identity service; this module only verifies them and
turns their claims into a ``Principal``. ``create_access_token`` exists for
local tooling and tests that need a token signed with the shared secret.
"""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt

from slotkeeper.config import settings
from slotkeeper.core.exceptions import AuthenticationError
from slotkeeper.core.permissions import Principal, UserRole


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, token_type: str = "access") -> dict[str, Any]:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {str(e)}")
    if payload.get("type") != token_type:
        raise AuthenticationError("Invalid token type")
    return payload


def principal_from_claims(payload: dict[str, Any]) -> Principal:
    """Build a principal from verified token claims."""
    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError("Invalid token payload")
    try:
        user_id = UUID(str(subject))
        role = UserRole(payload.get("role", UserRole.STANDARD.value))
    except ValueError:
        raise AuthenticationError("Invalid token payload")
    return Principal(id=user_id, role=role)
