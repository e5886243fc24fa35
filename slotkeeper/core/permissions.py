"""Role-based access control for bookings.

The caller is always an already-authenticated ``Principal``; nothing here
looks up identity from ambient request state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from slotkeeper.core.exceptions import AuthorizationError

if TYPE_CHECKING:
    from slotkeeper.models.booking import Booking


class UserRole(str, Enum):
    """User roles in the system."""

    STANDARD = "user"
    ADMIN = "admin"


class Permission(str, Enum):
    """Booking permissions."""

    CREATE_BOOKING = "create_booking"
    VIEW_OWN_BOOKINGS = "view_own_bookings"
    CANCEL_OWN_BOOKINGS = "cancel_own_bookings"
    VIEW_ALL_BOOKINGS = "view_all_bookings"
    CANCEL_ANY_BOOKING = "cancel_any_booking"


# Role to permissions mapping
ROLE_PERMISSIONS: dict[UserRole, set[Permission]] = {
    UserRole.STANDARD: {
        Permission.CREATE_BOOKING,
        Permission.VIEW_OWN_BOOKINGS,
        Permission.CANCEL_OWN_BOOKINGS,
    },
    UserRole.ADMIN: {
        # Admins have all permissions
        perm for perm in Permission
    },
}


@dataclass(frozen=True)
class Principal:
    """Authenticated caller handed to every booking operation."""

    id: UUID
    role: UserRole = UserRole.STANDARD

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def has_permission(role: UserRole, permission: Permission) -> bool:
    """Check if a role has a specific permission."""
    return permission in ROLE_PERMISSIONS.get(role, set())


def require_permission(principal: Principal, permission: Permission) -> None:
    if not has_permission(principal.role, permission):
        raise AuthorizationError(f"Permission '{permission.value}' is required for this action")


def can_view_booking(principal: Principal, booking: Booking) -> bool:
    if has_permission(principal.role, Permission.VIEW_ALL_BOOKINGS):
        return True
    return booking.owner_id == principal.id


def can_cancel_booking(principal: Principal, booking: Booking) -> bool:
    if has_permission(principal.role, Permission.CANCEL_ANY_BOOKING):
        return True
    return (
        has_permission(principal.role, Permission.CANCEL_OWN_BOOKINGS)
        and booking.owner_id == principal.id
    )


def require_view_access(principal: Principal, booking: Booking) -> None:
    if not can_view_booking(principal, booking):
        raise AuthorizationError("You don't have permission to view this booking")


def require_cancel_access(principal: Principal, booking: Booking) -> None:
    if not can_cancel_booking(principal, booking):
        raise AuthorizationError("You don't have permission to cancel this booking")


def visible_owner_scope(principal: Principal) -> UUID | None:
    """Owner every listing by this principal is pinned to, or None for all owners."""
    if has_permission(principal.role, Permission.VIEW_ALL_BOOKINGS):
        return None
    return principal.id
