"""Database models."""

from slotkeeper.models.booking import Booking
from slotkeeper.models.resource import Resource

__all__ = [
    "Booking",
    "Resource",
]
