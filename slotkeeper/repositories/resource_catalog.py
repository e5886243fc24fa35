"""Read-only access to the resource catalog.

The catalog itself is managed elsewhere; the booking core only needs to know
whether a resource exists and is accepting bookings.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from slotkeeper.core.exceptions import NotFoundError
from slotkeeper.models.resource import Resource
from slotkeeper.repositories.sql_booking_store import storage_errors


class ResourceCatalog(Protocol):
    async def get_active_resource(self, resource_id: UUID) -> Resource:
        """Return the resource, or raise NotFoundError if absent or inactive."""
        ...


class SqlResourceCatalog:
    """Catalog lookups against the ``resources`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_active_resource(self, resource_id: UUID) -> Resource:
        with storage_errors("load resource"):
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Resource).where(Resource.id == resource_id, Resource.is_active.is_(True))
                )
                resource = result.scalar_one_or_none()
        if resource is None:
            raise NotFoundError("Resource", str(resource_id))
        return resource


class InMemoryResourceCatalog:
    """Catalog backed by a dict, for local runs and tests."""

    def __init__(self, resources: list[Resource] | None = None) -> None:
        self._resources: dict[UUID, Resource] = {}
        for resource in resources or []:
            self.add(resource)

    def add(self, resource: Resource) -> Resource:
        self._resources[resource.id] = resource
        return resource

    async def get_active_resource(self, resource_id: UUID) -> Resource:
        resource = self._resources.get(resource_id)
        if resource is None or not resource.is_active:
            raise NotFoundError("Resource", str(resource_id))
        return resource
