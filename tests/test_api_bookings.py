"""HTTP-level tests for the booking endpoints."""

from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from slotkeeper.api.deps import get_booking_service
from slotkeeper.core.security import create_access_token
from slotkeeper.main import app

from tests.conftest import tomorrow

BASE = "/api/v1/bookings"


def _auth(principal) -> dict[str, str]:
    token = create_access_token({"sub": str(principal.id), "role": principal.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(service):
    app.dependency_overrides[get_booking_service] = lambda: service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def _payload(resource, start, end, **extra) -> dict:
    return {
        "resource_id": str(resource.id),
        "start_at": start.isoformat(),
        "end_at": end.isoformat(),
        **extra,
    }


async def test_requires_token(client, room):
    response = await client.post(f"{BASE}/", json=_payload(room, tomorrow(10), tomorrow(11)))
    assert response.status_code == 401
    assert response.json()["error"] == "UNAUTHORIZED"


async def test_rejects_garbage_token(client):
    response = await client.get(f"{BASE}/", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_create_booking(client, room, alice):
    response = await client.post(
        f"{BASE}/",
        json=_payload(room, tomorrow(10), tomorrow(11), description="Standup"),
        headers=_auth(alice),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["owner_id"] == str(alice.id)
    assert body["status"] == "active"
    assert body["description"] == "Standup"
    assert "X-Request-ID" in response.headers


async def test_overlap_returns_conflict(client, room, alice, bob):
    await client.post(f"{BASE}/", json=_payload(room, tomorrow(10), tomorrow(11)), headers=_auth(alice))

    response = await client.post(
        f"{BASE}/", json=_payload(room, tomorrow(10, 30), tomorrow(11, 30)), headers=_auth(bob)
    )

    assert response.status_code == 409
    assert response.json()["error"] == "CONFLICT"


async def test_rule_violation_returns_validation_error(client, room, alice):
    response = await client.post(
        f"{BASE}/", json=_payload(room, tomorrow(11), tomorrow(10)), headers=_auth(alice)
    )

    assert response.status_code == 422
    assert response.json() == {"detail": "Start time must be before end time", "error": "VALIDATION_ERROR"}


async def test_unknown_resource_returns_not_found(client, alice):
    payload = {
        "resource_id": str(uuid4()),
        "start_at": tomorrow(10).isoformat(),
        "end_at": tomorrow(11).isoformat(),
    }
    response = await client.post(f"{BASE}/", json=payload, headers=_auth(alice))
    assert response.status_code == 404


async def test_get_own_and_foreign_booking(client, room, alice, bob, admin):
    created = await client.post(
        f"{BASE}/", json=_payload(room, tomorrow(10), tomorrow(11)), headers=_auth(alice)
    )
    booking_id = created.json()["id"]

    own = await client.get(f"{BASE}/{booking_id}", headers=_auth(alice))
    foreign = await client.get(f"{BASE}/{booking_id}", headers=_auth(bob))
    as_admin = await client.get(f"{BASE}/{booking_id}", headers=_auth(admin))

    assert own.status_code == 200
    assert foreign.status_code == 403
    assert foreign.json()["error"] == "FORBIDDEN"
    assert as_admin.status_code == 200


async def test_cancel_flow(client, room, alice):
    created = await client.post(
        f"{BASE}/", json=_payload(room, tomorrow(10), tomorrow(11)), headers=_auth(alice)
    )
    booking_id = created.json()["id"]

    first = await client.post(f"{BASE}/{booking_id}/cancel", headers=_auth(alice))
    second = await client.post(f"{BASE}/{booking_id}/cancel", headers=_auth(alice))

    assert first.status_code == 200
    assert first.json()["status"] == "canceled"
    assert second.status_code == 409
    assert second.json()["error"] == "ALREADY_CANCELED"


async def test_list_is_scoped_and_paginated(client, room, projector, alice, bob, admin):
    for start, resource in ((8, room), (12, room), (10, projector)):
        await client.post(
            f"{BASE}/", json=_payload(resource, tomorrow(start), tomorrow(start + 1)), headers=_auth(alice)
        )
    await client.post(f"{BASE}/", json=_payload(room, tomorrow(14), tomorrow(15)), headers=_auth(bob))

    mine = await client.get(f"{BASE}/", headers=_auth(alice))
    everything = await client.get(f"{BASE}/", params={"page_size": 2, "page": 2}, headers=_auth(admin))
    filtered = await client.get(
        f"{BASE}/", params={"resource_id": str(room.id), "sort": "start_at"}, headers=_auth(alice)
    )

    assert mine.json()["total"] == 3
    assert mine.json()["total_pages"] == 1
    starts = [b["start_at"] for b in mine.json()["bookings"]]
    assert starts == sorted(starts, reverse=True)

    assert everything.json()["total"] == 4
    assert everything.json()["page"] == 2
    assert everything.json()["total_pages"] == 2
    assert len(everything.json()["bookings"]) == 2

    assert [b["start_at"][11:16] for b in filtered.json()["bookings"]] == ["08:00", "12:00"]


async def test_list_rejects_oversized_page(client, alice):
    response = await client.get(f"{BASE}/", params={"page_size": 1000}, headers=_auth(alice))
    assert response.status_code == 422


async def test_availability(client, room, alice):
    await client.post(f"{BASE}/", json=_payload(room, tomorrow(10), tomorrow(11)), headers=_auth(alice))

    busy = await client.get(
        f"{BASE}/availability",
        params={
            "resource_id": str(room.id),
            "start_at": tomorrow(10, 30).isoformat(),
            "end_at": tomorrow(11, 30).isoformat(),
        },
        headers=_auth(alice),
    )
    free = await client.get(
        f"{BASE}/availability",
        params={
            "resource_id": str(room.id),
            "start_at": tomorrow(11).isoformat(),
            "end_at": tomorrow(12).isoformat(),
        },
        headers=_auth(alice),
    )

    assert busy.json() == {"available": False, "unavailable_reason": "Selected time slot is already booked"}
    assert free.json() == {"available": True, "unavailable_reason": None}


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
