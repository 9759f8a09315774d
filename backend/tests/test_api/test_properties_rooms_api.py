"""Tests for property and room endpoints."""

import uuid

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestProperties:
    async def test_create_and_list(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.post(
            "/api/v1/properties",
            json={"name": "Sea Breeze Resort", "address": "5 Beach Rd", "province": "Krabi"},
            headers=auth_headers,
        )
        assert response.status_code == 201, response.text
        data = response.json()
        assert data["slug"] == "sea-breeze-resort"
        assert data["check_in_time"] == "14:00"
        assert data["total_rooms"] == 0

        response = await client.get("/api/v1/properties", headers=auth_headers)
        assert response.json()["total"] == 1

    async def test_create_requires_auth(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/properties", json={"name": "Nope", "address": "1 Rd", "province": "Krabi"}
        )
        assert response.status_code in (401, 403)

    async def test_invalid_check_in_time(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.post(
            "/api/v1/properties",
            json={"name": "Late Inn", "address": "1 Rd", "province": "Krabi", "check_in_time": "25:00"},
            headers=auth_headers,
        )
        assert response.status_code == 422

    async def test_public_slug_lookup(self, client: AsyncClient, test_property) -> None:
        response = await client.get(f"/api/v1/properties/slug/{test_property.slug}")
        assert response.status_code == 200
        assert response.json()["name"] == "Baan Suan Guesthouse"
        assert "owner_id" not in response.json()

        response = await client.get("/api/v1/properties/slug/no-such-place")
        assert response.status_code == 404

    async def test_other_owner(self, client: AsyncClient, other_auth_headers: dict, test_property) -> None:
        response = await client.get(f"/api/v1/properties/{test_property.id}", headers=other_auth_headers)
        assert response.status_code == 403
        assert response.json() == {"detail": "Not authorized to access this property", "code": "FORBIDDEN"}

        response = await client.get("/api/v1/properties", headers=other_auth_headers)
        assert response.json()["total"] == 0

    async def test_update_and_delete(self, client: AsyncClient, auth_headers: dict, test_property) -> None:
        response = await client.put(
            f"/api/v1/properties/{test_property.id}", json={"name": "Baan Suan Villa"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["slug"] == "baan-suan-villa"

        response = await client.delete(f"/api/v1/properties/{test_property.id}", headers=auth_headers)
        assert response.status_code == 200

        response = await client.get(f"/api/v1/properties/{test_property.id}", headers=auth_headers)
        assert response.status_code == 404

    async def test_unknown_property(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.get(f"/api/v1/properties/{uuid.uuid4()}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"


class TestRooms:
    async def test_create_room(self, client: AsyncClient, auth_headers: dict, test_property) -> None:
        response = await client.post(
            "/api/v1/rooms",
            json={
                "property_id": str(test_property.id),
                "name": "Deluxe Twin",
                "room_number": "301",
                "room_type": "deluxe",
                "price": 1200,
                "amenities": ["wifi", "aircon"],
            },
            headers=auth_headers,
        )
        assert response.status_code == 201, response.text
        data = response.json()
        assert data["status"] == "available"
        assert data["amenities"] == ["wifi", "aircon"]

    async def test_duplicate_room_number(self, client: AsyncClient, auth_headers: dict, test_room) -> None:
        response = await client.post(
            "/api/v1/rooms",
            json={"property_id": str(test_room.property_id), "name": "Copy", "room_number": "101", "price": 500},
            headers=auth_headers,
        )
        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    async def test_room_on_foreign_property(
        self, client: AsyncClient, other_auth_headers: dict, test_property
    ) -> None:
        response = await client.post(
            "/api/v1/rooms",
            json={"property_id": str(test_property.id), "name": "Sneaky", "room_number": "999", "price": 1},
            headers=other_auth_headers,
        )
        assert response.status_code == 403

    async def test_status_override_and_stats(self, client: AsyncClient, auth_headers: dict, test_room) -> None:
        response = await client.patch(
            f"/api/v1/rooms/{test_room.id}/status", json={"status": "maintenance"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "maintenance"

        response = await client.get(f"/api/v1/rooms/stats/{test_room.property_id}", headers=auth_headers)
        assert response.json() == {"total": 1, "available": 0, "occupied": 0, "cleaning": 0, "maintenance": 1}

        response = await client.patch(
            f"/api/v1/rooms/{test_room.id}/status", json={"status": "haunted"}, headers=auth_headers
        )
        assert response.status_code == 422

    async def test_public_availability(self, client: AsyncClient, test_room, make_booking) -> None:
        await make_booking(test_room)
        property_id = str(test_room.property_id)

        response = await client.get("/api/v1/rooms/available", params={"property_id": property_id})
        assert response.status_code == 200
        assert [r["room_number"] for r in response.json()] == ["101"]

        response = await client.get(
            "/api/v1/rooms/available",
            params={"property_id": property_id, "check_in": "2025-03-02", "check_out": "2025-03-04"},
        )
        assert response.json() == []

        response = await client.get(
            "/api/v1/rooms/available",
            params={"property_id": property_id, "check_in": "2025-03-03", "check_out": "2025-03-04"},
        )
        assert len(response.json()) == 1

        response = await client.get(
            "/api/v1/rooms/available",
            params={"property_id": property_id, "check_in": "2025-03-04", "check_out": "2025-03-03"},
        )
        assert response.status_code == 422

    async def test_update_price_and_delete(self, client: AsyncClient, auth_headers: dict, test_room) -> None:
        response = await client.put(f"/api/v1/rooms/{test_room.id}", json={"price": 750}, headers=auth_headers)
        assert response.status_code == 200
        assert float(response.json()["price"]) == 750.0

        response = await client.delete(f"/api/v1/rooms/{test_room.id}", headers=auth_headers)
        assert response.status_code == 200

        response = await client.get(f"/api/v1/rooms/{test_room.id}", headers=auth_headers)
        assert response.status_code == 404

        response = await client.get(
            "/api/v1/rooms", params={"property_id": str(test_room.property_id)}, headers=auth_headers
        )
        assert response.json() == []
