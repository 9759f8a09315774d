"""Tests for access code endpoints: terminal validate/use and owner management."""

import uuid
from datetime import datetime

import pytest
from httpx import AsyncClient

from keystay.services import access_code_service

pytestmark = pytest.mark.asyncio


@pytest.fixture
def during_stay(monkeypatch):
    monkeypatch.setattr(access_code_service, "utcnow", lambda: datetime(2025, 3, 2, 10, 0))


class TestTerminal:
    async def test_validate_good_code(self, client: AsyncClient, test_room, make_booking, during_stay) -> None:
        booking = await make_booking(test_room, admin=True)

        response = await client.post("/api/v1/access-codes/validate", json={"code": booking.access_code})
        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is True
        assert data["message"] == "รหัสถูกต้อง"
        assert data["booking"]["booking_number"] == booking.booking_number
        assert data["booking"]["guest_name"] == "Somchai Jaidee"

    async def test_validate_unknown_code(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/access-codes/validate", json={"code": "000000"})
        assert response.status_code == 200
        assert response.json() == {"is_valid": False, "message": "รหัสไม่ถูกต้อง", "booking": None}

    async def test_validate_before_window(self, client: AsyncClient, test_room, make_booking, monkeypatch) -> None:
        booking = await make_booking(test_room, admin=True)
        monkeypatch.setattr(access_code_service, "utcnow", lambda: datetime(2025, 2, 28, 23, 59))

        response = await client.post("/api/v1/access-codes/validate", json={"code": booking.access_code})
        assert response.json()["is_valid"] is False
        assert response.json()["message"] == "รหัสยังไม่เริ่มใช้งาน"

    async def test_validate_wrong_property(
        self, client: AsyncClient, test_room, make_booking, during_stay
    ) -> None:
        booking = await make_booking(test_room, admin=True)

        response = await client.post(
            "/api/v1/access-codes/validate",
            json={"code": booking.access_code, "property_id": str(uuid.uuid4())},
        )
        assert response.json()["is_valid"] is False
        assert response.json()["message"] == "รหัสไม่ถูกต้องสำหรับที่พักนี้"

    @pytest.mark.parametrize("code", ["12345", "1234567", "12a456", ""])
    async def test_validate_malformed(self, client: AsyncClient, code: str) -> None:
        response = await client.post("/api/v1/access-codes/validate", json={"code": code})
        assert response.status_code == 422

    async def test_use_unknown_code(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/access-codes/use/000000")
        assert response.status_code == 400
        assert response.json() == {"detail": "รหัสไม่ถูกต้อง", "code": "CODE_INVALID"}


class TestOwnerManagement:
    async def test_generate_for_pending_booking(
        self, client: AsyncClient, auth_headers: dict, test_room, make_booking
    ) -> None:
        booking = await make_booking(test_room)

        response = await client.post(
            "/api/v1/access-codes/generate",
            json={"booking_id": str(booking.id), "notify_guest": False},
            headers=auth_headers,
        )
        assert response.status_code == 201, response.text
        data = response.json()
        assert len(data["code"]) == 6
        assert data["valid_from"] == "2025-03-01T00:00:00"
        assert data["valid_until"] == "2025-03-04T00:00:00"
        assert data["is_used"] is False
        assert data["is_revoked"] is False

    async def test_generate_custom_window_must_be_ordered(
        self, client: AsyncClient, auth_headers: dict, test_room, make_booking
    ) -> None:
        booking = await make_booking(test_room)

        response = await client.post(
            "/api/v1/access-codes/generate",
            json={
                "booking_id": str(booking.id),
                "valid_from": "2025-03-02T00:00:00",
                "valid_until": "2025-03-01T00:00:00",
            },
            headers=auth_headers,
        )
        assert response.status_code == 422

    async def test_generate_mixed_offsets_stored_as_utc(
        self, client: AsyncClient, auth_headers: dict, test_room, make_booking
    ) -> None:
        booking = await make_booking(test_room)

        response = await client.post(
            "/api/v1/access-codes/generate",
            json={
                "booking_id": str(booking.id),
                "valid_from": "2025-03-01T00:00:00+07:00",
                "valid_until": "2025-03-05T00:00:00",
                "notify_guest": False,
            },
            headers=auth_headers,
        )
        assert response.status_code == 201, response.text
        assert response.json()["valid_from"] == "2025-02-28T17:00:00"
        assert response.json()["valid_until"] == "2025-03-05T00:00:00"

    async def test_generate_mixed_offsets_must_be_ordered(
        self, client: AsyncClient, auth_headers: dict, test_room, make_booking
    ) -> None:
        booking = await make_booking(test_room)

        response = await client.post(
            "/api/v1/access-codes/generate",
            json={
                "booking_id": str(booking.id),
                "valid_from": "2025-03-05T00:00:00+07:00",
                "valid_until": "2025-03-01T00:00:00",
            },
            headers=auth_headers,
        )
        assert response.status_code == 422

    async def test_generate_start_after_stay_rejected(
        self, client: AsyncClient, auth_headers: dict, test_room, make_booking
    ) -> None:
        booking = await make_booking(test_room)

        response = await client.post(
            "/api/v1/access-codes/generate",
            json={"booking_id": str(booking.id), "valid_from": "2025-04-01T00:00:00"},
            headers=auth_headers,
        )
        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

        listed = await client.get(f"/api/v1/access-codes/booking/{booking.id}", headers=auth_headers)
        assert listed.json() == []

    async def test_generate_for_missing_booking(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.post(
            "/api/v1/access-codes/generate",
            json={"booking_id": str(uuid.uuid4())},
            headers=auth_headers,
        )
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_other_owner_is_forbidden(
        self, client: AsyncClient, other_auth_headers: dict, test_room, make_booking
    ) -> None:
        booking = await make_booking(test_room, admin=True)

        response = await client.get(f"/api/v1/access-codes/booking/{booking.id}", headers=other_auth_headers)
        assert response.status_code == 403

        response = await client.post(f"/api/v1/access-codes/regenerate/{booking.id}", headers=other_auth_headers)
        assert response.status_code == 403

    async def test_revoke(self, client: AsyncClient, auth_headers: dict, test_room, make_booking, during_stay) -> None:
        booking = await make_booking(test_room, admin=True)
        codes = (await client.get(f"/api/v1/access-codes/booking/{booking.id}", headers=auth_headers)).json()

        response = await client.post(
            f"/api/v1/access-codes/{codes[0]['id']}/revoke",
            json={"reason": "Guest lost the code"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["is_revoked"] is True
        assert response.json()["revoked_reason"] == "Guest lost the code"

        response = await client.post("/api/v1/access-codes/validate", json={"code": booking.access_code})
        assert response.json()["message"] == "รหัสไม่ถูกต้อง"

    async def test_revoke_requires_reason(
        self, client: AsyncClient, auth_headers: dict, test_room, make_booking
    ) -> None:
        booking = await make_booking(test_room, admin=True)
        codes = (await client.get(f"/api/v1/access-codes/booking/{booking.id}", headers=auth_headers)).json()

        response = await client.post(
            f"/api/v1/access-codes/{codes[0]['id']}/revoke", json={"reason": ""}, headers=auth_headers
        )
        assert response.status_code == 422

    async def test_regenerate_replaces_code(
        self, client: AsyncClient, auth_headers: dict, test_room, make_booking
    ) -> None:
        booking = await make_booking(test_room, admin=True)
        old_code = booking.access_code

        response = await client.post(f"/api/v1/access-codes/regenerate/{booking.id}", headers=auth_headers)
        assert response.status_code == 200
        new_code = response.json()["code"]

        codes = (await client.get(f"/api/v1/access-codes/booking/{booking.id}", headers=auth_headers)).json()
        assert len(codes) == 2
        live = [c for c in codes if not c["is_revoked"]]
        assert [c["code"] for c in live] == [new_code]
        revoked = [c for c in codes if c["is_revoked"]]
        assert revoked[0]["code"] == old_code
        assert revoked[0]["revoked_reason"] == "Regenerated"

    async def test_list_and_cleanup(
        self, client: AsyncClient, auth_headers: dict, test_property, test_room, make_booking
    ) -> None:
        await make_booking(test_room, admin=True)

        # 2025 stays are long past, so the code only shows with include_expired
        response = await client.get(
            "/api/v1/access-codes", params={"property_id": str(test_property.id)}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json() == []

        response = await client.get(
            "/api/v1/access-codes",
            params={"property_id": str(test_property.id), "include_expired": True},
            headers=auth_headers,
        )
        listing = response.json()
        assert len(listing) == 1
        assert listing[0]["is_expired"] is True
        assert listing[0]["guest_name"] == "Somchai Jaidee"

        response = await client.post(f"/api/v1/access-codes/cleanup/{test_property.id}", headers=auth_headers)
        assert response.json() == {"cleaned_count": 1}

        response = await client.post(f"/api/v1/access-codes/cleanup/{test_property.id}", headers=auth_headers)
        assert response.json() == {"cleaned_count": 0}
