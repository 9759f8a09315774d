"""End-to-end: walk-in booking, door entry with the access code, checkout."""

from datetime import datetime

import pytest
from httpx import AsyncClient

from keystay.services import access_code_service

pytestmark = pytest.mark.asyncio


async def test_walk_in_stay_from_booking_to_checkout(client: AsyncClient, auth_headers: dict, monkeypatch) -> None:
    # Property and a 500/night room
    response = await client.post(
        "/api/v1/properties",
        json={"name": "Baan Rim Nam", "address": "88 Riverside Rd", "province": "Chiang Mai"},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    property_id = response.json()["id"]

    response = await client.post(
        "/api/v1/rooms",
        json={"property_id": property_id, "name": "River Room", "room_number": "101", "price": 500},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    room_id = response.json()["id"]

    # Walk-in booking is confirmed on the spot and carries a code
    response = await client.post(
        "/api/v1/bookings/admin",
        json={
            "property_id": property_id,
            "room_id": room_id,
            "guest": {
                "first_name": "Somchai",
                "last_name": "Jaidee",
                "email": "somchai@example.com",
                "phone_number": "0812345678",
            },
            "check_in": "2025-03-01",
            "check_out": "2025-03-03",
            "payment_method": "cash",
        },
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    booking = response.json()
    assert booking["status"] == "confirmed"
    assert booking["nights"] == 2
    assert float(booking["total_price"]) == 1000.0
    assert booking["access_code_expiry"] == "2025-03-04T00:00:00"
    code = booking["access_code"]
    assert len(code) == 6

    # Guest arrives in the afternoon of check-in day
    monkeypatch.setattr(access_code_service, "utcnow", lambda: datetime(2025, 3, 1, 15, 0))

    response = await client.post(f"/api/v1/access-codes/use/{code}", params={"property_id": property_id})
    assert response.status_code == 200, response.text
    used = response.json()
    assert used["granted"] is True
    assert used["booking"]["booking_number"] == booking["booking_number"]
    assert used["booking"]["room_name"] == "River Room"

    response = await client.get(f"/api/v1/bookings/{booking['id']}", headers=auth_headers)
    assert response.json()["status"] == "checked_in"
    response = await client.get(f"/api/v1/rooms/{room_id}", headers=auth_headers)
    assert response.json()["status"] == "occupied"

    # Codes are single-use
    response = await client.post(f"/api/v1/access-codes/use/{code}")
    assert response.status_code == 400
    assert response.json() == {"detail": "รหัสถูกใช้งานแล้ว", "code": "CODE_INVALID"}

    # Checkout: room to cleaning, codes revoked
    response = await client.post(f"/api/v1/bookings/{booking['id']}/checkout", headers=auth_headers)
    assert response.status_code == 200, response.text
    assert response.json()["status"] == "checked_out"

    response = await client.get(f"/api/v1/rooms/{room_id}", headers=auth_headers)
    assert response.json()["status"] == "cleaning"

    response = await client.get(f"/api/v1/access-codes/booking/{booking['id']}", headers=auth_headers)
    codes = response.json()
    assert len(codes) == 1
    assert codes[0]["is_revoked"] is True
    assert codes[0]["revoked_reason"] == "Checked out"

    response = await client.post("/api/v1/access-codes/validate", json={"code": code})
    assert response.status_code == 200
    assert response.json()["is_valid"] is False
    assert response.json()["message"] == "รหัสไม่ถูกต้อง"
