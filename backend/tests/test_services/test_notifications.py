"""Tests for simulated guest notifications."""

import logging

import pytest

from keystay.services import access_code_service, notifications


class TestRender:
    def test_access_code_template(self):
        subject, body = notifications.render(
            "access_code_issued",
            {
                "booking_number": "BK-20250301-AB12",
                "guest_name": "Somchai Jaidee",
                "code": "123456",
                "valid_from": "2025-03-01T00:00:00",
                "valid_until": "2025-03-04T00:00:00",
            },
        )
        assert subject == "Your access code for booking BK-20250301-AB12"
        assert "123456" in body
        assert "Dear Somchai Jaidee" in body

    def test_unknown_template(self):
        with pytest.raises(KeyError):
            notifications.render("welcome_drink", {})


class TestNotify:
    async def test_all_fans_out_to_every_channel(self, caplog):
        caplog.set_level(logging.INFO, logger="keystay.services.notifications")
        result = await notifications.notify(
            {"name": "Malee", "email": "malee@example.com", "phone": "0898765432"},
            "all",
            {
                "template": "booking_cancelled",
                "guest_name": "Malee",
                "booking_number": "BK-20250301-AB12",
                "check_in": "2025-03-01",
                "check_out": "2025-03-03",
            },
        )
        assert result["channels"] == ["line", "sms", "email"]
        assert result["status"] == "simulated"
        assert sum("Notification sent" in r.message for r in caplog.records) == 3

    async def test_unknown_method(self):
        with pytest.raises(ValueError):
            await notifications.notify({}, "pigeon", {"template": "booking_cancelled"})

    async def test_access_code_notice_never_raises(self, db_session, test_room, make_booking, monkeypatch, caplog):
        booking = await make_booking(test_room, admin=True)

        async def _broken(*args, **kwargs):
            raise RuntimeError("LINE is down")

        monkeypatch.setattr(notifications, "notify", _broken)
        caplog.set_level(logging.ERROR, logger="keystay.services.notifications")

        access_code = await access_code_service.find_by_code(db_session, booking.access_code)

        await notifications.notify_access_code(booking, access_code, "line")
        assert any("Access code notification failed" in r.message for r in caplog.records)
