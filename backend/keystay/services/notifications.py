"""Guest notifications — templated, fire-and-forget.

Delivery over LINE, SMS, or email is simulated: the rendered message is
logged. Callers on the access-code path use ``notify_access_code`` which
never raises.
"""

import logging
from typing import Any

from keystay.constants import NOTIFY_METHODS
from keystay.models.access_code import AccessCode
from keystay.models.booking import Booking

logger = logging.getLogger(__name__)

TEMPLATES = {
    "access_code_issued": {
        "subject": "Your access code for booking {booking_number}",
        "body": (
            "Dear {guest_name},\n\n"
            "Your room access code is {code}.\n\n"
            "Valid from: {valid_from}\n"
            "Valid until: {valid_until}\n\n"
            "Enter the code at the check-in terminal when you arrive.\n\n"
            "Best regards,\nKeyStay"
        ),
    },
    "booking_confirmed": {
        "subject": "Booking Confirmed: {booking_number}",
        "body": (
            "Dear {guest_name},\n\n"
            "Your booking {booking_number} has been confirmed.\n\n"
            "- Check-in: {check_in}\n"
            "- Check-out: {check_out}\n"
            "- Nights: {nights}\n"
            "- Total Price: {total_price} THB\n\n"
            "Best regards,\nKeyStay"
        ),
    },
    "booking_cancelled": {
        "subject": "Booking Cancelled: {booking_number}",
        "body": (
            "Dear {guest_name},\n\n"
            "Your booking {booking_number} ({check_in} to {check_out}) "
            "has been cancelled.\n\n"
            "Best regards,\nKeyStay"
        ),
    },
}


def render(template: str, variables: dict[str, Any]) -> tuple[str, str]:
    """Render a template into ``(subject, body)``."""
    tmpl = TEMPLATES[template]
    return tmpl["subject"].format(**variables), tmpl["body"].format(**variables)


def _channels(method: str) -> tuple[str, ...]:
    if method == "all":
        return ("line", "sms", "email")
    return (method,)


async def notify(contact: dict[str, str], method: str, payload: dict[str, Any]) -> dict:
    """Send a rendered notification to a guest (simulated).

    Args:
        contact: ``name``, ``email`` and ``phone`` of the recipient.
        method: One of ``line``, ``sms``, ``email``, ``all``.
        payload: ``template`` name plus the variables it needs.

    Returns:
        Dict with the rendered message and the channels it went to.
    """
    if method not in NOTIFY_METHODS:
        raise ValueError(f"Unknown notify method {method!r}")

    template = payload["template"]
    subject, body = render(template, payload)
    channels = _channels(method)

    for channel in channels:
        recipient = contact.get("email") if channel == "email" else contact.get("phone")
        logger.info("Notification sent [%s/%s] to %s <%s>: %s", template, channel, contact.get("name"), recipient, subject)

    return {
        "status": "simulated",
        "channels": list(channels),
        "subject": subject,
        "body": body,
    }


def _contact(booking: Booking) -> dict[str, str]:
    return {
        "name": booking.guest_name,
        "email": booking.guest_email,
        "phone": booking.guest_phone,
    }


async def notify_access_code(booking: Booking, access_code: AccessCode, method: str) -> None:
    """Tell the guest their new code. Failures are logged, never raised."""
    try:
        await notify(
            _contact(booking),
            method,
            {
                "template": "access_code_issued",
                "guest_name": booking.guest_name,
                "booking_number": booking.booking_number,
                "code": access_code.code,
                "valid_from": access_code.valid_from.isoformat(),
                "valid_until": access_code.valid_until.isoformat(),
            },
        )
    except Exception:
        logger.exception("Access code notification failed for booking %s", booking.id)


async def notify_booking_event(booking: Booking, template: str, method: str = "email") -> None:
    """Confirmation and cancellation notices. Failures are logged, never raised."""
    try:
        await notify(
            _contact(booking),
            method,
            {
                "template": template,
                "guest_name": booking.guest_name,
                "booking_number": booking.booking_number,
                "check_in": booking.check_in.isoformat(),
                "check_out": booking.check_out.isoformat(),
                "nights": booking.nights,
                "total_price": booking.total_price,
            },
        )
    except Exception:
        logger.exception("Notification %s failed for booking %s", template, booking.id)
