"""Prevents double-booking a room."""

import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from keystay.constants import BookingStatus
from keystay.models.booking import Booking


def overlaps(check_in: date, check_out: date, start: date, end: date) -> bool:
    """Half-open overlap of ``[check_in, check_out)`` and ``[start, end)``.

    A checkout on day N and a new check-in on day N do not conflict.
    """
    return check_in < end and check_out > start


async def is_room_available(
    db: AsyncSession,
    room_id: uuid.UUID,
    check_in: date,
    check_out: date,
    exclude_booking_id: uuid.UUID | None = None,
) -> bool:
    """Return False if any pending, confirmed, or checked-in booking overlaps the range.

    Cancelled and checked-out bookings never block. ``exclude_booking_id``
    leaves the booking being edited out of the scan.
    """
    result = await db.execute(
        select(Booking).where(
            Booking.room_id == room_id,
            Booking.status.in_(BookingStatus.BLOCKING),
        )
    )
    for booking in result.scalars():
        if exclude_booking_id is not None and booking.id == exclude_booking_id:
            continue
        if overlaps(check_in, check_out, booking.check_in, booking.check_out):
            return False
    return True
