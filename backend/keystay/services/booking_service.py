"""Booking service — creation, pricing, payments, and the booking state machine.

Every status change goes through ``transition_booking``, which checks the
transition table first and only then applies the room-status and
access-code side effects. A rejected transition leaves the booking, its room,
and its codes exactly as they were.
"""

import logging
import secrets
import string
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from keystay.constants import (
    BookingStatus,
    PaymentStatus,
    REVOKE_REASON_CANCELLED,
    REVOKE_REASON_CHECKED_OUT,
)
from keystay.database import utcnow
from keystay.errors import ConflictError, InvalidTransitionError, NotFoundError, RoomNotAvailableError, ValidationError
from keystay.models.booking import Booking
from keystay.models.property import Property
from keystay.models.room import Room
from keystay.schemas.booking import AdminBookingCreate, BookingCreate, BookingUpdate
from keystay.services import access_code_service, room_service
from keystay.services.availability import is_room_available
from keystay.services.notifications import notify_booking_event

logger = logging.getLogger(__name__)

_VALID_TRANSITIONS: dict[str, set[str]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CHECKED_IN, BookingStatus.CANCELLED},
    BookingStatus.CHECKED_IN: {BookingStatus.CHECKED_OUT},
    BookingStatus.CHECKED_OUT: set(),
    BookingStatus.CANCELLED: set(),
}

_BOOKING_NUMBER_ALPHABET = string.digits + string.ascii_uppercase
_BOOKING_NUMBER_ATTEMPTS = 5

# NOT NULL columns a partial update may name with an explicit null
_REQUIRED_FIELDS = {"adults", "children"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def can_transition(current: str, target: str) -> bool:
    return target in _VALID_TRANSITIONS.get(current, set())


def calculate_nights(check_in: date, check_out: date) -> int:
    return (check_out - check_in).days


def derive_payment_status(paid_amount: Decimal, total_price: Decimal) -> str:
    if paid_amount >= total_price:
        return PaymentStatus.PAID
    if paid_amount > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PENDING


def generate_booking_number() -> str:
    """``BK-YYYYMMDD-XXXX`` with today's UTC date and four base-36 characters."""
    suffix = "".join(secrets.choice(_BOOKING_NUMBER_ALPHABET) for _ in range(4))
    return f"BK-{utcnow():%Y%m%d}-{suffix}"


async def _unique_booking_number(db: AsyncSession) -> str:
    for _ in range(_BOOKING_NUMBER_ATTEMPTS):
        number = generate_booking_number()
        result = await db.execute(select(Booking.id).where(Booking.booking_number == number).limit(1))
        if result.scalar_one_or_none() is None:
            return number
    raise ConflictError("Could not allocate a booking number, try again")


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def get_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError("Booking")
    return booking


async def get_booking_by_number(db: AsyncSession, booking_number: str) -> Booking:
    result = await db.execute(select(Booking).where(Booking.booking_number == booking_number).limit(1))
    booking = result.scalar_one_or_none()
    if booking is None:
        raise NotFoundError("Booking")
    return booking


async def search_bookings(
    db: AsyncSession,
    owner_id: uuid.UUID,
    property_id: uuid.UUID | None = None,
    room_id: uuid.UUID | None = None,
    status: str | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    guest_name: str | None = None,
    guest_phone: str | None = None,
    skip: int = 0,
    limit: int = 50,
) -> tuple[list[Booking], int]:
    """Filter bookings on the owner's properties, newest first.

    ``from_date`` and ``to_date`` bound the check-in date (inclusive).
    ``guest_name`` matches either name part case-insensitively; ``guest_phone``
    is a substring match.

    Returns:
        The requested page and the total number of matches.
    """
    filters = [Property.owner_id == owner_id]
    if property_id is not None:
        filters.append(Booking.property_id == property_id)
    if room_id is not None:
        filters.append(Booking.room_id == room_id)
    if status is not None:
        filters.append(Booking.status == status)
    if from_date is not None:
        filters.append(Booking.check_in >= from_date)
    if to_date is not None:
        filters.append(Booking.check_in <= to_date)
    if guest_name:
        pattern = f"%{guest_name.lower()}%"
        filters.append(
            or_(
                func.lower(Booking.guest_first_name).like(pattern),
                func.lower(Booking.guest_last_name).like(pattern),
            )
        )
    if guest_phone:
        filters.append(Booking.guest_phone.contains(guest_phone))

    base_query = select(Booking).join(Property, Booking.property_id == Property.id).where(*filters)
    count_query = (
        select(func.count()).select_from(Booking).join(Property, Booking.property_id == Property.id).where(*filters)
    )

    total = (await db.execute(count_query)).scalar_one()
    result = await db.execute(base_query.order_by(Booking.created_at.desc()).offset(skip).limit(limit))
    return list(result.scalars().all()), total


async def get_today_movements(
    db: AsyncSession,
    property_id: uuid.UUID,
    today: date | None = None,
) -> tuple[list[Booking], list[Booking]]:
    """Confirmed arrivals and checked-in departures for ``today`` (UTC by default)."""
    today = today or utcnow().date()

    arrivals = await db.execute(
        select(Booking).where(
            Booking.property_id == property_id,
            Booking.check_in == today,
            Booking.status == BookingStatus.CONFIRMED,
        )
    )
    departures = await db.execute(
        select(Booking).where(
            Booking.property_id == property_id,
            Booking.check_out == today,
            Booking.status == BookingStatus.CHECKED_IN,
        )
    )
    return list(arrivals.scalars().all()), list(departures.scalars().all())


# ---------------------------------------------------------------------------
# Create / update
# ---------------------------------------------------------------------------


async def create_booking(
    db: AsyncSession,
    data: BookingCreate,
    auto_confirm: bool = False,
) -> Booking:
    """Reserve a room after checking it exists and is free for the dates.

    The room's current price is copied onto the booking. With
    ``auto_confirm`` (owner walk-in and phone bookings) the booking is
    confirmed straight away, which issues its access code.

    Raises:
        NotFoundError: The room is missing, inactive, or not in the property.
        RoomNotAvailableError: An active booking overlaps the dates.
    """
    room = await db.get(Room, data.room_id)
    if room is None or not room.is_active or room.property_id != data.property_id:
        raise NotFoundError("Room")

    if not await is_room_available(db, room.id, data.check_in, data.check_out):
        raise RoomNotAvailableError()

    nights = calculate_nights(data.check_in, data.check_out)
    room_price = Decimal(room.price)
    total_price = room_price * nights

    booking = Booking(
        property_id=data.property_id,
        room_id=room.id,
        booking_number=await _unique_booking_number(db),
        guest_first_name=data.guest.first_name,
        guest_last_name=data.guest.last_name,
        guest_email=str(data.guest.email),
        guest_phone=data.guest.phone_number,
        guest_id_number=data.guest.id_number,
        guest_nationality=data.guest.nationality,
        special_requests=data.special_requests,
        check_in=data.check_in,
        check_out=data.check_out,
        nights=nights,
        adults=data.adults,
        children=data.children,
        room_price=room_price,
        total_price=total_price,
        paid_amount=Decimal("0"),
        payment_status=PaymentStatus.PENDING,
        status=BookingStatus.PENDING,
        source="direct",
    )

    if isinstance(data, AdminBookingCreate):
        booking.source = data.source
        booking.notes = data.notes
        booking.payment_method = data.payment_method
        if data.paid_amount:
            booking.paid_amount = data.paid_amount
            booking.payment_status = derive_payment_status(data.paid_amount, total_price)

    db.add(booking)
    await db.flush()
    logger.info(
        "Created booking %s for room %s (%s to %s, %d nights, total %s)",
        booking.booking_number,
        room.id,
        data.check_in,
        data.check_out,
        nights,
        total_price,
    )

    if auto_confirm:
        await transition_booking(db, booking.id, BookingStatus.CONFIRMED)

    return booking


def _merge_guest(booking: Booking, guest: dict) -> None:
    fields = {
        "first_name": "guest_first_name",
        "last_name": "guest_last_name",
        "email": "guest_email",
        "phone_number": "guest_phone",
        "id_number": "guest_id_number",
        "nationality": "guest_nationality",
    }
    for key, value in guest.items():
        if key in fields and value is not None:
            setattr(booking, fields[key], str(value) if key == "email" else value)


async def update_booking(db: AsyncSession, booking: Booking, data: BookingUpdate) -> Booking:
    """Apply a partial update. Status is never touched here.

    New dates are re-checked for availability with this booking left out of
    the scan, and the price is recomputed from the original snapshot.
    A confirmed booking whose dates move gets its codes regenerated for the
    new stay; a checked-in guest keeps the code already used at the door.
    An explicit null for ``adults`` or ``children`` leaves the stored value.

    Raises:
        ValidationError: The merged dates leave no nights.
        RoomNotAvailableError: The new dates collide with another booking.
    """
    update_data = data.model_dump(exclude_unset=True)

    guest = update_data.pop("guest", None)
    if guest:
        _merge_guest(booking, guest)

    new_check_in = update_data.pop("check_in", None) or booking.check_in
    new_check_out = update_data.pop("check_out", None) or booking.check_out
    if (new_check_in, new_check_out) != (booking.check_in, booking.check_out):
        if new_check_out <= new_check_in:
            raise ValidationError("check_out must be after check_in")
        if not await is_room_available(
            db, booking.room_id, new_check_in, new_check_out, exclude_booking_id=booking.id
        ):
            raise RoomNotAvailableError()
        booking.check_in = new_check_in
        booking.check_out = new_check_out
        booking.nights = calculate_nights(new_check_in, new_check_out)
        booking.total_price = booking.room_price * booking.nights
        booking.payment_status = derive_payment_status(booking.paid_amount, booking.total_price)
        if booking.status == BookingStatus.CONFIRMED:
            await access_code_service.regenerate_code(db, booking.id)

    for field, value in update_data.items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(booking, field, value)

    await db.flush()
    return booking


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


async def transition_booking(db: AsyncSession, booking_id: uuid.UUID, target: str) -> Booking:
    """Move a booking to ``target`` and apply the side effects.

    * confirmed: a new access code is issued and the guest notified.
    * checked_in: the room becomes occupied.
    * checked_out: the room goes to cleaning and every code is revoked.
    * cancelled: every code is revoked; the room goes to cleaning only if the
      guest had already checked in.

    Raises:
        NotFoundError: The booking does not exist.
        InvalidTransitionError: ``target`` is not reachable from the current status.
    """
    booking = await get_booking(db, booking_id)
    previous = booking.status
    if not can_transition(previous, target):
        raise InvalidTransitionError(previous, target)

    booking.status = target
    await db.flush()
    logger.info("Booking %s status %s -> %s", booking.booking_number, previous, target)

    if target == BookingStatus.CONFIRMED:
        await access_code_service.generate_code(db, booking.id, notify_guest=True, notify_method="line")
        await notify_booking_event(booking, "booking_confirmed")
    elif target == BookingStatus.CHECKED_IN:
        await room_service.mark_occupied(db, booking.room_id)
    elif target == BookingStatus.CHECKED_OUT:
        await room_service.mark_cleaning(db, booking.room_id)
        await access_code_service.revoke_by_booking(db, booking.id, REVOKE_REASON_CHECKED_OUT)
    elif target == BookingStatus.CANCELLED:
        if previous == BookingStatus.CHECKED_IN:
            await room_service.mark_cleaning(db, booking.room_id)
        await access_code_service.revoke_by_booking(db, booking.id, REVOKE_REASON_CANCELLED)
        await notify_booking_event(booking, "booking_cancelled")

    return booking


async def confirm_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    return await transition_booking(db, booking_id, BookingStatus.CONFIRMED)


async def check_in_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    return await transition_booking(db, booking_id, BookingStatus.CHECKED_IN)


async def check_out_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    return await transition_booking(db, booking_id, BookingStatus.CHECKED_OUT)


async def cancel_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    return await transition_booking(db, booking_id, BookingStatus.CANCELLED)


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------


async def record_payment(
    db: AsyncSession,
    booking_id: uuid.UUID,
    amount: Decimal,
    method: str | None = None,
) -> Booking:
    """Add ``amount`` to what the booking has received and re-derive its payment status.

    Overpayment is accepted as is. The previous method is kept when none is given.

    Raises:
        ValidationError: ``amount`` is negative.
        NotFoundError: The booking does not exist.
    """
    if amount < 0:
        raise ValidationError("Payment amount cannot be negative")

    booking = await get_booking(db, booking_id)
    booking.paid_amount = Decimal(booking.paid_amount or 0) + Decimal(amount)
    booking.payment_status = derive_payment_status(booking.paid_amount, booking.total_price)
    if method:
        booking.payment_method = method

    await db.flush()
    logger.info(
        "Recorded payment of %s on booking %s (paid %s of %s, %s)",
        amount,
        booking.booking_number,
        booking.paid_amount,
        booking.total_price,
        booking.payment_status,
    )
    return booking
