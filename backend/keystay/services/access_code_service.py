"""Access code engine — issue, validate, consume, revoke, and clean up entry codes.

This module is the only writer of ``AccessCode`` rows. A code is a fixed-length
numeric string valid for ``[valid_from, valid_until]``; by default the window
opens at the booking's check-in date and closes ``access_code_grace_hours``
after the check-out date so late checkouts can still get in.

Validation failures are ordinary results, not exceptions: the terminal shows
the returned Thai message to the guest. Revoked codes are filtered out at
lookup, so a revoked code reads exactly like one that was never issued.

Concurrency: every call runs inside the request's single transaction (see
``keystay.database.get_db``) but nothing takes row locks.

* Two ``generate_code`` calls for the same booking can both pass the collision
  check and both persist a live code. The booking's cached ``access_code``
  then shows whichever write landed last. Callers issue codes from one place
  per lifecycle event (confirm, regenerate, explicit generate).
* Two ``use_code`` calls for the same code can both pass the ``is_used`` check
  before either marks it, so both grant entry and both attempt check-in. This
  is accepted: one booking, one door, usually one party arriving together.
"""

import logging
import re
import secrets
import string
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from keystay.config import settings
from keystay.constants import (
    BookingStatus,
    REVOKE_REASON_EXPIRED,
    REVOKE_REASON_REGENERATED,
)
from keystay.database import as_naive_utc, utcnow
from keystay.errors import GenerationExhaustedError, NotFoundError, ValidationError
from keystay.models.access_code import AccessCode
from keystay.models.booking import Booking
from keystay.models.room import Room
from keystay.services.notifications import notify_access_code

logger = logging.getLogger(__name__)

MSG_NOT_FOUND = "รหัสไม่ถูกต้อง"
MSG_WRONG_PROPERTY = "รหัสไม่ถูกต้องสำหรับที่พักนี้"
MSG_REVOKED = "รหัสถูกยกเลิกแล้ว"
MSG_USED = "รหัสถูกใช้งานแล้ว"
MSG_NOT_YET_ACTIVE = "รหัสยังไม่เริ่มใช้งาน"
MSG_EXPIRED = "รหัสหมดอายุแล้ว"
MSG_BOOKING_MISSING = "ไม่พบข้อมูลการจอง"
MSG_VALID = "รหัสถูกต้อง"
MSG_GRANTED = "Access granted"

_NUMERIC = re.compile(r"[0-9]+")


@dataclass
class BookingSummary:
    id: uuid.UUID
    booking_number: str
    guest_name: str
    room_name: str
    check_in: date
    check_out: date


@dataclass
class ValidationResult:
    is_valid: bool
    message: str
    booking: BookingSummary | None = None
    access_code: AccessCode | None = field(default=None, repr=False)


@dataclass
class UseResult:
    granted: bool
    message: str
    booking: BookingSummary | None = None


@dataclass
class AccessCodeListing:
    """A code with the booking details shown in the property listing."""

    access_code: AccessCode
    booking_number: str | None
    guest_name: str | None
    is_expired: bool


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _random_code(length: int) -> str:
    """Uniformly random numeric string of ``length`` digits."""
    return "".join(secrets.choice(string.digits) for _ in range(length))


def default_validity_window(check_in: date, check_out: date) -> tuple[datetime, datetime]:
    """Window from check-in midnight until check-out midnight plus the grace period."""
    valid_from = datetime.combine(check_in, time.min)
    valid_until = datetime.combine(check_out, time.min) + timedelta(hours=settings.access_code_grace_hours)
    return valid_from, valid_until


def ensure_code_format(code: str) -> None:
    """Reject anything that is not exactly ``access_code_length`` ASCII digits."""
    if len(code) != settings.access_code_length or not _NUMERIC.fullmatch(code):
        raise ValidationError(f"Access code must be {settings.access_code_length} digits")


async def _get_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking:
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError("Booking")
    return booking


async def _summarize(db: AsyncSession, booking: Booking) -> BookingSummary:
    room = await db.get(Room, booking.room_id)
    return BookingSummary(
        id=booking.id,
        booking_number=booking.booking_number,
        guest_name=booking.guest_name,
        room_name=room.name if room is not None else str(booking.room_id),
        check_in=booking.check_in,
        check_out=booking.check_out,
    )


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


async def get_code(db: AsyncSession, access_code_id: uuid.UUID) -> AccessCode:
    access_code = await db.get(AccessCode, access_code_id)
    if access_code is None:
        raise NotFoundError("Access code")
    return access_code


async def find_by_code(db: AsyncSession, code: str) -> AccessCode | None:
    """Return the non-revoked code with this value, if any."""
    result = await db.execute(
        select(AccessCode).where(AccessCode.code == code, AccessCode.is_revoked.is_(False)).limit(1)
    )
    return result.scalar_one_or_none()


async def list_codes_for_booking(db: AsyncSession, booking_id: uuid.UUID) -> list[AccessCode]:
    """Every code ever issued for a booking, newest first."""
    result = await db.execute(
        select(AccessCode).where(AccessCode.booking_id == booking_id).order_by(AccessCode.created_at.desc())
    )
    return list(result.scalars().all())


async def find_active_code(db: AsyncSession, booking_id: uuid.UUID) -> AccessCode | None:
    """The unrevoked, unused, unexpired code of a booking with the latest expiry."""
    result = await db.execute(
        select(AccessCode)
        .where(
            AccessCode.booking_id == booking_id,
            AccessCode.is_revoked.is_(False),
            AccessCode.is_used.is_(False),
            AccessCode.valid_until > utcnow(),
        )
        .order_by(AccessCode.valid_until.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def list_codes_for_property(
    db: AsyncSession,
    property_id: uuid.UUID,
    include_expired: bool = False,
) -> list[AccessCodeListing]:
    """Non-revoked codes of a property with booking number and guest name attached."""
    now = utcnow()
    query = select(AccessCode).where(AccessCode.property_id == property_id, AccessCode.is_revoked.is_(False))
    if not include_expired:
        query = query.where(AccessCode.valid_until > now)
    result = await db.execute(query.order_by(AccessCode.valid_until.desc()))
    codes = list(result.scalars().all())

    booking_ids = list({c.booking_id for c in codes})
    bookings: dict[uuid.UUID, Booking] = {}
    if booking_ids:
        booking_result = await db.execute(select(Booking).where(Booking.id.in_(booking_ids)))
        bookings = {b.id: b for b in booking_result.scalars()}

    listings = []
    for access_code in codes:
        booking = bookings.get(access_code.booking_id)
        listings.append(
            AccessCodeListing(
                access_code=access_code,
                booking_number=booking.booking_number if booking else None,
                guest_name=booking.guest_name if booking else None,
                is_expired=access_code.is_expired(now),
            )
        )
    return listings


# ---------------------------------------------------------------------------
# Issue
# ---------------------------------------------------------------------------


async def _draw_unique_code(db: AsyncSession) -> str:
    attempts = settings.access_code_max_attempts
    for _ in range(attempts):
        code = _random_code(settings.access_code_length)
        if await find_by_code(db, code) is None:
            return code
    raise GenerationExhaustedError(attempts)


async def generate_code(
    db: AsyncSession,
    booking_id: uuid.UUID,
    valid_from: datetime | None = None,
    valid_until: datetime | None = None,
    notify_guest: bool = True,
    notify_method: str | None = None,
) -> AccessCode:
    """Issue a new code for a booking and cache it on the booking.

    Booking and room status are left untouched.

    Raises:
        NotFoundError: The booking does not exist.
        ValidationError: The resolved window does not end after it starts.
        GenerationExhaustedError: Every draw collided with a non-revoked code.
    """
    booking = await _get_booking(db, booking_id)

    default_from, default_until = default_validity_window(booking.check_in, booking.check_out)
    window_from = as_naive_utc(valid_from) if valid_from is not None else default_from
    window_until = as_naive_utc(valid_until) if valid_until is not None else default_until
    if window_until <= window_from:
        raise ValidationError("valid_until must be after valid_from")

    code = await _draw_unique_code(db)

    access_code = AccessCode(
        booking_id=booking.id,
        property_id=booking.property_id,
        room_id=booking.room_id,
        code=code,
        valid_from=window_from,
        valid_until=window_until,
        is_used=False,
        is_revoked=False,
    )
    db.add(access_code)

    booking.access_code = code
    booking.access_code_expiry = window_until
    await db.flush()

    logger.info(
        "Issued access code %s for booking %s (valid %s to %s)",
        access_code.id,
        booking.id,
        window_from.isoformat(),
        window_until.isoformat(),
    )

    if notify_guest:
        await notify_access_code(booking, access_code, notify_method or settings.default_notify_method)

    return access_code


# ---------------------------------------------------------------------------
# Validate / use
# ---------------------------------------------------------------------------


async def validate_code(
    db: AsyncSession,
    code: str,
    property_id: uuid.UUID | None = None,
) -> ValidationResult:
    """Check a code without changing anything.

    Checks run in order and the first failure wins: not found, wrong
    property, revoked, used, not yet active, expired, booking missing.

    Raises:
        ValidationError: ``code`` is not a well-formed numeric code.
    """
    ensure_code_format(code)

    access_code = await find_by_code(db, code)
    if access_code is None:
        return ValidationResult(is_valid=False, message=MSG_NOT_FOUND)

    if property_id is not None and access_code.property_id != property_id:
        return ValidationResult(is_valid=False, message=MSG_WRONG_PROPERTY)

    if access_code.is_revoked:
        return ValidationResult(is_valid=False, message=MSG_REVOKED)

    if access_code.is_used:
        return ValidationResult(is_valid=False, message=MSG_USED)

    now = utcnow()
    if now < access_code.valid_from:
        return ValidationResult(is_valid=False, message=MSG_NOT_YET_ACTIVE)

    if now > access_code.valid_until:
        return ValidationResult(is_valid=False, message=MSG_EXPIRED)

    booking = await db.get(Booking, access_code.booking_id)
    if booking is None:
        return ValidationResult(is_valid=False, message=MSG_BOOKING_MISSING)

    return ValidationResult(
        is_valid=True,
        message=MSG_VALID,
        booking=await _summarize(db, booking),
        access_code=access_code,
    )


async def use_code(
    db: AsyncSession,
    code: str,
    property_id: uuid.UUID | None = None,
) -> UseResult:
    """Consume a code at the door.

    Validation is repeated here rather than trusting an earlier
    ``validate_code`` call. On success the code is marked used, and a booking
    still in ``confirmed`` is checked in, which marks the room occupied.
    """
    validation = await validate_code(db, code, property_id)
    if not validation.is_valid:
        logger.info("Rejected access code use: %s", validation.message)
        return UseResult(granted=False, message=validation.message)

    access_code = validation.access_code
    access_code.is_used = True
    access_code.used_at = utcnow()
    await db.flush()
    logger.info("Access code %s used for booking %s", access_code.id, access_code.booking_id)

    booking = await db.get(Booking, access_code.booking_id)
    if booking is not None and booking.status == BookingStatus.CONFIRMED:
        # Deferred: booking transitions themselves issue and revoke codes
        from keystay.services import booking_service

        await booking_service.check_in_booking(db, booking.id)

    return UseResult(granted=True, message=MSG_GRANTED, booking=validation.booking)


# ---------------------------------------------------------------------------
# Revoke / regenerate / cleanup
# ---------------------------------------------------------------------------


def _mark_revoked(access_code: AccessCode, reason: str) -> None:
    access_code.is_revoked = True
    access_code.revoked_at = utcnow()
    access_code.revoked_reason = reason


async def revoke_code(db: AsyncSession, access_code_id: uuid.UUID, reason: str) -> AccessCode:
    """Revoke one code. Revoking twice just overwrites the reason and timestamp.

    Raises:
        ValidationError: ``reason`` is blank.
        NotFoundError: No code with this id.
    """
    if not reason or not reason.strip():
        raise ValidationError("A revocation reason is required")

    access_code = await get_code(db, access_code_id)
    _mark_revoked(access_code, reason)
    await db.flush()
    logger.info("Revoked access code %s (%s)", access_code.id, reason)
    return access_code


async def revoke_by_booking(db: AsyncSession, booking_id: uuid.UUID, reason: str) -> int:
    """Revoke every non-revoked code of a booking and return how many changed."""
    result = await db.execute(
        select(AccessCode).where(AccessCode.booking_id == booking_id, AccessCode.is_revoked.is_(False))
    )
    codes = list(result.scalars().all())
    for access_code in codes:
        _mark_revoked(access_code, reason)
    await db.flush()

    if codes:
        logger.info("Revoked %d access code(s) for booking %s (%s)", len(codes), booking_id, reason)
    return len(codes)


async def regenerate_code(db: AsyncSession, booking_id: uuid.UUID) -> AccessCode:
    """Revoke all of a booking's codes and issue a fresh one.

    At most one live code survives. Both steps share the caller's transaction.

    Raises:
        NotFoundError: The booking does not exist.
    """
    await _get_booking(db, booking_id)
    await revoke_by_booking(db, booking_id, REVOKE_REASON_REGENERATED)
    return await generate_code(db, booking_id, notify_guest=True, notify_method="line")


async def cleanup_expired_codes(db: AsyncSession, property_id: uuid.UUID) -> int:
    """Revoke the property's non-revoked codes whose window has closed.

    Until this runs, expired codes still show up when listings include
    expired entries; expiry is otherwise only computed.
    """
    result = await db.execute(
        select(AccessCode).where(
            AccessCode.property_id == property_id,
            AccessCode.is_revoked.is_(False),
            AccessCode.valid_until < utcnow(),
        )
    )
    expired = list(result.scalars().all())
    for access_code in expired:
        _mark_revoked(access_code, REVOKE_REASON_EXPIRED)
    await db.flush()

    logger.info("Cleaned up %d expired access code(s) for property %s", len(expired), property_id)
    return len(expired)
