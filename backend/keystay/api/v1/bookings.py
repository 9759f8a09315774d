"""Bookings API router.

Ownership rule: an owner can only reach bookings on **their** properties.
Guests create bookings and look them up by number without an account; those
routes return the reduced public view.
"""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from keystay.api.deps import get_current_active_user, get_db
from keystay.constants import BookingStatus
from keystay.models.booking import Booking
from keystay.models.user import User
from keystay.schemas.booking import (
    AdminBookingCreate,
    BookingCreate,
    BookingListResponse,
    BookingPublicResponse,
    BookingResponse,
    BookingStatusUpdate,
    BookingUpdate,
    PaymentCreate,
    TodayMovementsResponse,
)
from keystay.services import booking_service, property_service

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _get_owned_booking(db: AsyncSession, booking_id: uuid.UUID, user: User) -> Booking:
    """Fetch a booking and verify the user owns its property (404 / 403)."""
    booking = await booking_service.get_booking(db, booking_id)
    await property_service.ensure_property_owner(db, booking.property_id, user)
    return booking


async def _transition(db: AsyncSession, booking_id: uuid.UUID, user: User, target: str) -> BookingResponse:
    await _get_owned_booking(db, booking_id, user)
    booking = await booking_service.transition_booking(db, booking_id, target)
    return BookingResponse.model_validate(booking)


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=BookingPublicResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Guest self-booking",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
) -> BookingPublicResponse:
    """Create a ``pending`` booking from the public booking page.

    Fails with 404 when the property or room is unknown and 409 when the room
    is taken for any of the nights.
    """
    await property_service.get_property(db, body.property_id)
    booking = await booking_service.create_booking(db, body)
    return BookingPublicResponse.model_validate(booking)


@router.get(
    "/number/{booking_number}",
    response_model=BookingPublicResponse,
    summary="Look up a booking by its number (public)",
)
async def get_booking_by_number(
    booking_number: str,
    db: AsyncSession = Depends(get_db),
) -> BookingPublicResponse:
    booking = await booking_service.get_booking_by_number(db, booking_number)
    return BookingPublicResponse.model_validate(booking)


# ---------------------------------------------------------------------------
# Owner endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/admin",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Walk-in or phone booking, confirmed immediately",
)
async def create_admin_booking(
    body: AdminBookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BookingResponse:
    """Create and confirm a booking in one step; the response carries the new access code."""
    await property_service.ensure_property_owner(db, body.property_id, current_user)
    booking = await booking_service.create_booking(db, body, auto_confirm=True)
    return BookingResponse.model_validate(booking)


@router.get(
    "",
    response_model=BookingListResponse,
    summary="Search bookings on the current user's properties",
)
async def list_bookings(
    property_id: uuid.UUID | None = Query(None, description="Filter by property"),
    room_id: uuid.UUID | None = Query(None, description="Filter by room"),
    status_filter: str | None = Query(None, alias="status", description="Filter by booking status"),
    from_date: date | None = Query(None, description="Bookings with check_in >= this date"),
    to_date: date | None = Query(None, description="Bookings with check_in <= this date"),
    guest_name: str | None = Query(None, description="Part of the guest's first or last name"),
    guest_phone: str | None = Query(None, description="Part of the guest's phone number"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(50, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BookingListResponse:
    if property_id is not None:
        await property_service.ensure_property_owner(db, property_id, current_user)

    items, total = await booking_service.search_bookings(
        db,
        current_user.id,
        property_id=property_id,
        room_id=room_id,
        status=status_filter,
        from_date=from_date,
        to_date=to_date,
        guest_name=guest_name,
        guest_phone=guest_phone,
        skip=skip,
        limit=limit,
    )
    return BookingListResponse(
        items=[BookingResponse.model_validate(b) for b in items],
        total=total,
    )


@router.get(
    "/today/{property_id}",
    response_model=TodayMovementsResponse,
    summary="Today's arrivals and departures",
)
async def get_today_movements(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> TodayMovementsResponse:
    await property_service.ensure_property_owner(db, property_id, current_user)
    check_ins, check_outs = await booking_service.get_today_movements(db, property_id)
    return TodayMovementsResponse(
        check_ins=[BookingResponse.model_validate(b) for b in check_ins],
        check_outs=[BookingResponse.model_validate(b) for b in check_outs],
    )


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking by ID",
)
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BookingResponse:
    booking = await _get_owned_booking(db, booking_id, current_user)
    return BookingResponse.model_validate(booking)


@router.patch(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Update guest details, dates, or notes",
)
async def update_booking(
    booking_id: uuid.UUID,
    body: BookingUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BookingResponse:
    """Partially update a booking. New dates are re-checked for availability."""
    booking = await _get_owned_booking(db, booking_id, current_user)
    booking = await booking_service.update_booking(db, booking, body)
    return BookingResponse.model_validate(booking)


@router.patch(
    "/{booking_id}/status",
    response_model=BookingResponse,
    summary="Change a booking's status",
)
async def update_booking_status(
    booking_id: uuid.UUID,
    body: BookingStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BookingResponse:
    """Apply a status transition; illegal transitions answer 409."""
    booking = await _get_owned_booking(db, booking_id, current_user)
    booking = await booking_service.transition_booking(db, booking.id, body.status)
    if body.notes is not None:
        booking.notes = body.notes
        await db.flush()
    return BookingResponse.model_validate(booking)


@router.post("/{booking_id}/confirm", response_model=BookingResponse, summary="Confirm and issue an access code")
async def confirm_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BookingResponse:
    return await _transition(db, booking_id, current_user, BookingStatus.CONFIRMED)


@router.post("/{booking_id}/checkin", response_model=BookingResponse, summary="Check the guest in")
async def check_in_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BookingResponse:
    return await _transition(db, booking_id, current_user, BookingStatus.CHECKED_IN)


@router.post("/{booking_id}/checkout", response_model=BookingResponse, summary="Check the guest out")
async def check_out_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BookingResponse:
    """Room goes to cleaning and every access code of the booking is revoked."""
    return await _transition(db, booking_id, current_user, BookingStatus.CHECKED_OUT)


@router.post("/{booking_id}/cancel", response_model=BookingResponse, summary="Cancel a booking")
async def cancel_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BookingResponse:
    return await _transition(db, booking_id, current_user, BookingStatus.CANCELLED)


@router.post(
    "/{booking_id}/payment",
    response_model=BookingResponse,
    summary="Record a payment",
)
async def record_payment(
    booking_id: uuid.UUID,
    body: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> BookingResponse:
    await _get_owned_booking(db, booking_id, current_user)
    booking = await booking_service.record_payment(db, booking_id, body.amount, body.method)
    return BookingResponse.model_validate(booking)
