"""Access code API router.

``validate`` and ``use`` are called by the check-in terminal without an
account; everything else is restricted to the owner of the code's property.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from keystay.api.deps import get_current_active_user, get_db
from keystay.errors import CodeInvalidError
from keystay.models.user import User
from keystay.schemas.access_code import (
    AccessCodeGenerate,
    AccessCodeListItem,
    AccessCodeResponse,
    AccessCodeRevoke,
    AccessCodeValidateRequest,
    CleanupResponse,
    UseCodeResponse,
    ValidationResultResponse,
)
from keystay.services import access_code_service, booking_service, property_service

router = APIRouter(prefix="/api/v1/access-codes", tags=["access-codes"])


async def _ensure_booking_owner(db: AsyncSession, booking_id: uuid.UUID, user: User) -> None:
    booking = await booking_service.get_booking(db, booking_id)
    await property_service.ensure_property_owner(db, booking.property_id, user)


# ---------------------------------------------------------------------------
# Terminal endpoints (public)
# ---------------------------------------------------------------------------


@router.post(
    "/validate",
    response_model=ValidationResultResponse,
    summary="Check a code without consuming it",
)
async def validate_code(
    body: AccessCodeValidateRequest,
    db: AsyncSession = Depends(get_db),
) -> ValidationResultResponse:
    """Always 200; ``is_valid`` and the localized ``message`` say what happened."""
    result = await access_code_service.validate_code(db, body.code, body.property_id)
    return ValidationResultResponse.model_validate(result)


@router.post(
    "/use/{code}",
    response_model=UseCodeResponse,
    summary="Consume a code at the door",
)
async def use_code(
    code: str,
    property_id: uuid.UUID | None = Query(None, description="Property of the terminal"),
    db: AsyncSession = Depends(get_db),
) -> UseCodeResponse:
    """Grant entry and check the guest in. A refused code answers 400 ``CODE_INVALID``."""
    result = await access_code_service.use_code(db, code, property_id)
    if not result.granted:
        raise CodeInvalidError(result.message)
    return UseCodeResponse.model_validate(result)


# ---------------------------------------------------------------------------
# Owner endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/generate",
    response_model=AccessCodeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue a code for a booking",
)
async def generate_code(
    body: AccessCodeGenerate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> AccessCodeResponse:
    await _ensure_booking_owner(db, body.booking_id, current_user)
    access_code = await access_code_service.generate_code(
        db,
        body.booking_id,
        valid_from=body.valid_from,
        valid_until=body.valid_until,
        notify_guest=body.notify_guest,
        notify_method=body.notify_method,
    )
    return AccessCodeResponse.model_validate(access_code)


@router.get(
    "",
    response_model=list[AccessCodeListItem],
    summary="Codes of a property",
)
async def list_property_codes(
    property_id: uuid.UUID = Query(...),
    include_expired: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[AccessCodeListItem]:
    """Non-revoked codes with booking number and guest name, latest expiry first."""
    await property_service.ensure_property_owner(db, property_id, current_user)
    listings = await access_code_service.list_codes_for_property(db, property_id, include_expired)
    return [
        AccessCodeListItem(
            **AccessCodeResponse.model_validate(listing.access_code).model_dump(),
            booking_number=listing.booking_number,
            guest_name=listing.guest_name,
            is_expired=listing.is_expired,
        )
        for listing in listings
    ]


@router.get(
    "/booking/{booking_id}",
    response_model=list[AccessCodeResponse],
    summary="Every code issued for a booking",
)
async def list_booking_codes(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[AccessCodeResponse]:
    await _ensure_booking_owner(db, booking_id, current_user)
    codes = await access_code_service.list_codes_for_booking(db, booking_id)
    return [AccessCodeResponse.model_validate(c) for c in codes]


@router.post(
    "/{access_code_id}/revoke",
    response_model=AccessCodeResponse,
    summary="Revoke a code",
)
async def revoke_code(
    access_code_id: uuid.UUID,
    body: AccessCodeRevoke,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> AccessCodeResponse:
    access_code = await access_code_service.get_code(db, access_code_id)
    await property_service.ensure_property_owner(db, access_code.property_id, current_user)
    access_code = await access_code_service.revoke_code(db, access_code_id, body.reason)
    return AccessCodeResponse.model_validate(access_code)


@router.post(
    "/regenerate/{booking_id}",
    response_model=AccessCodeResponse,
    summary="Replace a booking's codes with a fresh one",
)
async def regenerate_code(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> AccessCodeResponse:
    await _ensure_booking_owner(db, booking_id, current_user)
    access_code = await access_code_service.regenerate_code(db, booking_id)
    return AccessCodeResponse.model_validate(access_code)


@router.post(
    "/cleanup/{property_id}",
    response_model=CleanupResponse,
    summary="Revoke the property's expired codes",
)
async def cleanup_expired_codes(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> CleanupResponse:
    await property_service.ensure_property_owner(db, property_id, current_user)
    cleaned = await access_code_service.cleanup_expired_codes(db, property_id)
    return CleanupResponse(cleaned_count=cleaned)
