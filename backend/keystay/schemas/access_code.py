"""Pydantic v2 request/response schemas for access-code endpoints."""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from keystay.config import settings
from keystay.database import as_naive_utc

CODE_PATTERN = rf"^[0-9]{{{settings.access_code_length}}}$"

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class AccessCodeGenerate(BaseModel):
    """Issue a code for a booking. The window defaults to the stay plus grace hours."""

    booking_id: uuid.UUID
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    notify_guest: bool = True
    notify_method: str = Field(settings.default_notify_method, pattern="^(line|sms|email|all)$")

    @model_validator(mode="after")
    def check_window(self) -> "AccessCodeGenerate":
        if self.valid_from is None or self.valid_until is None:
            return self
        if as_naive_utc(self.valid_until) <= as_naive_utc(self.valid_from):
            raise ValueError("valid_until must be after valid_from")
        return self


class AccessCodeValidateRequest(BaseModel):
    """Code typed at a check-in terminal."""

    code: str = Field(..., pattern=CODE_PATTERN)
    property_id: uuid.UUID | None = None


class AccessCodeRevoke(BaseModel):
    reason: str = Field(..., min_length=1, max_length=255)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AccessCodeResponse(BaseModel):
    id: uuid.UUID
    booking_id: uuid.UUID
    property_id: uuid.UUID
    room_id: uuid.UUID
    code: str
    valid_from: datetime
    valid_until: datetime
    is_used: bool
    used_at: datetime | None = None
    is_revoked: bool
    revoked_at: datetime | None = None
    revoked_reason: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AccessCodeListItem(AccessCodeResponse):
    """Access code enriched with booking details for the property listing."""

    booking_number: str | None = None
    guest_name: str | None = None
    is_expired: bool


class BookingSummary(BaseModel):
    """Booking details shown on the terminal once a code checks out."""

    id: uuid.UUID
    booking_number: str
    guest_name: str
    room_name: str
    check_in: date
    check_out: date

    model_config = ConfigDict(from_attributes=True)


class ValidationResultResponse(BaseModel):
    is_valid: bool
    message: str
    booking: BookingSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class UseCodeResponse(BaseModel):
    granted: bool
    message: str
    booking: BookingSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class CleanupResponse(BaseModel):
    cleaned_count: int
