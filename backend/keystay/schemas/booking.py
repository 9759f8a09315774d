"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

_STATUS_PATTERN = "^(pending|confirmed|checked_in|checked_out|cancelled)$"
_PAYMENT_METHOD_PATTERN = "^(cash|promptpay|transfer|card)$"
_PHONE_PATTERN = r"^0[0-9]{9}$"

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class GuestInfo(BaseModel):
    """Guest details embedded in a booking."""

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone_number: str = Field(..., pattern=_PHONE_PATTERN)
    id_number: str | None = Field(None, max_length=50)
    nationality: str = Field("Thai", max_length=100)


class GuestInfoUpdate(BaseModel):
    """Partial guest details; unset fields keep their stored value."""

    first_name: str | None = Field(None, min_length=1, max_length=255)
    last_name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone_number: str | None = Field(None, pattern=_PHONE_PATTERN)
    id_number: str | None = Field(None, max_length=50)
    nationality: str | None = Field(None, max_length=100)


class BookingCreate(BaseModel):
    """Schema for a guest self-booking. Always starts ``pending``."""

    property_id: uuid.UUID
    room_id: uuid.UUID
    guest: GuestInfo
    check_in: date
    check_out: date
    adults: int = Field(1, ge=1)
    children: int = Field(0, ge=0)
    special_requests: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "BookingCreate":
        """Validate that check_out is strictly after check_in."""
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class AdminBookingCreate(BookingCreate):
    """Walk-in or phone booking entered by the owner; confirmed immediately."""

    payment_method: str | None = Field(None, pattern=_PAYMENT_METHOD_PATTERN)
    paid_amount: Decimal | None = Field(None, ge=0)
    notes: str | None = None
    source: str = Field("walk-in", pattern="^(direct|walk-in|phone|other)$")


class BookingUpdate(BaseModel):
    """Schema for partially updating a booking. Status and payments have their own endpoints."""

    guest: GuestInfoUpdate | None = None
    check_in: date | None = None
    check_out: date | None = None
    adults: int | None = Field(None, ge=1)
    children: int | None = Field(None, ge=0)
    special_requests: str | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "BookingUpdate":
        """If both dates are provided, validate check_out > check_in."""
        if self.check_in is not None and self.check_out is not None and self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class BookingStatusUpdate(BaseModel):
    status: str = Field(..., pattern=_STATUS_PATTERN)
    notes: str | None = None


class PaymentCreate(BaseModel):
    """A payment added on top of what the booking has already received."""

    amount: Decimal = Field(..., ge=0)
    method: str | None = Field(None, pattern=_PAYMENT_METHOD_PATTERN)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingResponse(BaseModel):
    """Full booking record returned to the property owner."""

    id: uuid.UUID
    property_id: uuid.UUID
    room_id: uuid.UUID
    booking_number: str
    guest_first_name: str
    guest_last_name: str
    guest_name: str
    guest_email: str
    guest_phone: str
    guest_id_number: str | None = None
    guest_nationality: str
    special_requests: str | None = None
    check_in: date
    check_out: date
    nights: int
    adults: int
    children: int
    room_price: Decimal
    total_price: Decimal
    paid_amount: Decimal
    payment_method: str | None = None
    payment_status: str
    status: str
    source: str
    notes: str | None = None
    access_code: str | None = None
    access_code_expiry: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingPublicResponse(BaseModel):
    """What an anonymous caller may see about a booking."""

    id: uuid.UUID
    booking_number: str
    check_in: date
    check_out: date
    nights: int
    total_price: Decimal
    status: str
    guest_name: str

    model_config = ConfigDict(from_attributes=True)


class BookingListResponse(BaseModel):
    items: list[BookingResponse]
    total: int


class TodayMovementsResponse(BaseModel):
    """Confirmed arrivals and checked-in departures for one day."""

    check_ins: list[BookingResponse]
    check_outs: list[BookingResponse]
