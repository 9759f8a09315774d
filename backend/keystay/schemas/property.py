"""Pydantic v2 request/response schemas for property endpoints."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

_TIME_PATTERN = r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$"

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PropertyCreate(BaseModel):
    """Schema for creating a new property. The slug is derived from the name."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    address: str = Field(..., min_length=1, max_length=500)
    district: str | None = Field(None, max_length=255)
    province: str = Field(..., min_length=1, max_length=255)
    postal_code: str | None = Field(None, pattern=r"^[0-9]{5}$")
    phone_number: str | None = Field(None, pattern=r"^0[0-9]{9}$")
    email: EmailStr | None = None
    line_id: str | None = Field(None, max_length=100)
    check_in_time: str = Field("14:00", pattern=_TIME_PATTERN)
    check_out_time: str = Field("12:00", pattern=_TIME_PATTERN)
    amenities: list[str] = Field(default_factory=list)


class PropertyUpdate(BaseModel):
    """Schema for partially updating a property. All fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    address: str | None = Field(None, min_length=1, max_length=500)
    district: str | None = Field(None, max_length=255)
    province: str | None = Field(None, min_length=1, max_length=255)
    postal_code: str | None = Field(None, pattern=r"^[0-9]{5}$")
    phone_number: str | None = Field(None, pattern=r"^0[0-9]{9}$")
    email: EmailStr | None = None
    line_id: str | None = Field(None, max_length=100)
    check_in_time: str | None = Field(None, pattern=_TIME_PATTERN)
    check_out_time: str | None = Field(None, pattern=_TIME_PATTERN)
    amenities: list[str] | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PropertyResponse(BaseModel):
    """Property information returned to its owner."""

    id: uuid.UUID
    owner_id: uuid.UUID
    name: str
    slug: str
    description: str | None = None
    address: str
    district: str | None = None
    province: str
    postal_code: str | None = None
    phone_number: str | None = None
    email: str | None = None
    line_id: str | None = None
    check_in_time: str
    check_out_time: str
    amenities: list | None = None
    total_rooms: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PropertyPublicResponse(BaseModel):
    """Reduced property view for the public booking page."""

    id: uuid.UUID
    name: str
    slug: str
    description: str | None = None
    address: str
    district: str | None = None
    province: str
    check_in_time: str
    check_out_time: str
    amenities: list | None = None

    model_config = ConfigDict(from_attributes=True)


class PropertyListResponse(BaseModel):
    """List of properties."""

    items: list[PropertyResponse]
    total: int
