"""Pydantic v2 request/response schemas for room endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

_ROOM_TYPE_PATTERN = "^(standard|deluxe|dormitory|suite)$"
_ROOM_STATUS_PATTERN = "^(available|occupied|cleaning|maintenance)$"

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class RoomCreate(BaseModel):
    """Schema for creating a room. Rooms always start ``available``."""

    property_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=255)
    room_number: str = Field(..., min_length=1, max_length=50)
    room_type: str = Field("standard", pattern=_ROOM_TYPE_PATTERN)
    description: str | None = None
    price: Decimal = Field(..., ge=0)
    capacity: int = Field(2, ge=1)
    bed_type: str | None = Field(None, max_length=100)
    amenities: list[str] = Field(default_factory=list)
    floor: int | None = None


class RoomUpdate(BaseModel):
    """Schema for partially updating a room. Status changes go through /status."""

    name: str | None = Field(None, min_length=1, max_length=255)
    room_number: str | None = Field(None, min_length=1, max_length=50)
    room_type: str | None = Field(None, pattern=_ROOM_TYPE_PATTERN)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0)
    capacity: int | None = Field(None, ge=1)
    bed_type: str | None = Field(None, max_length=100)
    amenities: list[str] | None = None
    floor: int | None = None


class RoomStatusUpdate(BaseModel):
    """Manual status override by the owner."""

    status: str = Field(..., pattern=_ROOM_STATUS_PATTERN)
    notes: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RoomResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    name: str
    room_number: str
    room_type: str
    description: str | None = None
    price: Decimal
    capacity: int
    bed_type: str | None = None
    amenities: list | None = None
    floor: int | None = None
    status: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoomPublicResponse(BaseModel):
    """Room fields exposed on the public booking page."""

    id: uuid.UUID
    name: str
    room_number: str
    room_type: str
    description: str | None = None
    price: Decimal
    capacity: int
    bed_type: str | None = None
    amenities: list | None = None

    model_config = ConfigDict(from_attributes=True)


class RoomStatsResponse(BaseModel):
    """Room counts per status for one property."""

    total: int
    available: int
    occupied: int
    cleaning: int
    maintenance: int
