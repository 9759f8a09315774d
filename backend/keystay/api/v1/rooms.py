"""Rooms API routes — CRUD, manual status override, and public availability."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from keystay.api.deps import get_current_active_user, get_db
from keystay.models.room import Room
from keystay.models.user import User
from keystay.schemas.auth import MessageResponse
from keystay.schemas.room import (
    RoomCreate,
    RoomPublicResponse,
    RoomResponse,
    RoomStatsResponse,
    RoomStatusUpdate,
    RoomUpdate,
)
from keystay.services import property_service, room_service
from keystay.services.availability import is_room_available

router = APIRouter(prefix="/api/v1/rooms", tags=["rooms"])


@router.get(
    "/available",
    response_model=list[RoomPublicResponse],
    summary="Rooms open for booking (public)",
)
async def list_available_rooms(
    property_id: uuid.UUID = Query(..., description="Property to list rooms for"),
    check_in: date | None = Query(None, description="Only rooms free from this date"),
    check_out: date | None = Query(None, description="Only rooms free until this date"),
    db: AsyncSession = Depends(get_db),
) -> list[RoomPublicResponse]:
    """Rooms whose status is ``available``, optionally free for a date range too."""
    rooms = await room_service.list_available_rooms(db, property_id)

    if check_in is not None and check_out is not None:
        if check_out <= check_in:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="check_out must be after check_in",
            )
        rooms = [r for r in rooms if await is_room_available(db, r.id, check_in, check_out)]

    return [RoomPublicResponse.model_validate(r) for r in rooms]


@router.get(
    "/stats/{property_id}",
    response_model=RoomStatsResponse,
    summary="Room counts per status",
)
async def get_room_stats(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> RoomStatsResponse:
    await property_service.ensure_property_owner(db, property_id, current_user)
    return RoomStatsResponse(**await room_service.room_stats(db, property_id))


@router.post(
    "",
    response_model=RoomResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a room",
)
async def create_room(
    body: RoomCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> RoomResponse:
    await property_service.ensure_property_owner(db, body.property_id, current_user)
    room = await room_service.create_room(db, body)
    return RoomResponse.model_validate(room)


@router.get(
    "",
    response_model=list[RoomResponse],
    summary="List rooms of a property",
)
async def list_rooms(
    property_id: uuid.UUID = Query(...),
    status_filter: str | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[RoomResponse]:
    await property_service.ensure_property_owner(db, property_id, current_user)
    rooms = await room_service.list_rooms(db, property_id, status=status_filter)
    return [RoomResponse.model_validate(r) for r in rooms]


async def _get_owned_room(db: AsyncSession, room_id: uuid.UUID, user: User) -> Room:
    room = await room_service.get_room(db, room_id)
    await property_service.ensure_property_owner(db, room.property_id, user)
    return room


@router.get(
    "/{room_id}",
    response_model=RoomResponse,
    summary="Get a room by ID",
)
async def get_room(
    room_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> RoomResponse:
    room = await _get_owned_room(db, room_id, current_user)
    return RoomResponse.model_validate(room)


@router.put(
    "/{room_id}",
    response_model=RoomResponse,
    summary="Update a room",
)
async def update_room(
    room_id: uuid.UUID,
    body: RoomUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> RoomResponse:
    """Partially update a room. Existing bookings keep the price they were made at."""
    room = await _get_owned_room(db, room_id, current_user)
    room = await room_service.update_room(db, room, body)
    return RoomResponse.model_validate(room)


@router.patch(
    "/{room_id}/status",
    response_model=RoomResponse,
    summary="Override a room's status",
)
async def update_room_status(
    room_id: uuid.UUID,
    body: RoomStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> RoomResponse:
    """Set the status by hand, e.g. back to ``available`` after cleaning."""
    room = await _get_owned_room(db, room_id, current_user)
    room = await room_service.set_room_status(db, room.id, body.status)
    return RoomResponse.model_validate(room)


@router.delete(
    "/{room_id}",
    response_model=MessageResponse,
    summary="Deactivate a room",
)
async def delete_room(
    room_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    room = await _get_owned_room(db, room_id, current_user)
    await room_service.delete_room(db, room)
    return MessageResponse(message="Room deleted successfully")
