"""Room service — room CRUD and the room status tracker.

Room status is written by booking transitions (``mark_occupied`` on check-in,
``mark_cleaning`` on checkout) and by the owner's manual override. Writes are
last-write-wins; a manual override racing a booking transition is not
reconciled.
"""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from keystay.constants import RoomStatus
from keystay.errors import ConflictError, NotFoundError
from keystay.models.room import Room
from keystay.schemas.room import RoomCreate, RoomUpdate
from keystay.services.property_service import adjust_room_count

logger = logging.getLogger(__name__)


async def get_room(db: AsyncSession, room_id: uuid.UUID) -> Room:
    room = await db.get(Room, room_id)
    if room is None or not room.is_active:
        raise NotFoundError("Room")
    return room


async def find_by_room_number(db: AsyncSession, property_id: uuid.UUID, room_number: str) -> Room | None:
    result = await db.execute(
        select(Room)
        .where(
            Room.property_id == property_id,
            Room.room_number == room_number,
            Room.is_active.is_(True),
        )
        .limit(1)
    )
    return result.scalar_one_or_none()


async def list_rooms(db: AsyncSession, property_id: uuid.UUID, status: str | None = None) -> list[Room]:
    """Active rooms of a property ordered by room number."""
    query = select(Room).where(Room.property_id == property_id, Room.is_active.is_(True))
    if status is not None:
        query = query.where(Room.status == status)
    result = await db.execute(query.order_by(Room.room_number.asc()))
    return list(result.scalars().all())


async def list_available_rooms(db: AsyncSession, property_id: uuid.UUID) -> list[Room]:
    return await list_rooms(db, property_id, status=RoomStatus.AVAILABLE)


async def create_room(db: AsyncSession, data: RoomCreate) -> Room:
    """Create an ``available`` room and bump the property's room counter."""
    if await find_by_room_number(db, data.property_id, data.room_number) is not None:
        raise ConflictError("Room number already exists")

    room = Room(status=RoomStatus.AVAILABLE, is_active=True, **data.model_dump())
    db.add(room)
    await db.flush()
    await adjust_room_count(db, data.property_id, 1)
    logger.info("Created room %s (%s) in property %s", room.id, room.room_number, room.property_id)
    return room


async def update_room(db: AsyncSession, room: Room, data: RoomUpdate) -> Room:
    update_data = data.model_dump(exclude_unset=True)

    new_number = update_data.get("room_number")
    if new_number and new_number != room.room_number:
        if await find_by_room_number(db, room.property_id, new_number) is not None:
            raise ConflictError("Room number already exists")

    for field, value in update_data.items():
        setattr(room, field, value)

    await db.flush()
    return room


async def delete_room(db: AsyncSession, room: Room) -> None:
    """Soft-delete a room and decrement the property's room counter."""
    room.is_active = False
    await db.flush()
    await adjust_room_count(db, room.property_id, -1)
    logger.info("Deactivated room %s in property %s", room.id, room.property_id)


async def set_room_status(db: AsyncSession, room_id: uuid.UUID, status: str) -> Room | None:
    """Overwrite a room's status. Returns ``None`` when the room is gone."""
    if status not in RoomStatus.ALL:
        raise ValueError(f"Unknown room status: {status!r}")

    room = await db.get(Room, room_id)
    if room is None:
        logger.warning("Room %s not found while setting status %s", room_id, status)
        return None

    previous = room.status
    room.status = status
    await db.flush()
    logger.info("Room %s status %s -> %s", room.id, previous, status)
    return room


async def mark_occupied(db: AsyncSession, room_id: uuid.UUID) -> Room | None:
    return await set_room_status(db, room_id, RoomStatus.OCCUPIED)


async def mark_cleaning(db: AsyncSession, room_id: uuid.UUID) -> Room | None:
    return await set_room_status(db, room_id, RoomStatus.CLEANING)


async def mark_available(db: AsyncSession, room_id: uuid.UUID) -> Room | None:
    return await set_room_status(db, room_id, RoomStatus.AVAILABLE)


async def mark_maintenance(db: AsyncSession, room_id: uuid.UUID) -> Room | None:
    return await set_room_status(db, room_id, RoomStatus.MAINTENANCE)


async def room_stats(db: AsyncSession, property_id: uuid.UUID) -> dict[str, int]:
    """Count active rooms per status, plus a ``total``."""
    result = await db.execute(
        select(Room.status, func.count())
        .where(Room.property_id == property_id, Room.is_active.is_(True))
        .group_by(Room.status)
    )
    stats = {status: 0 for status in RoomStatus.ALL}
    for status, count in result.all():
        stats[status] = count
    stats["total"] = sum(stats.values())
    return stats
