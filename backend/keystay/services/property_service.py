"""Property service — slugs, room counters, soft delete, and ownership checks."""

import logging
import re
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from keystay.errors import ForbiddenError, NotFoundError
from keystay.models.property import Property
from keystay.models.user import User
from keystay.schemas.property import PropertyCreate, PropertyUpdate

logger = logging.getLogger(__name__)

# Latin letters, digits, Thai block, whitespace and hyphen survive slugging
_SLUG_STRIP = re.compile(r"[^a-z0-9ก-๙\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(name: str) -> str:
    """Turn a property name into a URL-friendly slug, keeping Thai script."""
    slug = _SLUG_STRIP.sub("", name.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip().strip("-") or "property"


async def get_property_by_slug(db: AsyncSession, slug: str) -> Property | None:
    """Return the active property with this slug, if any."""
    result = await db.execute(
        select(Property).where(Property.slug == slug, Property.is_active.is_(True)).limit(1)
    )
    return result.scalar_one_or_none()


async def _unique_slug(
    db: AsyncSession,
    name: str,
    exclude_property_id: uuid.UUID | None = None,
) -> str:
    """Resolve slug collisions with a numeric suffix: ``name``, ``name-1``, ``name-2``..."""
    base = slugify(name)
    slug = base
    counter = 1
    while True:
        result = await db.execute(select(Property.id).where(Property.slug == slug).limit(1))
        existing_id = result.scalar_one_or_none()
        if existing_id is None or existing_id == exclude_property_id:
            return slug
        slug = f"{base}-{counter}"
        counter += 1


async def get_property(db: AsyncSession, property_id: uuid.UUID) -> Property:
    prop = await db.get(Property, property_id)
    if prop is None or not prop.is_active:
        raise NotFoundError("Property")
    return prop


async def ensure_property_owner(db: AsyncSession, property_id: uuid.UUID, user: User) -> Property:
    """Fetch an active property and check that ``user`` owns it.

    Raises:
        NotFoundError: The property does not exist or was soft-deleted.
        ForbiddenError: The property belongs to someone else.
    """
    prop = await get_property(db, property_id)
    if prop.owner_id != user.id:
        raise ForbiddenError()
    return prop


async def list_properties_for_owner(db: AsyncSession, owner_id: uuid.UUID) -> list[Property]:
    result = await db.execute(
        select(Property)
        .where(Property.owner_id == owner_id, Property.is_active.is_(True))
        .order_by(Property.created_at.desc())
    )
    return list(result.scalars().all())


async def create_property(db: AsyncSession, owner: User, data: PropertyCreate) -> Property:
    """Create a property with a unique slug and an empty room counter."""
    prop = Property(
        owner_id=owner.id,
        slug=await _unique_slug(db, data.name),
        total_rooms=0,
        is_active=True,
        **data.model_dump(),
    )
    db.add(prop)
    await db.flush()
    logger.info("Created property %s (slug=%s) for owner %s", prop.id, prop.slug, owner.id)
    return prop


async def update_property(db: AsyncSession, prop: Property, data: PropertyUpdate) -> Property:
    """Apply a partial update; a new name regenerates the slug."""
    update_data = data.model_dump(exclude_unset=True)

    new_name = update_data.get("name")
    if new_name and new_name != prop.name:
        prop.slug = await _unique_slug(db, new_name, exclude_property_id=prop.id)

    for field, value in update_data.items():
        setattr(prop, field, value)

    await db.flush()
    return prop


async def soft_delete_property(db: AsyncSession, prop: Property) -> Property:
    """Deactivate a property. Its bookings and codes stay for history."""
    prop.is_active = False
    await db.flush()
    logger.info("Deactivated property %s", prop.id)
    return prop


async def adjust_room_count(db: AsyncSession, property_id: uuid.UUID, delta: int) -> None:
    """Add ``delta`` to the property's room counter, never going below zero."""
    prop = await db.get(Property, property_id)
    if prop is None:
        return
    prop.total_rooms = max(0, prop.total_rooms + delta)
    await db.flush()
