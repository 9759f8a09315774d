"""Properties CRUD API routes — ownership-scoped, plus the public slug lookup."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from keystay.api.deps import get_current_active_user, get_db
from keystay.models.user import User
from keystay.schemas.auth import MessageResponse
from keystay.schemas.property import (
    PropertyCreate,
    PropertyListResponse,
    PropertyPublicResponse,
    PropertyResponse,
    PropertyUpdate,
)
from keystay.services import property_service

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new property",
)
async def create_property(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> PropertyResponse:
    """Create a property owned by the authenticated user."""
    prop = await property_service.create_property(db, current_user, body)
    return PropertyResponse.model_validate(prop)


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="List properties owned by the current user",
)
async def list_properties(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> PropertyListResponse:
    items = await property_service.list_properties_for_owner(db, current_user.id)
    return PropertyListResponse(
        items=[PropertyResponse.model_validate(p) for p in items],
        total=len(items),
    )


@router.get(
    "/slug/{slug}",
    response_model=PropertyPublicResponse,
    summary="Public property page by slug",
)
async def get_property_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_db),
) -> PropertyPublicResponse:
    prop = await property_service.get_property_by_slug(db, slug)
    if prop is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )
    return PropertyPublicResponse.model_validate(prop)


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Get a property by ID",
)
async def get_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> PropertyResponse:
    prop = await property_service.ensure_property_owner(db, property_id, current_user)
    return PropertyResponse.model_validate(prop)


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Update a property",
)
async def update_property(
    property_id: uuid.UUID,
    body: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> PropertyResponse:
    """Partially update a property. Renaming it regenerates the slug."""
    prop = await property_service.ensure_property_owner(db, property_id, current_user)
    prop = await property_service.update_property(db, prop, body)
    return PropertyResponse.model_validate(prop)


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    summary="Deactivate a property",
)
async def delete_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageResponse:
    """Soft-delete a property. Bookings and access codes are kept."""
    prop = await property_service.ensure_property_owner(db, property_id, current_user)
    await property_service.soft_delete_property(db, prop)
    return MessageResponse(message="Property deleted successfully")
