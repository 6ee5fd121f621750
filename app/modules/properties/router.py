"""Properties API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.modules.access.service import AccessContext, get_current_access
from app.modules.properties.schemas import (
    PropertyCreate,
    PropertyRead,
    PropertyStatusUpdate,
    PropertyUpdate,
)
from app.modules.properties.service import PropertyService, get_property_service
from app.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/properties", tags=["properties"])


@router.post("", response_model=PropertyRead, status_code=status.HTTP_201_CREATED)
async def create_property(
    payload: PropertyCreate,
    service: PropertyService = Depends(get_property_service),
    access: AccessContext = Depends(get_current_access),
) -> PropertyRead:
    """Create a draft listing."""
    record = await service.create_property(payload, access)
    return PropertyRead.model_validate(record)


@router.get("/my", response_model=Page[PropertyRead])
async def list_my_properties(
    pagination=Depends(get_pagination_params),
    service: PropertyService = Depends(get_property_service),
    access: AccessContext = Depends(get_current_access),
) -> Page[PropertyRead]:
    """List the caller's listings."""
    items, total = await service.list_my_properties(access, pagination.limit, pagination.offset)
    serialized = [PropertyRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.get("/{property_id}", response_model=PropertyRead)
async def get_property(
    property_id: UUID,
    service: PropertyService = Depends(get_property_service),
    access: AccessContext = Depends(get_current_access),
) -> PropertyRead:
    """Get a listing."""
    record = await service.get_property(property_id, access)
    return PropertyRead.model_validate(record)


@router.patch("/{property_id}", response_model=PropertyRead)
async def update_property(
    property_id: UUID,
    payload: PropertyUpdate,
    service: PropertyService = Depends(get_property_service),
    access: AccessContext = Depends(get_current_access),
) -> PropertyRead:
    """Edit a draft or rejected listing."""
    record = await service.update_property(property_id, payload, access)
    return PropertyRead.model_validate(record)


@router.post("/{property_id}/submit", response_model=PropertyRead)
async def submit_property(
    property_id: UUID,
    service: PropertyService = Depends(get_property_service),
    access: AccessContext = Depends(get_current_access),
) -> PropertyRead:
    """Send a draft to moderation."""
    record = await service.submit_property(property_id, access)
    return PropertyRead.model_validate(record)


@router.post("/{property_id}/resubmit", response_model=PropertyRead)
async def resubmit_property(
    property_id: UUID,
    service: PropertyService = Depends(get_property_service),
    access: AccessContext = Depends(get_current_access),
) -> PropertyRead:
    """Send a rejected listing back to moderation."""
    record = await service.resubmit_property(property_id, access)
    return PropertyRead.model_validate(record)


@router.put("/{property_id}/status", response_model=PropertyRead)
async def update_property_status(
    property_id: UUID,
    payload: PropertyStatusUpdate,
    service: PropertyService = Depends(get_property_service),
    access: AccessContext = Depends(get_current_access),
) -> PropertyRead:
    """Approve or reject a listing (admins)."""
    record = await service.moderate_property(property_id, payload, access)
    return PropertyRead.model_validate(record)
