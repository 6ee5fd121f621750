"""Admin API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from app.core.enums import PropertyStatusEnum
from app.modules.access.service import AccessContext, get_current_access
from app.modules.admin.schemas import AdminAccessUpdate, AdminOverviewRead
from app.modules.admin.service import AdminService, get_admin_service
from app.modules.identity.schemas import UserRead
from app.modules.properties.schemas import PropertyRead
from app.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/properties", response_model=Page[PropertyRead])
async def list_admin_properties(
    status: PropertyStatusEnum | None = None,
    pagination=Depends(get_pagination_params),
    service: AdminService = Depends(get_admin_service),
    access: AccessContext = Depends(get_current_access),
) -> Page[PropertyRead]:
    """Moderation queue scoped to the caller's territory."""
    items, total = await service.list_properties(
        access,
        status=status,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    serialized = [PropertyRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.get("/overview", response_model=AdminOverviewRead)
async def get_admin_overview(
    service: AdminService = Depends(get_admin_service),
    access: AccessContext = Depends(get_current_access),
) -> AdminOverviewRead:
    """Property counts per status."""
    return await service.get_overview(access)


@router.patch("/users/{user_id}/access", response_model=UserRead)
async def update_admin_access(
    user_id: UUID,
    payload: AdminAccessUpdate,
    service: AdminService = Depends(get_admin_service),
    access: AccessContext = Depends(get_current_access),
) -> UserRead:
    """Grant, change or revoke admin access."""
    user = await service.update_admin_access(user_id, payload, access)
    return UserRead.model_validate(user)
