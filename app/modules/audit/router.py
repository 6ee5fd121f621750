"""Audit API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.modules.access.service import AccessContext, get_current_access
from app.modules.audit.schemas import AuditLogRead
from app.modules.audit.service import AuditService, get_audit_service
from app.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/logs", response_model=Page[AuditLogRead])
async def list_logs(
    target_type: str | None = None,
    target_id: str | None = None,
    pagination=Depends(get_pagination_params),
    service: AuditService = Depends(get_audit_service),
    access: AccessContext = Depends(get_current_access),
) -> Page[AuditLogRead]:
    """List audit logs."""
    items, total = await service.list_logs(
        access,
        pagination.limit,
        pagination.offset,
        target_type=target_type,
        target_id=target_id,
    )
    serialized = [AuditLogRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)
