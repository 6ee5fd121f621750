"""Audit browsing service."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.modules.access.service import AccessContext
from app.modules.audit.models import AuditLog
from app.modules.audit.repository import AuditRepository
from app.shared.exceptions import ForbiddenException


class AuditService:
    """Read access to the audit journal."""

    def __init__(self, repository: AuditRepository) -> None:
        self.repository = repository

    async def list_logs(
        self,
        access: AccessContext,
        limit: int,
        offset: int,
        *,
        target_type: str | None = None,
        target_id: str | None = None,
    ) -> tuple[list[AuditLog], int]:
        """List audit logs; entries span territories so only global admins may read them."""
        if not access.capabilities.can_view_all_territories:
            raise ForbiddenException("Only super admins can view audit logs", reason="role")
        return await self.repository.list_audit_logs(
            limit=limit,
            offset=offset,
            target_type=target_type,
            target_id=target_id,
        )


async def get_audit_service(session: AsyncSession = Depends(get_db_session)) -> AuditService:
    """Dependency provider for audit service."""
    return AuditService(AuditRepository(session))
