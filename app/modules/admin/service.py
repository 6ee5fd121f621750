"""Admin business logic layer."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.enums import AdminLevelEnum, PropertyStatusEnum, RoleEnum
from app.modules.access.service import AccessContext
from app.modules.access.territory import describe_scope
from app.modules.admin.schemas import AdminAccessUpdate, AdminOverviewRead
from app.modules.audit.logger import AuditLogger, get_audit_logger
from app.modules.audit.schemas import AuditEntry
from app.modules.identity.models import User
from app.modules.identity.repository import IdentityRepository
from app.modules.properties.models import Property
from app.modules.properties.repository import PropertyRepository
from app.modules.territories.repository import TerritoryRepository
from app.shared.exceptions import ForbiddenException, NotFoundException, ValidationException
from app.shared.utils import normalize_territory_code, utc_now

logger = logging.getLogger(__name__)


class AdminService:
    """Admin console: moderation queue, overview and admin management."""

    def __init__(
        self,
        property_repository: PropertyRepository,
        identity_repository: IdentityRepository,
        territory_repository: TerritoryRepository,
        audit_logger: AuditLogger,
    ) -> None:
        self.property_repository = property_repository
        self.identity_repository = identity_repository
        self.territory_repository = territory_repository
        self.audit_logger = audit_logger

    async def list_properties(
        self,
        access: AccessContext,
        *,
        status: PropertyStatusEnum | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Property], int]:
        """List properties visible to the caller, optionally by status."""
        self._require_admin(access)
        return await self.property_repository.list_scoped(
            access.capabilities,
            status=status,
            limit=limit,
            offset=offset,
        )

    async def get_overview(self, access: AccessContext) -> AdminOverviewRead:
        """Return property counts per status for the caller's territory scope."""
        self._require_admin(access)
        counts = await self.property_repository.count_by_status(access.capabilities)
        by_status = {status: counts.get(status, 0) for status in PropertyStatusEnum}
        return AdminOverviewRead(
            generated_at=utc_now(),
            territory_scope=describe_scope(access.capabilities),
            properties_total=sum(by_status.values()),
            properties_by_status=by_status,
        )

    async def update_admin_access(
        self,
        user_id: UUID,
        payload: AdminAccessUpdate,
        access: AccessContext,
    ) -> User:
        """Change a user's role, admin level and territory."""
        if not access.capabilities.can_manage_admins:
            raise ForbiddenException("Only super admins can manage admin access", reason="role")

        user = await self.identity_repository.get_user_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found")

        admin_level, territory_code = await self._validate_access(payload)
        role = await self.identity_repository.get_role_by_name(payload.role)
        if role is None:
            raise NotFoundException("Role not found")

        previous = {
            "role": str(user.role.name),
            "admin_level": str(user.admin_level) if user.admin_level else None,
            "territory": user.territory_code,
        }
        updated = await self.identity_repository.update_admin_access(
            user,
            role=role,
            admin_level=admin_level,
            territory_code=territory_code,
        )
        logger.info(
            "Admin access for user %s changed by %s: role=%s level=%s territory=%s",
            user_id,
            access.identity.id,
            payload.role,
            admin_level,
            territory_code,
        )
        self.audit_logger.record(
            AuditEntry(
                admin_id=access.identity.id,
                action_type="admin_access_updated",
                target_type="user",
                target_id=str(user_id),
                details={
                    "previous": previous,
                    "role": str(payload.role),
                    "admin_level": str(admin_level) if admin_level else None,
                    "territory": territory_code,
                },
            ),
        )
        return updated

    async def _validate_access(
        self,
        payload: AdminAccessUpdate,
    ) -> tuple[AdminLevelEnum | None, str | None]:
        if payload.role != RoleEnum.ADMIN:
            return None, None

        if payload.admin_level is None:
            raise ValidationException("Admin level is required for admin role")

        territory_code = normalize_territory_code(payload.territory_code)
        if payload.admin_level == AdminLevelEnum.OWNER and territory_code is None:
            raise ValidationException("Territory owners need a territory")
        if territory_code is not None:
            territory = await self.territory_repository.get_by_code(territory_code)
            if territory is None:
                raise ValidationException(f"Unknown territory '{payload.territory_code}'")
        return payload.admin_level, territory_code

    @staticmethod
    def _require_admin(access: AccessContext) -> None:
        if not access.capabilities.is_admin:
            raise ForbiddenException("Only admins can use the admin console", reason="role")


async def get_admin_service(session: AsyncSession = Depends(get_db_session)) -> AdminService:
    """Dependency provider for admin service."""
    return AdminService(
        PropertyRepository(session),
        IdentityRepository(session),
        TerritoryRepository(session),
        get_audit_logger(),
    )
