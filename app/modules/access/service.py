"""Caller access resolution shared by every protected endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.security import oauth2_scheme, subject_from_access_token
from app.modules.access.permissions import CapabilitySet, resolve_capabilities
from app.modules.access.profile_store import AdminIdentity, ProfileStore
from app.modules.access.registry import AdminRegistry, get_admin_registry
from app.modules.identity.repository import IdentityRepository
from app.shared.exceptions import UnauthenticatedException

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AccessContext:
    """Caller identity plus the capability set derived for this request."""

    identity: AdminIdentity
    capabilities: CapabilitySet


class AccessService:
    """Load a caller profile and derive its capabilities."""

    def __init__(self, profile_store: ProfileStore, registry: AdminRegistry) -> None:
        self.profile_store = profile_store
        self.registry = registry

    async def resolve(self, user_id: UUID) -> AccessContext:
        identity = await self.profile_store.load(user_id)
        if identity is None:
            raise UnauthenticatedException("Caller identity could not be resolved")

        capabilities = resolve_capabilities(identity, self.registry)
        if capabilities.override_applied:
            logger.info(
                "Admin override applied for user %s (level=%s)",
                identity.id,
                capabilities.admin_level,
            )
        return AccessContext(identity=identity, capabilities=capabilities)


async def get_access_service(session: AsyncSession = Depends(get_db_session)) -> AccessService:
    """Dependency provider for access service."""
    return AccessService(ProfileStore(IdentityRepository(session)), get_admin_registry())


async def get_current_access(
    token: str = Depends(oauth2_scheme),
    service: AccessService = Depends(get_access_service),
) -> AccessContext:
    """Resolve caller identity and capability set from bearer token."""
    return await service.resolve(subject_from_access_token(token))
