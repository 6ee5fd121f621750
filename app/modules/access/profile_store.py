"""Read-only adapter exposing persisted admin identity."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from app.core.enums import AdminLevelEnum, RoleEnum
from app.modules.identity.models import User
from app.modules.identity.repository import IdentityRepository
from app.shared.utils import normalize_email, normalize_territory_code


@dataclass(frozen=True, slots=True)
class AdminIdentity:
    """Snapshot of one authenticated caller as stored in the profile table."""

    id: UUID
    email: str
    role: RoleEnum | str
    admin_level: AdminLevelEnum | str | None
    territory: str | None

    @classmethod
    def from_user(cls, user: User) -> "AdminIdentity":
        return cls(
            id=user.id,
            email=normalize_email(user.email),
            role=user.role.name,
            admin_level=user.admin_level,
            territory=normalize_territory_code(user.territory_code),
        )


class ProfileStore:
    """Load caller identities; never writes."""

    def __init__(self, repository: IdentityRepository) -> None:
        self.repository = repository

    async def load(self, user_id: UUID) -> AdminIdentity | None:
        """Return identity for an active user, or None when unresolvable."""
        user = await self.repository.get_user_by_id(user_id)
        if user is None or not user.is_active:
            return None
        return AdminIdentity.from_user(user)
