"""Capability derivation for admin identities.

Every moderation or territory-scoped call site goes through
:func:`resolve_capabilities`; nothing re-derives access from raw profile
fields. The result is computed per request and never cached.
"""

from __future__ import annotations

from dataclasses import dataclass

from app.core.enums import AdminLevelEnum, RoleEnum
from app.modules.access.profile_store import AdminIdentity
from app.modules.access.registry import AdminRegistry
from app.shared.utils import normalize_territory_code

ALL_TERRITORIES = "all"


@dataclass(frozen=True, slots=True)
class CapabilitySet:
    """What a caller may do in this request.

    ``territory_filter`` is ``"all"``, a territory code, or ``None`` meaning
    "no territory" (matches nothing).
    """

    can_approve: bool = False
    can_reject: bool = False
    can_view_all_territories: bool = False
    territory_filter: str | None = None
    can_manage_admins: bool = False
    is_admin: bool = False
    admin_level: AdminLevelEnum | None = None
    override_applied: bool = False


NO_ACCESS = CapabilitySet()


def _coerce_level(value: object) -> AdminLevelEnum | None:
    if value is None:
        return None
    try:
        return AdminLevelEnum(str(value).strip().lower())
    except ValueError:
        return None


def _coerce_territory(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    return normalize_territory_code(value)


def resolve_capabilities(identity: AdminIdentity, registry: AdminRegistry) -> CapabilitySet:
    """Combine declared role, registry override, level and territory."""
    if str(identity.role) != RoleEnum.ADMIN:
        return NO_ACCESS

    override = registry.resolve_override(identity.email if isinstance(identity.email, str) else None)
    level = override if override is not None else _coerce_level(identity.admin_level)
    override_applied = override is not None

    if level == AdminLevelEnum.SUPER:
        return CapabilitySet(
            can_approve=True,
            can_reject=True,
            can_view_all_territories=True,
            territory_filter=ALL_TERRITORIES,
            can_manage_admins=True,
            is_admin=True,
            admin_level=level,
            override_applied=override_applied,
        )

    can_moderate = level == AdminLevelEnum.OWNER
    return CapabilitySet(
        can_approve=can_moderate,
        can_reject=can_moderate,
        can_view_all_territories=False,
        territory_filter=_coerce_territory(identity.territory),
        can_manage_admins=False,
        is_admin=True,
        admin_level=level,
        override_applied=override_applied,
    )
