"""Access schemas."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.enums import AdminLevelEnum


class CapabilitySetRead(BaseModel):
    """Capability set as consumed by list endpoints and UI checks."""

    model_config = ConfigDict(from_attributes=True)

    can_approve: bool
    can_reject: bool
    can_view_all_territories: bool
    territory_filter: str | None
    can_manage_admins: bool
    is_admin: bool
    admin_level: AdminLevelEnum | None
    override_applied: bool


class AccessRead(BaseModel):
    """Caller identity with derived capabilities."""

    user_id: UUID
    email: str
    role: str
    territory: str | None
    capabilities: CapabilitySetRead
