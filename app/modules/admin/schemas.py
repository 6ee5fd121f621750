"""Admin schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.core.enums import AdminLevelEnum, PropertyStatusEnum, RoleEnum


class AdminAccessUpdate(BaseModel):
    """Grant, change or revoke admin access for a user."""

    role: RoleEnum
    admin_level: AdminLevelEnum | None = None
    territory_code: str | None = Field(default=None, max_length=2)


class AdminOverviewRead(BaseModel):
    """Property counts per status inside the caller's territory scope."""

    generated_at: datetime
    territory_scope: str
    properties_total: int
    properties_by_status: dict[PropertyStatusEnum, int]
