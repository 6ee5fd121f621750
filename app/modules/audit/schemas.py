"""Audit schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.shared.utils import utc_now


class AuditEntry(BaseModel):
    """Audit record handed to the audit logger."""

    admin_id: UUID | None
    action_type: str
    target_type: str
    target_id: str | None = None
    details: dict = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=utc_now)


class AuditLogRead(BaseModel):
    """Audit log response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    admin_id: UUID | None
    action_type: str
    target_type: str
    target_id: str | None
    details: dict
    created_at: datetime
