"""Territory schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TerritoryRead(BaseModel):
    """Territory display metadata."""

    model_config = ConfigDict(from_attributes=True)

    code: str
    name: str
    currency_code: str
    is_active: bool
