"""Property schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from app.core.enums import PropertyStatusEnum

REQUIRED_LISTING_FIELDS = ("title", "description", "price", "property_type", "region", "city")


class PropertyCreate(BaseModel):
    """Create a draft listing."""

    territory_code: str = Field(min_length=2, max_length=2)
    title: str = Field(min_length=3, max_length=200)
    description: str = Field(default="", max_length=5000)
    price: Decimal = Field(ge=0, max_digits=14, decimal_places=2)
    property_type: str = Field(min_length=1, max_length=64)
    bedrooms: int | None = Field(default=None, ge=0)
    bathrooms: int | None = Field(default=None, ge=0)
    region: str = Field(min_length=1, max_length=128)
    city: str = Field(min_length=1, max_length=128)


class PropertyUpdate(BaseModel):
    """Owner edits; territory is fixed at creation."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=3, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    price: Decimal | None = Field(default=None, ge=0, max_digits=14, decimal_places=2)
    property_type: str | None = Field(default=None, min_length=1, max_length=64)
    bedrooms: int | None = Field(default=None, ge=0)
    bathrooms: int | None = Field(default=None, ge=0)
    region: str | None = Field(default=None, min_length=1, max_length=128)
    city: str | None = Field(default=None, min_length=1, max_length=128)

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "PropertyUpdate":
        cleared = [
            name
            for name in REQUIRED_LISTING_FIELDS
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if cleared:
            raise ValueError(f"Fields cannot be null: {', '.join(cleared)}")
        return self


class PropertyStatusUpdate(BaseModel):
    """Admin moderation request: approve (active) or reject (rejected)."""

    model_config = ConfigDict(populate_by_name=True)

    status: PropertyStatusEnum | None = None
    rejection_reason: str | None = Field(
        default=None,
        max_length=2000,
        validation_alias=AliasChoices("rejection_reason", "rejectionReason"),
    )


class PropertyRead(BaseModel):
    """Property response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    territory_code: str
    title: str
    description: str
    price: Decimal
    property_type: str
    bedrooms: int | None
    bathrooms: int | None
    region: str
    city: str
    status: PropertyStatusEnum
    rejection_reason: str | None
    reviewed_by: UUID | None
    reviewed_at: datetime | None
    submitted_at: datetime | None
    expires_at: datetime | None
    created_at: datetime
    updated_at: datetime
