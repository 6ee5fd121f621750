"""Property ORM models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from app.core.database import Base, BaseModelMixin
from app.core.enums import PropertyStatusEnum
from app.shared.utils import normalize_territory_code


class Property(BaseModelMixin, Base):
    """Property listing with moderation metadata."""

    __tablename__ = "properties"

    owner_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    territory_code: Mapped[str] = mapped_column(
        ForeignKey("territories.code", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    property_type: Mapped[str] = mapped_column(String(64), nullable=False)
    bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    region: Mapped[str] = mapped_column(String(128), nullable=False)
    city: Mapped[str] = mapped_column(String(128), nullable=False)

    status: Mapped[PropertyStatusEnum] = mapped_column(
        SAEnum(PropertyStatusEnum, name="property_status_enum", native_enum=False),
        default=PropertyStatusEnum.DRAFT,
        nullable=False,
        index=True,
    )
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[UUID | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    @validates("territory_code")
    def _validate_territory_code(self, _: str, value: str) -> str:
        normalized = normalize_territory_code(value)
        current = self.__dict__.get("territory_code")
        if current is not None and normalized != current:
            raise ValueError("Property territory cannot be changed once set")
        return normalized
