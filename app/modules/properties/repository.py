"""Property repository layer."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import PropertyStatusEnum
from app.modules.access.permissions import CapabilitySet
from app.modules.access.territory import apply_territory_scope
from app.modules.properties.models import Property
from app.shared.exceptions import StorageFailureException

IMMUTABLE_FIELDS = frozenset({"id", "owner_id", "territory_code", "created_at"})


class PropertyRepository:
    """DB operations for property listings."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(
        self,
        *,
        owner_id: UUID,
        territory_code: str,
        title: str,
        description: str,
        price: Decimal,
        property_type: str,
        bedrooms: int | None,
        bathrooms: int | None,
        region: str,
        city: str,
    ) -> Property:
        record = Property(
            owner_id=owner_id,
            territory_code=territory_code,
            title=title,
            description=description,
            price=price,
            property_type=property_type,
            bedrooms=bedrooms,
            bathrooms=bathrooms,
            region=region,
            city=city,
            status=PropertyStatusEnum.DRAFT,
        )
        self.session.add(record)
        await self.session.flush()
        return record

    async def get_by_id(self, property_id: UUID) -> Property | None:
        return await self.session.get(Property, property_id)

    async def apply_changes(self, property_id: UUID, changes: dict[str, Any]) -> Property | None:
        """Write changes in one atomic UPDATE keyed by id and commit it.

        Returns None when the row disappeared. No row lock is taken: two
        concurrent moderators race and the last write wins.
        """
        blocked = IMMUTABLE_FIELDS.intersection(changes)
        if blocked:
            raise ValueError(f"Immutable property fields cannot be updated: {sorted(blocked)}")

        stmt = (
            update(Property)
            .where(Property.id == property_id)
            .values(**changes)
            .returning(Property)
            .execution_options(populate_existing=True)
        )
        try:
            record = await self.session.scalar(stmt)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StorageFailureException("Failed to update property") from exc
        return record

    async def list_for_owner(
        self,
        owner_id: UUID,
        limit: int,
        offset: int,
    ) -> tuple[list[Property], int]:
        base_stmt: Select[tuple[Property]] = select(Property).where(Property.owner_id == owner_id)
        return await self._paginate(base_stmt, limit, offset)

    async def list_scoped(
        self,
        capabilities: CapabilitySet,
        *,
        status: PropertyStatusEnum | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Property], int]:
        base_stmt: Select[tuple[Property]] = select(Property)
        base_stmt = apply_territory_scope(base_stmt, Property.territory_code, capabilities)
        if status is not None:
            base_stmt = base_stmt.where(Property.status == status)
        return await self._paginate(base_stmt, limit, offset)

    async def count_by_status(self, capabilities: CapabilitySet) -> dict[PropertyStatusEnum, int]:
        stmt = select(Property.status, func.count(Property.id)).group_by(Property.status)
        stmt = apply_territory_scope(stmt, Property.territory_code, capabilities)
        rows = (await self.session.execute(stmt)).all()
        return {status: int(count) for status, count in rows}

    async def find_expirable(self, now: datetime, limit: int) -> list[Property]:
        stmt = (
            select(Property)
            .where(
                Property.status == PropertyStatusEnum.ACTIVE,
                Property.expires_at.is_not(None),
                Property.expires_at <= now,
            )
            .order_by(Property.expires_at.asc())
            .limit(limit)
        )
        return list((await self.session.scalars(stmt)).all())

    async def save(self, record: Property) -> Property:
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StorageFailureException("Failed to save property") from exc
        return record

    async def _paginate(
        self,
        base_stmt: Select[tuple[Property]],
        limit: int,
        offset: int,
    ) -> tuple[list[Property], int]:
        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(Property.created_at.desc()).limit(limit).offset(offset)
        items = list((await self.session.scalars(stmt)).all())
        return items, total
