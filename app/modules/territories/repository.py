"""Territory repository layer."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.territories.models import Territory


class TerritoryRepository:
    """DB operations for territory reference data."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_code(self, code: str) -> Territory | None:
        return await self.session.get(Territory, code)

    async def list_active(self) -> list[Territory]:
        stmt = select(Territory).where(Territory.is_active.is_(True)).order_by(Territory.name.asc())
        return list((await self.session.scalars(stmt)).all())
