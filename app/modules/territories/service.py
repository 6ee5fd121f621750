"""Territory display metadata service."""

from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import CacheBackend, get_territory_cache
from app.core.config import get_settings
from app.core.database import get_db_session
from app.modules.territories.repository import TerritoryRepository
from app.modules.territories.schemas import TerritoryRead
from app.shared.exceptions import NotFoundException
from app.shared.utils import normalize_territory_code

logger = logging.getLogger(__name__)


class TerritoryService:
    """Read-only territory metadata with a TTL cache in front of the DB."""

    def __init__(
        self,
        repository: TerritoryRepository,
        cache: CacheBackend,
        *,
        ttl_seconds: int,
    ) -> None:
        self.repository = repository
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    async def get_territory(self, code: str) -> TerritoryRead:
        """Return display metadata for one territory."""
        normalized = normalize_territory_code(code)
        if normalized is None:
            raise NotFoundException("Territory not found")

        cached = await self.cache.get(normalized)
        if cached is not None:
            return TerritoryRead.model_validate_json(cached)

        territory = await self.repository.get_by_code(normalized)
        if territory is None:
            raise NotFoundException("Territory not found")

        result = TerritoryRead.model_validate(territory)
        await self.cache.set(normalized, result.model_dump_json(), self.ttl_seconds)
        logger.debug("Cached territory metadata for %s", normalized)
        return result

    async def list_territories(self) -> list[TerritoryRead]:
        """List active territories and warm the per-code cache."""
        items = [TerritoryRead.model_validate(item) for item in await self.repository.list_active()]
        for item in items:
            await self.cache.set(item.code, item.model_dump_json(), self.ttl_seconds)
        return items


async def get_territory_service(session: AsyncSession = Depends(get_db_session)) -> TerritoryService:
    """Dependency provider for territory service."""
    return TerritoryService(
        TerritoryRepository(session),
        get_territory_cache(),
        ttl_seconds=get_settings().territory_cache_ttl_seconds,
    )
