"""Territory API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.modules.territories.schemas import TerritoryRead
from app.modules.territories.service import TerritoryService, get_territory_service

router = APIRouter(prefix="/territories", tags=["territories"])


@router.get("", response_model=list[TerritoryRead])
async def list_territories(
    service: TerritoryService = Depends(get_territory_service),
) -> list[TerritoryRead]:
    """List active territories."""
    return await service.list_territories()


@router.get("/{code}", response_model=TerritoryRead)
async def get_territory(
    code: str,
    service: TerritoryService = Depends(get_territory_service),
) -> TerritoryRead:
    """Return display metadata for a territory."""
    return await service.get_territory(code)
