"""Access API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.modules.access.schemas import AccessRead, CapabilitySetRead
from app.modules.access.service import AccessContext, get_current_access

router = APIRouter(prefix="/access", tags=["access"])


@router.get("/me", response_model=AccessRead)
async def get_my_access(access: AccessContext = Depends(get_current_access)) -> AccessRead:
    """Return caller capabilities for UI gating."""
    return AccessRead(
        user_id=access.identity.id,
        email=access.identity.email,
        role=str(access.identity.role),
        territory=access.identity.territory,
        capabilities=CapabilitySetRead.model_validate(access.capabilities),
    )
