"""Executable worker that expires active listings past their expiry date."""

from __future__ import annotations

import asyncio
import logging
import os

from app.core.config import get_settings
from app.core.database import session_scope
from app.modules.audit.logger import get_audit_logger
from app.modules.properties.moderation import PropertyModerationStateMachine
from app.modules.properties.repository import PropertyRepository
from app.modules.properties.service import PropertyService
from app.modules.territories.repository import TerritoryRepository

logger = logging.getLogger(__name__)


async def run_cycle() -> int:
    """Run a single expiry pass; each listing is its own atomic update."""
    audit_logger = get_audit_logger()
    async with session_scope() as session:
        service = PropertyService(
            PropertyRepository(session),
            TerritoryRepository(session),
            PropertyModerationStateMachine(listing_active_days=get_settings().listing_active_days),
            audit_logger,
        )
        expired = await service.expire_listings()
    await audit_logger.drain()
    return expired


async def main() -> None:
    """Run once or keep polling according to worker mode."""
    logging.basicConfig(level=os.getenv("EXPIRY_WORKER_LOG_LEVEL", "INFO"))
    mode = os.getenv("EXPIRY_WORKER_MODE", "once").strip().lower()
    poll_seconds = int(os.getenv("EXPIRY_WORKER_POLL_SECONDS", "300"))

    if mode == "once":
        expired = await run_cycle()
        logger.info("Listing expiry worker expired %s listings", expired)
        return

    while True:
        try:
            expired = await run_cycle()
            logger.info("Listing expiry worker expired %s listings", expired)
        except Exception:
            logger.exception("Listing expiry worker cycle failed")
        await asyncio.sleep(poll_seconds)


if __name__ == "__main__":
    asyncio.run(main())
