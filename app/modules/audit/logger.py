"""Best-effort audit recording.

``record`` schedules the insert on the running loop and returns at once. The
insert runs in its own session after the caller's write, so an audit failure
can neither block nor roll back the action being audited. Failures are
logged and counted, never raised.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import session_scope
from app.core.metrics import AUDIT_WRITE_FAILURES_TOTAL
from app.modules.audit.repository import AuditRepository
from app.modules.audit.schemas import AuditEntry

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class AuditLogger:
    """Fire-and-forget writer for audit entries."""

    def __init__(self, session_factory: SessionFactory = session_scope) -> None:
        self._session_factory = session_factory
        self._pending: set[asyncio.Task[None]] = set()

    def record(self, entry: AuditEntry) -> None:
        """Queue an entry for writing. Never raises."""
        try:
            task = asyncio.get_running_loop().create_task(self._write(entry))
        except RuntimeError:
            self._report_failure(entry)
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, entry: AuditEntry) -> None:
        try:
            async with self._session_factory() as session:
                await AuditRepository(session).create_audit_log(
                    admin_id=entry.admin_id,
                    action_type=entry.action_type,
                    target_type=entry.target_type,
                    target_id=entry.target_id,
                    details=entry.details,
                    occurred_at=entry.occurred_at,
                )
        except Exception:
            self._report_failure(entry)

    def _report_failure(self, entry: AuditEntry) -> None:
        AUDIT_WRITE_FAILURES_TOTAL.inc()
        logger.exception(
            "Failed to write audit entry action=%s target=%s:%s",
            entry.action_type,
            entry.target_type,
            entry.target_id,
        )

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for queued writes (shutdown hook and tests)."""
        while self._pending:
            batch = list(self._pending)
            await asyncio.gather(*batch, return_exceptions=True)
            self._pending.difference_update(batch)


@lru_cache
def get_audit_logger() -> AuditLogger:
    """Process-wide audit logger."""
    return AuditLogger()
