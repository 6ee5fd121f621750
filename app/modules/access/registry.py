"""Static email allow-list layered on top of persisted admin levels.

The registry exists so operators keep access even when their profile row is
wrong or missing. An override always wins over the persisted ``admin_level``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache

from app.core.config import get_settings
from app.core.enums import AdminLevelEnum
from app.shared.utils import normalize_email

logger = logging.getLogger(__name__)


class AdminRegistry:
    """Resolve normalized emails to an authoritative admin level."""

    def __init__(self, overrides: Mapping[str, AdminLevelEnum | str] | None = None) -> None:
        self._overrides: dict[str, AdminLevelEnum] = {}
        for email, level in (overrides or {}).items():
            key = normalize_email(email)
            if not key:
                continue
            self._overrides[key] = AdminLevelEnum(level)

    def resolve_override(self, email: str | None) -> AdminLevelEnum | None:
        """Return the override level for an email, if any."""
        return self._overrides.get(normalize_email(email))

    def __len__(self) -> int:
        return len(self._overrides)


@lru_cache
def get_admin_registry() -> AdminRegistry:
    """Return registry built from ADMIN_OVERRIDE_EMAILS."""
    registry = AdminRegistry(get_settings().admin_override_emails)
    logger.info("Admin override registry loaded with %d entries", len(registry))
    return registry
