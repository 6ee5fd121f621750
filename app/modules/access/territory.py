"""Territory filter: per-country isolation for reads and writes."""

from __future__ import annotations

from typing import Any, TypeVar

from sqlalchemy import false

from app.modules.access.permissions import ALL_TERRITORIES, CapabilitySet
from app.shared.utils import normalize_territory_code

StatementT = TypeVar("StatementT")


def authorize(capabilities: CapabilitySet, record_territory: str | None) -> bool:
    """Return True if the caller may read or mutate a record in this territory."""
    scope = capabilities.territory_filter
    if scope == ALL_TERRITORIES:
        return True
    if scope is None:
        return False
    return scope == normalize_territory_code(record_territory)


def apply_territory_scope(stmt: StatementT, column: Any, capabilities: CapabilitySet) -> StatementT:
    """Restrict a select to the territories the caller may see."""
    scope = capabilities.territory_filter
    if scope == ALL_TERRITORIES:
        return stmt
    if scope is None:
        return stmt.where(false())
    return stmt.where(column == scope)


def describe_scope(capabilities: CapabilitySet) -> str:
    """Log-friendly label of the caller's territory scope."""
    if capabilities.territory_filter is None:
        return "none"
    return capabilities.territory_filter
