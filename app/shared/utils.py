"""Shared utility functions."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return aware UTC datetime."""
    return datetime.now(timezone.utc)


def normalize_email(email: str | None) -> str:
    """Trim and lower-case an email so it can be used as a lookup key."""
    if email is None:
        return ""
    return email.strip().lower()


def normalize_territory_code(code: str | None) -> str | None:
    """Return upper-case territory code, or None for blank input."""
    if code is None:
        return None
    cleaned = code.strip().upper()
    return cleaned or None
