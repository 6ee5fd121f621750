from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.core.enums import AdminLevelEnum
from app.modules.access.registry import AdminRegistry


def test_registry_normalizes_emails() -> None:
    registry = AdminRegistry({"  Ops@ListingHub.dev ": "super"})

    assert registry.resolve_override("ops@listinghub.dev") == AdminLevelEnum.SUPER
    assert registry.resolve_override("OPS@LISTINGHUB.DEV") == AdminLevelEnum.SUPER
    assert len(registry) == 1


def test_registry_returns_none_for_unknown_or_missing_email() -> None:
    registry = AdminRegistry({"ops@listinghub.dev": AdminLevelEnum.OWNER})

    assert registry.resolve_override("someone@listinghub.dev") is None
    assert registry.resolve_override(None) is None
    assert registry.resolve_override("") is None


def test_registry_skips_blank_emails() -> None:
    registry = AdminRegistry({"   ": AdminLevelEnum.SUPER})

    assert len(registry) == 0


def test_registry_rejects_unknown_levels() -> None:
    with pytest.raises(ValueError):
        AdminRegistry({"ops@listinghub.dev": "emperor"})


def test_settings_parse_override_pairs_from_env_string() -> None:
    settings = Settings(
        _env_file=None,
        admin_override_emails="Ops@ListingHub.dev:super, gy-lead@listinghub.dev:OWNER,",
    )

    assert settings.admin_override_emails == {
        "ops@listinghub.dev": AdminLevelEnum.SUPER,
        "gy-lead@listinghub.dev": AdminLevelEnum.OWNER,
    }


def test_settings_reject_malformed_override_entry() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, admin_override_emails="ops@listinghub.dev")


def test_settings_reject_unknown_override_level() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, admin_override_emails="ops@listinghub.dev:emperor")


def test_registry_built_from_settings_mapping() -> None:
    settings = Settings(_env_file=None, admin_override_emails={"ops@listinghub.dev": "owner"})

    registry = AdminRegistry(settings.admin_override_emails)

    assert registry.resolve_override("ops@listinghub.dev") == AdminLevelEnum.OWNER
