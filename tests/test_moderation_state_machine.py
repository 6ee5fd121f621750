from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from app.core.enums import AdminLevelEnum, ModerationActionEnum, PropertyStatusEnum, RoleEnum
from app.modules.access.permissions import CapabilitySet, resolve_capabilities
from app.modules.access.profile_store import AdminIdentity
from app.modules.access.registry import AdminRegistry
from app.modules.properties.moderation import (
    TRANSITIONS,
    PropertyModerationStateMachine,
    admin_action_for_status,
)
from app.shared.exceptions import ForbiddenException, ValidationException

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def make_machine(active_days: int = 90) -> PropertyModerationStateMachine:
    return PropertyModerationStateMachine(listing_active_days=active_days, clock=lambda: NOW)


def make_capabilities(level: AdminLevelEnum | None, territory: str | None = None) -> CapabilitySet:
    identity = AdminIdentity(
        id=uuid4(),
        email="moderator@listinghub.dev",
        role=RoleEnum.ADMIN,
        admin_level=level,
        territory=territory,
    )
    return resolve_capabilities(identity, AdminRegistry())


def test_approve_pending_sets_review_fields_and_expiry() -> None:
    actor_id = uuid4()

    changes = make_machine(30).plan(
        ModerationActionEnum.APPROVE,
        PropertyStatusEnum.PENDING,
        actor_id=actor_id,
    )

    assert changes == {
        "status": PropertyStatusEnum.ACTIVE,
        "reviewed_by": actor_id,
        "reviewed_at": NOW,
        "expires_at": NOW + timedelta(days=30),
    }
    assert "rejection_reason" not in changes


def test_approve_active_listing_is_accepted_as_restamp() -> None:
    changes = make_machine().plan(
        ModerationActionEnum.APPROVE,
        PropertyStatusEnum.ACTIVE,
        actor_id=uuid4(),
    )

    assert changes["status"] == PropertyStatusEnum.ACTIVE
    assert changes["reviewed_at"] == NOW


def test_reject_requires_non_blank_reason() -> None:
    machine = make_machine()

    with pytest.raises(ValidationException):
        machine.plan(ModerationActionEnum.REJECT, PropertyStatusEnum.PENDING, actor_id=uuid4())
    with pytest.raises(ValidationException):
        machine.plan(
            ModerationActionEnum.REJECT,
            PropertyStatusEnum.PENDING,
            actor_id=uuid4(),
            rejection_reason="   ",
        )


def test_reject_rejected_listing_updates_reason() -> None:
    actor_id = uuid4()

    changes = make_machine().plan(
        ModerationActionEnum.REJECT,
        PropertyStatusEnum.REJECTED,
        actor_id=actor_id,
        rejection_reason="  Photos missing  ",
    )

    assert changes["status"] == PropertyStatusEnum.REJECTED
    assert changes["rejection_reason"] == "Photos missing"
    assert changes["reviewed_by"] == actor_id


def test_resubmit_clears_rejection_reason() -> None:
    changes = make_machine().plan(ModerationActionEnum.RESUBMIT, PropertyStatusEnum.REJECTED)

    assert changes == {
        "status": PropertyStatusEnum.PENDING,
        "submitted_at": NOW,
        "rejection_reason": None,
    }


def test_expire_only_changes_status() -> None:
    changes = make_machine().plan(ModerationActionEnum.EXPIRE, PropertyStatusEnum.ACTIVE)

    assert changes == {"status": PropertyStatusEnum.EXPIRED}


@pytest.mark.parametrize(
    ("action", "status"),
    [
        (ModerationActionEnum.APPROVE, PropertyStatusEnum.DRAFT),
        (ModerationActionEnum.APPROVE, PropertyStatusEnum.REJECTED),
        (ModerationActionEnum.APPROVE, PropertyStatusEnum.EXPIRED),
        (ModerationActionEnum.REJECT, PropertyStatusEnum.ACTIVE),
        (ModerationActionEnum.SUBMIT, PropertyStatusEnum.PENDING),
        (ModerationActionEnum.RESUBMIT, PropertyStatusEnum.DRAFT),
        (ModerationActionEnum.EXPIRE, PropertyStatusEnum.PENDING),
    ],
)
def test_invalid_transitions_raise_validation_error(
    action: ModerationActionEnum,
    status: PropertyStatusEnum,
) -> None:
    with pytest.raises(ValidationException):
        make_machine().plan(action, status, actor_id=uuid4(), rejection_reason="reason")


def test_no_action_leads_back_to_draft() -> None:
    assert all(transition.target != PropertyStatusEnum.DRAFT for transition in TRANSITIONS.values())


@pytest.mark.parametrize(
    ("requested", "expected"),
    [
        (PropertyStatusEnum.ACTIVE, ModerationActionEnum.APPROVE),
        (PropertyStatusEnum.REJECTED, ModerationActionEnum.REJECT),
    ],
)
def test_admin_status_maps_to_action(
    requested: PropertyStatusEnum,
    expected: ModerationActionEnum,
) -> None:
    assert admin_action_for_status(requested) == expected


@pytest.mark.parametrize(
    "requested",
    [None, PropertyStatusEnum.PENDING, PropertyStatusEnum.EXPIRED, PropertyStatusEnum.DRAFT],
)
def test_admin_status_rejects_other_targets(requested: PropertyStatusEnum | None) -> None:
    with pytest.raises(ValidationException):
        admin_action_for_status(requested)


def test_basic_admin_fails_capability_check_with_role_reason() -> None:
    caps = make_capabilities(AdminLevelEnum.BASIC, "JM")

    with pytest.raises(ForbiddenException) as exc:
        make_machine().check_capability(ModerationActionEnum.REJECT, caps)
    assert exc.value.reason == "role"


def test_owner_admin_fails_territory_check_outside_own_territory() -> None:
    caps = make_capabilities(AdminLevelEnum.OWNER, "GY")
    machine = make_machine()

    machine.check_capability(ModerationActionEnum.APPROVE, caps)
    machine.check_territory(caps, "GY")
    with pytest.raises(ForbiddenException) as exc:
        machine.check_territory(caps, "JM")
    assert exc.value.reason == "territory"


def test_expire_is_not_an_admin_action() -> None:
    caps = make_capabilities(AdminLevelEnum.SUPER)

    with pytest.raises(ValidationException):
        make_machine().check_capability(ModerationActionEnum.EXPIRE, caps)


def test_check_owner_refuses_other_callers() -> None:
    owner_id = uuid4()
    machine = make_machine()

    machine.check_owner(owner_id, owner_id)
    with pytest.raises(ForbiddenException) as exc:
        machine.check_owner(owner_id, uuid4())
    assert exc.value.reason == "ownership"
