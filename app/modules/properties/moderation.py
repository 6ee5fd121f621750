"""Property moderation state machine.

Transitions (action: sources -> target):

* submit:   draft -> pending            (listing owner)
* approve:  pending, active -> active    (can_approve + territory)
* reject:   pending, rejected -> rejected (can_reject + territory + reason)
* resubmit: rejected -> pending          (listing owner)
* expire:   active -> expired            (time-based system trigger)

Approving an active listing or rejecting a rejected one is accepted and
re-stamps the review fields, so moderators can retry safely. The machine is
pure: it validates and returns the field changes, the caller persists them in
one update keyed by id.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from app.core.enums import ModerationActionEnum, PropertyStatusEnum
from app.modules.access import territory as territory_filter
from app.modules.access.permissions import CapabilitySet
from app.shared.exceptions import ForbiddenException, ValidationException
from app.shared.utils import utc_now


@dataclass(frozen=True, slots=True)
class Transition:
    """Allowed source statuses and the resulting status of an action."""

    sources: frozenset[PropertyStatusEnum]
    target: PropertyStatusEnum


TRANSITIONS: dict[ModerationActionEnum, Transition] = {
    ModerationActionEnum.SUBMIT: Transition(
        frozenset({PropertyStatusEnum.DRAFT}),
        PropertyStatusEnum.PENDING,
    ),
    ModerationActionEnum.APPROVE: Transition(
        frozenset({PropertyStatusEnum.PENDING, PropertyStatusEnum.ACTIVE}),
        PropertyStatusEnum.ACTIVE,
    ),
    ModerationActionEnum.REJECT: Transition(
        frozenset({PropertyStatusEnum.PENDING, PropertyStatusEnum.REJECTED}),
        PropertyStatusEnum.REJECTED,
    ),
    ModerationActionEnum.RESUBMIT: Transition(
        frozenset({PropertyStatusEnum.REJECTED}),
        PropertyStatusEnum.PENDING,
    ),
    ModerationActionEnum.EXPIRE: Transition(
        frozenset({PropertyStatusEnum.ACTIVE}),
        PropertyStatusEnum.EXPIRED,
    ),
}

ADMIN_ACTIONS_BY_STATUS: dict[PropertyStatusEnum, ModerationActionEnum] = {
    PropertyStatusEnum.ACTIVE: ModerationActionEnum.APPROVE,
    PropertyStatusEnum.REJECTED: ModerationActionEnum.REJECT,
}

OWNER_ACTIONS = frozenset({ModerationActionEnum.SUBMIT, ModerationActionEnum.RESUBMIT})


def admin_action_for_status(requested: PropertyStatusEnum | None) -> ModerationActionEnum:
    """Map a requested status on the admin endpoint to approve or reject."""
    if requested is None:
        raise ValidationException("Status is required")
    action = ADMIN_ACTIONS_BY_STATUS.get(requested)
    if action is None:
        raise ValidationException(
            f"Admins can only set status to 'active' or 'rejected', not '{requested}'",
        )
    return action


def clean_rejection_reason(reason: str | None) -> str | None:
    """Strip a rejection reason; blank means absent."""
    if reason is None:
        return None
    cleaned = reason.strip()
    return cleaned or None


class PropertyModerationStateMachine:
    """Validate moderation requests and plan the resulting field changes."""

    def __init__(
        self,
        *,
        listing_active_days: int,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.listing_active_days = listing_active_days
        self._clock = clock

    def check_capability(self, action: ModerationActionEnum, capabilities: CapabilitySet) -> None:
        """Refuse an admin action the caller's capability set does not grant."""
        if action == ModerationActionEnum.APPROVE:
            allowed = capabilities.can_approve
        elif action == ModerationActionEnum.REJECT:
            allowed = capabilities.can_reject
        else:
            raise ValidationException(f"Action '{action}' is not available to admins")

        if not allowed:
            raise ForbiddenException(f"No permission to {action} properties", reason="role")

    def check_territory(self, capabilities: CapabilitySet, record_territory: str | None) -> None:
        """Refuse access to a record outside the caller's territory."""
        if not territory_filter.authorize(capabilities, record_territory):
            raise ForbiddenException(
                "No access to properties from this territory",
                reason="territory",
            )

    def check_owner(self, owner_id: UUID, caller_id: UUID) -> None:
        """Refuse owner-only actions from anyone else."""
        if owner_id != caller_id:
            raise ForbiddenException("Only the listing owner can do this", reason="ownership")

    def plan(
        self,
        action: ModerationActionEnum,
        current_status: PropertyStatusEnum,
        *,
        actor_id: UUID | None = None,
        rejection_reason: str | None = None,
    ) -> dict[str, Any]:
        """Return the column changes for a valid transition."""
        transition = TRANSITIONS[action]
        if current_status not in transition.sources:
            raise ValidationException(
                f"Cannot {action} a property in status '{current_status}' "
                f"(move to '{transition.target}' is not allowed)",
            )

        now = self._clock()
        changes: dict[str, Any] = {"status": transition.target}

        if action in OWNER_ACTIONS:
            changes["submitted_at"] = now
            if action == ModerationActionEnum.RESUBMIT:
                changes["rejection_reason"] = None
        elif action == ModerationActionEnum.APPROVE:
            changes["reviewed_by"] = actor_id
            changes["reviewed_at"] = now
            changes["expires_at"] = now + timedelta(days=self.listing_active_days)
        elif action == ModerationActionEnum.REJECT:
            reason = clean_rejection_reason(rejection_reason)
            if reason is None:
                raise ValidationException("Rejection reason is required when rejecting a property")
            changes["reviewed_by"] = actor_id
            changes["reviewed_at"] = now
            changes["rejection_reason"] = reason

        return changes
