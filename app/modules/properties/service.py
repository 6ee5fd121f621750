"""Property business logic layer."""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db_session
from app.core.enums import AuditOutcomeEnum, ModerationActionEnum, PropertyStatusEnum
from app.core.metrics import observe_moderation_action
from app.modules.access.service import AccessContext
from app.modules.access.territory import authorize, describe_scope
from app.modules.audit.logger import AuditLogger, get_audit_logger
from app.modules.audit.schemas import AuditEntry
from app.modules.properties.models import Property
from app.modules.properties.moderation import (
    PropertyModerationStateMachine,
    admin_action_for_status,
    clean_rejection_reason,
)
from app.modules.properties.repository import PropertyRepository
from app.modules.properties.schemas import (
    REQUIRED_LISTING_FIELDS,
    PropertyCreate,
    PropertyStatusUpdate,
    PropertyUpdate,
)
from app.modules.territories.repository import TerritoryRepository
from app.shared.exceptions import (
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from app.shared.utils import normalize_territory_code, utc_now

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = frozenset({PropertyStatusEnum.DRAFT, PropertyStatusEnum.REJECTED})
EXPIRY_BATCH_SIZE = 100

# Owner actions (submit, resubmit) are not audited.
AUDIT_ACTION_TYPES = {
    ModerationActionEnum.APPROVE: "property_approved",
    ModerationActionEnum.REJECT: "property_rejected",
    ModerationActionEnum.EXPIRE: "property_expired",
}


def audit_action_type(action: ModerationActionEnum, outcome: AuditOutcomeEnum) -> str:
    """Journal action type; refused and invalid attempts never share the applied type."""
    if action not in AUDIT_ACTION_TYPES:
        raise ValueError(f"Moderation action '{action}' is not audited")
    if outcome == AuditOutcomeEnum.APPLIED:
        return AUDIT_ACTION_TYPES[action]
    return f"property_{action}_{outcome}"


class PropertyService:
    """Property listings and their moderation."""

    def __init__(
        self,
        repository: PropertyRepository,
        territory_repository: TerritoryRepository,
        state_machine: PropertyModerationStateMachine,
        audit_logger: AuditLogger,
    ) -> None:
        self.repository = repository
        self.territory_repository = territory_repository
        self.state_machine = state_machine
        self.audit_logger = audit_logger

    async def create_property(self, payload: PropertyCreate, access: AccessContext) -> Property:
        """Create a draft listing owned by the caller."""
        territory_code = normalize_territory_code(payload.territory_code)
        territory = (
            await self.territory_repository.get_by_code(territory_code) if territory_code else None
        )
        if territory is None or not territory.is_active:
            raise ValidationException(f"Unknown territory '{payload.territory_code}'")

        return await self.repository.create(
            owner_id=access.identity.id,
            territory_code=territory.code,
            title=payload.title,
            description=payload.description,
            price=payload.price,
            property_type=payload.property_type,
            bedrooms=payload.bedrooms,
            bathrooms=payload.bathrooms,
            region=payload.region,
            city=payload.city,
        )

    async def update_property(
        self,
        property_id: UUID,
        payload: PropertyUpdate,
        access: AccessContext,
    ) -> Property:
        """Edit listing fields while the listing is still with its owner."""
        record = await self._get_or_404(property_id)
        self.state_machine.check_owner(record.owner_id, access.identity.id)
        if record.status not in EDITABLE_STATUSES:
            raise ValidationException(
                f"Property in status '{record.status}' cannot be edited",
            )

        changes = payload.model_dump(exclude_unset=True)
        cleared = [name for name in REQUIRED_LISTING_FIELDS if name in changes and changes[name] is None]
        if cleared:
            raise ValidationException(f"Fields cannot be null: {', '.join(cleared)}")
        for field_name, value in changes.items():
            setattr(record, field_name, value)
        return await self.repository.save(record)

    async def submit_property(self, property_id: UUID, access: AccessContext) -> Property:
        """Send a draft to moderation."""
        return await self._owner_transition(ModerationActionEnum.SUBMIT, property_id, access)

    async def resubmit_property(self, property_id: UUID, access: AccessContext) -> Property:
        """Send a rejected listing back to moderation."""
        return await self._owner_transition(ModerationActionEnum.RESUBMIT, property_id, access)

    async def moderate_property(
        self,
        property_id: UUID,
        payload: PropertyStatusUpdate,
        access: AccessContext,
    ) -> Property:
        """Approve or reject a listing on behalf of an admin.

        Malformed requests fail first (400), then the capability check (403),
        the record lookup (404), the territory check (403) and finally the
        transition itself (400). Every attempt past request validation is
        audited; the audit write never affects the outcome.
        """
        action = admin_action_for_status(payload.status)
        reason = clean_rejection_reason(payload.rejection_reason)
        if action == ModerationActionEnum.REJECT and reason is None:
            raise ValidationException("Rejection reason is required when rejecting a property")

        capabilities = access.capabilities
        try:
            self.state_machine.check_capability(action, capabilities)
        except ForbiddenException as exc:
            self._audit_attempt(action, AuditOutcomeEnum.FORBIDDEN, access, property_id, None, exc)
            raise

        record = await self._get_or_404(property_id)
        previous_status = record.status
        try:
            self.state_machine.check_territory(capabilities, record.territory_code)
            changes = self.state_machine.plan(
                action,
                record.status,
                actor_id=access.identity.id,
                rejection_reason=reason,
            )
        except ForbiddenException as exc:
            self._audit_attempt(
                action, AuditOutcomeEnum.FORBIDDEN, access, property_id, record.territory_code, exc
            )
            raise
        except ValidationException as exc:
            self._audit_attempt(
                action, AuditOutcomeEnum.INVALID, access, property_id, record.territory_code, exc
            )
            raise

        updated = await self.repository.apply_changes(property_id, changes)
        if updated is None:
            raise NotFoundException("Property not found")

        observe_moderation_action(action, AuditOutcomeEnum.APPLIED)
        logger.info(
            "Property %s %s by admin %s (%s -> %s, scope=%s)",
            property_id,
            action,
            access.identity.id,
            previous_status,
            updated.status,
            describe_scope(capabilities),
        )
        details = {
            "outcome": str(AuditOutcomeEnum.APPLIED),
            "territory": updated.territory_code,
            "previous_status": str(previous_status),
            "new_status": str(updated.status),
        }
        if action == ModerationActionEnum.REJECT:
            details["rejection_reason"] = updated.rejection_reason
        self.audit_logger.record(
            AuditEntry(
                admin_id=access.identity.id,
                action_type=audit_action_type(action, AuditOutcomeEnum.APPLIED),
                target_type="property",
                target_id=str(property_id),
                details=details,
            ),
        )
        return updated

    async def get_property(self, property_id: UUID, access: AccessContext) -> Property:
        """Return a listing to its owner or to an admin scoped to its territory."""
        record = await self._get_or_404(property_id)
        if record.owner_id == access.identity.id:
            return record
        if not access.capabilities.is_admin:
            raise ForbiddenException("Only the listing owner can view this property", reason="ownership")
        if not authorize(access.capabilities, record.territory_code):
            raise ForbiddenException("No access to properties from this territory", reason="territory")
        return record

    async def list_my_properties(
        self,
        access: AccessContext,
        limit: int,
        offset: int,
    ) -> tuple[list[Property], int]:
        """List listings owned by the caller."""
        return await self.repository.list_for_owner(access.identity.id, limit=limit, offset=offset)

    async def expire_listings(self, now: datetime | None = None) -> int:
        """Move active listings past their expiry date to expired.

        System trigger only; never reachable from the admin status endpoint.
        """
        current_time = now or utc_now()
        expired = 0
        for record in await self.repository.find_expirable(current_time, EXPIRY_BATCH_SIZE):
            try:
                changes = self.state_machine.plan(ModerationActionEnum.EXPIRE, record.status)
            except ValidationException:
                continue
            updated = await self.repository.apply_changes(record.id, changes)
            if updated is None:
                continue

            expired += 1
            observe_moderation_action(ModerationActionEnum.EXPIRE, AuditOutcomeEnum.APPLIED)
            self.audit_logger.record(
                AuditEntry(
                    admin_id=None,
                    action_type=AUDIT_ACTION_TYPES[ModerationActionEnum.EXPIRE],
                    target_type="property",
                    target_id=str(record.id),
                    details={
                        "outcome": str(AuditOutcomeEnum.APPLIED),
                        "territory": updated.territory_code,
                        "expires_at": record.expires_at.isoformat() if record.expires_at else None,
                    },
                ),
            )
        if expired:
            logger.info("Expired %s property listings", expired)
        return expired

    async def _owner_transition(
        self,
        action: ModerationActionEnum,
        property_id: UUID,
        access: AccessContext,
    ) -> Property:
        record = await self._get_or_404(property_id)
        self.state_machine.check_owner(record.owner_id, access.identity.id)
        changes = self.state_machine.plan(action, record.status)
        updated = await self.repository.apply_changes(property_id, changes)
        if updated is None:
            raise NotFoundException("Property not found")
        observe_moderation_action(action, AuditOutcomeEnum.APPLIED)
        return updated

    async def _get_or_404(self, property_id: UUID) -> Property:
        record = await self.repository.get_by_id(property_id)
        if record is None:
            raise NotFoundException("Property not found")
        return record

    def _audit_attempt(
        self,
        action: ModerationActionEnum,
        outcome: AuditOutcomeEnum,
        access: AccessContext,
        property_id: UUID,
        territory_code: str | None,
        error: Exception,
    ) -> None:
        action_type = audit_action_type(action, outcome)
        observe_moderation_action(action, outcome)
        details = {"outcome": str(outcome), "error": str(error)}
        if territory_code is not None:
            details["territory"] = territory_code
        if isinstance(error, ForbiddenException):
            details["reason"] = error.reason
        self.audit_logger.record(
            AuditEntry(
                admin_id=access.identity.id,
                action_type=action_type,
                target_type="property",
                target_id=str(property_id),
                details=details,
            ),
        )


async def get_property_service(session: AsyncSession = Depends(get_db_session)) -> PropertyService:
    """Dependency provider for property service."""
    settings = get_settings()
    return PropertyService(
        PropertyRepository(session),
        TerritoryRepository(session),
        PropertyModerationStateMachine(listing_active_days=settings.listing_active_days),
        get_audit_logger(),
    )
