"""Core enums used across modules."""

from enum import StrEnum


class RoleEnum(StrEnum):
    """Declared account roles."""

    REGULAR = "regular"
    ADMIN = "admin"


class AdminLevelEnum(StrEnum):
    """Admin tiers controlling moderation rights and territorial scope."""

    SUPER = "super"
    OWNER = "owner"
    BASIC = "basic"


class PropertyStatusEnum(StrEnum):
    """Property listing lifecycle status."""

    DRAFT = "draft"
    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"
    EXPIRED = "expired"


class ModerationActionEnum(StrEnum):
    """Actions that move a property between statuses."""

    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    RESUBMIT = "resubmit"
    EXPIRE = "expire"


class AuditOutcomeEnum(StrEnum):
    """Result of an attempted audited action."""

    APPLIED = "applied"
    FORBIDDEN = "forbidden"
    INVALID = "invalid"
