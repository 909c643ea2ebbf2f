"""Global enums — must match the Prisma enum values stored in the DB exactly."""

from enum import Enum


class BountyStatus(str, Enum):
    OPEN = "OPEN"
    REVIEWING = "REVIEWING"
    COMPLETED = "COMPLETED"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"


class GrantStatus(str, Enum):
    OPEN = "OPEN"
    PAUSED = "PAUSED"
    CLOSED = "CLOSED"


class ActivityType(str, Enum):
    SUBMISSION = "submission"
    APPLICATION = "application"


class OpportunityType(str, Enum):
    BOUNTY = "bounty"
    GRANT = "grant"


# Bounty statuses that count as live opportunities (open, in review, or paid out)
ACTIVE_BOUNTY_STATUSES: tuple[str, ...] = (
    BountyStatus.OPEN.value,
    BountyStatus.COMPLETED.value,
    BountyStatus.REVIEWING.value,
)
