"""Domain models for ot_stats — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Organization:
    id: str
    name: str
    slug: str
    logo: str | None


@dataclass
class OpportunityTotals:
    """Number of opportunities and their summed USD value for one organization."""

    count: int = 0
    value: int | float = 0


@dataclass
class OrganizationBountyTotals:
    organization_id: str
    count: int
    value_usd: int | float


@dataclass
class GrantFunds:
    """One open grant's organization and USD funding (None when unpriced)."""

    organization_id: str
    total_funds_usd: int | float | None


@dataclass
class Actor:
    username: str
    first_name: str | None = None
    last_name: str | None = None
    image: str | None = None


@dataclass
class ActivityRecord:
    """A submission (to a bounty) or application (to a grant)."""

    id: str
    type: str                    # ActivityType value
    actor: Actor
    target_id: str
    target_title: str
    target_type: str             # OpportunityType value
    organization_name: str
    created_at: datetime
