"""Pydantic schemas for ot_stats API responses.

These models are also the cache format: StatsCache stores
model_dump_json(by_alias=True) and reads back with model_validate_json().

Bounty/grant/RFP snapshots use snake_case keys. The homepage snapshot keeps
the camelCase keys the web app consumes (aliases), e.g.:

{
    "platformStats": {"totalOpportunities": 12, "totalBuilders": 40,
                      "totalRewards": "$1.5M", "activeBounties": 8, "activeGrants": 4},
    "featuredOrganizations": [{"id": "...", "name": "...", "slug": "...", "logo": null,
                               "totalOpportunities": 3, "totalValue": 120000}],
    "popularSkills": [{"skill": "Rust", "count": 7}],
    "recentActivity": [{"id": "...", "type": "submission",
                        "user": {"firstName": null, "lastName": null,
                                 "username": "alice", "image": null},
                        "target": {"id": "...", "title": "...", "type": "bounty",
                                   "organizationName": "..."},
                        "createdAt": "2025-03-01T12:00:00.000Z"}]
}
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt
from pydantic.alias_generators import to_camel

from src.ot_common.datetime_utils import to_iso_utc
from src.ot_stats.domain.models import ActivityRecord, OpportunityTotals, Organization

# int first: whole amounts stay ints in JSON (150000, not 150000.0)
Amount = NonNegativeInt | NonNegativeFloat

# ---------------------------------------------------------------------------
# Flat snapshots
# ---------------------------------------------------------------------------


class BountyStats(BaseModel):
    total_bounties_count: int = Field(ge=0)
    total_rewards: Amount


class GrantStats(BaseModel):
    total_grants_count: int = Field(ge=0)
    total_funds: Amount


class RfpStats(BaseModel):
    total_rfps_count: int = Field(ge=0)
    total_grants_count: int = Field(ge=0)


# ---------------------------------------------------------------------------
# Homepage snapshot
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PlatformStats(_CamelModel):
    total_opportunities: int = Field(ge=0)
    total_builders: int = Field(ge=0)
    total_rewards: str
    active_bounties: int = Field(ge=0)
    active_grants: int = Field(ge=0)


class FeaturedOrganization(_CamelModel):
    id: str
    name: str
    slug: str
    logo: str | None = None
    total_opportunities: int = Field(ge=0)
    total_value: Amount

    @classmethod
    def from_domain(
        cls, org: Organization, totals: OpportunityTotals
    ) -> "FeaturedOrganization":
        return cls(
            id=org.id,
            name=org.name,
            slug=org.slug,
            logo=org.logo,
            total_opportunities=totals.count,
            total_value=totals.value,
        )


class PopularSkill(_CamelModel):
    skill: str
    count: int = Field(ge=0)


class ActivityUser(_CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    username: str
    image: str | None = None


class ActivityTarget(_CamelModel):
    id: str
    title: str
    type: Literal["bounty", "grant"]
    organization_name: str


class RecentActivity(_CamelModel):
    id: str
    type: Literal["submission", "application"]
    user: ActivityUser
    target: ActivityTarget
    created_at: str

    @classmethod
    def from_domain(cls, a: ActivityRecord) -> "RecentActivity":
        return cls(
            id=a.id,
            type=a.type,
            user=ActivityUser(
                first_name=a.actor.first_name,
                last_name=a.actor.last_name,
                username=a.actor.username,
                image=a.actor.image,
            ),
            target=ActivityTarget(
                id=a.target_id,
                title=a.target_title,
                type=a.target_type,
                organization_name=a.organization_name,
            ),
            created_at=to_iso_utc(a.created_at),
        )


class HomepageStats(_CamelModel):
    platform_stats: PlatformStats
    featured_organizations: list[FeaturedOrganization]
    popular_skills: list[PopularSkill]
    recent_activity: list[RecentActivity]


class HomepageStatsResponse(BaseModel):
    data: HomepageStats
