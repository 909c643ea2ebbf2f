"""StatsApplicationService — cache-aside statistics for the public site.

Each public method resolves one endpoint's snapshot through StatsCache:
cached JSON when present (and refresh is False), otherwise a fresh compute
that is written back with the endpoint's TTL.

All queries are read-only; no commit/rollback needed. Queries of one
compute share the request's AsyncSession, so they run one after another.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ot_common.currency import as_number, format_compact_usd
from src.ot_common.enums import (
    ACTIVE_BOUNTY_STATUSES,
    BountyStatus,
    GrantStatus,
)
from src.ot_common.stats_cache import CachePolicy, StatsCache
from src.ot_stats.application.schemas import (
    BountyStats,
    FeaturedOrganization,
    GrantStats,
    HomepageStats,
    PlatformStats,
    PopularSkill,
    RecentActivity,
    RfpStats,
)
from src.ot_stats.domain.homepage import (
    RECENT_ACTIVITY_LIMIT,
    count_unique_builders,
    merge_recent_activity,
    rank_featured_organizations,
    rank_popular_skills,
)
from src.ot_stats.domain.repository import StatsRepositoryProtocol
from src.ot_stats.infrastructure.persistence import StatsRepository

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Cache policies (key, Redis TTL = browser max-age, CDN s-maxage)
# ---------------------------------------------------------------------------

BOUNTY_STATS_POLICY = CachePolicy(key="bounties:stats", ttl_seconds=600, shared_max_age=1800)
GRANT_STATS_POLICY = CachePolicy(key="grants:stats", ttl_seconds=1800, shared_max_age=1800)
RFP_STATS_POLICY = CachePolicy(key="rfps:stats", ttl_seconds=600, shared_max_age=1800)
HOMEPAGE_STATS_POLICY = CachePolicy(key="homepage:stats", ttl_seconds=300, shared_max_age=3600)

# Bounties whose rewards count toward the bounty page total
_REWARD_BOUNTY_STATUSES: tuple[str, ...] = (
    BountyStatus.COMPLETED.value,
    BountyStatus.OPEN.value,
    BountyStatus.REVIEWING.value,
)
# Skills are taken from bounties still open or already completed
_SKILL_BOUNTY_STATUSES: tuple[str, ...] = (
    BountyStatus.OPEN.value,
    BountyStatus.COMPLETED.value,
)


class StatsApplicationService:
    def __init__(
        self, cache: StatsCache, repo: StatsRepositoryProtocol | None = None
    ) -> None:
        self._cache = cache
        self._repo: StatsRepositoryProtocol = repo or StatsRepository()

    # ------------------------------------------------------------------
    # Endpoint snapshots
    # ------------------------------------------------------------------

    async def get_bounty_stats(self, db: AsyncSession, refresh: bool = False) -> BountyStats:
        return await self._cache.get_or_compute_policy(
            BOUNTY_STATS_POLICY, refresh, lambda: self.compute_bounty_stats(db), BountyStats
        )

    async def get_grant_stats(self, db: AsyncSession, refresh: bool = False) -> GrantStats:
        return await self._cache.get_or_compute_policy(
            GRANT_STATS_POLICY, refresh, lambda: self.compute_grant_stats(db), GrantStats
        )

    async def get_rfp_stats(self, db: AsyncSession, refresh: bool = False) -> RfpStats:
        return await self._cache.get_or_compute_policy(
            RFP_STATS_POLICY, refresh, lambda: self.compute_rfp_stats(db), RfpStats
        )

    async def get_homepage_stats(
        self, db: AsyncSession, refresh: bool = False
    ) -> HomepageStats:
        return await self._cache.get_or_compute_policy(
            HOMEPAGE_STATS_POLICY,
            refresh,
            lambda: self.compute_homepage_stats(db),
            HomepageStats,
        )

    # ------------------------------------------------------------------
    # Compute functions (the only code that touches the database)
    # ------------------------------------------------------------------

    async def compute_bounty_stats(self, db: AsyncSession) -> BountyStats:
        total_count = await self._repo.count_bounties(db)
        total_rewards = await self._repo.sum_bounty_amount_usd(db, _REWARD_BOUNTY_STATUSES)
        return BountyStats(
            total_bounties_count=total_count,
            total_rewards=as_number(total_rewards),
        )

    async def compute_grant_stats(self, db: AsyncSession) -> GrantStats:
        total_count = await self._repo.count_grants(db, GrantStatus.OPEN.value)
        total_funds = await self._repo.sum_grant_funds_usd(db, GrantStatus.OPEN.value)
        return GrantStats(
            total_grants_count=total_count,
            total_funds=as_number(total_funds),
        )

    async def compute_rfp_stats(self, db: AsyncSession) -> RfpStats:
        total_rfps = await self._repo.count_rfps(db)
        total_grants = await self._repo.count_grants(db)
        return RfpStats(total_rfps_count=total_rfps, total_grants_count=total_grants)

    async def compute_homepage_stats(self, db: AsyncSession) -> HomepageStats:
        platform_stats = await self._platform_stats(db)
        featured = await self._featured_organizations(db)
        skills = await self._popular_skills(db)
        activity = await self._recent_activity(db)
        logger.debug(
            "Homepage stats computed: featured=%d skills=%d activity=%d",
            len(featured),
            len(skills),
            len(activity),
        )
        return HomepageStats(
            platform_stats=platform_stats,
            featured_organizations=featured,
            popular_skills=skills,
            recent_activity=activity,
        )

    # ------------------------------------------------------------------
    # Homepage parts
    # ------------------------------------------------------------------

    async def _platform_stats(self, db: AsyncSession) -> PlatformStats:
        active_bounties = await self._repo.count_bounties(db, ACTIVE_BOUNTY_STATUSES)
        active_grants = await self._repo.count_grants(db, GrantStatus.OPEN.value)

        submitter_ids = await self._repo.list_submitter_ids(db)
        applicant_ids = await self._repo.list_applicant_ids(db)

        # Only bounties with announced winners have actually paid out
        bounty_total = as_number(
            await self._repo.sum_bounty_amount_usd(
                db, ACTIVE_BOUNTY_STATUSES, winners_announced_only=True
            )
        )
        grant_total = as_number(
            await self._repo.sum_grant_funds_usd(db, GrantStatus.OPEN.value)
        )

        return PlatformStats(
            total_opportunities=active_bounties + active_grants,
            total_builders=count_unique_builders(submitter_ids, applicant_ids),
            total_rewards=format_compact_usd(bounty_total + grant_total),
            active_bounties=active_bounties,
            active_grants=active_grants,
        )

    async def _featured_organizations(self, db: AsyncSession) -> list[FeaturedOrganization]:
        bounty_totals = await self._repo.bounty_totals_by_organization(
            db, ACTIVE_BOUNTY_STATUSES
        )
        grant_funds = await self._repo.list_grant_funds(db, GrantStatus.OPEN.value)
        organizations = await self._repo.list_organizations(db)
        ranked = rank_featured_organizations(organizations, bounty_totals, grant_funds)
        return [FeaturedOrganization.from_domain(org, totals) for org, totals in ranked]

    async def _popular_skills(self, db: AsyncSession) -> list[PopularSkill]:
        bounty_skills = await self._repo.list_bounty_skills(db, _SKILL_BOUNTY_STATUSES)
        grant_skills = await self._repo.list_grant_skills(db, GrantStatus.OPEN.value)
        ranked = rank_popular_skills([*bounty_skills, *grant_skills])
        return [PopularSkill(skill=skill, count=count) for skill, count in ranked]

    async def _recent_activity(self, db: AsyncSession) -> list[RecentActivity]:
        submissions = await self._repo.list_recent_submissions(db, RECENT_ACTIVITY_LIMIT)
        applications = await self._repo.list_recent_applications(db, RECENT_ACTIVITY_LIMIT)
        merged = merge_recent_activity(submissions, applications)
        return [RecentActivity.from_domain(a) for a in merged]
