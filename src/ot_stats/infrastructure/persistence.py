"""StatsRepository — concrete implementation of StatsRepositoryProtocol.

All queries use raw text() SQL (no ORM) against the Prisma-managed schema:
lower-case table names, quoted camelCase columns, Postgres enum columns for
visibility/status. Status lists are bound as expanding IN parameters.
"""

from collections.abc import Sequence
from decimal import Decimal

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ot_common.currency import as_number
from src.ot_common.enums import ActivityType, OpportunityType
from src.ot_stats.domain.models import (
    ActivityRecord,
    Actor,
    GrantFunds,
    Organization,
    OrganizationBountyTotals,
)

# ---------------------------------------------------------------------------
# SQL — bounties
# ---------------------------------------------------------------------------

_COUNT_BOUNTIES_SQL = text("""
    SELECT COUNT(*) FROM "bounty" WHERE visibility = 'PUBLISHED'
""")

_COUNT_BOUNTIES_BY_STATUS_SQL = text("""
    SELECT COUNT(*) FROM "bounty"
    WHERE visibility = 'PUBLISHED' AND status::text IN :statuses
""").bindparams(bindparam("statuses", expanding=True))

_SUM_BOUNTY_AMOUNT_SQL = text("""
    SELECT SUM("amountUSD") FROM "bounty"
    WHERE visibility = 'PUBLISHED' AND status::text IN :statuses
""").bindparams(bindparam("statuses", expanding=True))

_SUM_ANNOUNCED_BOUNTY_AMOUNT_SQL = text("""
    SELECT SUM("amountUSD") FROM "bounty"
    WHERE visibility = 'PUBLISHED' AND status::text IN :statuses
      AND "winnersAnnouncedAt" IS NOT NULL
""").bindparams(bindparam("statuses", expanding=True))

_BOUNTY_TOTALS_BY_ORG_SQL = text("""
    SELECT "organizationId" AS organization_id,
           COUNT(*) AS bounty_count,
           SUM("amountUSD") AS value_usd
    FROM "bounty"
    WHERE visibility = 'PUBLISHED' AND status::text IN :statuses
    GROUP BY "organizationId"
""").bindparams(bindparam("statuses", expanding=True))

_BOUNTY_SKILLS_SQL = text("""
    SELECT skills FROM "bounty"
    WHERE visibility = 'PUBLISHED' AND status::text IN :statuses
""").bindparams(bindparam("statuses", expanding=True))

# ---------------------------------------------------------------------------
# SQL — grants / RFPs / organizations
# ---------------------------------------------------------------------------

_COUNT_GRANTS_SQL = text("""
    SELECT COUNT(*) FROM "grant"
    WHERE visibility = 'PUBLISHED'
      AND (CAST(:status AS TEXT) IS NULL OR status::text = CAST(:status AS TEXT))
""")

_SUM_GRANT_FUNDS_SQL = text("""
    SELECT SUM("totalFundsUSD") FROM "grant"
    WHERE visibility = 'PUBLISHED' AND status::text = :status
""")

_GRANT_FUNDS_SQL = text("""
    SELECT "organizationId" AS organization_id, "totalFundsUSD" AS total_funds_usd
    FROM "grant"
    WHERE visibility = 'PUBLISHED' AND status::text = :status
""")

_GRANT_SKILLS_SQL = text("""
    SELECT skills FROM "grant"
    WHERE visibility = 'PUBLISHED' AND status::text = :status
""")

_COUNT_RFPS_SQL = text("""
    SELECT COUNT(*) FROM "rfp" WHERE visibility = 'PUBLISHED'
""")

_LIST_ORGANIZATIONS_SQL = text("""
    SELECT id, name, slug, logo FROM "organization"
""")

# ---------------------------------------------------------------------------
# SQL — builders and activity
# ---------------------------------------------------------------------------

_SUBMITTER_IDS_SQL = text("""
    SELECT DISTINCT "userId" FROM "submission" WHERE status <> 'DRAFT'
""")

_APPLICANT_IDS_SQL = text("""
    SELECT DISTINCT "userId" FROM "grant_application" WHERE status <> 'DRAFT'
""")

_RECENT_SUBMISSIONS_SQL = text("""
    SELECT s.id, s."createdAt" AS created_at,
           u.username, u."firstName" AS first_name, u."lastName" AS last_name, u.image,
           b.id AS target_id, b.title AS target_title,
           o.name AS organization_name
    FROM "submission" s
    LEFT JOIN "user" u ON u.id = s."userId"
    LEFT JOIN "bounty" b ON b.id = s."bountyId"
    LEFT JOIN "organization" o ON o.id = b."organizationId"
    WHERE s.status <> 'DRAFT'
    ORDER BY s."createdAt" DESC
    LIMIT :limit
""")

_RECENT_APPLICATIONS_SQL = text("""
    SELECT a.id, a."createdAt" AS created_at,
           u.username, u."firstName" AS first_name, u."lastName" AS last_name, u.image,
           g.id AS target_id, g.title AS target_title,
           o.name AS organization_name
    FROM "grant_application" a
    LEFT JOIN "user" u ON u.id = a."userId"
    LEFT JOIN "grant" g ON g.id = a."grantId"
    LEFT JOIN "organization" o ON o.id = g."organizationId"
    WHERE a.status <> 'DRAFT'
    ORDER BY a."createdAt" DESC
    LIMIT :limit
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_activity(row: object, activity_type: str, target_type: str) -> ActivityRecord:
    return ActivityRecord(
        id=row.id,  # type: ignore[attr-defined]
        type=activity_type,
        actor=Actor(
            username=row.username or "",  # type: ignore[attr-defined]
            first_name=row.first_name,  # type: ignore[attr-defined]
            last_name=row.last_name,  # type: ignore[attr-defined]
            image=row.image,  # type: ignore[attr-defined]
        ),
        target_id=row.target_id or "",  # type: ignore[attr-defined]
        target_title=row.target_title or "",  # type: ignore[attr-defined]
        target_type=target_type,
        organization_name=row.organization_name or "",  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class StatsRepository:
    """Concrete repository — all operations are read-only SQL queries."""

    async def count_bounties(
        self, db: AsyncSession, statuses: Sequence[str] | None = None
    ) -> int:
        if statuses is None:
            result = await db.execute(_COUNT_BOUNTIES_SQL)
        else:
            result = await db.execute(
                _COUNT_BOUNTIES_BY_STATUS_SQL, {"statuses": list(statuses)}
            )
        return int(result.scalar_one())

    async def sum_bounty_amount_usd(
        self,
        db: AsyncSession,
        statuses: Sequence[str],
        winners_announced_only: bool = False,
    ) -> Decimal | None:
        sql = (
            _SUM_ANNOUNCED_BOUNTY_AMOUNT_SQL
            if winners_announced_only
            else _SUM_BOUNTY_AMOUNT_SQL
        )
        result = await db.execute(sql, {"statuses": list(statuses)})
        return result.scalar_one()

    async def count_grants(self, db: AsyncSession, status: str | None = None) -> int:
        result = await db.execute(_COUNT_GRANTS_SQL, {"status": status})
        return int(result.scalar_one())

    async def sum_grant_funds_usd(self, db: AsyncSession, status: str) -> Decimal | None:
        result = await db.execute(_SUM_GRANT_FUNDS_SQL, {"status": status})
        return result.scalar_one()

    async def count_rfps(self, db: AsyncSession) -> int:
        result = await db.execute(_COUNT_RFPS_SQL)
        return int(result.scalar_one())

    async def list_submitter_ids(self, db: AsyncSession) -> list[str]:
        result = await db.execute(_SUBMITTER_IDS_SQL)
        return [row[0] for row in result.fetchall()]

    async def list_applicant_ids(self, db: AsyncSession) -> list[str]:
        result = await db.execute(_APPLICANT_IDS_SQL)
        return [row[0] for row in result.fetchall()]

    async def bounty_totals_by_organization(
        self, db: AsyncSession, statuses: Sequence[str]
    ) -> list[OrganizationBountyTotals]:
        result = await db.execute(_BOUNTY_TOTALS_BY_ORG_SQL, {"statuses": list(statuses)})
        return [
            OrganizationBountyTotals(
                organization_id=row.organization_id,
                count=int(row.bounty_count),
                value_usd=as_number(row.value_usd),
            )
            for row in result.fetchall()
        ]

    async def list_grant_funds(self, db: AsyncSession, status: str) -> list[GrantFunds]:
        result = await db.execute(_GRANT_FUNDS_SQL, {"status": status})
        return [
            GrantFunds(
                organization_id=row.organization_id,
                total_funds_usd=(
                    None if row.total_funds_usd is None else as_number(row.total_funds_usd)
                ),
            )
            for row in result.fetchall()
        ]

    async def list_organizations(self, db: AsyncSession) -> list[Organization]:
        result = await db.execute(_LIST_ORGANIZATIONS_SQL)
        return [
            Organization(id=row.id, name=row.name, slug=row.slug, logo=row.logo)
            for row in result.fetchall()
        ]

    async def list_bounty_skills(
        self, db: AsyncSession, statuses: Sequence[str]
    ) -> list[list[str] | None]:
        result = await db.execute(_BOUNTY_SKILLS_SQL, {"statuses": list(statuses)})
        return [row.skills for row in result.fetchall()]

    async def list_grant_skills(
        self, db: AsyncSession, status: str
    ) -> list[list[str] | None]:
        result = await db.execute(_GRANT_SKILLS_SQL, {"status": status})
        return [row.skills for row in result.fetchall()]

    async def list_recent_submissions(
        self, db: AsyncSession, limit: int
    ) -> list[ActivityRecord]:
        result = await db.execute(_RECENT_SUBMISSIONS_SQL, {"limit": limit})
        return [
            _row_to_activity(row, ActivityType.SUBMISSION.value, OpportunityType.BOUNTY.value)
            for row in result.fetchall()
        ]

    async def list_recent_applications(
        self, db: AsyncSession, limit: int
    ) -> list[ActivityRecord]:
        result = await db.execute(_RECENT_APPLICATIONS_SQL, {"limit": limit})
        return [
            _row_to_activity(row, ActivityType.APPLICATION.value, OpportunityType.GRANT.value)
            for row in result.fetchall()
        ]
