"""Pure aggregation rules behind the homepage statistics.

Everything here works on already-fetched rows; the repository does the I/O.
"""

from collections import Counter
from collections.abc import Iterable, Sequence

from src.ot_common.currency import as_number
from src.ot_common.datetime_utils import to_iso_utc
from src.ot_stats.domain.models import (
    ActivityRecord,
    GrantFunds,
    OpportunityTotals,
    Organization,
    OrganizationBountyTotals,
)

FEATURED_ORGANIZATIONS_LIMIT = 3
POPULAR_SKILLS_LIMIT = 10
RECENT_ACTIVITY_LIMIT = 10


def count_unique_builders(
    submitter_ids: Iterable[str], applicant_ids: Iterable[str]
) -> int:
    """Builders = distinct users who submitted to a bounty or applied to a grant."""
    return len(set(submitter_ids) | set(applicant_ids))


def rank_featured_organizations(
    organizations: Sequence[Organization],
    bounty_totals: Sequence[OrganizationBountyTotals],
    grant_funds: Sequence[GrantFunds],
    limit: int = FEATURED_ORGANIZATIONS_LIMIT,
) -> list[tuple[Organization, OpportunityTotals]]:
    """Merge bounty and grant totals per organization and rank them.

    Organizations without opportunities are dropped. Order: total USD value
    desc, then opportunity count desc.
    """
    bounty_by_org = {
        t.organization_id: OpportunityTotals(count=t.count, value=as_number(t.value_usd))
        for t in bounty_totals
    }

    grants_by_org: dict[str, OpportunityTotals] = {}
    for g in grant_funds:
        current = grants_by_org.setdefault(g.organization_id, OpportunityTotals())
        current.count += 1
        current.value += as_number(g.total_funds_usd)

    merged: list[tuple[Organization, OpportunityTotals]] = []
    for org in organizations:
        b = bounty_by_org.get(org.id, OpportunityTotals())
        g = grants_by_org.get(org.id, OpportunityTotals())
        totals = OpportunityTotals(count=b.count + g.count, value=b.value + g.value)
        if totals.count > 0:
            merged.append((org, totals))

    merged.sort(key=lambda item: (item[1].value, item[1].count), reverse=True)
    return merged[:limit]


def rank_popular_skills(
    skill_lists: Iterable[Sequence[str] | None],
    limit: int = POPULAR_SKILLS_LIMIT,
) -> list[tuple[str, int]]:
    """Most frequent skills; names are trimmed and blanks ignored.

    Ties keep first-seen order.
    """
    counter: Counter[str] = Counter()
    for skills in skill_lists:
        for raw in skills or []:
            skill = str(raw or "").strip()
            if skill:
                counter[skill] += 1
    return counter.most_common(limit)


def merge_recent_activity(
    submissions: Sequence[ActivityRecord],
    applications: Sequence[ActivityRecord],
    limit: int = RECENT_ACTIVITY_LIMIT,
) -> list[ActivityRecord]:
    """Newest first across both feeds, compared on the ISO timestamp string."""
    merged = [*submissions, *applications]
    merged.sort(key=lambda a: to_iso_utc(a.created_at), reverse=True)
    return merged[:limit]
