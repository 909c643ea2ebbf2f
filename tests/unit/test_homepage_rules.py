"""Tests for ot_stats.domain.homepage — pure aggregation rules."""

from datetime import datetime

from src.ot_stats.domain.homepage import (
    count_unique_builders,
    merge_recent_activity,
    rank_featured_organizations,
    rank_popular_skills,
)
from src.ot_stats.domain.models import (
    ActivityRecord,
    Actor,
    GrantFunds,
    Organization,
    OrganizationBountyTotals,
)


def _org(org_id: str) -> Organization:
    return Organization(id=org_id, name=f"Org {org_id}", slug=f"org-{org_id}", logo=None)


def _activity(activity_id: str, kind: str, created_at: datetime) -> ActivityRecord:
    return ActivityRecord(
        id=activity_id,
        type=kind,
        actor=Actor(username=f"user-{activity_id}"),
        target_id=f"t-{activity_id}",
        target_title="Target",
        target_type="bounty" if kind == "submission" else "grant",
        organization_name="Acme",
        created_at=created_at,
    )


class TestCountUniqueBuilders:
    def test_union_of_submitters_and_applicants(self) -> None:
        assert count_unique_builders(["u1", "u2", "u2"], ["u2", "u3"]) == 3

    def test_empty(self) -> None:
        assert count_unique_builders([], []) == 0


class TestRankFeaturedOrganizations:
    def test_orders_by_value_then_count(self) -> None:
        orgs = [_org("a"), _org("b"), _org("c")]
        bounty_totals = [
            OrganizationBountyTotals("a", count=1, value_usd=5000),
            OrganizationBountyTotals("b", count=3, value_usd=5000),
        ]
        grant_funds = [GrantFunds("c", 20000)]

        ranked = rank_featured_organizations(orgs, bounty_totals, grant_funds)

        assert [org.id for org, _ in ranked] == ["c", "b", "a"]
        assert ranked[0][1].count == 1
        assert ranked[0][1].value == 20000

    def test_merges_bounties_and_grants(self) -> None:
        bounty_totals = [OrganizationBountyTotals("a", count=2, value_usd=1000)]
        grant_funds = [GrantFunds("a", 500), GrantFunds("a", None)]

        ranked = rank_featured_organizations([_org("a")], bounty_totals, grant_funds)

        totals = ranked[0][1]
        assert totals.count == 4
        assert totals.value == 1500

    def test_drops_organizations_without_opportunities(self) -> None:
        ranked = rank_featured_organizations([_org("a"), _org("b")], [], [GrantFunds("b", 0)])
        assert [org.id for org, _ in ranked] == ["b"]

    def test_limit(self) -> None:
        orgs = [_org(str(i)) for i in range(5)]
        grant_funds = [GrantFunds(str(i), i * 100) for i in range(5)]

        ranked = rank_featured_organizations(orgs, [], grant_funds)

        assert [org.id for org, _ in ranked] == ["4", "3", "2"]


class TestRankPopularSkills:
    def test_counts_across_lists(self) -> None:
        ranked = rank_popular_skills([["Rust", "TypeScript"], ["Rust"], None])
        assert ranked == [("Rust", 2), ("TypeScript", 1)]

    def test_trims_and_skips_blanks(self) -> None:
        ranked = rank_popular_skills([[" Rust ", "", "  "], ["Rust"]])
        assert ranked == [("Rust", 2)]

    def test_limit_is_ten(self) -> None:
        ranked = rank_popular_skills([[f"skill-{i}" for i in range(15)]])
        assert len(ranked) == 10


class TestMergeRecentActivity:
    def test_newest_first_across_feeds(self) -> None:
        subs = [_activity("s1", "submission", datetime(2025, 3, 1, 10))]
        apps = [
            _activity("a1", "application", datetime(2025, 3, 1, 12)),
            _activity("a2", "application", datetime(2025, 2, 28, 9)),
        ]

        merged = merge_recent_activity(subs, apps)

        assert [a.id for a in merged] == ["a1", "s1", "a2"]

    def test_limit(self) -> None:
        subs = [_activity(f"s{i}", "submission", datetime(2025, 1, i + 1)) for i in range(8)]
        apps = [_activity(f"a{i}", "application", datetime(2025, 2, i + 1)) for i in range(8)]

        merged = merge_recent_activity(subs, apps)

        assert len(merged) == 10
        assert merged[0].id == "a7"
