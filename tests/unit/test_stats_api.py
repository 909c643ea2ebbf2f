"""HTTP tests for the public statistics endpoints (dependencies overridden)."""

import json
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from src.main import app
from src.ot_common.stats_cache import StatsCache
from src.ot_stats.api.router import get_stats_service
from src.ot_stats.application.service import StatsApplicationService


@pytest.fixture
def repo() -> MagicMock:
    repo = MagicMock()
    for name in (
        "count_bounties",
        "count_grants",
        "count_rfps",
    ):
        setattr(repo, name, AsyncMock(return_value=0))
    for name in ("sum_bounty_amount_usd", "sum_grant_funds_usd"):
        setattr(repo, name, AsyncMock(return_value=None))
    for name in (
        "list_submitter_ids",
        "list_applicant_ids",
        "bounty_totals_by_organization",
        "list_grant_funds",
        "list_organizations",
        "list_bounty_skills",
        "list_grant_skills",
        "list_recent_submissions",
        "list_recent_applications",
    ):
        setattr(repo, name, AsyncMock(return_value=[]))
    return repo


@pytest.fixture(autouse=True)
def override_service(redis_mock: MagicMock, repo: MagicMock, override_db: MagicMock):
    service = StatsApplicationService(StatsCache(redis_mock), repo)
    app.dependency_overrides[get_stats_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_stats_service, None)


class TestBountyStatsEndpoint:
    async def test_cache_miss_computes_and_caches(
        self, client: AsyncClient, repo: MagicMock, redis_mock: MagicMock
    ) -> None:
        repo.count_bounties.return_value = 42
        repo.sum_bounty_amount_usd.return_value = Decimal("150000")

        resp = await client.get("/api/v1/bounties/stats")

        assert resp.status_code == 200
        assert resp.json() == {"total_bounties_count": 42, "total_rewards": 150000}
        assert resp.headers["cache-control"] == "s-maxage=1800, max-age=600"
        redis_mock.set.assert_awaited_once_with(
            "bounties:stats",
            '{"total_bounties_count":42,"total_rewards":150000}',
            ex=600,
        )

    async def test_cache_hit_skips_database(
        self, client: AsyncClient, repo: MagicMock, redis_mock: MagicMock
    ) -> None:
        redis_mock.get.return_value = '{"total_bounties_count":42,"total_rewards":150000}'

        resp = await client.get("/api/v1/bounties/stats")

        assert resp.status_code == 200
        assert resp.json() == {"total_bounties_count": 42, "total_rewards": 150000}
        repo.count_bounties.assert_not_awaited()
        redis_mock.set.assert_not_awaited()

    async def test_no_matching_bounties_reports_zero(
        self, client: AsyncClient, repo: MagicMock
    ) -> None:
        resp = await client.get("/api/v1/bounties/stats")
        assert resp.json() == {"total_bounties_count": 0, "total_rewards": 0}

    async def test_refresh_must_be_exact_literal(
        self, client: AsyncClient, redis_mock: MagicMock
    ) -> None:
        redis_mock.get.return_value = '{"total_bounties_count":5,"total_rewards":10}'

        for value in ("True", "1", "yes"):
            resp = await client.get("/api/v1/bounties/stats", params={"refresh": value})
            assert resp.json()["total_bounties_count"] == 5
        redis_mock.set.assert_not_awaited()


class TestGrantStatsEndpoint:
    async def test_refresh_bypasses_cached_snapshot(
        self, client: AsyncClient, repo: MagicMock, redis_mock: MagicMock
    ) -> None:
        redis_mock.get.return_value = '{"total_grants_count":1,"total_funds":1}'
        repo.count_grants.return_value = 7
        repo.sum_grant_funds_usd.return_value = Decimal("90000")

        resp = await client.get("/api/v1/grants/stats?refresh=true")

        assert resp.status_code == 200
        assert resp.json() == {"total_grants_count": 7, "total_funds": 90000}
        assert resp.headers["cache-control"] == "s-maxage=1800, max-age=1800"
        redis_mock.get.assert_not_awaited()
        redis_mock.set.assert_awaited_once_with(
            "grants:stats", '{"total_grants_count":7,"total_funds":90000}', ex=1800
        )


class TestRfpStatsEndpoint:
    async def test_success(self, client: AsyncClient, repo: MagicMock) -> None:
        repo.count_rfps.return_value = 12
        repo.count_grants.return_value = 5

        resp = await client.get("/api/v1/rfps/stats")

        assert resp.status_code == 200
        assert resp.json() == {"total_rfps_count": 12, "total_grants_count": 5}
        assert resp.headers["cache-control"] == "s-maxage=1800, max-age=600"

    async def test_database_failure_returns_error_envelope(
        self, client: AsyncClient, repo: MagicMock, redis_mock: MagicMock
    ) -> None:
        repo.count_rfps.side_effect = RuntimeError("Database connection failed")

        resp = await client.get("/api/v1/rfps/stats")

        assert resp.status_code == 500
        assert resp.json() == {
            "error": "Failed to fetch RFP statistics",
            "details": "Database connection failed",
        }
        redis_mock.set.assert_not_awaited()

    async def test_exception_without_message(
        self, client: AsyncClient, repo: MagicMock
    ) -> None:
        repo.count_rfps.side_effect = RuntimeError()

        resp = await client.get("/api/v1/rfps/stats")

        assert resp.status_code == 500
        assert resp.json()["details"] == "Unknown error"


class TestHomepageStatsEndpoint:
    async def test_wrapped_in_data(
        self, client: AsyncClient, repo: MagicMock, redis_mock: MagicMock
    ) -> None:
        repo.count_bounties.return_value = 2
        repo.count_grants.return_value = 1
        repo.sum_grant_funds_usd.return_value = Decimal("45000")

        resp = await client.get("/api/v1/home/stats")

        assert resp.status_code == 200
        assert resp.headers["cache-control"] == "s-maxage=3600, max-age=300"
        body = resp.json()
        assert body["data"]["platformStats"] == {
            "totalOpportunities": 3,
            "totalBuilders": 0,
            "totalRewards": "$45K",
            "activeBounties": 2,
            "activeGrants": 1,
        }
        assert body["data"]["featuredOrganizations"] == []
        cached = json.loads(redis_mock.set.call_args.args[1])
        assert cached == body["data"]

    async def test_failure_uses_homepage_label(
        self, client: AsyncClient, repo: MagicMock
    ) -> None:
        repo.count_bounties.side_effect = RuntimeError("boom")

        resp = await client.get("/api/v1/home/stats")

        assert resp.status_code == 500
        assert resp.json() == {
            "error": "Failed to fetch homepage statistics",
            "details": "boom",
        }


class TestPreflight:
    @pytest.mark.parametrize(
        "path",
        ["/api/v1/bounties/stats", "/api/v1/grants/stats", "/api/v1/rfps/stats", "/api/v1/home/stats"],
    )
    async def test_options_returns_empty_200(
        self, client: AsyncClient, repo: MagicMock, path: str
    ) -> None:
        resp = await client.options(path)

        assert resp.status_code == 200
        assert resp.content == b""
        repo.count_bounties.assert_not_awaited()


class TestRequestId:
    async def test_response_carries_request_id(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/bounties/stats")
        assert resp.headers["x-request-id"].startswith("req_")


class TestBrowserPreflight:
    async def test_trusted_origin_gets_cors_headers_and_empty_body(
        self, client: AsyncClient
    ) -> None:
        resp = await client.options(
            "/api/v1/bounties/stats",
            headers={"Origin": "https://opentribe.io", "Access-Control-Request-Method": "GET"},
        )

        assert resp.status_code == 200
        assert resp.content == b""
        assert resp.headers["access-control-allow-origin"] == "https://opentribe.io"
        assert resp.headers["access-control-allow-credentials"] == "true"
        assert "GET" in resp.headers["access-control-allow-methods"]

    async def test_unknown_origin_gets_empty_200_without_allow_origin(
        self, client: AsyncClient
    ) -> None:
        resp = await client.options(
            "/api/v1/home/stats",
            headers={"Origin": "https://evil.example", "Access-Control-Request-Method": "GET"},
        )

        assert resp.status_code == 200
        assert resp.content == b""
        assert "access-control-allow-origin" not in resp.headers
