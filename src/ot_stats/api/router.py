"""ot_stats REST endpoints (public, no auth).

GET /bounties/stats   — {total_bounties_count, total_rewards}
GET /grants/stats     — {total_grants_count, total_funds}
GET /rfps/stats       — {total_rfps_count, total_grants_count}
GET /home/stats       — {data: {platformStats, featuredOrganizations, popularSkills, recentActivity}}

?refresh=true skips the cache read (the fresh snapshot is still cached).
Every response carries Cache-Control: s-maxage=<cdn>, max-age=<ttl>.
OPTIONS on each path answers an empty 200 for CORS preflight.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from src.ot_common.database import get_db_session
from src.ot_common.errors import StatsComputeError, error_details
from src.ot_common.redis_client import get_redis
from src.ot_common.stats_cache import CachePolicy, StatsCache
from src.ot_stats.application.schemas import HomepageStatsResponse
from src.ot_stats.application.service import (
    BOUNTY_STATS_POLICY,
    GRANT_STATS_POLICY,
    HOMEPAGE_STATS_POLICY,
    RFP_STATS_POLICY,
    StatsApplicationService,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["stats"])

STATS_PATHS = ("/bounties/stats", "/grants/stats", "/rfps/stats", "/home/stats")


async def get_stats_service(
    redis: Annotated[Redis, Depends(get_redis)],
) -> StatsApplicationService:
    return StatsApplicationService(StatsCache(redis))


ServiceDep = Annotated[StatsApplicationService, Depends(get_stats_service)]
SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
RefreshQuery = Annotated[
    str | None, Query(description='Pass "true" to bypass the cached snapshot.')
]


def _is_refresh(refresh: str | None) -> bool:
    # Only the exact literal counts; "1", "True", "yes" do not
    return refresh == "true"


async def _stats_response(
    label: str,
    policy: CachePolicy,
    fetch: Callable[[], Awaitable[dict[str, Any]]],
) -> JSONResponse:
    try:
        content = await fetch()
    except Exception as exc:
        logger.exception("Error fetching %s stats", label)
        raise StatsComputeError(label, error_details(exc), policy.cache_control) from exc
    return JSONResponse(content=content, headers={"Cache-Control": policy.cache_control})


@router.get("/bounties/stats")
async def get_bounty_stats(
    service: ServiceDep, db: SessionDep, refresh: RefreshQuery = None
) -> JSONResponse:
    async def fetch() -> dict[str, Any]:
        stats = await service.get_bounty_stats(db, _is_refresh(refresh))
        return stats.model_dump(mode="json")

    return await _stats_response("bounty", BOUNTY_STATS_POLICY, fetch)


@router.get("/grants/stats")
async def get_grant_stats(
    service: ServiceDep, db: SessionDep, refresh: RefreshQuery = None
) -> JSONResponse:
    async def fetch() -> dict[str, Any]:
        stats = await service.get_grant_stats(db, _is_refresh(refresh))
        return stats.model_dump(mode="json")

    return await _stats_response("grant", GRANT_STATS_POLICY, fetch)


@router.get("/rfps/stats")
async def get_rfp_stats(
    service: ServiceDep, db: SessionDep, refresh: RefreshQuery = None
) -> JSONResponse:
    async def fetch() -> dict[str, Any]:
        stats = await service.get_rfp_stats(db, _is_refresh(refresh))
        return stats.model_dump(mode="json")

    return await _stats_response("RFP", RFP_STATS_POLICY, fetch)


@router.get("/home/stats")
async def get_homepage_stats(
    service: ServiceDep, db: SessionDep, refresh: RefreshQuery = None
) -> JSONResponse:
    async def fetch() -> dict[str, Any]:
        stats = await service.get_homepage_stats(db, _is_refresh(refresh))
        return HomepageStatsResponse(data=stats).model_dump(mode="json", by_alias=True)

    return await _stats_response("homepage", HOMEPAGE_STATS_POLICY, fetch)


async def preflight() -> Response:
    return Response(status_code=200)


for _path in STATS_PATHS:
    router.add_api_route(_path, preflight, methods=["OPTIONS"], include_in_schema=False)
