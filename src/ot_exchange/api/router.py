"""Cron endpoints for exchange-rate maintenance.

GET /cron/update-usd-amount[?refresh=true]
    Recompute bounty/grant USD columns from current CoinMarketCap rates.
    refresh=true clears the cached rates first.
    Requires Authorization: Bearer <CRON_SECRET>.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ot_common.database import get_db_session
from src.ot_common.errors import error_details
from src.ot_common.redis_client import get_redis
from src.ot_exchange.application.exchange_rate_service import ExchangeRateService
from src.ot_exchange.application.usd_amount_service import UsdAmountService
from src.ot_exchange.infrastructure.coinmarketcap_client import CoinMarketCapClient
from src.ot_gateway.auth.dependencies import verify_cron_secret

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/cron", tags=["cron"], dependencies=[Depends(verify_cron_secret)]
)


async def get_coinmarketcap_client() -> AsyncGenerator[CoinMarketCapClient, None]:
    client = CoinMarketCapClient(
        settings.COINMARKETCAP_API_KEY,
        settings.COINMARKETCAP_API_URL,
        timeout_s=settings.COINMARKETCAP_TIMEOUT_SECONDS,
    )
    try:
        yield client
    finally:
        await client.aclose()


async def get_usd_amount_service(
    redis: Annotated[Redis, Depends(get_redis)],
    client: Annotated[CoinMarketCapClient, Depends(get_coinmarketcap_client)],
) -> UsdAmountService:
    return UsdAmountService(ExchangeRateService(redis, client))


@router.get("/update-usd-amount")
async def update_usd_amount(
    service: Annotated[UsdAmountService, Depends(get_usd_amount_service)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    refresh: Annotated[str | None, Query()] = None,
) -> JSONResponse:
    try:
        async with db.begin():
            result = await service.update_usd_amounts(db, refresh == "true")
    except Exception as exc:
        logger.exception("Error in USD amount update cron job")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Failed to update USD amounts",
                "details": error_details(exc),
            },
        )
    return JSONResponse(content=result.model_dump(by_alias=True, exclude_none=True))
