"""ExchangeRateService — token -> USDC rates with a per-token Redis cache.

Cache key: exchange:rates:<SYMBOL> (symbol upper-cased), TTL 30 minutes.

get_exchange_rates():
  1. GET each token's key; a Redis failure counts as a miss for that token.
  2. Fetch every missing token in a single CoinMarketCap call.
  3. SET each fetched rate; a failed SET is logged and the rate still returned.
API failures propagate (ExchangeRateApiError / httpx errors).
"""

import logging
from collections.abc import Iterable
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.ot_exchange.infrastructure.coinmarketcap_client import CoinMarketCapClient

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "exchange:rates"
CACHE_TTL_SECONDS = 30 * 60

_CACHE_ERRORS: tuple[type[Exception], ...] = (RedisError, OSError)


def _cache_key(symbol: str) -> str:
    return f"{CACHE_KEY_PREFIX}:{symbol}"


def _parse_rate(raw: Any) -> float | None:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


class ExchangeRateService:
    def __init__(self, redis: Redis, client: CoinMarketCapClient) -> None:
        self._redis = redis
        self._client = client

    async def get_exchange_rates(self, tokens: Iterable[str]) -> dict[str, float]:
        result: dict[str, float] = {}
        to_fetch: list[str] = []

        for token in tokens:
            symbol = token.upper()
            if symbol in result or symbol in to_fetch:
                continue
            cached = await self._read_cached(symbol)
            if cached is not None:
                result[symbol] = cached
            else:
                to_fetch.append(symbol)

        if to_fetch:
            rates = await self._client.fetch_usdc_prices(to_fetch)
            for symbol, rate in rates.items():
                try:
                    await self._redis.set(_cache_key(symbol), str(rate), ex=CACHE_TTL_SECONDS)
                except _CACHE_ERRORS as exc:
                    logger.warning("Failed to cache rate for token %s: %s", symbol, exc)
                result[symbol] = rate

        return result

    async def get_exchange_rate(self, token: str) -> float:
        """Rate for one token; 0.0 when the API does not know the symbol."""
        rates = await self.get_exchange_rates([token])
        return rates.get(token.upper(), 0.0)

    async def clear_cache(self) -> None:
        """Delete every cached rate. Redis errors propagate."""
        keys = await self._redis.keys(f"{CACHE_KEY_PREFIX}:*")
        if keys:
            await self._redis.delete(*keys)
        logger.info("Exchange rate cache cleared: keys=%d", len(keys))

    async def get_cache_status(self) -> dict[str, dict[str, float | int]]:
        """Cached rate and remaining TTL per symbol; partial on Redis errors."""
        status: dict[str, dict[str, float | int]] = {}
        prefix = f"{CACHE_KEY_PREFIX}:"
        try:
            for key in await self._redis.keys(f"{prefix}*"):
                rate = _parse_rate(await self._redis.get(key))
                if rate is None:
                    continue
                ttl = await self._redis.ttl(key)
                status[key.removeprefix(prefix)] = {"rate": rate, "ttl": ttl}
        except _CACHE_ERRORS as exc:
            logger.error("Failed to get exchange rate cache status: %s", exc)
        return status

    async def _read_cached(self, symbol: str) -> float | None:
        try:
            raw = await self._redis.get(_cache_key(symbol))
        except _CACHE_ERRORS as exc:
            logger.warning("Failed to check cache for token %s: %s", symbol, exc)
            return None
        if raw is None:
            return None
        return _parse_rate(raw)
