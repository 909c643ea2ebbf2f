"""Read-through (cache-aside) helper for statistics snapshots.

Flow per call:
    bypass=False:  GET key -> hit: parse + return
                              miss: compute -> SET key EX ttl -> return
    bypass=True:   compute -> SET key EX ttl -> return   (no GET)

Snapshots are always stored as compact JSON strings and always parsed back
through the snapshot's pydantic model, so there is exactly one
(de)serialisation boundary.

Redis failures never fail the request: a failed GET counts as a miss and a
failed SET still returns the computed snapshot. Both are logged at WARNING.
Exceptions raised by `compute` propagate unchanged.

No stampede protection: concurrent misses on the same key each compute and
each write; the last SET wins.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ValidationError
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

SnapshotT = TypeVar("SnapshotT", bound=BaseModel)

_CACHE_ERRORS: tuple[type[Exception], ...] = (RedisError, OSError)


class CacheClientProtocol(Protocol):
    """The slice of redis.asyncio.Redis this module relies on."""

    async def get(self, name: str) -> Any: ...

    async def set(self, name: str, value: str, ex: int | None = None) -> Any: ...


@dataclass(frozen=True)
class CachePolicy:
    """Cache key and lifetimes for one statistics endpoint.

    ttl_seconds is the Redis TTL and the browser max-age; shared_max_age is
    the CDN s-maxage, deliberately longer than the application TTL.
    """

    key: str
    ttl_seconds: int
    shared_max_age: int

    @property
    def cache_control(self) -> str:
        return f"s-maxage={self.shared_max_age}, max-age={self.ttl_seconds}"


class StatsCache:
    def __init__(self, redis: CacheClientProtocol) -> None:
        self._redis = redis

    async def get_or_compute(
        self,
        key: str,
        ttl_seconds: int,
        bypass: bool,
        compute: Callable[[], Awaitable[SnapshotT]],
        schema: type[SnapshotT],
    ) -> SnapshotT:
        if not bypass:
            cached = await self._read(key, schema)
            if cached is not None:
                return cached

        snapshot = await compute()
        await self._write(key, snapshot, ttl_seconds)
        return snapshot

    async def get_or_compute_policy(
        self,
        policy: CachePolicy,
        bypass: bool,
        compute: Callable[[], Awaitable[SnapshotT]],
        schema: type[SnapshotT],
    ) -> SnapshotT:
        return await self.get_or_compute(
            policy.key, policy.ttl_seconds, bypass, compute, schema
        )

    async def _read(self, key: str, schema: type[SnapshotT]) -> SnapshotT | None:
        try:
            raw = await self._redis.get(key)
        except _CACHE_ERRORS as exc:
            logger.warning("Stats cache read failed: key=%s error=%s", key, exc)
            return None
        if raw is None:
            return None
        try:
            return schema.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning(
                "Discarding unreadable stats cache entry: key=%s errors=%d",
                key,
                exc.error_count(),
            )
            return None

    async def _write(self, key: str, snapshot: BaseModel, ttl_seconds: int) -> None:
        serialized = snapshot.model_dump_json(by_alias=True)
        try:
            await self._redis.set(key, serialized, ex=ttl_seconds)
        except _CACHE_ERRORS as exc:
            logger.warning("Stats cache write failed: key=%s error=%s", key, exc)
