"""Redis cache for raw table rows.

Rows are stored as JSON under a key built from the table name and a hash of
the query parameters. Only successful queries reach the cache: when the
wrapped call raises, nothing is written and the exception propagates, so a
transient outage is retried on the next comparison instead of being served
as an empty table until the TTL runs out.
"""

import functools
import hashlib
import json
import logging
from typing import Any, Awaitable, Callable

import redis.asyncio as redis

from homefit.config import settings

logger = logging.getLogger(__name__)

KEY_NAMESPACE = "homefit"

_redis_client: redis.Redis | None = None


async def get_redis() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(settings.redis_url, decode_responses=True)
    return _redis_client


def row_cache_key(prefix: str, table: str, params: dict) -> str:
    """Key for one table query, e.g. homefit:postgrest:aggregated_monthly:1a2b..."""
    digest = hashlib.sha256(json.dumps(params, sort_keys=True, default=str).encode()).hexdigest()[:16]
    return f"{KEY_NAMESPACE}:{prefix}:{table}:{digest}"


async def _read(key: str) -> list[dict] | None:
    try:
        r = await get_redis()
        raw = await r.get(key)
    except redis.RedisError as e:
        logger.warning("Redis read failed for %s: %s", key, e)
        return None
    if raw is None:
        return None
    logger.debug("Cache hit: %s", key)
    return json.loads(raw)


async def _write(key: str, rows: list[dict], ttl_seconds: int) -> None:
    try:
        r = await get_redis()
        await r.setex(key, ttl_seconds, json.dumps(rows, default=str))
    except redis.RedisError as e:
        logger.warning("Redis write failed for %s: %s", key, e)


QueryMethod = Callable[[Any, str, dict], Awaitable[list[dict]]]


def cached_rows(prefix: str, ttl_seconds: int | None = None) -> Callable[[QueryMethod], QueryMethod]:
    """Cache a ``(self, table, params) -> rows`` coroutine method.

    Redis errors degrade to an uncached call. Exceptions from the wrapped
    method are never cached.
    """
    def decorator(func: QueryMethod) -> QueryMethod:
        @functools.wraps(func)
        async def wrapper(self: Any, table: str, params: dict) -> list[dict]:
            key = row_cache_key(prefix, table, params)
            hit = await _read(key)
            if hit is not None:
                return hit
            rows = await func(self, table, params)
            await _write(key, rows, ttl_seconds or settings.cache_ttl_seconds)
            return rows
        return wrapper
    return decorator
