"""Keyed query cache over Redis.

Cache-aside: a read checks Redis first and falls back to the store on a miss,
storing the JSON result with a TTL. Mutations delete the keys they affect so
the next read refetches. Nothing is ever patched in place.
"""
import json
import logging
from typing import Any, Awaitable, Callable

from redis import asyncio as aioredis

from blogapp.core.config import get_settings
from blogapp.core.errors import cache_call

logger = logging.getLogger(__name__)

POST_LIST_PATTERN = "posts:list:*"
ANALYTICS_KEY = "analytics"


def post_list_key(skip: int = 0, limit: int | None = None) -> str:
    return f"posts:list:{skip}:{limit if limit is not None else 'all'}"

def post_key(post_id: int) -> str:
    return f"post:{post_id}"

def comments_key(post_id: int) -> str:
    return f"comments:{post_id}"


class QueryCache:
    def __init__(self, redis: aioredis.Redis, ttl: int = 300):
        self.redis = redis
        self.ttl = ttl

    @cache_call
    async def get_or_fetch(
        self,
        cache_key: str,
        fetch_func: Callable[[], Awaitable[Any]],
        ttl: int | None = None,
    ) -> Any:
        cached = await self.redis.get(cache_key)
        if cached is not None:
            return json.loads(cached)

        logger.debug("cache miss: %s", cache_key)
        # errors from fetch_func propagate and leave the key unset
        data = await fetch_func()
        await self.redis.setex(cache_key, ttl or self.ttl, json.dumps(data, default=str))
        return data

    @cache_call
    async def invalidate(self, *keys: str) -> None:
        """Delete keys; entries containing ``*`` are expanded as glob patterns."""
        to_delete = []
        for key in keys:
            if "*" in key:
                to_delete.extend(await self.redis.keys(key))
            else:
                to_delete.append(key)
        if to_delete:
            await self.redis.delete(*to_delete)
        logger.debug("invalidated %s", ", ".join(keys))


# Global Redis connection, created on first use
redis_client = None

async def get_redis() -> aioredis.Redis:
    global redis_client
    if redis_client is None:
        redis_client = aioredis.from_url(
            get_settings().REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
        )
    return redis_client

async def close_redis() -> None:
    global redis_client
    if redis_client is not None:
        await redis_client.aclose()
        redis_client = None

async def get_cache() -> QueryCache:
    return QueryCache(await get_redis(), ttl=get_settings().CACHE_TTL_SECONDS)
