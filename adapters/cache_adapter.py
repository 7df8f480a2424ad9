"""Redis adapter for the read caches in front of the catalog.

Write paths only drop keys; whoever reads the listings repopulates them.
When no Redis URL is configured every call is a no-op.
"""

from typing import Optional
import logging

import redis

from app.config import settings

logger = logging.getLogger("halalcheck.cache")

_client: Optional[redis.Redis] = None


# ------------------ Connection ------------------
def connect(url: Optional[str]):
    global _client
    if not url:
        logger.info("No Redis URL configured, cache invalidation disabled")
        _client = None
        return
    try:
        _client = redis.from_url(url, decode_responses=True)
        _client.ping()
        logger.info("Connected to Redis %s", url)
    except redis.RedisError as exc:
        _client = None
        logger.warning("Could not initialize Redis client: %s - cache disabled", exc)


def close():
    """Close Redis connection."""
    global _client
    try:
        if _client is not None:
            _client.close()
            logger.info("Redis client closed")
    except redis.RedisError:
        logger.exception("Error closing Redis client")
    finally:
        _client = None


def is_connected() -> bool:
    return _client is not None


# ------------------ Keys ------------------
def invalidate(*keys: str) -> int:
    """Drop cached entries; returns how many keys were removed.

    A cache outage must not fail a committed write, so Redis errors are logged.
    """
    keys = tuple(k for k in keys if k)
    if _client is None or not keys:
        logger.debug("Cache invalidation skipped for %s", keys)
        return 0
    try:
        removed = _client.delete(*keys)
        logger.debug("Invalidated cache keys %s (%s removed)", keys, removed)
        return removed
    except redis.RedisError as exc:
        logger.warning("Failed to invalidate cache keys %s: %s", keys, exc)
        return 0


def invalidate_products() -> int:
    return invalidate(settings.products_cache_key)


def invalidate_pending_requests() -> int:
    return invalidate(settings.pending_requests_cache_key)
