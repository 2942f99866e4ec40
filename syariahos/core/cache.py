"""Read-through JSON cache for upstream reference data.

Backed by Redis when REDIS_URL is configured, otherwise an in-process
TTL store (per worker).
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Awaitable, Callable

from syariahos.core.redis_client import get_async_redis_client

logger = logging.getLogger(__name__)

CACHE_PREFIX = "syariahos:"

_memory_store: dict[str, tuple[float, Any]] = {}


async def get(key: str) -> Any | None:
    client = get_async_redis_client()
    if client is None:
        entry = _memory_store.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= time.monotonic():
            _memory_store.pop(key, None)
            return None
        return value

    try:
        raw = await client.get(CACHE_PREFIX + key)
    except Exception as exc:
        logger.warning("Cache read failed: %s", type(exc).__name__)
        return None
    return json.loads(raw) if raw is not None else None


async def set(key: str, value: Any, ttl_seconds: int) -> None:
    client = get_async_redis_client()
    if client is None:
        _memory_store[key] = (time.monotonic() + ttl_seconds, value)
        return

    try:
        await client.set(CACHE_PREFIX + key, json.dumps(value), ex=ttl_seconds)
    except Exception as exc:
        logger.warning("Cache write failed: %s", type(exc).__name__)


async def remember(
    key: str, ttl_seconds: int, loader: Callable[[], Awaitable[Any]]
) -> Any:
    """Return the cached value for key, loading and storing it on a miss.

    Loader exceptions propagate and nothing is stored.
    """
    cached = await get(key)
    if cached is not None:
        return cached
    value = await loader()
    await set(key, value, ttl_seconds)
    return value


def clear() -> None:
    """Drop all in-process entries."""
    _memory_store.clear()
