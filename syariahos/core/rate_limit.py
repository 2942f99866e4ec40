"""Rate limiting configuration for the SyariahOS API."""

import logging
import os

from slowapi import Limiter
from slowapi.util import get_remote_address

from syariahos.core.config import settings
from syariahos.core.redis_client import get_redis_url

IS_TESTING = os.getenv("TESTING", "").lower() in ("1", "true", "yes")
DEFAULT_LIMITS = (
    []
    if IS_TESTING or settings.RATE_LIMIT_API <= 0
    else [f"{settings.RATE_LIMIT_API}/minute"]
)
AUTH_LIMIT = f"{settings.RATE_LIMIT_AUTH}/minute"


def _storage_uri() -> str:
    url = get_redis_url()
    if IS_TESTING or not url:
        return "memory://"
    # Test connection upfront, fall back to memory if Redis is down
    try:
        import redis

        redis.from_url(url, socket_connect_timeout=1).ping()
        return url
    except Exception as e:
        logging.warning(f"Redis unavailable for rate limiting, using in-memory: {e}")
        return "memory://"


limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=_storage_uri(),
    default_limits=DEFAULT_LIMITS,
    enabled=not IS_TESTING,
)
