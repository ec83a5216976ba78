import logging
from typing import Optional

import redis

from healthaccess.core.config import settings

logger = logging.getLogger(__name__)

_redis_client: Optional[redis.Redis] = None


def get_redis() -> Optional[redis.Redis]:
    """Shared client for event fan-out, or None when REDIS_URL is not configured."""
    global _redis_client
    if not settings.REDIS_URL:
        return None
    if _redis_client is None:
        _redis_client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
        logger.info("Redis client created for event fan-out")
    return _redis_client
