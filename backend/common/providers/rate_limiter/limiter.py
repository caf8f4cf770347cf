"""Global rate limiter instance for SlowAPI."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from common.core.config import settings

# Redis-backed so limits hold across API pods; both limits must be satisfied
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["20/second", "600/minute"],
    storage_uri=settings.rate_limit_storage_uri or settings.redis_connection_url,
    enabled=settings.rate_limit_enabled,
)
