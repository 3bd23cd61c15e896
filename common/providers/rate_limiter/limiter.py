"""Global rate limiter instance for SlowAPI."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from common.core.config import settings

# Redis-backed so limits hold across API pods.
# Both limits apply; whichever is hit first wins:
# - 20/second: burst from dashboards polling several wallets at once
# - 600/minute: sustained rate
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["20/second", "600/minute"],
    storage_uri=settings.redis_connection_url,
)
