"""Rate limiting configuration using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# Public auth routes are keyed by client IP
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["100/minute"],
    enabled=settings.RATE_LIMIT_ENABLED,
)

LOGIN_LIMIT = "10/minute"
REFRESH_LIMIT = "30/minute"
