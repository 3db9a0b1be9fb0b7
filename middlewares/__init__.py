"""Request middlewares: correlation-id logging and per-user rate limiting."""

from middlewares.logging_middleware import CORRELATION_HEADER, setup_logging
from middlewares.rate_limit import get_user_id_or_ip, limiter, setup_rate_limiting
from middlewares.rate_limit_config import RateLimitConfig

__all__ = [
    "CORRELATION_HEADER",
    "setup_logging",
    "get_user_id_or_ip",
    "limiter",
    "setup_rate_limiting",
    "RateLimitConfig",
]
