"""Rate limit configuration for different endpoints."""

from typing import Callable

from middlewares.rate_limit import ADMIN_KEY_PREFIX


class RateLimitConfig:
    """
    Rate limit configurations for API endpoints.

    Format: "requests/period"
    Periods: second, minute, hour, day
    """

    # Public endpoints
    HEALTH = "60/minute"
    AUTH_REGISTER = "5/minute"
    AUTH_LOGIN = "10/minute"

    # Catalog reads
    PRODUCTS_LIST = "120/minute"
    PRODUCT_GET = "120/minute"

    # User endpoints
    CART = "60/minute"
    ORDERS_READ = "60/minute"
    ORDER_CREATE = "10/minute"
    ORDER_CANCEL = "10/minute"
    CACHE_STATS = "30/minute"

    # Admin endpoints
    PRODUCT_WRITE = "30/minute"
    ORDERS_ADMIN = "60/minute"
    CACHE_ADMIN = "10/minute"

    ADMIN_MULTIPLIER = 3

    @classmethod
    def get_limit(cls, endpoint: str, is_admin: bool = False) -> str:
        """
        Get rate limit for endpoint.

        Admins get ADMIN_MULTIPLIER times the base limit. Unknown endpoints
        fall back to 30/minute.
        """
        base_limit = getattr(cls, endpoint.upper(), "30/minute")

        if is_admin:
            count, period = base_limit.split("/")
            return f"{int(count) * cls.ADMIN_MULTIPLIER}/{period}"

        return base_limit

    @classmethod
    def for_caller(cls, endpoint: str) -> Callable[[str], str]:
        """
        Limit provider for ``limiter.limit`` resolved per request.

        slowapi passes the rate limit key, whose ``admin:`` prefix marks an
        administrator token.
        """
        def provider(key: str) -> str:
            return cls.get_limit(endpoint, is_admin=key.startswith(f"{ADMIN_KEY_PREFIX}:"))

        return provider
