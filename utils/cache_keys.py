"""Cache key patterns for the product catalog."""


class CacheKeys:
    """Cache key patterns. Expiry is the store-wide CACHE_TTL."""

    # Whole active catalog, ordered by id
    PRODUCTS_ALL = "products:all"
    # Single product; singular prefix keeps it outside PRODUCTS_PATTERN
    PRODUCT = "product"
    # Per-category lists from the per-query key scheme; only reported in stats
    PRODUCTS_BY_CATEGORY = "products:category"

    # Fan-out pattern for every list key
    PRODUCTS_PATTERN = "products:*"

    @staticmethod
    def product(product_id: int) -> str:
        """Key for a single product response."""
        return f"{CacheKeys.PRODUCT}:{product_id}"

    @staticmethod
    def invalidate_products() -> str:
        """Pattern to invalidate every product list."""
        return CacheKeys.PRODUCTS_PATTERN

    @staticmethod
    def stats_patterns() -> list:
        """Patterns reported by the cache statistics endpoint."""
        return [
            CacheKeys.PRODUCTS_ALL,
            f"{CacheKeys.PRODUCT}:*",
            f"{CacheKeys.PRODUCTS_BY_CATEGORY}:*",
        ]
