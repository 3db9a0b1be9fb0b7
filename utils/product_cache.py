"""
Read-through cache policy for products.

The whole active catalog is cached under one key (``products:all``) and
single products under ``product:{id}``. List reads page and filter the
cached catalog in process, so every page and every category share one
cache entry and one invalidation.

Reads never raise: a missing, undecodable or unreachable entry is a miss
(``None``). Writes and invalidations log failures and report them through
their boolean result; the database stays authoritative either way.
"""

import re
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple, Union

from pydantic import ValidationError

from schemas.product import ProductResponse
from utils.cache import CacheError, CacheMiss
from utils.cache_keys import CacheKeys
from utils.logger import cache_logger as logger

# Optional sign then ASCII digits only
CATEGORY_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


class CacheStore(Protocol):
    """Capability the product cache needs from a key-value store."""

    enabled: bool

    async def get(self, key: str): ...

    async def set(self, key: str, value, ttl: Optional[int] = None): ...

    async def exists(self, key: str) -> bool: ...

    async def delete(self, key: str) -> int: ...

    async def delete_pattern(self, pattern: str) -> int: ...

    async def count_pattern(self, pattern: str) -> int: ...


def parse_category_id(value) -> Optional[int]:
    """Parse a category filter, ``None`` when it is not a plain decimal integer."""
    if not isinstance(value, str) or not CATEGORY_ID_PATTERN.fullmatch(value):
        return None
    return int(value)


def filter_by_category(products: List[ProductResponse], category_id: str) -> List[ProductResponse]:
    """
    Keep products whose category_id equals ``category_id`` parsed as int.

    A value that is not an integer matches nothing.
    """
    wanted = parse_category_id(category_id)
    if wanted is None:
        return []
    return [p for p in products if p.category_id is not None and p.category_id == wanted]


def paginate(items: Sequence, page: int, limit: int) -> list:
    """Slice ``[(page-1)*limit, page*limit)``, empty when out of range."""
    if page < 1 or limit < 1:
        return []
    start = (page - 1) * limit
    if start >= len(items):
        return []
    return list(items[start:start + limit])


class ProductCache:
    """Product key schema plus read, write and invalidation operations."""

    def __init__(self, store: CacheStore):
        self.store = store

    @property
    def enabled(self) -> bool:
        return self.store.enabled

    # --- reads ---

    async def _load_catalog(self) -> Optional[List[ProductResponse]]:
        try:
            raw = await self.store.get(CacheKeys.PRODUCTS_ALL)
        except CacheMiss:
            logger.debug("Cache miss", key=CacheKeys.PRODUCTS_ALL)
            return None
        except CacheError as exc:
            logger.warning("Cache read failed, treating as miss", key=CacheKeys.PRODUCTS_ALL, error=str(exc))
            return None

        try:
            return [ProductResponse.model_validate(item) for item in raw]
        except (TypeError, ValidationError) as exc:
            logger.warning("Cached catalog is malformed, treating as miss", error=str(exc))
            return None

    async def get_product_page(
        self, page: int, limit: int, category_id: Optional[str] = None
    ) -> Optional[Tuple[List[ProductResponse], int]]:
        """
        Return ``(items, total)`` for one page of the cached catalog.

        ``total`` is the size of the filtered catalog. ``None`` means the
        catalog is not cached.
        """
        catalog = await self._load_catalog()
        if catalog is None:
            return None

        if category_id:
            catalog = filter_by_category(catalog, category_id)

        logger.debug("Cache hit", key=CacheKeys.PRODUCTS_ALL, page=page, limit=limit, category_id=category_id)
        return paginate(catalog, page, limit), len(catalog)

    async def get_product_list(
        self, page: int, limit: int, category_id: Optional[str] = None
    ) -> Optional[List[ProductResponse]]:
        """One page of products, ``[]`` for an empty page, ``None`` on miss."""
        result = await self.get_product_page(page, limit, category_id)
        if result is None:
            return None
        return result[0]

    async def has_catalog(self) -> bool:
        try:
            return await self.store.exists(CacheKeys.PRODUCTS_ALL)
        except CacheError as exc:
            logger.warning("Cache exists check failed", key=CacheKeys.PRODUCTS_ALL, error=str(exc))
            return False

    async def get_product(self, product_id: int) -> Optional[ProductResponse]:
        key = CacheKeys.product(product_id)
        try:
            raw = await self.store.get(key)
        except CacheMiss:
            logger.debug("Cache miss", key=key)
            return None
        except CacheError as exc:
            logger.warning("Cache read failed, treating as miss", key=key, error=str(exc))
            return None

        try:
            product = ProductResponse.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Cached product is malformed, treating as miss", key=key, error=str(exc))
            return None

        logger.debug("Cache hit", key=key)
        return product

    # --- writes ---

    async def set_product_list(self, products: List[ProductResponse]) -> bool:
        """Store the whole active catalog."""
        payload = [p.model_dump(mode="json") for p in products]
        try:
            await self.store.set(CacheKeys.PRODUCTS_ALL, payload)
        except CacheError as exc:
            logger.error("Failed to cache product catalog", error=str(exc))
            return False
        logger.info("Product catalog cached", count=len(products))
        return True

    async def set_product(self, product: ProductResponse) -> bool:
        key = CacheKeys.product(product.id)
        try:
            await self.store.set(key, product.model_dump(mode="json"))
        except CacheError as exc:
            logger.error("Failed to cache product", key=key, error=str(exc))
            return False
        logger.debug("Product cached", key=key)
        return True

    # --- invalidation ---

    async def invalidate_product(self, product_id: int) -> bool:
        """
        Drop ``product:{id}`` and every product list.

        Both deletes are attempted; ``False`` if either failed.
        """
        return await self.invalidate_products([product_id])

    async def invalidate_products(self, product_ids: Iterable[int]) -> bool:
        """
        Drop ``product:{id}`` for each id, then every product list once.

        Every delete is attempted; ``False`` if any failed.
        """
        product_ids = sorted(set(product_ids))
        ok = True
        for product_id in product_ids:
            key = CacheKeys.product(product_id)
            try:
                await self.store.delete(key)
            except CacheError as exc:
                logger.error("Failed to delete cached product", key=key, error=str(exc))
                ok = False

        if not await self.invalidate_all():
            ok = False

        if ok:
            logger.info("Product cache invalidated", product_ids=product_ids)
        return ok

    async def invalidate_all(self) -> bool:
        """Drop every product list. Single-product keys are kept."""
        pattern = CacheKeys.invalidate_products()
        try:
            deleted = await self.store.delete_pattern(pattern)
        except CacheError as exc:
            logger.error("Failed to invalidate product lists", pattern=pattern, error=str(exc))
            return False
        logger.info("Product lists invalidated", pattern=pattern, deleted=deleted)
        return True

    # --- stats ---

    async def get_cache_stats(self) -> Dict[str, Union[int, str]]:
        stats: Dict[str, Union[int, str]] = {}
        for pattern in CacheKeys.stats_patterns():
            try:
                stats[pattern] = await self.store.count_pattern(pattern)
            except CacheError as exc:
                logger.warning("Cache stats failed for pattern", pattern=pattern, error=str(exc))
                stats[pattern] = "error"

        catalog = await self._load_catalog()
        stats["cached_products_count"] = len(catalog) if catalog is not None else 0
        return stats
