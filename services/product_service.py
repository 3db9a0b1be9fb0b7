"""Product business logic service."""

from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Product
from repositories.product_repository import Pagination, ProductFilters, ProductRepository
from schemas.product import ProductCreate, ProductListResponse, ProductResponse, ProductUpdate
from services.base import BaseService
from services.exceptions import BusinessRuleError, ConflictError, NotFoundError
from utils.logger import logger
from utils.product_cache import ProductCache

# Columns that may be cleared by sending null
NULLABLE_FIELDS = {"category_id"}


class ProductService(BaseService[Product]):
    """
    Product reads through the cache and writes followed by invalidation.

    The database is the source of truth. Cache failures never fail a
    request; they only turn hits into misses.
    """

    def __init__(self, session: AsyncSession, cache: ProductCache):
        super().__init__(session)
        self.repo = ProductRepository(session)
        self.cache = cache

    async def list_products(
        self, filters: ProductFilters, pagination: Pagination
    ) -> Tuple[ProductListResponse, bool]:
        """
        One page of active products.

        Returns:
            (page, cache_hit)
        """
        if filters.matches_catalog_order:
            cached = await self.cache.get_product_page(pagination.page, pagination.limit, filters.category_id)
            if cached is not None:
                items, total = cached
                return (
                    ProductListResponse(products=items, total=total, page=pagination.page, limit=pagination.limit),
                    True,
                )

        products, total = await self.repo.fetch_active_products(filters, pagination)
        await self.warm_catalog()

        return (
            ProductListResponse(products=products, total=total, page=pagination.page, limit=pagination.limit),
            False,
        )

    async def warm_catalog(self) -> bool:
        """Store the active catalog unless it is already cached."""
        if not self.cache.enabled or await self.cache.has_catalog():
            return False
        catalog = await self.repo.fetch_catalog()
        return await self.cache.set_product_list(catalog)

    async def get_product(self, product_id: int) -> Tuple[ProductResponse, bool]:
        """
        Get an active product.

        Returns:
            (product, cache_hit)

        Raises:
            NotFoundError: no active product with this id
        """
        cached = await self.cache.get_product(product_id)
        if cached is not None:
            return cached, True

        product = await self.repo.get_response(product_id)
        if product is None:
            raise NotFoundError("Product not found", {"product_id": product_id})

        await self.cache.set_product(product)
        return product, False

    async def _check_category(self, category_id):
        if category_id is not None and not await self.repo.category_exists(category_id):
            raise BusinessRuleError("Category does not exist", {"category_id": category_id})

    async def create(self, data: ProductCreate) -> ProductResponse:
        await self._check_category(data.category_id)

        product = await self.repo.create(**data.model_dump())
        await self.commit()
        logger.info("Product created", product_id=product.id, product_name=product.name)

        await self.cache.invalidate_all()
        return await self.repo.get_response(product.id, only_active=False)

    async def update(self, product_id: int, data: ProductUpdate) -> ProductResponse:
        """
        Apply the provided fields.

        Raises:
            NotFoundError: unknown product
        """
        product = await self.repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found", {"product_id": product_id})

        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field in NULLABLE_FIELDS
        }
        if "category_id" in changes:
            await self._check_category(changes["category_id"])

        await self.repo.update(product, **changes)
        await self.commit()
        logger.info("Product updated", product_id=product_id, fields=sorted(changes))

        await self.cache.invalidate_product(product_id)
        return await self.repo.get_response(product_id, only_active=False)

    async def delete(self, product_id: int) -> bool:
        """
        Delete a product.

        Returns:
            Whether the cache invalidation that followed succeeded

        Raises:
            NotFoundError: unknown product
            ConflictError: the product is referenced by orders
        """
        product = await self.repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found", {"product_id": product_id})

        try:
            await self.repo.delete(product)
            await self.commit()
        except IntegrityError as exc:
            await self.rollback()
            raise ConflictError("Product is referenced by existing orders", {"product_id": product_id}) from exc

        logger.info("Product deleted", product_id=product_id)
        return await self.cache.invalidate_product(product_id)
