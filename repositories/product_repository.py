"""Product repository: the persistence source of truth for product reads."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Category, Product
from repositories.base import BaseRepository
from schemas.product import ProductResponse
from utils.product_cache import parse_category_id

SORTABLE_COLUMNS = {
    "id": Product.id,
    "name": Product.name,
    "price": Product.price,
    "stock": Product.stock,
    "created_at": Product.created_at,
}


@dataclass
class ProductFilters:
    category_id: Optional[str] = None
    search: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort: str = "id"
    order: str = "asc"

    @property
    def matches_catalog_order(self) -> bool:
        """
        True when the query can be answered from the cached catalog.

        The catalog is cached ordered by id ascending and can only be
        filtered by category.
        """
        return (
            not self.search
            and self.min_price is None
            and self.max_price is None
            and self.sort == "id"
            and self.order == "asc"
        )


@dataclass
class Pagination:
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def to_response(product: Product, category_slug: Optional[str] = None) -> ProductResponse:
    response = ProductResponse.model_validate(product)
    if category_slug is not None:
        response = response.model_copy(update={"category_slug": category_slug})
    return response


class ProductRepository(BaseRepository[Product]):
    """Repository for Product entity."""

    def __init__(self, session: AsyncSession):
        super().__init__(Product, session)

    def _select_with_slug(self):
        return select(Product, Category.slug).outerjoin(Category, Product.category_id == Category.id)

    async def fetch_active_products(
        self, filters: ProductFilters, pagination: Pagination
    ) -> Tuple[List[ProductResponse], int]:
        """
        One page of active products and the total matching the filters.

        A category filter that is not an integer matches nothing, the same
        rule the cached catalog applies.
        """
        conditions = [Product.is_active.is_(True)]

        if filters.category_id:
            category_id = parse_category_id(filters.category_id)
            if category_id is None:
                return [], 0
            conditions.append(Product.category_id == category_id)

        if filters.search:
            pattern = f"%{filters.search}%"
            conditions.append(or_(Product.name.ilike(pattern), Product.description.ilike(pattern)))

        if filters.min_price is not None:
            conditions.append(Product.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Product.price <= filters.max_price)

        total = await self.session.scalar(select(func.count(Product.id)).where(*conditions))

        column = SORTABLE_COLUMNS.get(filters.sort, Product.id)
        ordering = column.desc() if filters.order == "desc" else column.asc()
        stmt = (
            self._select_with_slug()
            .where(*conditions)
            .order_by(ordering, Product.id.asc())
            .limit(pagination.limit)
            .offset(pagination.offset)
        )
        result = await self.session.execute(stmt)
        return [to_response(product, slug) for product, slug in result.all()], total or 0

    async def fetch_catalog(self) -> List[ProductResponse]:
        """Every active product ordered by id, as cached under products:all."""
        stmt = self._select_with_slug().where(Product.is_active.is_(True)).order_by(Product.id.asc())
        result = await self.session.execute(stmt)
        return [to_response(product, slug) for product, slug in result.all()]

    async def get_response(self, product_id: int, only_active: bool = True) -> Optional[ProductResponse]:
        stmt = self._select_with_slug().where(Product.id == product_id)
        if only_active:
            stmt = stmt.where(Product.is_active.is_(True))
        row = (await self.session.execute(stmt)).first()
        if row is None:
            return None
        product, slug = row
        return to_response(product, slug)

    async def get_active_for_update(self, product_id: int) -> Optional[Product]:
        """Lock an active product row for a stock check."""
        stmt = (
            select(Product)
            .where(Product.id == product_id, Product.is_active.is_(True))
            .with_for_update()
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active(self, product_id: int) -> Optional[Product]:
        stmt = select(Product).where(Product.id == product_id, Product.is_active.is_(True))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def adjust_stock(self, product_id: int, delta: int):
        """Add ``delta`` (negative to take) to the product's stock."""
        stmt = update(Product).where(Product.id == product_id).values(stock=Product.stock + delta)
        await self.session.execute(stmt)
        await self.session.flush()

    async def category_exists(self, category_id: int) -> bool:
        return await self.session.get(Category, category_id) is not None
