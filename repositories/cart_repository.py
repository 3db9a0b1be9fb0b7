"""Cart repository for data access."""

from typing import List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import CartItem, Category, Product
from repositories.base import BaseRepository


class CartRepository(BaseRepository[CartItem]):
    """Repository for CartItem entity."""

    def __init__(self, session: AsyncSession):
        super().__init__(CartItem, session)

    async def get_user_cart(self, user_id: int) -> List[Tuple[CartItem, Product, Optional[str]]]:
        """
        Get user's cart lines with product details.

        Returns:
            List of (CartItem, Product, category_slug) tuples, oldest line first
        """
        stmt = (
            select(CartItem, Product, Category.slug)
            .join(Product, CartItem.product_id == Product.id)
            .outerjoin(Category, Product.category_id == Category.id)
            .where(CartItem.user_id == user_id)
            .where(Product.is_active.is_(True))
            .order_by(CartItem.created_at.asc(), CartItem.id.asc())
        )

        result = await self.session.execute(stmt)
        return list(result.all())

    async def get_user_item(self, user_id: int, product_id: int) -> Optional[CartItem]:
        """Get the user's line for a product, if any."""
        stmt = select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id,
        )

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def clear(self, user_id: int) -> int:
        """Delete every line of the user's cart. Returns deleted rows."""
        stmt = delete(CartItem).where(CartItem.user_id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0

    async def get_line(self, item_id: int) -> Optional[Tuple[CartItem, Product, Optional[str]]]:
        """One cart line with its product, regardless of owner."""
        stmt = (
            select(CartItem, Product, Category.slug)
            .join(Product, CartItem.product_id == Product.id)
            .outerjoin(Category, Product.category_id == Category.id)
            .where(CartItem.id == item_id)
        )

        result = await self.session.execute(stmt)
        return result.first()
