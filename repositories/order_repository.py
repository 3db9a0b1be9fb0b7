"""Order repository for data access."""

from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from database.models import Order, OrderItem, Product
from repositories.base import BaseRepository


def _with_items():
    return selectinload(Order.items).selectinload(OrderItem.product).selectinload(Product.category)


class OrderRepository(BaseRepository[Order]):
    """Repository for Order and OrderItem entities."""

    def __init__(self, session: AsyncSession):
        super().__init__(Order, session)

    async def add_item(self, order_id: int, product_id: int, quantity: int, price: float) -> OrderItem:
        item = OrderItem(
            order_id=order_id,
            product_id=product_id,
            quantity=quantity,
            price=price,
            discount=0,
            total=round(price * quantity, 2),
        )
        self.session.add(item)
        await self.session.flush()
        return item

    async def get_with_items(self, order_id: int) -> Optional[Order]:
        """Load an order together with its lines and their products."""
        stmt = (
            select(Order)
            .where(Order.id == order_id)
            .options(_with_items())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_orders(
        self,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[Order], int]:
        """
        Orders newest first, optionally scoped to one user and one status.

        Returns:
            (orders, total) where total ignores limit and offset
        """
        conditions = []
        if user_id is not None:
            conditions.append(Order.user_id == user_id)
        if status:
            conditions.append(Order.status == status)

        total = await self.session.scalar(select(func.count(Order.id)).where(*conditions))

        stmt = (
            select(Order)
            .where(*conditions)
            .options(_with_items())
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total or 0
