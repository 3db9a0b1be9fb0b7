"""Shopping cart business logic service."""

from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from database.models import CartItem, Product
from repositories.cart_repository import CartRepository
from repositories.product_repository import ProductRepository, to_response
from schemas.cart import CartItemCreate, CartItemResponse, CartItemUpdate, CartResponse
from services.base import BaseService
from services.exceptions import BusinessRuleError, NotFoundError, PermissionDeniedError
from utils.logger import logger


def _line_response(item: CartItem, product: Product, category_slug: Optional[str]) -> CartItemResponse:
    return CartItemResponse(
        id=item.id,
        user_id=item.user_id,
        product_id=item.product_id,
        product=to_response(product, category_slug),
        quantity=item.quantity,
        price=item.price,
        total=round(item.price * item.quantity, 2),
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


class CartService(BaseService[CartItem]):
    """Service for the per-user cart."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.repo = CartRepository(session)
        self.products = ProductRepository(session)

    async def get_cart(self, user_id: int) -> CartResponse:
        rows = await self.repo.get_user_cart(user_id)
        items = [_line_response(item, product, slug) for item, product, slug in rows]

        return CartResponse(
            items=items,
            total_items=sum(i.quantity for i in items),
            total_price=round(sum(i.total for i in items), 2),
            item_count=len(items),
        )

    async def _reload(self, item_id: int) -> CartItemResponse:
        item, product, slug = await self.repo.get_line(item_id)
        return _line_response(item, product, slug)

    async def add_item(self, user_id: int, data: CartItemCreate) -> Tuple[CartItemResponse, bool]:
        """
        Add a product, merging with an existing line.

        Returns:
            (line, created) where created is False for a merge

        Raises:
            BusinessRuleError: product missing, inactive or short on stock
        """
        product = await self.products.get_active(data.product_id)
        if product is None:
            raise BusinessRuleError("Product not found or inactive", {"product_id": data.product_id})

        existing = await self.repo.get_user_item(user_id, data.product_id)
        quantity = data.quantity + (existing.quantity if existing else 0)
        if quantity > product.stock:
            raise BusinessRuleError(
                "Not enough stock",
                {"product_id": product.id, "requested": quantity, "available": product.stock},
            )

        if existing:
            await self.repo.update(existing, quantity=quantity)
            item_id, created = existing.id, False
        else:
            item = await self.repo.create(
                user_id=user_id,
                product_id=product.id,
                quantity=quantity,
                price=product.price,
            )
            item_id, created = item.id, True

        await self.commit()
        logger.info("Cart item saved", user_id=user_id, product_id=product.id, quantity=quantity, created=created)
        return await self._reload(item_id), created

    async def _owned_item(self, user_id: int, item_id: int) -> CartItem:
        item = await self.repo.get_by_id(item_id)
        if item is None:
            raise NotFoundError("Cart item not found", {"item_id": item_id})
        if item.user_id != user_id:
            raise PermissionDeniedError("Cart item belongs to another user", {"item_id": item_id})
        return item

    async def update_item(self, user_id: int, item_id: int, data: CartItemUpdate) -> CartItemResponse:
        item = await self._owned_item(user_id, item_id)

        product = await self.products.get_active(item.product_id)
        if product is None:
            raise BusinessRuleError("Product not found or inactive", {"product_id": item.product_id})
        if data.quantity > product.stock:
            raise BusinessRuleError(
                "Not enough stock",
                {"product_id": product.id, "requested": data.quantity, "available": product.stock},
            )

        await self.repo.update(item, quantity=data.quantity)
        await self.commit()
        return await self._reload(item_id)

    async def remove_item(self, user_id: int, item_id: int):
        item = await self._owned_item(user_id, item_id)
        await self.repo.delete(item)
        await self.commit()
        logger.info("Cart item removed", user_id=user_id, item_id=item_id)

    async def clear(self, user_id: int) -> int:
        deleted = await self.repo.clear(user_id)
        await self.commit()
        logger.info("Cart cleared", user_id=user_id, deleted=deleted)
        return deleted
