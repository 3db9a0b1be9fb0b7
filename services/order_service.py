"""Order business logic service."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Order
from repositories.order_repository import OrderRepository
from repositories.product_repository import ProductRepository, to_response
from schemas.order import (
    CANCELLABLE_STATUSES,
    OrderCreate,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatus,
    OrderUpdate,
)
from services.base import BaseService
from services.exceptions import BusinessRuleError, NotFoundError, PermissionDeniedError, ServiceError
from utils.logger import logger
from utils.product_cache import ProductCache


def order_response(order: Order) -> OrderResponse:
    """Build the response from an order loaded with its items and products."""
    items = []
    for item in order.items:
        product = item.product
        slug = product.category.slug if product.category is not None else None
        items.append(
            OrderItemResponse(
                id=item.id,
                order_id=item.order_id,
                product_id=item.product_id,
                product=to_response(product, slug),
                quantity=item.quantity,
                price=item.price,
                discount=item.discount,
                total=item.total,
            )
        )

    return OrderResponse(
        id=order.id,
        user_id=order.user_id,
        status=order.status,
        total_amount=order.total_amount,
        tax_amount=order.tax_amount,
        discount_amount=order.discount_amount,
        shipping_address=order.shipping_address,
        billing_address=order.billing_address,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        notes=order.notes,
        items=items,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


class OrderService(BaseService[Order]):
    """
    Order placement, listing and cancellation.

    Stock changes and the order rows are committed together. Stock is part
    of the cached product shape, so every product an order touches is
    invalidated after the commit.
    """

    def __init__(self, session: AsyncSession, cache: ProductCache):
        super().__init__(session)
        self.repo = OrderRepository(session)
        self.products = ProductRepository(session)
        self.cache = cache

    async def create_order(self, user_id: int, data: OrderCreate) -> OrderResponse:
        """
        Place an order and take its quantities from stock.

        Raises:
            BusinessRuleError: a product is missing, inactive or short on stock
        """
        touched = []
        try:
            order = await self.repo.create(
                user_id=user_id,
                status=OrderStatus.PENDING.value,
                total_amount=0,
                tax_amount=0,
                discount_amount=0,
                shipping_address=data.shipping_address,
                billing_address=data.billing_address,
                payment_method=data.payment_method,
                payment_status="pending",
                notes=data.notes,
            )

            total = 0.0
            for line in data.items:
                product = await self.products.get_active_for_update(line.product_id)
                if product is None:
                    raise BusinessRuleError("Product not found or inactive", {"product_id": line.product_id})
                if product.stock < line.quantity:
                    raise BusinessRuleError(
                        "Not enough stock",
                        {"product_id": product.id, "requested": line.quantity, "available": product.stock},
                    )

                product.stock -= line.quantity
                item = await self.repo.add_item(order.id, product.id, line.quantity, product.price)
                total += item.total
                touched.append(product.id)

            order.total_amount = round(total, 2)
            await self.commit()
        except ServiceError:
            await self.rollback()
            raise

        logger.info("Order created", order_id=order.id, user_id=user_id, total=order.total_amount)
        await self.cache.invalidate_products(touched)
        return order_response(await self.repo.get_with_items(order.id))

    async def list_orders(
        self,
        user_id: Optional[int] = None,
        status: Optional[OrderStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> OrderListResponse:
        """Orders newest first; ``user_id=None`` lists every user's orders."""
        orders, total = await self.repo.list_orders(
            user_id=user_id,
            status=status.value if status else None,
            limit=limit,
            offset=(page - 1) * limit,
        )
        return OrderListResponse(
            orders=[order_response(o) for o in orders],
            total=total,
            page=page,
            limit=limit,
        )

    async def _owned_order(self, user_id: int, order_id: int) -> Order:
        order = await self.repo.get_with_items(order_id)
        if order is None:
            raise NotFoundError("Order not found", {"order_id": order_id})
        if order.user_id != user_id:
            raise PermissionDeniedError("Order belongs to another user", {"order_id": order_id})
        return order

    async def get_order(self, user_id: int, order_id: int) -> OrderResponse:
        return order_response(await self._owned_order(user_id, order_id))

    async def cancel_order(self, user_id: int, order_id: int) -> OrderResponse:
        """
        Cancel a pending or confirmed order and return its stock.

        Raises:
            NotFoundError: unknown order
            PermissionDeniedError: order of another user
            BusinessRuleError: order is past the cancellable statuses
        """
        order = await self._owned_order(user_id, order_id)
        if order.status not in {s.value for s in CANCELLABLE_STATUSES}:
            raise BusinessRuleError(
                "Order can no longer be cancelled",
                {"order_id": order_id, "status": order.status},
            )

        touched = []
        for item in order.items:
            await self.products.adjust_stock(item.product_id, item.quantity)
            touched.append(item.product_id)
        order.status = OrderStatus.CANCELLED.value
        await self.commit()

        logger.info("Order cancelled", order_id=order_id, user_id=user_id)
        await self.cache.invalidate_products(touched)
        return order_response(await self.repo.get_with_items(order_id))

    async def admin_update(self, order_id: int, data: OrderUpdate) -> OrderResponse:
        """Apply the provided fields to any user's order."""
        order = await self.repo.get_with_items(order_id)
        if order is None:
            raise NotFoundError("Order not found", {"order_id": order_id})

        changes = {field: value for field, value in data.model_dump(exclude_unset=True).items() if value is not None}
        if "status" in changes:
            changes["status"] = OrderStatus(changes["status"]).value

        await self.repo.update(order, **changes)
        await self.commit()
        logger.info("Order updated", order_id=order_id, fields=sorted(changes))
        return order_response(await self.repo.get_with_items(order_id))
