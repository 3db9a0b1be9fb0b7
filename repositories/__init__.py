"""Data access layer repositories."""

from repositories.product_repository import ProductRepository
from repositories.user_repository import UserRepository
from repositories.cart_repository import CartRepository
from repositories.order_repository import OrderRepository

__all__ = [
    "ProductRepository",
    "UserRepository",
    "CartRepository",
    "OrderRepository",
]
