"""Pydantic schemas for API contracts."""

from schemas.product import (
    ProductBase,
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
)
from schemas.user import (
    UserCreate,
    UserLogin,
    UserResponse,
    LoginResponse,
)
from schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartItemResponse,
    CartResponse,
)
from schemas.order import (
    OrderStatus,
    OrderItemCreate,
    OrderCreate,
    OrderUpdate,
    OrderItemResponse,
    OrderResponse,
    OrderListResponse,
)
from schemas.cache import CacheStatsResponse
from schemas.common import (
    HealthResponse,
    MessageResponse,
    ErrorResponse,
)

__all__ = [
    # Product
    "ProductBase",
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "ProductListResponse",
    # Auth
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "LoginResponse",
    # Cart
    "CartItemCreate",
    "CartItemUpdate",
    "CartItemResponse",
    "CartResponse",
    # Order
    "OrderStatus",
    "OrderItemCreate",
    "OrderCreate",
    "OrderUpdate",
    "OrderItemResponse",
    "OrderResponse",
    "OrderListResponse",
    # Cache
    "CacheStatsResponse",
    # Common
    "HealthResponse",
    "MessageResponse",
    "ErrorResponse",
]
