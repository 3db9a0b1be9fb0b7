"""Order schemas."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.product import ProductResponse


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


# Orders the owner may still cancel
CANCELLABLE_STATUSES = (OrderStatus.PENDING, OrderStatus.CONFIRMED)


class OrderItemCreate(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)


class OrderCreate(BaseModel):
    """Schema for placing an order."""

    items: List[OrderItemCreate] = Field(..., min_length=1)
    shipping_address: str = Field(..., min_length=1)
    billing_address: str = Field(..., min_length=1)
    payment_method: str = Field(..., min_length=1)
    notes: str = ""

    class Config:
        json_schema_extra = {
            "example": {
                "items": [{"product_id": 7, "quantity": 2}],
                "shipping_address": "221B Baker Street, London",
                "billing_address": "221B Baker Street, London",
                "payment_method": "card",
                "notes": "Leave at the door",
            }
        }


class OrderUpdate(BaseModel):
    """Admin update; only provided fields change."""

    status: Optional[OrderStatus] = None
    shipping_address: Optional[str] = None
    billing_address: Optional[str] = None
    payment_status: Optional[str] = None
    notes: Optional[str] = None


class OrderItemResponse(BaseModel):
    id: int
    order_id: int
    product_id: int
    product: ProductResponse
    quantity: int
    price: float
    discount: float = 0
    total: float


class OrderResponse(BaseModel):
    id: int
    user_id: int
    status: OrderStatus
    total_amount: float
    tax_amount: float = 0
    discount_amount: float = 0
    shipping_address: str
    billing_address: str
    payment_method: str
    payment_status: str
    notes: str = ""
    items: List[OrderItemResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderListResponse(BaseModel):
    orders: List[OrderResponse]
    total: int = Field(..., ge=0)
    page: int
    limit: int
