"""Shopping cart schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.product import ProductResponse


class CartItemCreate(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: int = Field(..., gt=0, description="Product ID")
    quantity: int = Field(..., ge=1, description="Units to add")


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1, description="New quantity")


class CartItemResponse(BaseModel):
    """Cart line with a product snapshot and its total."""

    id: int
    user_id: int
    product_id: int
    product: ProductResponse
    quantity: int
    price: float = Field(..., description="Unit price captured when added")
    total: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CartResponse(BaseModel):
    """Schema for the whole cart."""

    items: List[CartItemResponse] = Field(default_factory=list)
    total_items: int = Field(0, ge=0, description="Sum of quantities")
    total_price: float = Field(0, ge=0)
    item_count: int = Field(0, ge=0, description="Number of distinct lines")

    class Config:
        json_schema_extra = {
            "example": {
                "items": [],
                "total_items": 3,
                "total_price": 269.97,
                "item_count": 1,
            }
        }
