"""Product-related schemas."""

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


def _check_price_precision(v: Optional[float]) -> Optional[float]:
    if v is not None and round(v, 2) != v:
        raise ValueError("Price must have at most 2 decimal places")
    return v


class ProductBase(BaseModel):
    """Base product schema with common fields."""

    name: str = Field(..., min_length=1, max_length=200, description="Product name")
    description: str = Field("", description="Product description")
    price: float = Field(..., gt=0, description="Unit price")
    category_id: Optional[int] = Field(None, description="Category ID")
    stock: int = Field(0, ge=0, description="Units in stock")
    image_url: str = Field("", description="Image URL")
    sku: str = Field("", max_length=100, description="Stock keeping unit")
    weight: float = Field(0, ge=0, description="Weight in kg")
    dimensions: str = Field("", max_length=100, description="Dimensions, free form")
    is_active: bool = Field(True, description="Visible in the catalog")
    is_featured: bool = Field(False, description="Featured on the storefront")
    sort_order: int = Field(0, description="Manual ordering weight")

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        """Ensure price has max 2 decimal places."""
        return _check_price_precision(v)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Mechanical keyboard",
                "description": "87 keys, brown switches",
                "price": 89.99,
                "category_id": 2,
                "stock": 40,
                "image_url": "https://cdn.example.com/kb.jpg",
                "sku": "KB-87-BRN",
                "weight": 0.9,
                "dimensions": "36x13x4",
                "is_active": True,
                "is_featured": False,
                "sort_order": 0,
            }
        }


class ProductCreate(ProductBase):
    """Schema for creating a new product."""


class ProductUpdate(BaseModel):
    """Schema for updating product (all fields optional)."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    category_id: Optional[int] = None
    stock: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    sku: Optional[str] = Field(None, max_length=100)
    weight: Optional[float] = Field(None, ge=0)
    dimensions: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    sort_order: Optional[int] = None

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _check_price_precision(v)


class ProductResponse(ProductBase):
    """
    Product as returned over HTTP.

    This is also the shape stored in the cache, so a cached value and a
    fresh database read serialize identically.
    """

    id: int = Field(..., description="Product ID")
    category_slug: Optional[str] = Field(None, description="Slug of the category")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 7,
                "name": "Mechanical keyboard",
                "description": "87 keys, brown switches",
                "price": 89.99,
                "category_id": 2,
                "category_slug": "peripherals",
                "stock": 40,
                "image_url": "https://cdn.example.com/kb.jpg",
                "sku": "KB-87-BRN",
                "weight": 0.9,
                "dimensions": "36x13x4",
                "is_active": True,
                "is_featured": False,
                "sort_order": 0,
                "created_at": "2026-02-19T19:00:00",
                "updated_at": "2026-02-19T19:00:00",
            }
        }


class ProductListResponse(BaseModel):
    """Paginated product list."""

    products: List[ProductResponse] = Field(..., description="Products on this page")
    total: int = Field(..., ge=0, description="Products matching the filters")
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
