# webapp/routers/products.py
"""
Product catalog endpoints.
Reads go through the product cache and report it in the X-Cache header;
writes are admin only and invalidate the affected cache entries.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from middlewares.rate_limit import limiter
from middlewares.rate_limit_config import RateLimitConfig
from repositories.product_repository import Pagination, ProductFilters
from schemas.common import MessageResponse
from schemas.product import ProductCreate, ProductListResponse, ProductResponse, ProductUpdate
from services.product_service import ProductService
from utils.security import TokenPayload
from webapp.dependencies import get_current_user, get_product_service, require_admin

router = APIRouter(prefix="/products", tags=["products"])

SortField = Literal["id", "name", "price", "created_at", "stock"]
SortOrder = Literal["asc", "desc"]


def _cache_header(response: Response, hit: bool):
    response.headers["X-Cache"] = "HIT" if hit else "MISS"


@router.get("", response_model=ProductListResponse)
@limiter.limit(RateLimitConfig.for_caller("PRODUCTS_LIST"))
async def list_products(
    request: Request,
    response: Response,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category_id: Optional[str] = Query(None, description="Category id; non-numeric values match nothing"),
    search: Optional[str] = Query(None, description="Case-insensitive match on name and description"),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    sort: SortField = "id",
    order: SortOrder = "asc",
    user: TokenPayload = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    filters = ProductFilters(
        category_id=category_id,
        search=search,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        order=order,
    )
    result, hit = await service.list_products(filters, Pagination(page=page, limit=limit))
    _cache_header(response, hit)
    return result


@router.get("/{product_id}", response_model=ProductResponse)
@limiter.limit(RateLimitConfig.for_caller("PRODUCT_GET"))
async def get_product(
    request: Request,
    response: Response,
    product_id: int,
    user: TokenPayload = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    product, hit = await service.get_product(product_id)
    _cache_header(response, hit)
    return product


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RateLimitConfig.for_caller("PRODUCT_WRITE"))
async def create_product(
    request: Request,
    response: Response,
    data: ProductCreate,
    admin: TokenPayload = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    return await service.create(data)


@router.put("/{product_id}", response_model=ProductResponse)
@limiter.limit(RateLimitConfig.for_caller("PRODUCT_WRITE"))
async def update_product(
    request: Request,
    response: Response,
    product_id: int,
    data: ProductUpdate,
    admin: TokenPayload = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    return await service.update(product_id, data)


@router.delete("/{product_id}", response_model=MessageResponse)
@limiter.limit(RateLimitConfig.for_caller("PRODUCT_WRITE"))
async def delete_product(
    request: Request,
    response: Response,
    product_id: int,
    admin: TokenPayload = Depends(require_admin),
    service: ProductService = Depends(get_product_service),
):
    invalidated = await service.delete(product_id)
    if not invalidated:
        response.headers["X-Cache-Invalidation"] = "failed"
    return MessageResponse(message="Product deleted")
