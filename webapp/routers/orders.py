# webapp/routers/orders.py
"""
Orders of the authenticated user, plus the administrator view over all orders.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from middlewares.rate_limit import limiter
from middlewares.rate_limit_config import RateLimitConfig
from schemas.order import OrderCreate, OrderListResponse, OrderResponse, OrderStatus, OrderUpdate
from services.order_service import OrderService
from utils.security import TokenPayload
from webapp.dependencies import get_current_user, get_order_service, require_admin

router = APIRouter(prefix="/orders", tags=["orders"])
admin_router = APIRouter(prefix="/admin/orders", tags=["admin"])


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RateLimitConfig.for_caller("ORDER_CREATE"))
async def create_order(
    request: Request,
    response: Response,
    data: OrderCreate,
    user: TokenPayload = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    return await service.create_order(user.user_id, data)


@router.get("", response_model=OrderListResponse)
@limiter.limit(RateLimitConfig.for_caller("ORDERS_READ"))
async def list_orders(
    request: Request,
    response: Response,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    order_status: Optional[OrderStatus] = Query(None, alias="status"),
    user: TokenPayload = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    return await service.list_orders(user_id=user.user_id, status=order_status, page=page, limit=limit)


@router.get("/{order_id}", response_model=OrderResponse)
@limiter.limit(RateLimitConfig.for_caller("ORDERS_READ"))
async def get_order(
    request: Request,
    response: Response,
    order_id: int,
    user: TokenPayload = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    return await service.get_order(user.user_id, order_id)


@router.post("/{order_id}/cancel", response_model=OrderResponse)
@limiter.limit(RateLimitConfig.for_caller("ORDER_CANCEL"))
async def cancel_order(
    request: Request,
    response: Response,
    order_id: int,
    user: TokenPayload = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    return await service.cancel_order(user.user_id, order_id)


@admin_router.get("", response_model=OrderListResponse)
@limiter.limit(RateLimitConfig.for_caller("ORDERS_ADMIN"))
async def list_all_orders(
    request: Request,
    response: Response,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    order_status: Optional[OrderStatus] = Query(None, alias="status"),
    admin: TokenPayload = Depends(require_admin),
    service: OrderService = Depends(get_order_service),
):
    return await service.list_orders(status=order_status, page=page, limit=limit)


@admin_router.put("/{order_id}", response_model=OrderResponse)
@limiter.limit(RateLimitConfig.for_caller("ORDERS_ADMIN"))
async def update_order(
    request: Request,
    response: Response,
    order_id: int,
    data: OrderUpdate,
    admin: TokenPayload = Depends(require_admin),
    service: OrderService = Depends(get_order_service),
):
    return await service.admin_update(order_id, data)
