# webapp/routers/cart.py
"""
Shopping cart of the authenticated user.
"""

from fastapi import APIRouter, Depends, Request, Response, status

from middlewares.rate_limit import limiter
from middlewares.rate_limit_config import RateLimitConfig
from schemas.cart import CartItemCreate, CartItemResponse, CartItemUpdate, CartResponse
from schemas.common import MessageResponse
from services.cart_service import CartService
from utils.security import TokenPayload
from webapp.dependencies import get_cart_service, get_current_user

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartResponse)
@limiter.limit(RateLimitConfig.for_caller("CART"))
async def get_cart(
    request: Request,
    response: Response,
    user: TokenPayload = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    return await service.get_cart(user.user_id)


@router.post("", response_model=CartItemResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RateLimitConfig.for_caller("CART"))
async def add_to_cart(
    request: Request,
    response: Response,
    data: CartItemCreate,
    user: TokenPayload = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    """Add a product; an existing line is merged and answered with 200."""
    item, created = await service.add_item(user.user_id, data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return item


@router.post("/clear", response_model=MessageResponse)
@limiter.limit(RateLimitConfig.for_caller("CART"))
async def clear_cart(
    request: Request,
    response: Response,
    user: TokenPayload = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    deleted = await service.clear(user.user_id)
    return MessageResponse(message="Cart cleared", data={"deleted": deleted})


@router.put("/{item_id}", response_model=CartItemResponse)
@limiter.limit(RateLimitConfig.for_caller("CART"))
async def update_cart_item(
    request: Request,
    response: Response,
    item_id: int,
    data: CartItemUpdate,
    user: TokenPayload = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    return await service.update_item(user.user_id, item_id, data)


@router.delete("/{item_id}", response_model=MessageResponse)
@limiter.limit(RateLimitConfig.for_caller("CART"))
async def remove_cart_item(
    request: Request,
    response: Response,
    item_id: int,
    user: TokenPayload = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    await service.remove_item(user.user_id, item_id)
    return MessageResponse(message="Item removed from cart")
