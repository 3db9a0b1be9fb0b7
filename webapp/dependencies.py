"""FastAPI dependencies shared by the routers."""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from database.engine import get_session
from services.auth_service import AuthService
from services.cart_service import CartService
from services.exceptions import AuthenticationError, PermissionDeniedError
from services.order_service import OrderService
from services.product_service import ProductService
from utils.logger import set_current_user_id
from utils.product_cache import ProductCache
from utils.security import TokenPayload, decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_product_cache(request: Request) -> ProductCache:
    return request.app.state.product_cache


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenPayload:
    """Resolve the caller from ``Authorization: Bearer <token>``."""
    if credentials is None:
        raise AuthenticationError("Authorization header with a bearer token is required")

    user = decode_access_token(credentials.credentials)
    set_current_user_id(user.user_id)
    return user


async def require_admin(user: TokenPayload = Depends(get_current_user)) -> TokenPayload:
    if not user.is_admin:
        raise PermissionDeniedError("Administrator role required")
    return user


def get_auth_service(session: AsyncSession = Depends(get_session)) -> AuthService:
    return AuthService(session)


def get_product_service(
    session: AsyncSession = Depends(get_session),
    cache: ProductCache = Depends(get_product_cache),
) -> ProductService:
    return ProductService(session, cache)


def get_cart_service(session: AsyncSession = Depends(get_session)) -> CartService:
    return CartService(session)


def get_order_service(
    session: AsyncSession = Depends(get_session),
    cache: ProductCache = Depends(get_product_cache),
) -> OrderService:
    return OrderService(session, cache)
