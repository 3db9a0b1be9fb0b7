# webapp/routers/auth.py
"""
Registration and login.
Both endpoints are public; login returns the bearer token used by every other router.
"""

from fastapi import APIRouter, Depends, Request, Response, status

from middlewares.rate_limit import limiter
from middlewares.rate_limit_config import RateLimitConfig
from schemas.user import LoginResponse, UserCreate, UserLogin, UserResponse
from services.auth_service import AuthService
from webapp.dependencies import get_auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RateLimitConfig.AUTH_REGISTER)
async def register(
    request: Request,
    response: Response,
    data: UserCreate,
    service: AuthService = Depends(get_auth_service),
):
    return await service.register(data)


@router.post("/login", response_model=LoginResponse)
@limiter.limit(RateLimitConfig.AUTH_LOGIN)
async def login(
    request: Request,
    response: Response,
    data: UserLogin,
    service: AuthService = Depends(get_auth_service),
):
    return await service.login(data)
