# webapp/routers/cache.py
"""
Product cache administration: key statistics and manual invalidation.
"""

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from middlewares.rate_limit import limiter
from middlewares.rate_limit_config import RateLimitConfig
from schemas.cache import CacheStatsResponse
from schemas.common import ErrorResponse, MessageResponse
from utils.logger import cache_logger as logger
from utils.product_cache import ProductCache
from utils.security import TokenPayload
from webapp.dependencies import get_current_user, get_product_cache, require_admin

router = APIRouter(prefix="/cache", tags=["cache"])


@router.get("/stats", response_model=CacheStatsResponse)
@limiter.limit(RateLimitConfig.for_caller("CACHE_STATS"))
async def cache_stats(
    request: Request,
    response: Response,
    user: TokenPayload = Depends(get_current_user),
    cache: ProductCache = Depends(get_product_cache),
):
    return CacheStatsResponse(cache_stats=await cache.get_cache_stats())


@router.post(
    "/invalidate",
    response_model=MessageResponse,
    responses={500: {"model": ErrorResponse}},
)
@limiter.limit(RateLimitConfig.for_caller("CACHE_ADMIN"))
async def invalidate_cache(
    request: Request,
    response: Response,
    admin: TokenPayload = Depends(require_admin),
    cache: ProductCache = Depends(get_product_cache),
):
    if not await cache.invalidate_all():
        logger.error("Manual cache invalidation failed", user_id=admin.user_id)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="cache_invalidation_failed",
                message="Failed to invalidate product cache",
            ).model_dump(),
        )

    logger.info("Product cache invalidated manually", user_id=admin.user_id)
    return MessageResponse(message="Product cache invalidated")
