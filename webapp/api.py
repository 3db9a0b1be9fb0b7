"""
FastAPI application: middleware, error handlers, routers and the process lifespan.

Run locally with ``python -m webapp.api`` or in production through
``gunicorn -c deploy/gunicorn.conf.py webapp.api:app``.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from database.engine import async_session, dispose_engine, init_models
from middlewares import setup_logging, setup_rate_limiting
from schemas.common import ErrorResponse, HealthResponse
from services.exceptions import ServiceError
from services.product_service import ProductService
from utils.cache import RedisCacheStore
from utils.logger import api_logger, configure_logging, logger
from utils.product_cache import ProductCache
from webapp.routers import auth, cache, cart, orders, products

SERVICE_NAME = "storefront"
__version__ = "1.0.0"
API_PREFIX = "/api/v1"


def _error(status_code: int, error: str, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, details=details)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        api_logger.error("Service error", error=exc.error, error_message=exc.message, path=request.url.path)
    else:
        api_logger.warning(
            "Request rejected",
            error=exc.error,
            error_message=exc.message,
            status_code=exc.status_code,
            path=request.url.path,
        )
    return _error(exc.status_code, exc.error, exc.message, exc.details or None)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(422, "validation_error", "Request validation failed", exc.errors())


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = _error(exc.status_code, "http_error", str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: connect the cache (a failure only disables caching), ensure
    tables and warm the catalog. Shutdown: close Redis and the engine.
    """
    configure_logging()
    logger.info("Starting service", version=__version__)

    store = RedisCacheStore()
    await store.connect()
    app.state.cache_store = store
    app.state.product_cache = ProductCache(store)

    await init_models()

    async with async_session() as session:
        warmed = await ProductService(session, app.state.product_cache).warm_catalog()
    logger.info("Startup complete", cache_enabled=store.enabled, catalog_warmed=warmed)

    try:
        yield
    finally:
        await store.disconnect()
        await dispose_engine()
        logger.info("Service stopped")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront API",
        version=__version__,
        description="Product catalog, cart and orders with a Redis read-through cache.",
        lifespan=lifespan,
    )

    setup_logging(app)
    setup_rate_limiting(app)
    register_exception_handlers(app)

    for module in (auth, products, cart, orders, cache):
        app.include_router(module.router, prefix=API_PREFIX)
    app.include_router(orders.admin_router, prefix=API_PREFIX)

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": SERVICE_NAME,
            "version": __version__,
            "docs": "/docs",
            "endpoints": {
                "auth": f"{API_PREFIX}/auth/*",
                "products": f"{API_PREFIX}/products",
                "cart": f"{API_PREFIX}/cart",
                "orders": f"{API_PREFIX}/orders",
                "admin": f"{API_PREFIX}/admin/orders",
                "cache": f"{API_PREFIX}/cache/*",
            },
        }

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        store = getattr(request.app.state, "cache_store", None)
        if store is None or not store.enabled:
            cache_state = "disabled"
        else:
            cache_state = "up" if await store.ping() else "down"
        return HealthResponse(status="ok", service=SERVICE_NAME, version=__version__, cache=cache_state)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("webapp.api:app", host=settings.SERVER_HOST, port=settings.SERVER_PORT)
