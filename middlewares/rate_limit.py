"""Rate limiting using SlowAPI."""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from services.exceptions import AuthenticationError
from utils.security import decode_access_token

USER_KEY_PREFIX = "user"
ADMIN_KEY_PREFIX = "admin"


def get_user_id_or_ip(request: Request) -> str:
    """
    Rate limit key for a request.

    Requests with a valid bearer token are counted per user under
    ``user:{id}`` or ``admin:{id}``, everything else per client address.
    """
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token:
        try:
            payload = decode_access_token(token)
            return f"{ADMIN_KEY_PREFIX if payload.is_admin else USER_KEY_PREFIX}:{payload.user_id}"
        except AuthenticationError:
            pass

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_user_id_or_ip,
    default_limits=["200/minute"],
    storage_uri="memory://",
    headers_enabled=True,
)


def custom_rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """429 in the same JSON shape as every other API error."""
    response = JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": "rate_limited",
            "message": "Too many requests. Please try again later.",
            "details": {"limit": str(exc.detail)},
        },
    )
    return request.app.state.limiter._inject_headers(response, request.state.view_rate_limit)


def setup_rate_limiting(app):
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, custom_rate_limit_handler)
