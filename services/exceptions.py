"""Service-layer errors mapped to HTTP responses in webapp.api."""

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base class for errors a request handler turns into a JSON error body."""

    status_code = 500
    error = "internal_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(ServiceError):
    status_code = 404
    error = "not_found"


class ConflictError(ServiceError):
    status_code = 409
    error = "conflict"


class PermissionDeniedError(ServiceError):
    status_code = 403
    error = "forbidden"


class AuthenticationError(ServiceError):
    status_code = 401
    error = "unauthorized"


class BusinessRuleError(ServiceError):
    """The request is well formed but breaks a rule (stock, status, inactive product)."""

    status_code = 400
    error = "bad_request"
