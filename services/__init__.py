"""Business logic services.

Service classes are imported from their modules directly; only the error
types are re-exported here so that low-level helpers can raise them
without importing the services themselves.
"""

from services.exceptions import (
    ServiceError,
    NotFoundError,
    ConflictError,
    PermissionDeniedError,
    AuthenticationError,
    BusinessRuleError,
)

__all__ = [
    "ServiceError",
    "NotFoundError",
    "ConflictError",
    "PermissionDeniedError",
    "AuthenticationError",
    "BusinessRuleError",
]
