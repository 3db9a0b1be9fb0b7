"""Utility modules."""

from utils.logger import (
    logger,
    api_logger,
    db_logger,
    cache_logger,
    auth_logger,
    set_correlation_id,
    get_correlation_id,
    clear_correlation_id,
    set_current_user_id,
    clear_request_context,
)

__all__ = [
    "logger",
    "api_logger",
    "db_logger",
    "cache_logger",
    "auth_logger",
    "set_correlation_id",
    "get_correlation_id",
    "clear_correlation_id",
    "set_current_user_id",
    "clear_request_context",
]
