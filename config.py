import logging
import os
from typing import Optional

from dotenv import load_dotenv

# Module logger only; handlers are configured in utils.logger
logger = logging.getLogger(__name__)

if not load_dotenv():
    logger.warning(".env file not found, falling back to process environment")


def get_env(var_name: str, default: str) -> str:
    """
    Returns an environment variable or its default.

    Empty values are treated as unset.
    """
    value = os.getenv(var_name)
    if not value:
        return default
    return value


def validate_port(port_str: str, name: str = "DB_PORT") -> int:
    """
    Validates a TCP port.

    Args:
        port_str: Port as a string.
        name: Variable name used in the error message.

    Raises:
        ValueError: If the port is not a number or is out of range.

    Returns:
        Port as an integer.
    """
    try:
        port_int = int(port_str)
    except ValueError as e:
        logger.critical("Invalid %s: %s", name, e)
        raise ValueError(f"{name} must be an integer, got {port_str!r}") from e
    if not 1 <= port_int <= 65535:
        logger.critical("Invalid %s: %s", name, port_int)
        raise ValueError(f"{name} must be in range 1..65535")
    return port_int


def get_bool_env(var_name: str, default: bool) -> bool:
    return get_env(var_name, "true" if default else "false").lower() == "true"


class Settings:
    """Process-wide configuration read once at import time."""

    def __init__(self):
        # --- Database ---
        self.DB_HOST = get_env("DB_HOST", "localhost")
        self.DB_PORT = validate_port(get_env("DB_PORT", "5432"))
        self.DB_USER = get_env("DB_USER", "postgres")
        self.DB_PASSWORD = get_env("DB_PASSWORD", "password")
        self.DB_NAME = get_env("DB_NAME", "products_db")
        self.DATABASE_URL = get_env(
            "DATABASE_URL",
            f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}",
        )
        self.DB_ECHO = get_bool_env("DB_ECHO", False)

        # --- Redis ---
        self.REDIS_HOST = get_env("REDIS_HOST", "localhost")
        self.REDIS_PORT = validate_port(get_env("REDIS_PORT", "6379"), "REDIS_PORT")
        self.REDIS_DB = int(get_env("REDIS_DB", "0"))
        self.REDIS_PASSWORD: Optional[str] = os.getenv("REDIS_PASSWORD") or None
        self.REDIS_ENABLED = get_bool_env("REDIS_ENABLED", True)

        # --- Cache ---
        self.CACHE_TTL = int(get_env("CACHE_TTL", "600"))
        self.CACHE_OPERATION_TIMEOUT = float(get_env("CACHE_OPERATION_TIMEOUT", "2.0"))

        # --- Auth ---
        self.JWT_SECRET = get_env("JWT_SECRET", "default-secret-key")
        self.JWT_EXPIRY_HOURS = int(get_env("JWT_EXPIRY_HOURS", "24"))
        if self.JWT_SECRET == "default-secret-key":
            logger.warning("JWT_SECRET is not set, using the insecure default")

        # --- Server ---
        self.SERVER_HOST = get_env("SERVER_HOST", "0.0.0.0")
        self.SERVER_PORT = validate_port(get_env("SERVER_PORT", "8080"), "SERVER_PORT")
        self.LOG_LEVEL = get_env("LOG_LEVEL", "INFO").upper()

    @property
    def REDIS_URL(self) -> str:
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"


settings = Settings()

logger.info("Database configured: %s@%s:%s/%s",
            settings.DB_USER, settings.DB_HOST, settings.DB_PORT, settings.DB_NAME)
if not settings.REDIS_ENABLED:
    logger.warning("Redis disabled, product reads will always hit the database")
