"""
Environment Configuration Helper
================================
Centralized env var loading with fallbacks.
All runtime knobs of the period service are read here, once, at import.
"""

import os
import logging
from typing import Optional, Any, List

logger = logging.getLogger(__name__)


def get_env(*names: str, default: Any = None) -> Optional[str]:
    """
    Get environment variable with fallback names.

    Tries each name in order, returns first non-empty value.

    Example:
        get_env("PERIOD_TIMEZONE", "TZ_NAME", default="Europe/Berlin")

    Args:
        *names: Variable names to try in order
        default: Default value if none found

    Returns:
        First non-empty value found, or default
    """
    for name in names:
        value = os.getenv(name)
        if value and str(value).strip():
            return value.strip()
    return default


def get_env_bool(name: str, default: bool = False) -> bool:
    """Get boolean env var (true/false/1/0)."""
    value = os.getenv(name, "").lower().strip()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    return default


def get_env_int(name: str, default: int) -> int:
    """Get integer env var, falling back to default on junk."""
    value = get_env(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={value!r}, using {default}")
        return default


def get_env_list(name: str, default: str = "") -> List[str]:
    """Get comma separated env var as a list of non-empty items."""
    raw = get_env(name, default=default) or ""
    return [item.strip() for item in raw.split(",") if item.strip()]


# ============================================================================
# CENTRALIZED CONFIG (loaded once at import)
# ============================================================================

class Config:
    """Centralized configuration from env vars."""

    # ============================================================================
    # VERSION CONSTANTS
    # ============================================================================
    ENGINE_VERSION = "2.0"  # 2.0: single active period per duration class, two-tier points
    API_VERSION = "1.0"

    # One civil zone for every user; periods are computed on its calendar
    TIMEZONE = get_env("PERIOD_TIMEZONE", default="Europe/Berlin")

    # Logging
    LOG_LEVEL = (get_env("LOG_LEVEL", default="INFO") or "INFO").upper()
    LOG_FORMAT = get_env("LOG_FORMAT", default="json")

    # HTTP
    PORT = get_env_int("PORT", 8000)
    CORS_ORIGINS = get_env_list("CORS_ORIGINS", default="*")
    DEBUG_ENDPOINTS = get_env_bool("DEBUG_ENDPOINTS", False)

    @classmethod
    def log_status(cls):
        """Log config status at boot."""
        status = {
            "engine_version": cls.ENGINE_VERSION,
            "api_version": cls.API_VERSION,
            "timezone": cls.TIMEZONE,
            "log_level": cls.LOG_LEVEL,
            "log_format": cls.LOG_FORMAT,
            "port": cls.PORT,
            "cors_origins": len(cls.CORS_ORIGINS),
            "debug_endpoints": cls.DEBUG_ENDPOINTS,
        }
        logger.info(f"Config status: {status}")
        return status
