"""Application configuration.

Single source of truth for all configuration values.
Loads from environment variables with .env file support.
"""

import os
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

# Load .env file from project root
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"
load_dotenv(_ENV_FILE)

VERSION = "0.1.0"

_DEFAULT_API_BASE = "https://backend-stage.vacademy.io"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class Config:
    """Application configuration singleton.

    All configuration values should be accessed through this class.
    Values are loaded from environment variables with sensible defaults.
    """

    # Admin-core backend
    API_BASE_URL: str = os.getenv("VACADEMY_API_BASE_URL", _DEFAULT_API_BASE)
    STUDENT_DATA_ENRICHMENT_BASE: str = os.getenv(
        "STUDENT_DATA_ENRICHMENT_BASE",
        f"{API_BASE_URL}/admin-core-service/v1",
    )
    INSTITUTE_DETAILS_URL: str = os.getenv(
        "INSTITUTE_DETAILS_URL",
        f"{API_BASE_URL}/admin-core-service/institute/v1/details",
    )
    LIVE_SESSION_REPORT_URL: str = os.getenv(
        "LIVE_SESSION_REPORT_URL",
        f"{API_BASE_URL}/admin-core-service/live-session-report/by-session-id",
    )

    # Auth
    ACCESS_TOKEN_COOKIE: str = os.getenv("ACCESS_TOKEN_COOKIE", "accessToken")

    # Timeouts (seconds). RESOLUTION_TIMEOUT 0 disables the per-token deadline.
    HTTP_TIMEOUT: float = _float_env("HTTP_TIMEOUT", 10.0)
    RESOLUTION_TIMEOUT: float = _float_env("RESOLUTION_TIMEOUT", 10.0)

    # Cache
    DEFAULT_CACHE_TTL: float = _float_env("DEFAULT_CACHE_TTL", 5 * 60)

    # Display
    USER_TIMEZONE: str = os.getenv("USER_TIMEZONE", "Asia/Kolkata")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def get_timezone(cls) -> ZoneInfo:
        """Get the user timezone as a ZoneInfo object."""
        return ZoneInfo(cls.USER_TIMEZONE)

    @classmethod
    def reload(cls) -> None:
        """Reload configuration from environment.

        Useful for testing or runtime config changes.
        """
        load_dotenv(_ENV_FILE, override=True)
        cls.API_BASE_URL = os.getenv("VACADEMY_API_BASE_URL", _DEFAULT_API_BASE)
        cls.STUDENT_DATA_ENRICHMENT_BASE = os.getenv(
            "STUDENT_DATA_ENRICHMENT_BASE",
            f"{cls.API_BASE_URL}/admin-core-service/v1",
        )
        cls.INSTITUTE_DETAILS_URL = os.getenv(
            "INSTITUTE_DETAILS_URL",
            f"{cls.API_BASE_URL}/admin-core-service/institute/v1/details",
        )
        cls.LIVE_SESSION_REPORT_URL = os.getenv(
            "LIVE_SESSION_REPORT_URL",
            f"{cls.API_BASE_URL}/admin-core-service/live-session-report/by-session-id",
        )
        cls.ACCESS_TOKEN_COOKIE = os.getenv("ACCESS_TOKEN_COOKIE", "accessToken")
        cls.HTTP_TIMEOUT = _float_env("HTTP_TIMEOUT", 10.0)
        cls.RESOLUTION_TIMEOUT = _float_env("RESOLUTION_TIMEOUT", 10.0)
        cls.DEFAULT_CACHE_TTL = _float_env("DEFAULT_CACHE_TTL", 5 * 60)
        cls.USER_TIMEZONE = os.getenv("USER_TIMEZONE", "Asia/Kolkata")
        cls.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def get_user_timezone() -> ZoneInfo:
    """Get the configured user timezone.

    This is the single source of truth for timezone.
    """
    return Config.get_timezone()


def get_user_timezone_str() -> str:
    """Get the configured user timezone as a string."""
    return Config.USER_TIMEZONE


def get_access_token_cookie() -> str:
    """Name of the cookie carrying the bearer token."""
    return Config.ACCESS_TOKEN_COOKIE
