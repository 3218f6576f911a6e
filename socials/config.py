"""
Application configuration with environment variable support.
"""
from __future__ import annotations

from typing import Dict, Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-level settings read from ``SOCIALS_*`` variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="SOCIALS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Persisted keyword settings
    SETTINGS_FILE: str = "settings.json"
    SETTINGS_DIR: str = "."
    SETTINGS_EXTENSION: str = ".json"

    # Collection defaults
    RECENCY_WINDOW_DAYS: int = 30
    DEFAULT_RESULT_LIMIT: int = 10
    DEFAULT_FETCH_INTERVAL_MINUTES: int = 5

    # HTTP client
    HTTP_TIMEOUT_SECONDS: float = 20.0
    USER_AGENT: str = (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE: str = ""

    # Headless API
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000
    OUTPUT_BUFFER_LINES: int = 2000


settings = Settings()


# Sources are a closed set; order here is the display and grouping order.
SOURCES: Tuple[str, ...] = ("reddit", "hn", "ddg")

SOURCE_LABELS: Dict[str, str] = {
    "reddit": "Reddit",
    "hn": "Hacker News",
    "ddg": "DuckDuckGo",
}


def http_headers() -> Dict[str, str]:
    """Default request headers for source adapters."""
    return {"User-Agent": settings.USER_AGENT}
