import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
QUIET_LOGGERS = ("httpx", "httpcore")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Upstream
    nasa_api_base_url: str = os.getenv("NASA_API_BASE_URL", "https://api.nasa.gov")
    nasa_images_api_base_url: str = os.getenv("NASA_IMAGES_API_BASE_URL", "https://images-api.nasa.gov")
    nasa_api_key: str = os.getenv("NASA_API_KEY") or "DEMO_KEY"
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "10"))

    # Cache
    cache_ttl: int = int(os.getenv("CACHE_TTL", "3600"))  # 1 hour default

    # Rate limiting
    rate_limit_window_ms: int = int(os.getenv("RATE_LIMIT_WINDOW_MS", "900000"))  # 15 minutes
    rate_limit_max_requests: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("PORT", "3001"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def using_demo_key(self) -> bool:
        """Whether the public DEMO_KEY is in use (heavily rate limited upstream)."""
        return self.nasa_api_key == "DEMO_KEY"

    @property
    def rate_limit_window_seconds(self) -> float:
        return self.rate_limit_window_ms / 1000

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be a positive number of seconds")

        if self.upstream_timeout <= 0:
            raise ValueError("UPSTREAM_TIMEOUT must be a positive number of seconds")

        if self.rate_limit_window_ms <= 0 or self.rate_limit_max_requests <= 0:
            raise ValueError("RATE_LIMIT_WINDOW_MS and RATE_LIMIT_MAX_REQUESTS must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service process.

    httpx logs every request URL at INFO, and upstream URLs carry the access
    key, so its loggers are held at WARNING.
    """
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
