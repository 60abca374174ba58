from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings

DEFAULT_TIMEZONE = "America/Los_Angeles"


class Settings(BaseSettings):
    """Application settings, read from environment variables (e.g. REDIS_HOST)."""

    service_name: str = "cart-service"
    version: str = "1.0.0"
    storage_backend: Literal["redis", "memory"] = "redis"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    # Single namespaced key holding the whole cart snapshot
    cart_storage_key: str = "@GoMarketplace:cart"
    # Local carts do not expire unless a TTL is configured
    cart_ttl: Optional[int] = None
    log_level: str = "INFO"
    log_timezone: str = DEFAULT_TIMEZONE
    cart_service_port: int = 8001


@lru_cache
def get_settings() -> Settings:
    return Settings()
