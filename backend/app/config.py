"""Application configuration."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Binance public spot API
    binance_base_url: str = "https://api.binance.com"
    binance_api_key: str = ""
    quote_asset: str = "USDT"
    http_timeout: float = 10.0

    # Market data window
    kline_interval: str = "15m"
    kline_limit: int = 50
    order_book_depth: int = 100

    # Substitute synthetic data when the exchange is unreachable
    synthetic_fallback: bool = True

    # Seed for pattern/MTF draws and synthetic data (None = fresh entropy)
    random_seed: int | None = None

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
