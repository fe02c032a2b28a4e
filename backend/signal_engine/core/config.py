"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "Momentum Signal Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Instrument universe (supplied by deployment, no built-in default)
    instruments: list[str] = []

    # Candle window
    interval: str = "5m"
    limit: int = Field(default=120, ge=40, le=1000)

    # Providers
    request_timeout_seconds: float = Field(default=10.0, gt=0)
    min_candles: int = Field(default=30, ge=1)
    provider_order: Literal["random", "priority"] = "random"
    user_agent: str = "Mozilla/5.0"

    # Scanner
    enable_scanner: bool = False
    scan_interval_seconds: float = 300.0
    scan_start_delay_seconds: float = 5.0
    per_instrument_delay_seconds: float = 2.0

    # Dedup
    dedup_window_seconds: float = 3600.0
    dedup_retention_seconds: float = 24 * 3600.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
