# src/btcproxy/config.py
"""
Runtime settings, read from the environment and an optional `.env` file.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment / DB
    ENV: str = Field(default="dev")
    DATABASE_URL: str = Field(default="sqlite:///./btc_price_cache.db")

    # Upstream (CoinGecko)
    API_KEY: str | None = None
    COINGECKO_BASE_URL: str = "https://api.coingecko.com/api/v3"
    UPSTREAM_TIMEOUT_SECONDS: float = 10.0

    # Cache policy
    LIVE_PRICE_TTL_SECONDS: int = 5 * 60
    HISTORY_RETENTION_SECONDS: int = 24 * 60 * 60
    PRUNE_INTERVAL_SECONDS: int = 5 * 60 * 60
    PRUNE_ON_STARTUP: bool = False

    # HTTP
    CORS_ORIGINS: str = "*"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def _normalize_db_url(cls, v):
        url = (v or "").strip()
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+psycopg://", 1)
        return url

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
