import os
from functools import lru_cache

from pydantic import BaseModel, Field


def _optional(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


class Settings(BaseModel):
    POLYGON_API_KEY: str = Field(min_length=1)
    POLYGON_BASE_URL: str = "https://api.polygon.io"
    POLYGON_TIMEOUT_SEC: float = Field(default=5.0, gt=0)
    WATCHLIST_EMA_PERIOD: int = Field(default=14, ge=1)
    WATCHLIST_EMA_WINDOW: int = Field(default=5, ge=1)
    WATCHLIST_EMA_DOUBLE_SEED: bool = True
    WATCHLIST_REFRESH_MAX_WORKERS: int | None = Field(default=None, ge=1)
    WATCHLIST_REFRESH_TIMEOUT_SEC: float | None = Field(default=None, gt=0)
    WATCHLIST_MARKET_TZ: str = "America/New_York"

    @classmethod
    def from_env(cls) -> "Settings":
        raw = {
            "POLYGON_API_KEY": os.getenv("POLYGON_API_KEY"),
            "POLYGON_BASE_URL": _optional("POLYGON_BASE_URL"),
            "POLYGON_TIMEOUT_SEC": _optional("POLYGON_TIMEOUT_SEC"),
            "WATCHLIST_EMA_PERIOD": _optional("WATCHLIST_EMA_PERIOD"),
            "WATCHLIST_EMA_WINDOW": _optional("WATCHLIST_EMA_WINDOW"),
            "WATCHLIST_EMA_DOUBLE_SEED": _optional("WATCHLIST_EMA_DOUBLE_SEED"),
            "WATCHLIST_REFRESH_MAX_WORKERS": _optional("WATCHLIST_REFRESH_MAX_WORKERS"),
            "WATCHLIST_REFRESH_TIMEOUT_SEC": _optional("WATCHLIST_REFRESH_TIMEOUT_SEC"),
            "WATCHLIST_MARKET_TZ": _optional("WATCHLIST_MARKET_TZ"),
        }
        # unset optionals fall back to the model defaults
        return cls.model_validate({k: v for k, v in raw.items() if v is not None or k == "POLYGON_API_KEY"})


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
