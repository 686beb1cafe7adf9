from functools import lru_cache
from os import getenv
from typing import List

from pydantic import BaseModel


class Settings(BaseModel):
    """Process configuration collected from environment variables."""

    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db: str = "transfers_db"
    exchange_rate_api_key: str = ""
    exchange_rate_api_url: str = "https://v6.exchangerate-api.com/v6"
    http_timeout_seconds: float = 10.0
    transfer_api_url: str = "http://localhost:8000"
    cors_origins: List[str] = ["http://localhost:3000"]


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    defaults = Settings()
    return Settings(
        mongodb_url=getenv("MONGODB_URL", defaults.mongodb_url),
        mongodb_db=getenv("MONGODB_DB", defaults.mongodb_db),
        exchange_rate_api_key=getenv("EXCHANGE_RATE_API_KEY", defaults.exchange_rate_api_key),
        exchange_rate_api_url=getenv("EXCHANGE_RATE_API_URL", defaults.exchange_rate_api_url).rstrip("/"),
        http_timeout_seconds=float(getenv("HTTP_TIMEOUT_SECONDS", defaults.http_timeout_seconds)),
        transfer_api_url=getenv("TRANSFER_API_URL", defaults.transfer_api_url).rstrip("/"),
        cors_origins=_split_origins(getenv("CORS_ORIGINS", ",".join(defaults.cors_origins))),
    )
