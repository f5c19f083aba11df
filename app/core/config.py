from functools import lru_cache
import json

from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors_origins(value: str) -> list[str]:
    if not value:
        return []

    parsed: list[str]
    raw = value.strip()
    if raw.startswith("["):
        try:
            items = json.loads(raw)
            parsed = [str(item).strip() for item in items if str(item).strip()]
        except (TypeError, ValueError):
            parsed = []
    else:
        parsed = [origin.strip() for origin in raw.split(",") if origin.strip()]

    # Preserve order and remove duplicates.
    return list(dict.fromkeys(parsed))


def parse_provider_keys(value: str) -> list[str]:
    keys = [item.strip().lower() for item in str(value or "").split(",") if item.strip()]
    return list(dict.fromkeys(keys))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "eSIM Compare"
    environment: str = "development"
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Provider scraping
    esim_live_scraping: bool = True
    # Comma-separated provider keys (airalo, holafly, nomad, kolet).
    esim_providers: str = "airalo,holafly,nomad"
    provider_timeout_seconds: float = 10.0
    scraper_user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

    # Outbound scraping is triggered per request, keep it throttled.
    plans_rate_limit: str = "30/minute"

    # Frontend URLs
    frontend_base_url: str = "http://localhost:3000"

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:5173"


@lru_cache
def get_settings() -> Settings:
    return Settings()
