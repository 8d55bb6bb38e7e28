from functools import lru_cache
from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


def _is_placeholder(value: Optional[str]) -> bool:
    # Template .env files ship values like "your-supabase-url"
    return not value or "your-" in value


class Settings(BaseSettings):
    server_port: int = 8000
    # Allow both localhost and 127.0.0.1 for local development
    allowed_origins: List[AnyHttpUrl] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]  # type: ignore
    log_level: str = "INFO"

    database_url: Optional[str] = None

    gemini_api_key: Optional[str] = None
    google_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Retry policy for the AI provider
    ai_max_attempts: int = 3
    ai_base_delay: float = 1.0

    # Single-tenant identity used for every request
    default_owner_id: str = "demo-user-123"

    # None means: decide from the configured credentials
    development_mode: Optional[bool] = None
    seed_demo_data: bool = True

    # pydantic-settings v2 style config: load env from both ../.env (repo root) and .env
    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=("../.env", ".env"),
        extra="ignore",  # ignore env vars not defined as fields
    )

    @property
    def resolved_gemini_key(self) -> Optional[str]:
        return self.gemini_api_key or self.google_api_key

    @property
    def is_development_mode(self) -> bool:
        if self.development_mode is not None:
            return self.development_mode
        return _is_placeholder(self.database_url) or _is_placeholder(self.resolved_gemini_key)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
