# app/config.py - Pydantic settings (env vars)

from functools import lru_cache
from typing import Literal
from urllib.parse import urlparse

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    environment: Literal["development", "production"] = "development"
    log_level: str = "INFO"

    # Supabase (anon key only; row-level security does the authorization)
    supabase_url: str
    supabase_anon_key: str
    supabase_debug: bool = False

    # Stripe
    stripe_secret_key: str | None = None
    stripe_api_url: str = "https://api.stripe.com"
    stripe_timeout_seconds: float = 30.0

    # Admin console
    session_cookie_name: str = "sb-access-token"
    view_cache_ttl_seconds: float = 30.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @field_validator("supabase_url")
    @classmethod
    def _validate_supabase_url(cls, value: str) -> str:
        cleaned = value.strip()
        parsed = urlparse(cleaned)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(
                f'SUPABASE_URL is not a valid URL. Got: "{value}". '
                'Expected "https://<project-ref>.supabase.co".'
            )
        return cleaned

    @field_validator("supabase_anon_key")
    @classmethod
    def _validate_supabase_anon_key(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("SUPABASE_ANON_KEY must be set and non-empty")
        return cleaned

    @field_validator("stripe_secret_key")
    @classmethod
    def _blank_stripe_key_is_missing(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def debug_diagnostics(self) -> bool:
        return self.supabase_debug and not self.is_production


@lru_cache
def get_settings() -> Settings:
    return Settings()
