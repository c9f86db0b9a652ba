"""
Mealink - Configuration and settings.

Supabase is optional: when the URL or anon key is missing the store
collaborators are not built and every operation reports the backend
as unavailable.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.

    Loaded from the environment (and `.env` when present).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase
    supabase_url: str | None = None
    supabase_anon_key: str | None = None

    # Application
    mealink_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Ingredient search
    search_debounce_ms: int = 300
    search_limit: int = 10

    # Identity
    # "session" requires a signed-in Supabase user, "device" uses a local UUID
    identity_mode: Literal["session", "device"] = "session"
    device_id_path: Path = Path.home() / ".mealink" / "device_id"
    dev_user_id: str | None = None

    @property
    def is_supabase_configured(self) -> bool:
        return bool(self.supabase_url) and bool(self.supabase_anon_key)

    @property
    def search_quiet_period(self) -> float:
        """Debounce window in seconds."""
        return self.search_debounce_ms / 1000

    @property
    def is_development(self) -> bool:
        return self.mealink_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: Settings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
