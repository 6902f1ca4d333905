"""
config.py — taxcore settings.

Usage:
    from taxcore.config import settings
    print(settings.fallback_to_latest_year)

Never pass settings around as a dependency — import directly as a module-level singleton.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TAXCORE_",
        case_sensitive=False,
        extra="ignore",  # Silently ignore any extra env vars
    )

    # --- Logging ---
    debug: bool = False
    log_level: str = "INFO"

    # --- Request defaults ---
    # Age assumed when a request omits it (below-60 slab bracket)
    default_age: int = 30

    # --- Period policy ---
    # When a requested financial year has no slab table, retry with the latest
    # configured year instead of surfacing UnsupportedPeriodError.
    fallback_to_latest_year: bool = False

    # --- Application ---
    app_version: str = "0.1.0"

    @property
    def effective_log_level(self) -> str:
        """DEBUG wins over log_level so a single flag turns on slab-level tracing."""
        return "DEBUG" if self.debug else self.log_level.upper()


# Module-level singleton; import this throughout the codebase
settings = Settings()
