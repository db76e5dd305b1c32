"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_env: str = "development"
    app_debug: bool = True

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # True = one JSON object per line (production log shipping)

    # Analytics result cache
    analytics_cache_ttl_seconds: float = 300.0
    # Empty results expire sooner so newly recorded transactions show up quickly
    analytics_empty_cache_ttl_seconds: float = 60.0
    analytics_cache_sweep_interval_seconds: float = 600.0

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
