"""Policy validator configuration management."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="CXPV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Catena-X Policy Validator"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8181

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:4200"

    # Transformer context the validation endpoint is bound to
    transformation_context: str = "management-api"

    # Where cached JSON-LD documents are materialized (system temp dir if unset)
    document_cache_dir: Path | None = None

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
