"""Client configuration using Pydantic Settings with YAML support.

Values are loaded from, in priority order:
- keyword arguments passed to ``Settings()``
- environment variables (``API__BASE_URL=...``)
- a ``.env`` file
- YAML files under ``config/base`` merged with ``config/environments/{APP_ENV}``
- the defaults declared below
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Recipe Browser"
    version: str = "0.1.0"


class ApiSettings(BaseModel):
    """Recipe API connection settings."""

    base_url: str = "http://localhost:5000"
    timeout: float = 10.0


class PaginationSettings(BaseModel):
    """Settings for "Load More" browsing and search."""

    page_size: int = Field(default=12, ge=1, le=100)
    search_debounce_seconds: float = Field(default=0.3, ge=0.0)


class FavoritesSettings(BaseModel):
    """Client-persisted favorites settings."""

    storage_path: Path = Path.home() / ".recipe-browser" / "recipe-favorites.json"
    max_concurrent_fetches: int = Field(default=5, ge=1)


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"
    file: Path | None = None


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Recipe browser settings.

    Any nested value can be overridden with the ``__`` delimiter, e.g.
    ``PAGINATION__PAGE_SIZE=24``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    api: ApiSettings = ApiSettings()
    pagination: PaginationSettings = PaginationSettings()
    favorites: FavoritesSettings = FavoritesSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
