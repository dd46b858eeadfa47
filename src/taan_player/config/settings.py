"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import SpotifyConstants
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import BusyTimeoutMs, ConnectionTimeoutS, PageSize


class SpotifySettings(BaseModel):
    """Streaming service and web API configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    client_id: str = Field(
        default=SpotifyConstants.CLIENT_ID,
        min_length=1,
        validation_alias=AliasChoices("client_id", "spotify_client_id"),
    )
    redirect_uri: str = Field(
        default=SpotifyConstants.REDIRECT_URI,
        validation_alias=AliasChoices("redirect_uri", "oauth_redirect_uri"),
    )
    scopes: tuple[str, ...] = SpotifyConstants.OAUTH_SCOPES
    api_base_url: str = SpotifyConstants.API_BASE_URL
    request_timeout_s: float = Field(default=10.0, gt=0.0, le=120.0)
    page_size: PageSize = 10

    @field_validator("redirect_uri", "api_base_url")
    @classmethod
    def validate_http_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(ErrorMessages.INVALID_REDIRECT_URI)
        return v.rstrip("/")

    @field_validator("scopes", mode="before")
    @classmethod
    def split_scopes(cls, v: str | list[str] | tuple[str, ...]) -> tuple[str, ...]:
        """Accept a space or comma separated string from the environment."""
        if isinstance(v, str):
            return tuple(s for s in v.replace(",", " ").split() if s)
        return tuple(v)


class RetrySettings(BaseModel):
    """Web API retry discipline for 401 and 429 responses."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    # None keeps retrying for as long as the backend answers 401/429.
    max_attempts: int | None = Field(
        default=10,
        ge=1,
        validation_alias=AliasChoices("max_attempts", "retry_max_attempts"),
    )
    max_retry_after_seconds: float | None = Field(default=None, ge=0.0)
    token_expiry_leeway_s: float = Field(default=0.0, ge=0.0, le=300.0)


class PlayerSettings(BaseModel):
    """Player event handling configuration."""

    model_config = SettingsConfigDict(frozen=True)

    pause_on_end_of_track: bool = True
    preload_next_track: bool = True
    fetch_cover_art: bool = True


class CacheSettings(BaseModel):
    """Credential cache configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="sqlite:///data/taan.db",
        validation_alias=AliasChoices("url", "database_url", "cache_url"),
    )
    busy_timeout_ms: BusyTimeoutMs = Field(
        default=5000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: ConnectionTimeoutS = Field(
        default=10,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith("sqlite://"):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - SPOTIFY__CLIENT_ID, SPOTIFY__SCOPES, etc. (nested with "__")
    - RETRY__MAX_ATTEMPTS, RETRY__MAX_RETRY_AFTER_SECONDS
    - PLAYER__PAUSE_ON_END_OF_TRACK, PLAYER__FETCH_COVER_ART
    - CACHE__URL
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    spotify: SpotifySettings = Field(default_factory=SpotifySettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    player: PlayerSettings = Field(default_factory=PlayerSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
