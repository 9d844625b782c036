"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import (
    LogLevels,
    PlayerConstants,
    QueueStoreSchemes,
    SearchPlatforms,
)
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import (
    BusyTimeoutMs,
    ConnectionTimeoutS,
    PortNumber,
    RequestTimeoutS,
)


class PlayerSettings(BaseModel):
    """Defaults shared by every player of a manager."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    volume_decrementer: float | None = Field(
        default=None,
        validation_alias=AliasChoices("volume_decrementer", "decrementer"),
    )
    apply_volume_as_filter: bool = Field(
        default=False,
        validation_alias=AliasChoices("apply_volume_as_filter", "volume_as_filter"),
    )
    default_search_platform: str = Field(
        default=SearchPlatforms.DEFAULT,
        min_length=1,
        validation_alias=AliasChoices("default_search_platform", "search_platform"),
    )
    default_volume: int = Field(
        default=PlayerConstants.DEFAULT_VOLUME,
        ge=PlayerConstants.MIN_VOLUME,
        le=PlayerConstants.MAX_VOLUME,
    )

    @field_validator("volume_decrementer")
    @classmethod
    def validate_decrementer(cls, v: float | None) -> float | None:
        """A decrementer scales the volume down, so it must be within (0, 1]."""
        if v is not None and not 0 < v <= 1:
            raise ValueError(ErrorMessages.INVALID_DECREMENTER)
        return v


class QueueSettings(BaseModel):
    """Queue persistence configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    store_url: str = Field(
        default=QueueStoreSchemes.MEMORY,
        validation_alias=AliasChoices("store_url", "queue_store_url", "url"),
    )
    max_previous_tracks: int = Field(default=PlayerConstants.MAX_PREVIOUS_TRACKS, ge=0, le=500)
    busy_timeout_ms: BusyTimeoutMs = Field(
        default=5000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: ConnectionTimeoutS = Field(
        default=10,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("store_url")
    @classmethod
    def validate_store_url(cls, v: str) -> str:
        """Validate queue store URL format."""
        if not v.startswith((QueueStoreSchemes.MEMORY, QueueStoreSchemes.SQLITE)):
            raise ValueError(ErrorMessages.INVALID_STORE_URL)
        return v


class NodeSettings(BaseModel):
    """Connection details of one remote audio node."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    host: str = Field(default="localhost", min_length=1)
    port: PortNumber = 2333
    authorization: SecretStr = Field(
        default=SecretStr("youshallnotpass"),
        validation_alias=AliasChoices("authorization", "password"),
    )
    secure: bool = False
    session_id: str | None = None
    regions: tuple[str, ...] = Field(default_factory=tuple)
    request_timeout_s: RequestTimeoutS = 10.0

    @field_validator("regions", mode="before")
    @classmethod
    def validate_regions(cls, v: tuple[str, ...] | list[str] | str) -> tuple[str, ...]:
        """Accept a list, a tuple or a comma-separated string of region codes."""
        if isinstance(v, str):
            v = [r for r in (part.strip() for part in v.split(",")) if r]
        return tuple(v)

    @property
    def base_url(self) -> str:
        scheme = "https" if self.secure else "http"
        return f"{scheme}://{self.host}:{self.port}"


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - PLAYER__VOLUME_DECREMENTER, PLAYER__APPLY_VOLUME_AS_FILTER, ...
    - QUEUE__STORE_URL (memory:// or sqlite:///path)
    - NODES (JSON array of node objects)
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
    log_level: str = LogLevels.INFO

    player: PlayerSettings = Field(default_factory=PlayerSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)
    nodes: tuple[NodeSettings, ...] = Field(default_factory=tuple)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {
            LogLevels.DEBUG,
            LogLevels.INFO,
            LogLevels.WARNING,
            LogLevels.ERROR,
            LogLevels.CRITICAL,
        }
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
