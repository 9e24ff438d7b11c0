"""Daemon configuration using environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .services.engines import EngineChoice

# Resolve the project root once so that `.env` is discovered regardless of CWD
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Target value meaning "play through the local speakers"
LOCAL_TARGET = "local"


class Settings(BaseSettings):
    """Load configuration from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    engine: EngineChoice = Field(
        default=EngineChoice.AUTO,
        validation_alias=AliasChoices("NOTIFYD_ENGINE", "engine"),
    )
    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("NOTIFYD_HOST", "host"),
    )
    port: int = Field(
        default=8080,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("NOTIFYD_PORT", "port"),
    )

    # Device id used by /notify, or LOCAL_TARGET for the local speakers
    target: str = Field(
        default=LOCAL_TARGET,
        validation_alias=AliasChoices("NOTIFYD_TARGET", "target"),
    )
    # Address cast devices use to reach /static; detected when unset
    advertise_host: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("NOTIFYD_ADVERTISE_HOST", "advertise_host"),
    )
    locale: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("NOTIFYD_LOCALE", "locale"),
    )
    # Parent of the per-process scratch directory; system temp dir when unset
    scratch_parent: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices("NOTIFYD_SCRATCH_PARENT", "scratch_parent"),
    )

    playback: Literal["native", "external"] = Field(
        default="native",
        validation_alias=AliasChoices("NOTIFYD_PLAYBACK", "playback"),
    )
    poll_interval: float = Field(
        default=0.05,
        gt=0,
        le=5,
        validation_alias=AliasChoices("NOTIFYD_POLL_INTERVAL", "poll_interval"),
    )
    cast_tool: str = Field(
        default="go-chromecast",
        validation_alias=AliasChoices("NOTIFYD_CAST_TOOL", "cast_tool"),
    )

    @field_validator("engine", mode="before")
    @classmethod
    def _normalize_engine(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("target")
    @classmethod
    def _normalize_target(cls, value: str) -> str:
        value = value.strip()
        return value or LOCAL_TARGET

    @property
    def casts_by_default(self) -> bool:
        """True when /notify should cast instead of playing locally."""
        return self.target != LOCAL_TARGET


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()  # pyright: ignore[reportCallIssue]


__all__ = ["LOCAL_TARGET", "Settings", "get_settings"]
