"""
Configuration settings for the pusula progression engine.

Uses Pydantic Settings for environment variable management with .env file support.
All variables are prefixed with PUSULA_ (e.g. PUSULA_DATA_DIR).
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PUSULA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".pusula",
        description="Directory holding learner snapshot files",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum loguru level written to stderr by the CLI",
    )

    # ========================================
    # Learner Defaults
    # ========================================
    default_learner_id: str = Field(
        default="learner",
        description="Learner id used when the CLI is called without --learner",
    )
    default_display_name: str = Field(
        default="Learner",
        description="Display name given to learners created by `pusula init`",
    )

    # ========================================
    # Content
    # ========================================
    catalog_path: Path | None = Field(
        default=None,
        description="JSON content catalog; the built-in sample catalog when unset",
    )

    # ========================================
    # Progression Tuning
    # ========================================
    streak_milestones: list[int] = Field(
        default=[3, 7, 14, 30, 60, 100],
        description="Streak lengths that produce a milestone notification",
    )
    feed_limit: int = Field(
        default=20,
        ge=1,
        description="Default number of feed items shown by `pusula feed`",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value

    def get_snapshot_dir(self) -> Path:
        """Snapshot directory with ~ expanded."""
        return self.data_dir.expanduser()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
