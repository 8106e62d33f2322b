"""Application settings using Pydantic Settings."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from ``SALES_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SALES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_title: str = Field(default="Sales Records Service")
    app_version: str = Field(default="1.0.0")

    data_file: Path = Field(
        default=Path("data/data.json"),
        description="JSON document holding customers, products and sales",
    )
    seed_on_startup: bool = Field(
        default=True,
        description="Seed demo data on startup when the data file is empty",
    )

    log_level: str = Field(default="INFO")
    log_file: Path | None = Field(
        default=None,
        description="Optional log file; rotated daily when set",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Invalid log level: {v}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
