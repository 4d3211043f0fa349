"""
Configuration settings for Sales Insight.

Uses Pydantic Settings to load environment variables (and an optional `.env`
file) for the data file location, logging, and I/O profiling.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Storage
    data_file: Path = Field(Path("sales_data.txt"), alias="SALES_DATA_FILE")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("WARNING", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Diagnostics
    profile_io: bool = Field(False, alias="PROFILE_IO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
