"""Configuration for the App Clash engine and API."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from ``APPCLASH_*`` variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="APPCLASH_", env_file=".env", env_file_encoding="utf-8"
    )

    store_backend: Literal["json", "sql"] = Field(
        default="json", description="Which game store implementation to use"
    )
    data_dir: Path = Field(default=Path("games"), description="Where JSON game snapshots live")
    database_url: str = Field(
        default="sqlite:///appclash.db",
        description="SQLAlchemy URL for the SQL game store and the leaderboard",
    )
    database_echo: bool = Field(default=False, description="Log every SQL statement")
    lock_timeout_seconds: float = Field(
        default=5.0,
        description="How long a move waits for the per-game guard before failing as retryable",
        gt=0.0,
    )
    store_timeout_seconds: float = Field(
        default=10.0, description="Upper bound for a single store read or write", gt=0.0
    )
    score_report_attempts: int = Field(
        default=3, description="Attempts made to record a win on the leaderboard", ge=1
    )
    score_report_backoff_seconds: float = Field(
        default=0.5, description="Delay before the first leaderboard retry; doubles each time", ge=0.0
    )
    leaderboard_limit: int = Field(default=100, description="Rows returned by the leaderboard", ge=1)
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
