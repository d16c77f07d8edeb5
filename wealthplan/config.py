"""Service configuration loaded from the environment.

Engine assumptions (rates, multipliers, ages) are not settings; they travel
with each request as an ``AssumptionSet``. This module only covers how the
service itself runs.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings, read from ``WEALTHPLAN_*`` variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="WEALTHPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Root log level")
    log_json: bool = Field(default=True, description="Render logs as JSON lines")
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
        description="Origins allowed to call /api",
    )
    max_simulation_age: int = Field(
        default=120,
        ge=1,
        le=120,
        description="Hard upper bound on any simulated age",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
