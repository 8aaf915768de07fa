"""Runtime settings, read from the environment (prefix ``STOCKOPS_``) or ``.env``."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOCKOPS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_base_url: str = Field(
        default="http://localhost:3001/api",
        description="Root of the back-office REST API (without /company-stocks)",
    )
    api_timeout: float = Field(default=10.0, gt=0)
    page_size: int = Field(default=1000, gt=0)
    store_backend: Literal["rest", "json"] = "json"
    data_dir: str = "data"
    conflict_retries: int = Field(default=3, ge=0)
    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
