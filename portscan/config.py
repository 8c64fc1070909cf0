"""
Pydantic-based configuration for the scanner.

Every knob can be set through a PORTSCAN_* environment variable (or a .env
file); command line flags take precedence over these values.
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_WORKERS = 100


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PORTSCAN_", case_sensitive=False, env_file=".env")

    # Concurrency ceiling: at most this many connect attempts in flight
    max_workers: int = Field(DEFAULT_MAX_WORKERS, description="worker pool size")

    # None leaves the OS connect timeout in charge
    connect_timeout: Optional[float] = Field(None, description="connect timeout in seconds")

    log_level: str = Field("INFO", description="root log level")

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_workers must be >= 1")
        return v

    @field_validator("connect_timeout")
    @classmethod
    def validate_connect_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError("connect_timeout must be > 0")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("log_level must be a standard logging level name")
        return v

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
