"""Centralized application configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `TASKSTATE_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    json_version : int
        Version number stamped into the JSON user-task document; maps from
        `TASKSTATE_JSON_VERSION`.
    max_completed_tasks : int
        How many completed tasks the manager retains; maps from
        `TASKSTATE_MAX_COMPLETED_TASKS`.
    host, port :
        Bind address for the HTTP API (`TASKSTATE_HOST`, `TASKSTATE_PORT`).
    """

    environment: EnvName = Field(default="dev", alias="TASKSTATE_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    json_version: int = Field(default=1, ge=0, alias="TASKSTATE_JSON_VERSION")
    max_completed_tasks: int = Field(default=100, ge=0, alias="TASKSTATE_MAX_COMPLETED_TASKS")
    host: str = Field(default="127.0.0.1", alias="TASKSTATE_HOST")
    port: int = Field(default=8000, ge=1, le=65535, alias="TASKSTATE_PORT")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("TASKSTATE_ENV", "dev")
    return Settings()


# Export a ready-to-use singleton (import-time read of env / .env files).
settings: Settings = load_settings()


def get_logger(name: str = "taskstate") -> logging.Logger:
    """Return a process-global logger configured to the current log level."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
