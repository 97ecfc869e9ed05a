"""
serialdb/config.py

Client settings, read from SERIALDB_* environment variables or a .env file.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Attributes:
        timeout: Seconds the engine waits on a locked database file.
        thread_name: Name prefix of the worker thread.
        echo: Log every scheduled statement at INFO instead of DEBUG.
    """
    timeout: float = 5.0
    thread_name: str = "serialdb-worker"
    echo: bool = False

    model_config = SettingsConfigDict(env_prefix="SERIALDB_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
