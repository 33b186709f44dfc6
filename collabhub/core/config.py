"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from enum import Enum
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageMode(str, Enum):
    local = "local"              # durable local records only
    remote = "remote"            # MongoDB, re-read after every write
    remote_live = "remote_live"  # MongoDB, snapshot fed by change streams


class Settings(BaseSettings):
    # Persistence strategy for projects/applications
    storage_mode: StorageMode = StorageMode.local

    # Durable local records (any SQLAlchemy URL)
    local_store_url: str = "sqlite:///./collabhub.db"

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "collabhub"
    remote_timeout_ms: int = 5000

    # Directory
    seed_directory: bool = True

    # Placeholder credential scheme (not real security)
    placeholder_password: str = "password"

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440

    # App
    debug: bool = False
    log_level: str = "INFO"

    @property
    def uses_remote(self) -> bool:
        return self.storage_mode != StorageMode.local

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_prefix="COLLABHUB_",
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
