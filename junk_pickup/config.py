"""
This module contains the settings for the junk pickup service.
"""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Service settings loaded from ``JUNK_PICKUP_*`` environment variables or a ``.env`` file.

    Attributes:
        database_url (str): Async SQLAlchemy URL of the booking database.
        celery_broker_url (str): Broker used by the photo analysis worker.
        celery_result_backend (str): Result backend for Celery tasks.
        log_level (str): Level of the ``junk_pickup`` logger.
    """
    database_url: str = "sqlite+aiosqlite:///junk-pickup.db"
    celery_broker_url: str = "redis://localhost:6379/0"
    celery_result_backend: str = "db+sqlite:///junk-pickup.db"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="JUNK_PICKUP_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Returns the process-wide settings instance.
    """
    return Settings()
