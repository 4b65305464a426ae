"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from chatflow.configs.attachments import AttachmentSettings
from chatflow.configs.base import BaseSettings
from chatflow.configs.database import DatabaseSettings
from chatflow.configs.inference import InferenceSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = DatabaseSettings()
    attachments: AttachmentSettings = AttachmentSettings()
    inference: InferenceSettings = InferenceSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from chatflow.configs import get_settings
        settings = get_settings()
    """
    return Settings()
