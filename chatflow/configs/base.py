"""
Shared chatflow settings.

Every settings group reads the same `.env` file; this base adds the few
process-wide knobs the API entry point needs (log level, allowed browser
origins, dev autoreload).

Dependencies: pydantic_settings
System role: Common base of the chatflow settings groups
"""

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict
from pydantic import Field


class BaseSettings(PydanticBaseSettings):
    """Process-wide settings shared by every chatflow config group."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Root log level for configure_logging")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Browser origins allowed to call the API (JSON list in env)",
    )
    reload: bool = Field(default=False, description="Run uvicorn with autoreload when launched directly")
