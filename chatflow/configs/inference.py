"""
Inference webhook configuration.

Dependencies: pydantic_settings
System role: External inference endpoint configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class InferenceSettings(BaseSettings):
    """Settings for the remote inference webhook."""

    model_config = SettingsConfigDict(
        env_prefix="INFERENCE_",
        case_sensitive=False,
        extra="ignore",
    )

    webhook_url: str = Field(
        default="http://localhost:5678/webhook/chat",
        description="URL receiving the JSON chat payload",
    )
    timeout_seconds: float = Field(
        default=120.0,
        description="Transport timeout for a single dispatch",
    )
    default_model: str = Field(
        default="gpt-4-mini",
        description="Model identifier assigned to newly created sessions",
    )
