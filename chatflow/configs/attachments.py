"""
Attachment storage configuration.

Settings for the S3 bucket holding chat attachments, presigned URL expiry
and the per-file size limit applied before a file joins a turn.

Dependencies: pydantic_settings
System role: Attachment storage and validation configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from chatflow.core.attachments.validator import MAX_ATTACHMENT_BYTES


class AttachmentSettings(BaseSettings):
    """Settings for attachment uploads."""

    model_config = SettingsConfigDict(
        env_prefix="ATTACHMENTS_",
        case_sensitive=False,
        extra="ignore",
    )

    bucket: str = Field(
        default="chat-files",
        description="S3 bucket for raw attachment storage",
    )
    region: str = Field(
        default="ap-southeast-2",
        description="AWS region for S3 bucket",
    )
    presigned_url_expiry: int = Field(
        default=3600,
        description="Presigned download URL expiry in seconds (default 1 hour)",
    )
    max_bytes: int = Field(
        default=MAX_ATTACHMENT_BYTES,
        description="Maximum accepted size of a single attachment in bytes",
    )
