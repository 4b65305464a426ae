"""
AWS boundary modules.

Exports: S3AttachmentStore
"""

from .s3_client import S3AttachmentStore

__all__ = ["S3AttachmentStore"]
