"""
S3 client for chat attachment storage.

Uploads attachment bytes under ``{owner_id}/{message_id}/{timestamp_ms}.{ext}``
and generates presigned download URLs for attachment listings.

Dependencies: boto3
System role: Blob storage boundary for chat attachments
"""

import asyncio
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from chatflow.core.attachments.validator import CandidateFile
from chatflow.core.exceptions import TransportError

logger = logging.getLogger(__name__)


class S3AttachmentStore:
    """S3 client for the attachment bucket."""

    def __init__(
        self,
        bucket: str,
        region: str = "ap-southeast-2",
        s3_client: Any | None = None,
    ) -> None:
        """
        Initialize S3 client for attachment bucket.

        Args:
            bucket: S3 bucket name for attachment storage
            region: AWS region for S3 bucket
            s3_client: Pre-built boto3 S3 client (created from region when omitted)
        """
        if not bucket:
            raise ValueError("bucket is required")

        self._bucket = bucket
        self._region = region
        self._s3_client = s3_client or boto3.client("s3", region_name=region)

    @property
    def bucket(self) -> str:
        return self._bucket

    @staticmethod
    def build_key(
        owner_id: str,
        message_id: UUID | str,
        timestamp_ms: int,
        extension: str,
    ) -> str:
        """
        Build the storage key for one attachment.

        Args:
            owner_id: Owning user id
            message_id: Parent message id
            timestamp_ms: Upload time in epoch milliseconds
            extension: File extension without the dot

        Returns:
            str: Key of the form ``{owner_id}/{message_id}/{timestamp_ms}.{extension}``
        """
        return f"{owner_id}/{message_id}/{timestamp_ms}.{extension}"

    async def upload(
        self,
        owner_id: str,
        message_id: UUID,
        file: CandidateFile,
        timestamp_ms: int | None = None,
    ) -> str:
        """
        Upload one attachment's bytes.

        Args:
            owner_id: Owning user id
            message_id: Parent message id
            file: Accepted candidate file with its bytes
            timestamp_ms: Key timestamp (current time when omitted)

        Returns:
            str: Storage key of the uploaded object

        Raises:
            TransportError: If the S3 put fails
        """
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        s3_key = self.build_key(owner_id, message_id, timestamp_ms, file.extension)

        logger.debug(
            f"{__name__}:upload - Uploading to S3 "
            f"s3_key={s3_key}, size={file.size} bytes"
        )

        try:
            # boto3 is blocking; keep the event loop free
            await asyncio.to_thread(
                self._s3_client.put_object,
                Bucket=self._bucket,
                Key=s3_key,
                Body=file.data,
                ContentType=file.content_type,
                Metadata={
                    "owner_id": owner_id,
                    "message_id": str(message_id),
                },
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"{__name__}:upload - {type(e).__name__}: {e}")
            raise TransportError(
                f"Upload of {file.name} failed",
                target=s3_key,
                details={"error": str(e)},
            ) from e

        logger.info(f"{__name__}:upload - Successfully uploaded s3_key={s3_key}")
        return s3_key

    def generate_presigned_download_url(
        self,
        s3_key: str,
        expires_in: int = 3600,
    ) -> tuple[str, datetime]:
        """
        Generate presigned URL for downloading/viewing an attachment.

        Args:
            s3_key: S3 object key (path in bucket)
            expires_in: URL expiry in seconds (default 1 hour)

        Returns:
            tuple[str, datetime]: (presigned_url, expires_at)

        Raises:
            ClientError: If presigned URL generation fails
        """
        presigned_url = self._s3_client.generate_presigned_url(
            ClientMethod="get_object",
            Params={
                "Bucket": self._bucket,
                "Key": s3_key,
            },
            ExpiresIn=expires_in,
        )
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        return presigned_url, expires_at
