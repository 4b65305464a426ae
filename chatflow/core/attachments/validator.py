"""
Attachment validation policy.

Filters candidate files by size and declared MIME type before they are
accepted into the pending-send set. Pure functions, no side effects.

Dependencies: None (pure domain layer)
System role: Gatekeeper for files attached to a chat turn
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import Iterable

from chatflow.core.exceptions import ValidationError

MAX_ATTACHMENT_BYTES = 10 * 1024 * 1024  # 10 MiB

ALLOWED_TYPE_PREFIXES = ("image/", "text/")
ALLOWED_EXACT_TYPES = frozenset({"application/pdf"})


class RejectionReason(str, Enum):
    """Why a candidate file was not accepted."""

    TOO_LARGE = "too_large"
    UNSUPPORTED_TYPE = "unsupported_type"


@dataclass(frozen=True)
class CandidateFile:
    """
    A file offered for attachment to the next turn.

    Attributes:
        name: Original file name as provided by the client
        content_type: Declared MIME type
        size: Size in bytes (declared; equals len(data) when data is present)
        data: Raw bytes, empty when only metadata is known
    """

    name: str
    content_type: str
    size: int
    data: bytes = field(default=b"", repr=False)

    @property
    def normalized_type(self) -> str:
        """MIME type lower-cased with parameters (``; charset=...``) stripped."""
        return normalize_content_type(self.content_type)

    @property
    def is_image(self) -> bool:
        return self.normalized_type.startswith("image/")

    @property
    def extension(self) -> str:
        """File extension without the dot, ``bin`` when the name has none."""
        suffix = PurePosixPath(self.name).suffix
        return suffix[1:].lower() if suffix else "bin"

    def metadata(self) -> dict:
        """Name/type/size triple sent to the inference endpoint."""
        return {"name": self.name, "type": self.content_type, "size": self.size}


@dataclass(frozen=True)
class Rejection:
    """A rejected candidate and the reason tag."""

    file: CandidateFile
    reason: RejectionReason
    message: str

    @property
    def title(self) -> str:
        if self.reason is RejectionReason.TOO_LARGE:
            return "File too large"
        return "Unsupported file type"

    def to_error(self) -> ValidationError:
        """Build the per-file ValidationError for reporting."""
        return ValidationError(
            self.message,
            field=self.file.name,
            details={"reason": self.reason.value},
        )


@dataclass
class ValidationResult:
    """Accepted subset plus one rejection per refused file."""

    accepted: list[CandidateFile] = field(default_factory=list)
    rejections: list[Rejection] = field(default_factory=list)

    @property
    def all_accepted(self) -> bool:
        return not self.rejections


def normalize_content_type(content_type: str | None) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_allowed_type(content_type: str | None) -> bool:
    """
    Check a declared MIME type against the allowed classes.

    Args:
        content_type: Declared MIME type, possibly with parameters

    Returns:
        bool: True for image/*, text/* and application/pdf
    """
    normalized = normalize_content_type(content_type)
    if normalized in ALLOWED_EXACT_TYPES:
        return True
    return any(
        normalized.startswith(prefix) and len(normalized) > len(prefix)
        for prefix in ALLOWED_TYPE_PREFIXES
    )


def validate_attachments(
    files: Iterable[CandidateFile],
    max_bytes: int = MAX_ATTACHMENT_BYTES,
) -> ValidationResult:
    """
    Split candidate files into accepted and rejected.

    Size is checked before type. A file of exactly ``max_bytes`` is accepted.
    A rejection never prevents acceptance of other files in the batch.

    Args:
        files: Candidate files in submission order
        max_bytes: Maximum allowed size per file

    Returns:
        ValidationResult: Accepted files (order preserved) and rejections
    """
    result = ValidationResult()
    limit_mb = max_bytes // (1024 * 1024)

    for candidate in files:
        if candidate.size > max_bytes:
            result.rejections.append(
                Rejection(
                    file=candidate,
                    reason=RejectionReason.TOO_LARGE,
                    message=f"{candidate.name} is larger than {limit_mb}MB",
                )
            )
            continue

        if not is_allowed_type(candidate.content_type):
            result.rejections.append(
                Rejection(
                    file=candidate,
                    reason=RejectionReason.UNSUPPORTED_TYPE,
                    message=(
                        f"{candidate.name} is not supported. "
                        "Please use images, PDFs, or text files."
                    ),
                )
            )
            continue

        result.accepted.append(candidate)

    return result
