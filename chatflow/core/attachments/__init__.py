"""
Attachment acceptance policy.

Exports:
  - CandidateFile, validate_attachments, ValidationResult, Rejection, RejectionReason
  - PendingAttachments, PreviewRegistry, PreviewHandle
"""

from chatflow.core.attachments.validator import (
    MAX_ATTACHMENT_BYTES,
    CandidateFile,
    Rejection,
    RejectionReason,
    ValidationResult,
    is_allowed_type,
    validate_attachments,
)
from chatflow.core.attachments.pending import (
    PendingAttachment,
    PendingAttachments,
    PreviewHandle,
    PreviewRegistry,
)

__all__ = [
    "MAX_ATTACHMENT_BYTES",
    "CandidateFile",
    "Rejection",
    "RejectionReason",
    "ValidationResult",
    "is_allowed_type",
    "validate_attachments",
    "PendingAttachment",
    "PendingAttachments",
    "PreviewHandle",
    "PreviewRegistry",
]
