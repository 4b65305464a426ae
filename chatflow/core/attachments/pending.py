"""
Pending-send attachment set with revocable image previews.

Files accepted by the validator wait here until the turn is submitted.
Image files get a preview handle that must be released when the file
leaves the set, otherwise the registry keeps the bytes alive.

Dependencies: chatflow.core.attachments.validator
System role: Client-side staging area for a chat turn's attachments
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Iterable

from chatflow.core.attachments.validator import (
    MAX_ATTACHMENT_BYTES,
    CandidateFile,
    Rejection,
    validate_attachments,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreviewHandle:
    """Opaque, revocable reference to a locally held image preview."""

    handle_id: str
    content_type: str

    @property
    def url(self) -> str:
        return f"blob:preview/{self.handle_id}"


class PreviewRegistry:
    """
    Issues and revokes preview handles.

    Keeps the preview bytes for every live handle; ``active_count`` makes
    leaked handles observable.
    """

    def __init__(self) -> None:
        self._previews: dict[str, bytes] = {}

    def create(self, file: CandidateFile) -> PreviewHandle:
        handle = PreviewHandle(handle_id=uuid.uuid4().hex, content_type=file.content_type)
        self._previews[handle.handle_id] = file.data
        return handle

    def resolve(self, handle: PreviewHandle) -> bytes | None:
        return self._previews.get(handle.handle_id)

    def release(self, handle: PreviewHandle) -> None:
        """Revoke a handle. Releasing twice is a no-op."""
        self._previews.pop(handle.handle_id, None)

    @property
    def active_count(self) -> int:
        return len(self._previews)


@dataclass(frozen=True)
class PendingAttachment:
    """An accepted file waiting to be sent, with its optional preview."""

    file: CandidateFile
    preview: PreviewHandle | None = None


class PendingAttachments:
    """
    Ordered set of files staged for the next turn.

    Every path that drops an entry (remove, clear, take) releases its preview.
    """

    def __init__(
        self,
        previews: PreviewRegistry | None = None,
        max_bytes: int = MAX_ATTACHMENT_BYTES,
    ) -> None:
        """
        Initialize an empty pending set.

        Args:
            previews: Registry issuing preview handles (a private one if omitted)
            max_bytes: Maximum accepted size per file
        """
        self.previews = previews or PreviewRegistry()
        self.max_bytes = max_bytes
        self._items: list[PendingAttachment] = []

    def add(self, files: Iterable[CandidateFile]) -> list[Rejection]:
        """
        Validate files and stage the accepted ones.

        Args:
            files: Candidate files (file picker selection or paste)

        Returns:
            list[Rejection]: One entry per refused file, for user notification
        """
        result = validate_attachments(files, max_bytes=self.max_bytes)
        for rejection in result.rejections:
            logger.info(
                f"{__name__}:add - Rejected {rejection.file.name}: {rejection.reason.value}"
            )

        for accepted in result.accepted:
            preview = self.previews.create(accepted) if accepted.is_image else None
            self._items.append(PendingAttachment(file=accepted, preview=preview))

        return result.rejections

    def remove(self, index: int) -> CandidateFile:
        """
        Drop one staged file by position and release its preview.

        Raises:
            IndexError: If index is out of range
        """
        item = self._items.pop(index)
        if item.preview is not None:
            self.previews.release(item.preview)
        return item.file

    def clear(self) -> None:
        """Drop every staged file and release all previews."""
        for item in self._items:
            if item.preview is not None:
                self.previews.release(item.preview)
        self._items.clear()

    def take(self) -> list[CandidateFile]:
        """Hand the staged files to a submission and empty the set."""
        files = self.files
        self.clear()
        return files

    @property
    def items(self) -> list[PendingAttachment]:
        return list(self._items)

    @property
    def files(self) -> list[CandidateFile]:
        return [item.file for item in self._items]

    def __len__(self) -> int:
        return len(self._items)
