"""
Send orchestrator.

Runs one chat turn end to end: ensure a session, persist the user
message, upload attachments, dispatch to the inference webhook, persist
the reply and bump the session's activity timestamp.

Steps are independent writes. A failure stops the chain but leaves
everything already committed in place; the caller learns which step
failed from the SubmissionResult.

Dependencies: chatflow.boundary (db, aws, inference), chatflow.application.view_models
System role: Chat turn use case
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from chatflow.application.view_models.session_view_model import SessionViewModel
from chatflow.boundary.aws.s3_client import S3AttachmentStore
from chatflow.boundary.db.gateway import PersistenceGateway
from chatflow.boundary.inference.webhook_client import InferenceClient
from chatflow.core.attachments.validator import CandidateFile
from chatflow.core.exceptions import ChatflowException, PersistenceError
from chatflow.models.attachment import AttachmentRecord, FileMetadata
from chatflow.models.chat import InferenceRequest, MessageRecord, MessageRole
from chatflow.models.session import SessionRecord, derive_title
from chatflow.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

SEND_FAILED_MESSAGE = "Failed to send message. Please try again."
CREATE_FAILED_MESSAGE = "Failed to create new chat"

_VIEW_MODEL_SESSION = object()


class SendState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"


class SendStep(str, Enum):
    CREATE_SESSION = "create_session"
    PERSIST_USER_MESSAGE = "persist_user_message"
    DISPATCH = "dispatch"
    PERSIST_ASSISTANT_MESSAGE = "persist_assistant_message"


class SubmissionOutcome(str, Enum):
    REJECTED = "rejected"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class SubmissionResult:
    """What a submit call committed, and where it stopped if it failed."""

    outcome: SubmissionOutcome
    session: SessionRecord | None = None
    user_message: MessageRecord | None = None
    assistant_message: MessageRecord | None = None
    attachments: list[AttachmentRecord] = field(default_factory=list)
    failed_step: SendStep | None = None
    error: ChatflowException | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is SubmissionOutcome.COMPLETED

    def committed_ids(self) -> dict[str, str]:
        """Ids of everything persisted so far, for error reporting."""
        ids: dict[str, str] = {}
        if self.session is not None:
            ids["session_id"] = str(self.session.id)
        if self.user_message is not None:
            ids["user_message_id"] = str(self.user_message.id)
        if self.assistant_message is not None:
            ids["assistant_message_id"] = str(self.assistant_message.id)
        return ids


class SendOrchestrator:
    """
    Executes chat turns for one view model.

    The view model's ``sending`` flag is the orchestrator's state: at most
    one submission per view model is in flight, and a second submit while
    one is running is rejected rather than queued.
    """

    def __init__(
        self,
        view_model: SessionViewModel,
        gateway: PersistenceGateway,
        inference_client: InferenceClient,
        attachment_store: S3AttachmentStore | None = None,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            view_model: Active-session state the turn writes into
            gateway: Persistence gateway for sessions, messages and attachments
            inference_client: Client dispatching the turn to the model
            attachment_store: Blob store for attachments (uploads skipped if None)
        """
        self.view_model = view_model
        self.gateway = gateway
        self.inference_client = inference_client
        self.attachment_store = attachment_store

    @property
    def state(self) -> SendState:
        return SendState.SENDING if self.view_model.sending else SendState.IDLE

    async def submit(
        self,
        text: str | None,
        attachments: Iterable[CandidateFile] = (),
        active_session: SessionRecord | None | object = _VIEW_MODEL_SESSION,
    ) -> SubmissionResult:
        """
        Run one chat turn.

        Args:
            text: Message text typed by the user
            attachments: Files already accepted by the attachment validator
            active_session: Session to send into; defaults to the view model's
                active session, None forces a new session

        Returns:
            SubmissionResult: REJECTED, COMPLETED, or FAILED with the failed step
        """
        content = (text or "").strip()
        files = list(attachments)

        if not content and not files:
            logger.debug(f"{__name__}:submit - Empty submission ignored")
            return SubmissionResult(outcome=SubmissionOutcome.REJECTED)
        if self.view_model.sending:
            logger.info(f"{__name__}:submit - Submission already in flight, rejected")
            return SubmissionResult(outcome=SubmissionOutcome.REJECTED)

        self.view_model.sending = True
        if active_session is _VIEW_MODEL_SESSION:
            active_session = self.view_model.active_session

        result = SubmissionResult(outcome=SubmissionOutcome.FAILED)
        uploads: list[asyncio.Task] = []
        logger.info(f"{__name__}:submit - START files={len(files)}")
        try:
            await self._run_turn(result, content, files, active_session, uploads)
        finally:
            try:
                await self._join_uploads(result, uploads)
                if result.user_message is not None:
                    await self._touch(result)
            finally:
                self.view_model.sending = False

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:submit - END",
            outcome=result.outcome.value,
            failed_step=result.failed_step.value if result.failed_step else None,
            attachments_saved=len(result.attachments),
            **result.committed_ids(),
        )
        return result

    async def _run_turn(
        self,
        result: SubmissionResult,
        content: str,
        files: list[CandidateFile],
        session: SessionRecord | None,
        uploads: list[asyncio.Task],
    ) -> None:
        if session is None:
            try:
                session = await self.gateway.create_session(
                    owner_id=self.view_model.current_user_id,
                    title=derive_title(content),
                    model=self.view_model.selected_model,
                )
            except PersistenceError as e:
                self._fail(result, SendStep.CREATE_SESSION, e, CREATE_FAILED_MESSAGE)
                return
            self.view_model.adopt_session(session, [])
        result.session = session

        try:
            user_message = await self.gateway.append_message(session.id, MessageRole.USER, content)
        except PersistenceError as e:
            self._fail(result, SendStep.PERSIST_USER_MESSAGE, e, SEND_FAILED_MESSAGE)
            return
        result.user_message = user_message

        if files:
            uploads.append(
                asyncio.create_task(self._store_attachments(session.owner_id, user_message.id, files))
            )

        self.view_model.surface_message(user_message)

        request = InferenceRequest(
            message=content,
            model=self._model_for(session),
            chat_id=session.id,
            user_id=self.view_model.current_user_id,
            files=[FileMetadata(**file.metadata()) for file in files],
        )
        try:
            reply = await self.inference_client.dispatch(request)
        except ChatflowException as e:
            self._fail(result, SendStep.DISPATCH, e, SEND_FAILED_MESSAGE)
            return

        try:
            assistant_message = await self.gateway.append_message(
                session.id, MessageRole.ASSISTANT, reply
            )
        except PersistenceError as e:
            self._fail(result, SendStep.PERSIST_ASSISTANT_MESSAGE, e, SEND_FAILED_MESSAGE)
            return
        result.assistant_message = assistant_message
        self.view_model.surface_message(assistant_message)
        result.outcome = SubmissionOutcome.COMPLETED

    def _model_for(self, session: SessionRecord) -> str:
        # A model switched locally but not yet persisted still applies to this turn.
        active = self.view_model.active_session
        if active is not None and active.id == session.id:
            return active.model
        return session.model

    def _fail(
        self,
        result: SubmissionResult,
        step: SendStep,
        error: ChatflowException,
        description: str,
    ) -> None:
        result.outcome = SubmissionOutcome.FAILED
        result.failed_step = step
        result.error = error
        log_exception_with_context(
            logger,
            f"{__name__}:submit - {step.value} failed",
            error,
            step=step.value,
            **result.committed_ids(),
        )
        self.view_model.notifications.error(description)

    async def _touch(self, result: SubmissionResult) -> None:
        try:
            touched = await self.gateway.touch_session(result.session.id)
        except PersistenceError as e:
            log_exception_with_context(
                logger,
                f"{__name__}:submit - Session timestamp bump failed",
                e,
                session_id=result.session.id,
            )
            return
        result.session = touched
        self.view_model.note_activity(touched)

    async def _join_uploads(self, result: SubmissionResult, uploads: list[asyncio.Task]) -> None:
        outcomes = await asyncio.gather(*uploads, return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                log_exception_with_context(
                    logger,
                    f"{__name__}:submit - Attachment upload task crashed",
                    outcome,
                    **result.committed_ids(),
                )
                continue
            result.attachments.extend(outcome)

    async def _store_attachments(
        self,
        owner_id: str,
        message_id,
        files: list[CandidateFile],
    ) -> list[AttachmentRecord]:
        if self.attachment_store is None:
            logger.warning(
                f"{__name__}:_store_attachments - No attachment store configured, "
                f"{len(files)} file(s) dropped"
            )
            return []

        stored = await asyncio.gather(
            *(self._store_attachment(owner_id, message_id, file) for file in files)
        )
        return [record for record in stored if record is not None]

    async def _store_attachment(
        self,
        owner_id: str,
        message_id,
        file: CandidateFile,
    ) -> AttachmentRecord | None:
        try:
            storage_path = await self.attachment_store.upload(owner_id, message_id, file)
        except ChatflowException as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_store_attachment - Upload failed",
                e,
                file_name=file.name,
                message_id=message_id,
            )
            return None

        try:
            return await self.gateway.create_attachment(
                message_id=message_id,
                file_name=file.name,
                content_type=file.content_type,
                size_bytes=file.size,
                storage_path=storage_path,
            )
        except PersistenceError as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_store_attachment - Orphaned blob, record not saved",
                e,
                storage_path=storage_path,
                message_id=message_id,
            )
            return None
