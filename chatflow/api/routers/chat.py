"""Chat API endpoints.

Routes:
- POST /chat - Send one chat turn (multipart: message, optional session_id, files)

Without a session_id a new session is created, titled after the message.

Dependencies: chatflow.application.services.send_orchestrator
System role: Chat messaging HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from chatflow.api.deps import (
    get_current_user_id,
    get_gateway,
    get_send_orchestrator,
    get_settings_dependency,
)
from chatflow.api.routers.router_utils import handle_chatflow_errors, http_error_for
from chatflow.api.routers.sessions import load_owned_session
from chatflow.application.services.send_orchestrator import (
    SendOrchestrator,
    SubmissionOutcome,
)
from chatflow.boundary.db.gateway import PersistenceGateway
from chatflow.configs import Settings
from chatflow.core.attachments.validator import CandidateFile, validate_attachments
from chatflow.core.exceptions import ValidationError
from chatflow.models.attachment import RejectedFileResponse
from chatflow.models.chat import ChatMessageResponse, ChatTurnResponse
from chatflow.models.session import SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


async def read_upload(upload: UploadFile) -> CandidateFile:
    data = await upload.read()
    return CandidateFile(
        name=upload.filename or "file",
        content_type=upload.content_type or "application/octet-stream",
        size=len(data),
        data=data,
    )


@router.post("/chat", response_model=ChatTurnResponse)
@handle_chatflow_errors
async def send_chat_message(
    message: str = Form(default=""),
    session_id: UUID | None = Form(default=None),
    files: list[UploadFile] = File(default=[]),
    user_id: str = Depends(get_current_user_id),
    gateway: PersistenceGateway = Depends(get_gateway),
    orchestrator: SendOrchestrator = Depends(get_send_orchestrator),
    settings: Settings = Depends(get_settings_dependency),
) -> ChatTurnResponse:
    """
    Send one chat turn.

    Flow:
    1. Validate attachments (rejected files are reported, not fatal)
    2. Load the target session, if one was given
    3. Run the turn through the SendOrchestrator
    4. Return the persisted user and assistant messages

    Returns:
        ChatTurnResponse: Session, both messages and attachment outcome

    Raises:
        HTTPException(400): Nothing to send
        HTTPException(404): Session not found
        HTTPException(502): Inference webhook failed (user message is kept)
        HTTPException(500): Persistence failed
    """
    candidates = [await read_upload(upload) for upload in files]
    validation = validate_attachments(candidates, max_bytes=settings.attachments.max_bytes)
    rejected = [
        RejectedFileResponse(
            name=rejection.file.name,
            reason=rejection.reason.value,
            message=rejection.message,
        )
        for rejection in validation.rejections
    ]

    if not message.strip() and not validation.accepted:
        raise ValidationError(
            "A message or at least one supported file is required",
            field="message",
            details={"rejected_files": [r.model_dump() for r in rejected]},
        )

    session = None
    if session_id is not None:
        session = await load_owned_session(gateway, session_id, user_id)
        orchestrator.view_model.adopt_session(session)

    result = await orchestrator.submit(message, validation.accepted, active_session=session)

    if result.outcome is SubmissionOutcome.REJECTED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": "Submission rejected"},
        )
    if result.outcome is SubmissionOutcome.FAILED:
        raise http_error_for(result.error, result.committed_ids())

    return ChatTurnResponse(
        session=SessionResponse.from_record(result.session),
        user_message=ChatMessageResponse.from_record(result.user_message),
        assistant_message=ChatMessageResponse.from_record(result.assistant_message),
        attachments_saved=len(result.attachments),
        rejected_files=rejected,
    )
