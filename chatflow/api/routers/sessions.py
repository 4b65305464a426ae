"""
Session API endpoints.

Routes:
- GET /sessions - List the caller's sessions, most recently active first
- POST /sessions - Create a session
- GET /sessions/{id} - Get a session with its messages
- PATCH /sessions/{id}/model - Switch a session's model
- DELETE /sessions/{id} - Delete a session with its messages
- GET /sessions/{id}/messages/{message_id}/attachments - List attachments

Sessions owned by another user are reported as not found.

Dependencies: chatflow.boundary.db.gateway, chatflow.models
System role: Session management HTTP API
"""

import logging
from uuid import UUID

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends

from chatflow.api.deps import (
    get_attachment_store,
    get_current_user_id,
    get_gateway,
    get_settings_dependency,
)
from chatflow.api.routers.router_utils import handle_chatflow_errors
from chatflow.boundary.aws.s3_client import S3AttachmentStore
from chatflow.boundary.db.gateway import PersistenceGateway
from chatflow.configs import Settings
from chatflow.core.exceptions import NotFoundError, ValidationError
from chatflow.models.attachment import AttachmentResponse
from chatflow.models.catalog import is_known_model
from chatflow.models.chat import ChatMessageResponse, SessionDetailResponse
from chatflow.models.session import (
    ChangeModelRequest,
    CreateSessionRequest,
    SessionRecord,
    SessionResponse,
    derive_title,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


async def load_owned_session(
    gateway: PersistenceGateway,
    session_id: UUID,
    user_id: str,
) -> SessionRecord:
    """
    Load a session the caller owns.

    Raises:
        NotFoundError: If the session is missing or belongs to someone else
    """
    session = await gateway.get_session(session_id)
    if session.owner_id != user_id:
        raise NotFoundError("session", session_id)
    return session


def ensure_known_model(model: str) -> None:
    if not is_known_model(model):
        raise ValidationError(f"Unknown model: {model}", field="model")


@router.get("", response_model=list[SessionResponse])
@handle_chatflow_errors
async def list_sessions(
    limit: int = 100,
    offset: int = 0,
    user_id: str = Depends(get_current_user_id),
    gateway: PersistenceGateway = Depends(get_gateway),
) -> list[SessionResponse]:
    """
    List the caller's sessions with pagination.

    Args:
        limit: Maximum number of sessions (default 100)
        offset: Number to skip (default 0)

    Returns:
        list[SessionResponse]: Sessions ordered by updated_at descending
    """
    sessions = await gateway.list_sessions(owner_id=user_id, limit=limit, offset=offset)
    return [SessionResponse.from_record(session) for session in sessions]


@router.post("", response_model=SessionResponse, status_code=201)
@handle_chatflow_errors
async def create_session(
    request: CreateSessionRequest,
    user_id: str = Depends(get_current_user_id),
    gateway: PersistenceGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings_dependency),
) -> SessionResponse:
    """
    Create an empty session.

    Raises:
        HTTPException(400): Unknown model
        HTTPException(500): Creation failed
    """
    model = request.model or settings.inference.default_model
    ensure_known_model(model)
    session = await gateway.create_session(
        owner_id=user_id,
        title=derive_title(request.title),
        model=model,
    )
    return SessionResponse.from_record(session)


@router.get("/{session_id}", response_model=SessionDetailResponse)
@handle_chatflow_errors
async def get_session(
    session_id: UUID,
    user_id: str = Depends(get_current_user_id),
    gateway: PersistenceGateway = Depends(get_gateway),
) -> SessionDetailResponse:
    """
    Get a session with its messages in chronological order.

    Raises:
        HTTPException(404): Session not found
    """
    session = await load_owned_session(gateway, session_id, user_id)
    messages = await gateway.list_messages(session_id)
    return SessionDetailResponse(
        session=SessionResponse.from_record(session),
        messages=[ChatMessageResponse.from_record(message) for message in messages],
        total=len(messages),
    )


@router.patch("/{session_id}/model", response_model=SessionResponse)
@handle_chatflow_errors
async def change_session_model(
    session_id: UUID,
    request: ChangeModelRequest,
    user_id: str = Depends(get_current_user_id),
    gateway: PersistenceGateway = Depends(get_gateway),
) -> SessionResponse:
    """
    Switch the model used for a session's next turns.

    Raises:
        HTTPException(400): Unknown model
        HTTPException(404): Session not found
    """
    ensure_known_model(request.model)
    await load_owned_session(gateway, session_id, user_id)
    session = await gateway.update_session_model(session_id, request.model)
    return SessionResponse.from_record(session)


@router.delete("/{session_id}", status_code=204)
@handle_chatflow_errors
async def delete_session(
    session_id: UUID,
    user_id: str = Depends(get_current_user_id),
    gateway: PersistenceGateway = Depends(get_gateway),
) -> None:
    """
    Delete a session with its messages and attachment records.

    Raises:
        HTTPException(404): Session not found
    """
    await load_owned_session(gateway, session_id, user_id)
    await gateway.delete_session(session_id)


@router.get(
    "/{session_id}/messages/{message_id}/attachments",
    response_model=list[AttachmentResponse],
)
@handle_chatflow_errors
async def list_message_attachments(
    session_id: UUID,
    message_id: UUID,
    user_id: str = Depends(get_current_user_id),
    gateway: PersistenceGateway = Depends(get_gateway),
    attachment_store: S3AttachmentStore = Depends(get_attachment_store),
    settings: Settings = Depends(get_settings_dependency),
) -> list[AttachmentResponse]:
    """
    List a message's attachments with temporary download URLs.

    A URL that cannot be signed is returned as null; the record is still listed.

    Raises:
        HTTPException(404): Session or message not found
    """
    await load_owned_session(gateway, session_id, user_id)
    message = await gateway.get_message(message_id)
    if message.session_id != session_id:
        raise NotFoundError("message", message_id)

    responses = []
    for attachment in await gateway.list_attachments(message_id):
        download_url = expires_at = None
        try:
            download_url, expires_at = attachment_store.generate_presigned_download_url(
                attachment.storage_path,
                expires_in=settings.attachments.presigned_url_expiry,
            )
        except (BotoCoreError, ClientError) as e:
            logger.warning(
                f"{__name__}:list_message_attachments - Could not sign "
                f"{attachment.storage_path}: {e}"
            )
        responses.append(
            AttachmentResponse(
                id=attachment.id,
                file_name=attachment.file_name,
                content_type=attachment.content_type,
                size_bytes=attachment.size_bytes,
                storage_path=attachment.storage_path,
                download_url=download_url,
                expires_at=expires_at,
            )
        )
    return responses
