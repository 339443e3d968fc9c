"""
Chat Routes - API endpoints for messages and sessions.

Endpoints:
- POST   /chat/message                 : Send a message, get the assistant reply
- GET    /chat/sessions                : List the caller's active sessions
- POST   /chat/sessions                : Create a session
- GET    /chat/sessions/{id}           : Get one active session
- GET    /chat/sessions/{id}/messages  : Full message log of a session
- DELETE /chat/sessions/{id}           : Soft-delete a session
- POST   /chat/analyze-document        : Feedback on an uploaded document
- POST   /chat/career-roadmap          : Generate a career roadmap

Identity comes from the optional X-User-Id header; without it the
caller is the anonymous owner.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Header, UploadFile

from career_assistant.core.config import get_settings
from career_assistant.core.exceptions import ValidationError
from career_assistant.core.logging_config import get_logger
from career_assistant.database.models import MessageRecord, SessionRecord
from career_assistant.models.career import (
    CareerRoadmapRequest,
    CareerRoadmapResponse,
    DocumentAnalysisResponse,
)
from career_assistant.models.chat import (
    SendMessageRequest,
    CreateSessionRequest,
    ChatMessageResponse,
    ChatSessionResponse,
    SessionDeleteResponse,
    ErrorResponse,
)
from career_assistant.services.chat_service import ChatService, get_chat_service

logger = get_logger(__name__)

router = APIRouter(
    prefix="/chat",
    tags=["Chat"],
    responses={
        500: {"model": ErrorResponse, "description": "Internal server error"},
        503: {"model": ErrorResponse, "description": "Message store unavailable"},
    }
)


def get_owner_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Resolve the caller, falling back to the anonymous owner."""
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return get_settings().anonymous_owner_id


def to_message_response(record: MessageRecord) -> ChatMessageResponse:
    """Convert a stored message, lifting provenance out of its metadata."""
    metadata = record.metadata or {}
    return ChatMessageResponse(
        id=record.id,
        session_id=record.session_id,
        role=record.role,
        content=record.content,
        created_at=record.created_at,
        provider=metadata.get("provider"),
        persona=metadata.get("persona"),
        degraded=bool(metadata.get("degraded", False)),
    )


def to_session_response(record: SessionRecord) -> ChatSessionResponse:
    return ChatSessionResponse(
        id=record.id,
        title=record.title,
        is_active=record.is_active,
        created_at=record.created_at,
        updated_at=record.updated_at,
        message_count=record.message_count,
        last_message=to_message_response(record.last_message) if record.last_message else None,
    )


@router.post(
    "/message",
    response_model=ChatMessageResponse,
    summary="Send a message to the assistant",
    description="""
    Send a message and receive the assistant's reply.

    Include a `session_id` to continue a conversation. If it is omitted,
    unknown or no longer active, a new session is created; the reply's
    `session_id` tells you which one.

    `provider` on the reply names the provider that generated it, or
    `offline` for a templated reply.
    """
)
def send_message(
    request: SendMessageRequest,
    owner_id: str = Depends(get_owner_id),
    service: ChatService = Depends(get_chat_service),
) -> ChatMessageResponse:
    reply = service.send_message(
        owner_id,
        request.session_id,
        request.message,
        context=request.context,
        preferred_provider=request.preferred_provider,
    )
    return to_message_response(reply)


@router.get(
    "/sessions",
    response_model=List[ChatSessionResponse],
    summary="List active sessions",
)
def list_sessions(
    owner_id: str = Depends(get_owner_id),
    service: ChatService = Depends(get_chat_service),
) -> List[ChatSessionResponse]:
    """Active sessions of the caller, most recently updated first."""
    return [to_session_response(record) for record in service.get_user_sessions(owner_id)]


@router.post(
    "/sessions",
    response_model=ChatSessionResponse,
    status_code=201,
    summary="Create a session",
)
def create_session(
    request: Optional[CreateSessionRequest] = None,
    owner_id: str = Depends(get_owner_id),
    service: ChatService = Depends(get_chat_service),
) -> ChatSessionResponse:
    request = request or CreateSessionRequest()
    record = service.create_session(owner_id, title=request.title, context=request.context)
    return to_session_response(record)


@router.get(
    "/sessions/{session_id}",
    response_model=ChatSessionResponse,
    summary="Get a session",
    responses={404: {"model": ErrorResponse, "description": "Session not found"}},
)
def get_session(
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    service: ChatService = Depends(get_chat_service),
) -> ChatSessionResponse:
    return to_session_response(service.get_session(session_id, owner_id))


@router.get(
    "/sessions/{session_id}/messages",
    response_model=List[ChatMessageResponse],
    summary="Get the messages of a session",
    description="Messages in chronological order. Deleted sessions remain readable.",
    responses={404: {"model": ErrorResponse, "description": "Session not found"}},
)
def get_session_messages(
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    service: ChatService = Depends(get_chat_service),
) -> List[ChatMessageResponse]:
    return [to_message_response(record) for record in service.get_session_messages(session_id, owner_id)]


@router.delete(
    "/sessions/{session_id}",
    response_model=SessionDeleteResponse,
    summary="Delete a session",
    description="Soft delete: the session leaves the session list but its messages are kept.",
    responses={404: {"model": ErrorResponse, "description": "Session not found"}},
)
def delete_session(
    session_id: str,
    owner_id: str = Depends(get_owner_id),
    service: ChatService = Depends(get_chat_service),
) -> SessionDeleteResponse:
    service.delete_session(session_id, owner_id)
    logger.info(f"Session deleted via API: {session_id}")
    return SessionDeleteResponse(session_id=session_id)


@router.post(
    "/analyze-document",
    response_model=DocumentAnalysisResponse,
    summary="Get feedback on a career document",
    description="""
    Upload a text document (resume, cover letter or other career
    document) and receive templated feedback. The kind of feedback is
    chosen from the file name.
    """,
    responses={400: {"model": ErrorResponse, "description": "No file or an empty file"}},
)
def analyze_document(
    file: Optional[UploadFile] = File(default=None, description="Document to analyze"),
    owner_id: str = Depends(get_owner_id),
    service: ChatService = Depends(get_chat_service),
) -> DocumentAnalysisResponse:
    if file is None:
        raise ValidationError("No file uploaded", field="file")

    try:
        content = file.file.read().decode("utf-8", errors="replace")
    finally:
        file.file.close()

    return service.analyze_document(owner_id, content, file.filename or "")


@router.post(
    "/career-roadmap",
    response_model=CareerRoadmapResponse,
    summary="Generate a career roadmap",
)
def generate_career_roadmap(
    request: CareerRoadmapRequest,
    owner_id: str = Depends(get_owner_id),
    service: ChatService = Depends(get_chat_service),
) -> CareerRoadmapResponse:
    """Three-phase plan for the requested field, level and horizon."""
    return service.generate_career_roadmap(owner_id, request)
