"""
Chat Service - Session and message lifecycle around the assistant.

This service orchestrates the chat flow:
1. Resolves the caller's session, or creates one
2. Reads the trailing prior messages of the session
3. Stores the user message
4. Generates a reply through the assistant engine
5. Stores the assistant message and bumps the session

It also fronts the templated career tools (document feedback and
roadmaps), which need no session.
"""
from datetime import datetime
from typing import List, Optional

from career_assistant.core.config import Settings, get_settings
from career_assistant.core.exceptions import (
    MalformedMemoryError,
    PersistenceError,
    SessionNotFoundError,
    ValidationError,
)
from career_assistant.core.logging_config import get_logger, preview
from career_assistant.database.connection import DatabaseConnection, get_database
from career_assistant.database.models import MessageRecord, SessionRecord
from career_assistant.database.repository import SessionRepository, MessageRepository
from career_assistant.llm.engine import AssistantEngine
from career_assistant.memory.conversation import Memory, Turn
from career_assistant.memory.store import MemoryStore
from career_assistant.models.career import (
    CareerRoadmapRequest,
    CareerRoadmapResponse,
    DocumentAnalysisResponse,
)
from career_assistant.models.chat import ChatContext
from career_assistant.services.career_tools import analyze_document, build_career_roadmap

logger = get_logger(__name__)

MAX_MESSAGE_LENGTH = 4000


class ChatService:
    """
    Entry point for chat sessions and messages.

    A missing, unknown, inactive or foreign session id never fails a
    message: a new session is created instead.

    Example:
        >>> service = ChatService(sessions, messages, engine)
        >>> reply = service.send_message("user-1", None, "Hello!")
        >>> reply.role
        'assistant'
        >>> followup = service.send_message("user-1", reply.session_id, "Tell me about nursing")
    """

    def __init__(
        self,
        sessions: SessionRepository,
        messages: MessageRepository,
        engine: AssistantEngine,
        context_message_limit: int = 10
    ):
        """
        Args:
            sessions: Session store
            messages: Message log
            engine: Reply generator
            context_message_limit: Prior messages passed to generation
        """
        self.sessions = sessions
        self.messages = messages
        self.engine = engine
        self.context_message_limit = context_message_limit

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        db: Optional[DatabaseConnection] = None
    ) -> "ChatService":
        """Wire repositories, memory store and engine from settings."""
        db = db or get_database()
        sessions = SessionRepository(db)
        messages = MessageRepository(db)
        memory_store = MemoryStore(
            sessions,
            messages,
            history_limit=settings.memory_history_limit,
            scan_limit=settings.memory_scan_messages,
        )
        engine = AssistantEngine.from_settings(settings, memory_store)

        logger.info(
            f"ChatService initialized: providers={settings.configured_providers() or ['offline']}"
        )
        return cls(sessions, messages, engine, settings.context_message_limit)

    def create_session(
        self,
        owner_id: str,
        title: Optional[str] = None,
        context: Optional[str] = None
    ) -> SessionRecord:
        """
        Create a new active session.

        A plain-text context is kept in the session memory as the
        `sessionContext` preference.
        """
        return self.sessions.create(owner_id, title=title, context=self._initial_context(context))

    def send_message(
        self,
        owner_id: str,
        session_id: Optional[str],
        message: str,
        context: Optional[ChatContext] = None,
        preferred_provider: Optional[str] = None
    ) -> MessageRecord:
        """
        Store a user message, generate the reply and store it.

        Args:
            owner_id: Caller identity
            session_id: Session to continue, or None for a new one
            message: The user's message
            context: Optional caller context
            preferred_provider: Provider token for this message

        Returns:
            The stored assistant message; its metadata carries the
            provider, persona and degraded flag

        Raises:
            ValidationError: If the message is blank or too long
            PersistenceError: If either message cannot be stored
        """
        if not message or not message.strip():
            raise ValidationError("Message cannot be empty", field="message")
        if len(message) > MAX_MESSAGE_LENGTH:
            raise ValidationError(
                f"Message exceeds {MAX_MESSAGE_LENGTH} characters", field="message"
            )

        session = self._resolve_session(owner_id, session_id)

        logger.info(
            f"Processing message: session={session.id}, "
            f"message_length={len(message)}, preview={preview(message)!r}"
        )

        prior = self.messages.recent(session.id, self.context_message_limit)
        prior_turns = [
            Turn(role=record.role, content=record.content, timestamp=record.created_at)
            for record in prior
        ]

        user_metadata = None
        if context is not None:
            user_metadata = {"context": context.model_dump(mode="json", exclude_none=True)}
        self.messages.append(session.id, owner_id, "user", message, user_metadata)

        result = self.engine.generate_response(
            message,
            prior_turns=prior_turns,
            context=context,
            session_id=session.id,
            preferred_provider=preferred_provider,
        )

        reply = self.messages.append(
            session.id,
            owner_id,
            "assistant",
            result.text,
            {
                "provider": result.provider,
                "persona": result.persona,
                "degraded": result.degraded,
                "attempts": [attempt.name for attempt in result.attempts],
                "generatedAt": datetime.utcnow().isoformat(),
            },
        )

        try:
            self.sessions.touch(session.id)
        except PersistenceError as e:
            logger.warning(f"Could not bump session {session.id}: {e}")

        logger.info(
            f"Message processed: session={session.id}, "
            f"provider={result.provider}, response_length={len(result.text)}"
        )
        return reply

    def get_session(self, session_id: str, owner_id: str) -> SessionRecord:
        """
        Active session owned by owner_id.

        Raises:
            SessionNotFoundError: If there is no such active session
        """
        record = self.sessions.find_active(session_id, owner_id)
        if record is None:
            raise SessionNotFoundError(session_id)
        return record

    def get_session_messages(self, session_id: str, owner_id: str) -> List[MessageRecord]:
        """
        All messages of a session, oldest first.

        Deleted (inactive) sessions stay readable by id.

        Raises:
            SessionNotFoundError: If owner_id has no session with this id
        """
        record = self.sessions.find(session_id)
        if record is None or record.owner_id != owner_id:
            raise SessionNotFoundError(session_id)
        return self.messages.list_for_session(session_id, owner_id)

    def get_user_sessions(self, owner_id: str) -> List[SessionRecord]:
        """Active sessions, most recently updated first."""
        return self.sessions.list_active(owner_id)

    def delete_session(self, session_id: str, owner_id: str) -> None:
        """
        Soft-delete a session.

        Raises:
            SessionNotFoundError: If owner_id has no session with this id
        """
        if not self.sessions.deactivate(session_id, owner_id):
            raise SessionNotFoundError(session_id)

    def analyze_document(self, owner_id: str, content: str, file_name: str) -> DocumentAnalysisResponse:
        """
        Templated feedback on an uploaded career document.

        Raises:
            ValidationError: If the file name or the content is blank
        """
        if not file_name or not file_name.strip():
            raise ValidationError("No file uploaded", field="file")
        if not content or not content.strip():
            raise ValidationError("Uploaded file is empty", field="file")

        result = analyze_document(content, file_name.strip())
        logger.info(
            f"Document analyzed: owner={owner_id}, file={result.file_name!r}, "
            f"type={result.document_type}, words={result.word_count}"
        )
        return result

    def generate_career_roadmap(self, owner_id: str, request: CareerRoadmapRequest) -> CareerRoadmapResponse:
        """Roadmap for the caller's field, level and horizon."""
        roadmap = build_career_roadmap(request)
        logger.info(
            f"Roadmap generated: owner={owner_id}, field={request.career_field}, "
            f"level={request.experience_level}, months={request.timeline_months}"
        )
        return roadmap

    def _resolve_session(self, owner_id: str, session_id: Optional[str]) -> SessionRecord:
        if session_id:
            record = self.sessions.find_active(session_id, owner_id)
            if record is not None:
                return record
            logger.info(f"Session {session_id} not usable for owner={owner_id}, creating a new one")
        return self.sessions.create(owner_id)

    @staticmethod
    def _initial_context(context: Optional[str]) -> Optional[str]:
        if not context or not context.strip():
            return None
        try:
            return Memory.from_json(context).to_json()
        except MalformedMemoryError:
            return Memory(user_preferences={"sessionContext": context.strip()}).to_json()


_chat_service: Optional[ChatService] = None


def get_chat_service() -> ChatService:
    """Get or create chat service singleton."""
    global _chat_service
    if _chat_service is None:
        _chat_service = ChatService.from_settings(get_settings())
    return _chat_service


def reset_chat_service() -> None:
    """Reset the chat service singleton (useful for testing)."""
    global _chat_service
    _chat_service = None
