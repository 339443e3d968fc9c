"""
Session store and message log.

Two small repositories over the ORM models:
- SessionRepository: create/find/update/soft-delete sessions
- MessageRepository: append-only message log, read by session id

Every SQLAlchemyError is wrapped in PersistenceError so callers decide
whether a failure is fatal (primary message writes) or best-effort
(memory updates).
"""
import json
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from career_assistant.core.exceptions import PersistenceError
from career_assistant.core.logging_config import get_logger
from career_assistant.database.connection import DatabaseConnection
from career_assistant.database.models import ChatSession, ChatMessage, SessionRecord, MessageRecord

logger = get_logger(__name__)

VALID_ROLES = ("user", "assistant", "system")


class SessionRepository:
    """
    Key-value style access to chat sessions.

    Example:
        >>> sessions = SessionRepository(db)
        >>> record = sessions.create("user-1", title="Career chat")
        >>> sessions.find_active(record.id, "user-1").title
        'Career chat'
    """

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def create(
        self,
        owner_id: str,
        title: Optional[str] = None,
        context: Optional[str] = None
    ) -> SessionRecord:
        """Insert a new active session."""
        now = datetime.utcnow()
        try:
            with self.db.get_session() as db_session:
                row = ChatSession(
                    owner_id=owner_id,
                    title=title or "New Chat",
                    context=context,
                    is_active=True,
                    created_at=now,
                    updated_at=now,
                )
                db_session.add(row)
                db_session.flush()
                record = row.to_record()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to create session: {e}") from e

        logger.info(f"Created session {record.id} for owner={owner_id}")
        return record

    def find(self, session_id: str) -> Optional[SessionRecord]:
        """Find a session by id regardless of owner or active flag."""
        try:
            with self.db.get_session() as db_session:
                row = db_session.get(ChatSession, session_id)
                return row.to_record() if row else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load session: {e}") from e

    def find_active(self, session_id: str, owner_id: str) -> Optional[SessionRecord]:
        """Find an active session owned by owner_id, with message stats."""
        try:
            with self.db.get_session() as db_session:
                row = db_session.query(ChatSession).filter(
                    ChatSession.id == session_id,
                    ChatSession.owner_id == owner_id,
                    ChatSession.is_active.is_(True)
                ).first()
                if row is None:
                    return None
                return self._with_stats(db_session, row)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load session: {e}") from e

    def list_active(self, owner_id: str) -> List[SessionRecord]:
        """Active sessions for an owner, most recently updated first."""
        try:
            with self.db.get_session() as db_session:
                rows = db_session.query(ChatSession).filter(
                    ChatSession.owner_id == owner_id,
                    ChatSession.is_active.is_(True)
                ).order_by(ChatSession.updated_at.desc()).all()
                return [self._with_stats(db_session, row) for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list sessions: {e}") from e

    def update_context(self, session_id: str, context: str) -> bool:
        """Overwrite the session's context blob. Returns False if missing."""
        try:
            with self.db.get_session() as db_session:
                row = db_session.get(ChatSession, session_id)
                if row is None:
                    return False
                row.context = context
                return True
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to update session context: {e}") from e

    def touch(self, session_id: str) -> None:
        """Bump updated_at to now."""
        try:
            with self.db.get_session() as db_session:
                row = db_session.get(ChatSession, session_id)
                if row is not None:
                    row.updated_at = datetime.utcnow()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to update session timestamp: {e}") from e

    def deactivate(self, session_id: str, owner_id: str) -> bool:
        """
        Soft-delete a session.

        Returns:
            True if a session owned by owner_id was found
        """
        try:
            with self.db.get_session() as db_session:
                row = db_session.query(ChatSession).filter(
                    ChatSession.id == session_id,
                    ChatSession.owner_id == owner_id
                ).first()
                if row is None:
                    return False
                row.is_active = False
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete session: {e}") from e

        logger.info(f"Deactivated session {session_id}")
        return True

    def _with_stats(self, db_session, row: ChatSession) -> SessionRecord:
        record = row.to_record()
        record.message_count = db_session.query(func.count(ChatMessage.id)).filter(
            ChatMessage.session_id == row.id
        ).scalar() or 0
        last = db_session.query(ChatMessage).filter(
            ChatMessage.session_id == row.id
        ).order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc()).first()
        record.last_message = last.to_record() if last else None
        return record


class MessageRepository:
    """
    Append-only message log.

    Within a session, created_at is strictly increasing: a message written
    in the same clock tick as its predecessor is stamped one microsecond
    after it.
    """

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def append(
        self,
        session_id: str,
        owner_id: str,
        role: str,
        content: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> MessageRecord:
        """Write one message and return its record."""
        if role not in VALID_ROLES:
            raise ValueError(f"Invalid message role: {role}")

        try:
            with self.db.get_session() as db_session:
                created_at = datetime.utcnow()
                last = db_session.query(func.max(ChatMessage.created_at)).filter(
                    ChatMessage.session_id == session_id
                ).scalar()
                if last is not None and created_at <= last:
                    created_at = last + timedelta(microseconds=1)

                row = ChatMessage(
                    session_id=session_id,
                    owner_id=owner_id,
                    role=role,
                    content=content,
                    extra_data=self._serialize_metadata(metadata),
                    created_at=created_at,
                )
                db_session.add(row)
                db_session.flush()
                record = row.to_record()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to save {role} message: {e}") from e

        logger.debug(f"Saved message: session={session_id}, role={role}, id={record.id}")
        return record

    def recent(self, session_id: str, limit: int) -> List[MessageRecord]:
        """
        The most recent `limit` messages of a session, oldest first.

        Read newest-first with a limit, then reversed.
        """
        if limit <= 0:
            return []
        try:
            with self.db.get_session() as db_session:
                rows = db_session.query(ChatMessage).filter(
                    ChatMessage.session_id == session_id
                ).order_by(
                    ChatMessage.created_at.desc(), ChatMessage.id.desc()
                ).limit(limit).all()
                records = [row.to_record() for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read messages: {e}") from e

        records.reverse()
        return records

    def list_for_session(self, session_id: str, owner_id: str) -> List[MessageRecord]:
        """All messages of a session written by/for owner_id, oldest first."""
        try:
            with self.db.get_session() as db_session:
                rows = db_session.query(ChatMessage).filter(
                    ChatMessage.session_id == session_id,
                    ChatMessage.owner_id == owner_id
                ).order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc()).all()
                return [row.to_record() for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read messages: {e}") from e

    def _serialize_metadata(self, metadata: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """
        Ensure metadata is JSON-serializable.

        Datetimes become ISO strings; anything else unknown becomes str().
        """
        if not metadata:
            return None

        try:
            json.dumps(metadata)
            return metadata
        except (TypeError, ValueError):
            return json.loads(json.dumps(metadata, default=self._json_default))

    @staticmethod
    def _json_default(value: Any) -> Any:
        if isinstance(value, datetime):
            return value.isoformat()
        return str(value)
