"""
Database Models - SQLAlchemy ORM models for persistent storage.

This module defines the database schema for:
- Chat sessions (the session store; `context` holds serialized memory)
- Chat messages (the append-only message log)

Repositories never hand ORM instances outside a database session; rows are
converted to the plain SessionRecord / MessageRecord dataclasses instead.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any

from sqlalchemy import Boolean, Column, String, Integer, Text, DateTime, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()


@dataclass
class SessionRecord:
    """Detached snapshot of a chat session row."""
    id: str
    owner_id: str
    title: str
    context: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime
    message_count: int = 0
    last_message: Optional["MessageRecord"] = None


@dataclass
class MessageRecord:
    """Detached snapshot of a chat message row."""
    id: int
    session_id: str
    owner_id: str
    role: str
    content: str
    created_at: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)


class ChatSession(Base):
    """
    A conversation thread owned by one actor.

    Sessions are never hard-deleted; deletion flips is_active.
    """
    __tablename__ = "chat_sessions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(64), nullable=False, index=True)
    title = Column(String(255), nullable=False, default="New Chat")
    context = Column(Text, nullable=True)  # Serialized conversation memory
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    messages = relationship(
        "ChatMessage",
        back_populates="session",
        order_by="ChatMessage.created_at"
    )

    def to_record(self) -> SessionRecord:
        """Convert to a detached record."""
        return SessionRecord(
            id=self.id,
            owner_id=self.owner_id,
            title=self.title,
            context=self.context,
            is_active=bool(self.is_active),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class ChatMessage(Base):
    """
    One immutable turn in a session's message log.

    extra_data carries message metadata (caller context for user turns,
    provider/persona provenance for assistant turns).
    """
    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("ix_chat_messages_session_created", "session_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String(36), ForeignKey("chat_sessions.id"), nullable=False)
    owner_id = Column(String(64), nullable=False, index=True)
    role = Column(String(20), nullable=False)  # 'user', 'assistant', 'system'
    content = Column(Text, nullable=False)
    extra_data = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    session = relationship("ChatSession", back_populates="messages")

    def to_record(self) -> MessageRecord:
        """Convert to a detached record."""
        return MessageRecord(
            id=self.id,
            session_id=self.session_id,
            owner_id=self.owner_id,
            role=self.role,
            content=self.content,
            created_at=self.created_at,
            metadata=dict(self.extra_data or {}),
        )
