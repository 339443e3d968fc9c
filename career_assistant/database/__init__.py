"""
Database module - Session store and message log.

This module handles:
- Database connection management
- ORM models for chat sessions and messages
- Repositories returning detached records
- Table initialization
"""
from career_assistant.database.connection import DatabaseConnection, get_database, reset_database
from career_assistant.database.models import (
    Base,
    ChatSession,
    ChatMessage,
    SessionRecord,
    MessageRecord,
)
from career_assistant.database.repository import SessionRepository, MessageRepository
from career_assistant.database.init_db import init_conversation_tables, drop_conversation_tables

__all__ = [
    # Connection
    "DatabaseConnection",
    "get_database",
    "reset_database",
    # Models
    "Base",
    "ChatSession",
    "ChatMessage",
    "SessionRecord",
    "MessageRecord",
    # Repositories
    "SessionRepository",
    "MessageRepository",
    # Init
    "init_conversation_tables",
    "drop_conversation_tables",
]
