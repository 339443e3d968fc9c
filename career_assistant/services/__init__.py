"""
Services module - Business logic and orchestration.

Services contain the core application logic:
- No HTTP concerns (those belong in api/)
- No database queries (those belong in database/)
- Orchestrate between the engine, the session store and the message log
"""
from career_assistant.services.chat_service import ChatService, get_chat_service, reset_chat_service

__all__ = [
    "ChatService",
    "get_chat_service",
    "reset_chat_service",
]
