"""
API Routes module - Endpoint definitions.

Each file in this module defines routes for a specific domain:
- chat.py   : Messages and session lifecycle
- health.py : Health and readiness checks
"""
from career_assistant.api.routes.chat import router as chat_router
from career_assistant.api.routes.health import router as health_router

__all__ = [
    "chat_router",
    "health_router",
]
