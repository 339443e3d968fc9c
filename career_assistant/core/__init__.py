"""
Core module - Configuration and cross-cutting concerns.

This module provides:
- config.py         : Environment-based configuration management
- logging_config.py : Centralized logging setup
- exceptions.py     : Error hierarchy shared by every layer
"""
from career_assistant.core.config import get_settings, Settings, PROVIDER_PRIORITY
from career_assistant.core.logging_config import setup_logging, get_logger, preview, LoggerMixin
from career_assistant.core.exceptions import (
    AssistantException,
    ValidationError,
    ProviderError,
    PersistenceError,
    MalformedMemoryError,
    SessionNotFoundError,
)

__all__ = [
    "get_settings",
    "Settings",
    "PROVIDER_PRIORITY",
    "setup_logging",
    "get_logger",
    "preview",
    "LoggerMixin",
    "AssistantException",
    "ValidationError",
    "ProviderError",
    "PersistenceError",
    "MalformedMemoryError",
    "SessionNotFoundError",
]
