"""Shared test fixtures."""

import os
from dataclasses import replace
from typing import List, Optional, Sequence

import pytest

from career_assistant.core.config import Settings
from career_assistant.core.exceptions import ProviderError
from career_assistant.database.connection import DatabaseConnection
from career_assistant.database.init_db import init_conversation_tables
from career_assistant.database.repository import SessionRepository, MessageRepository
from career_assistant.memory.conversation import Turn
from career_assistant.memory.store import MemoryStore

# Read lazily by get_settings(); keeps the app import from writing log files
os.environ.setdefault("APP_ENV", "testing")

BASE_SETTINGS = Settings(
    app_name="CareerAssistantTest",
    app_env="testing",
    log_level="DEBUG",
    database_url="sqlite://",
    deepseek_api_key="",
    deepseek_model="deepseek-chat",
    deepseek_base_url="https://api.deepseek.com/v1",
    gpt_oss_api_key="",
    gpt_oss_model="gpt-4o-mini",
    gpt_oss_base_url="https://api.openai.com/v1",
    openai_api_key="",
    openai_model="gpt-4o-mini",
    openai_base_url="https://api.openai.com/v1",
    anthropic_api_key="",
    anthropic_model="claude-3-haiku-20240307",
    anthropic_base_url="https://api.anthropic.com/v1",
    anthropic_version="2023-06-01",
    llm_temperature=0.7,
    llm_max_tokens=500,
    provider_timeout_seconds=30,
    default_provider="auto",
    preferred_provider_fallthrough=False,
    memory_history_limit=15,
    prompt_history_turns=6,
    context_message_limit=10,
    memory_scan_messages=20,
    anonymous_owner_id="anonymous",
)


class FakeGateway:
    """Stand-in provider gateway that records calls."""

    def __init__(self, name: str, reply: Optional[str] = None, configured: bool = True,
                 error: Optional[Exception] = None) -> None:
        self.name = name
        self.reply = reply if reply is not None else f"reply from {name}"
        self.configured = configured
        self.error = error
        self.calls: List[Sequence[Turn]] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    def invoke(self, turns: Sequence[Turn]) -> str:
        self.calls.append(list(turns))
        if self.error is not None:
            raise self.error
        return self.reply


def failing(name: str, status: int = 500) -> FakeGateway:
    return FakeGateway(name, error=ProviderError(name, "upstream failure", upstream_status=status))


@pytest.fixture
def settings() -> Settings:
    """Settings with no provider credentials."""
    return BASE_SETTINGS


@pytest.fixture
def make_settings():
    """Build Settings with overrides."""
    def _make(**overrides) -> Settings:
        return replace(BASE_SETTINGS, **overrides)
    return _make


@pytest.fixture
def db(tmp_path):
    """A fresh SQLite database file with the chat tables."""
    connection = DatabaseConnection(f"sqlite:///{tmp_path / 'assistant.db'}")
    init_conversation_tables(connection)
    yield connection
    connection.close()


@pytest.fixture
def sessions(db) -> SessionRepository:
    return SessionRepository(db)


@pytest.fixture
def messages(db) -> MessageRepository:
    return MessageRepository(db)


@pytest.fixture
def memory_store(sessions, messages) -> MemoryStore:
    return MemoryStore(sessions, messages)


@pytest.fixture
def gateway():
    """Factory for FakeGateway instances."""
    return FakeGateway


@pytest.fixture
def failing_gateway():
    """Factory for gateways that raise ProviderError."""
    return failing
