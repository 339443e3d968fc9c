"""Tests for the chat service: sessions, message log and reply flow."""

import json
from unittest.mock import MagicMock, patch

import pytest

from career_assistant.core.exceptions import PersistenceError, SessionNotFoundError, ValidationError
from career_assistant.llm.engine import AssistantEngine
from career_assistant.llm.orchestrator import FallbackOrchestrator
from career_assistant.memory.conversation import Memory
from career_assistant.models.career import CareerRoadmapRequest
from career_assistant.models.chat import ChatContext
from career_assistant.services.chat_service import ChatService


@pytest.fixture
def deepseek(gateway):
    return gateway("deepseek")


@pytest.fixture
def service(sessions, messages, memory_store, deepseek) -> ChatService:
    engine = AssistantEngine(memory_store, FallbackOrchestrator([deepseek]))
    return ChatService(sessions, messages, engine)


# -- send_message ------------------------------------------------------------


def test_send_without_session_creates_one(service) -> None:
    reply = service.send_message("alice", None, "Hello!")

    assert reply.role == "assistant"
    assert reply.content == "reply from deepseek"
    assert service.get_session(reply.session_id, "alice").message_count == 2


def test_two_sends_without_session_create_two_sessions(service) -> None:
    first = service.send_message("alice", None, "Hello!")
    second = service.send_message("alice", None, "Hello again!")

    assert first.session_id != second.session_id
    assert len(service.get_user_sessions("alice")) == 2


def test_log_alternates_roles_with_increasing_timestamps(service) -> None:
    reply = service.send_message("alice", None, "Hello!")
    service.send_message("alice", reply.session_id, "Tell me about nursing")

    log = service.get_session_messages(reply.session_id, "alice")

    assert [m.role for m in log] == ["user", "assistant", "user", "assistant"]
    stamps = [m.created_at for m in log]
    assert all(earlier < later for earlier, later in zip(stamps, stamps[1:]))


def test_prior_turns_not_replayed_twice(service, deepseek) -> None:
    reply = service.send_message("alice", None, "Hello!")
    service.send_message("alice", reply.session_id, "Tell me about nursing")

    contents = [t.content for t in deepseek.calls[1][1:]]
    assert contents == ["Hello!", "reply from deepseek", "Tell me about nursing"]


def test_reply_carries_provenance(service) -> None:
    reply = service.send_message("alice", None, "I need motivation")

    assert reply.metadata["provider"] == "deepseek"
    assert reply.metadata["persona"] == "coach"
    assert reply.metadata["degraded"] is False
    assert reply.metadata["attempts"] == ["deepseek"]
    assert "generatedAt" in reply.metadata


def test_user_message_stores_context(service) -> None:
    reply = service.send_message("alice", None, "hi", context=ChatContext(current_page="dashboard"))

    user_message = service.get_session_messages(reply.session_id, "alice")[0]
    assert user_message.metadata["context"]["current_page"] == "dashboard"


def test_foreign_session_id_starts_new_session(service) -> None:
    alice = service.send_message("alice", None, "Hello!")

    bob = service.send_message("bob", alice.session_id, "Hello!")

    assert bob.session_id != alice.session_id
    assert len(service.get_session_messages(alice.session_id, "alice")) == 2


def test_unknown_session_id_starts_new_session(service) -> None:
    reply = service.send_message("alice", "does-not-exist", "Hello!")
    assert reply.session_id != "does-not-exist"


def test_deleted_session_id_starts_new_session(service) -> None:
    first = service.send_message("alice", None, "Hello!")
    service.delete_session(first.session_id, "alice")

    second = service.send_message("alice", first.session_id, "Still there?")

    assert second.session_id != first.session_id


@pytest.mark.parametrize("message", ["", "   ", "\n\t"])
def test_blank_message_rejected(service, message: str) -> None:
    with pytest.raises(ValidationError):
        service.send_message("alice", None, message)


def test_overlong_message_rejected(service) -> None:
    with pytest.raises(ValidationError):
        service.send_message("alice", None, "x" * 4001)


def test_message_write_failure_propagates(sessions, memory_store, deepseek) -> None:
    messages = MagicMock()
    messages.recent.return_value = []
    messages.append.side_effect = PersistenceError("database is down")
    engine = AssistantEngine(memory_store, FallbackOrchestrator([deepseek]))
    service = ChatService(sessions, messages, engine)

    with pytest.raises(PersistenceError):
        service.send_message("alice", None, "Hello!")


def test_memory_save_failure_does_not_block_reply(service, sessions) -> None:
    with patch.object(sessions, "update_context", side_effect=PersistenceError("disk full")):
        reply = service.send_message("alice", None, "Hello!")

    assert reply.content == "reply from deepseek"


def test_touch_failure_does_not_block_reply(service, sessions) -> None:
    with patch.object(sessions, "touch", side_effect=PersistenceError("disk full")):
        reply = service.send_message("alice", None, "Hello!")

    assert reply.role == "assistant"


def test_degraded_reply_is_stored(sessions, messages, memory_store, failing_gateway) -> None:
    engine = AssistantEngine(memory_store, FallbackOrchestrator([failing_gateway("deepseek")]))
    service = ChatService(sessions, messages, engine)

    reply = service.send_message("alice", None, "Any salary advice?")

    assert reply.metadata["provider"] == "offline"
    assert reply.metadata["degraded"] is True
    assert reply.content


# -- sessions ----------------------------------------------------------------


def test_create_session_defaults(service) -> None:
    record = service.create_session("alice")

    assert record.title == "New Chat"
    assert record.is_active is True
    assert record.context is None


def test_create_session_wraps_plain_context(service) -> None:
    record = service.create_session("alice", title="Nursing", context="Exploring healthcare roles")

    memory = Memory.from_json(record.context)
    assert memory.user_preferences == {"sessionContext": "Exploring healthcare roles"}


def test_create_session_keeps_memory_context(service) -> None:
    blob = json.dumps({"userGoals": ["become a nurse"]})
    record = service.create_session("alice", context=blob)

    assert Memory.from_json(record.context).user_goals == ["become a nurse"]


def test_get_session_unknown_raises(service) -> None:
    with pytest.raises(SessionNotFoundError):
        service.get_session("missing", "alice")


def test_get_session_other_owner_raises(service) -> None:
    record = service.create_session("alice")
    with pytest.raises(SessionNotFoundError):
        service.get_session(record.id, "bob")


def test_session_stats(service) -> None:
    reply = service.send_message("alice", None, "Hello!")

    record = service.get_session(reply.session_id, "alice")

    assert record.message_count == 2
    assert record.last_message.role == "assistant"


def test_sessions_listed_most_recent_first(service) -> None:
    older = service.create_session("alice", title="older")
    service.create_session("alice", title="newer")
    service.send_message("alice", older.id, "Back to this one")

    titles = [record.title for record in service.get_user_sessions("alice")]
    assert titles == ["older", "newer"]


def test_deleted_session_hidden_but_readable(service) -> None:
    reply = service.send_message("alice", None, "Hello!")

    service.delete_session(reply.session_id, "alice")

    assert service.get_user_sessions("alice") == []
    assert len(service.get_session_messages(reply.session_id, "alice")) == 2
    with pytest.raises(SessionNotFoundError):
        service.get_session(reply.session_id, "alice")


def test_delete_unknown_session_raises(service) -> None:
    with pytest.raises(SessionNotFoundError):
        service.delete_session("missing", "alice")


def test_messages_of_foreign_session_raise(service) -> None:
    reply = service.send_message("alice", None, "Hello!")
    with pytest.raises(SessionNotFoundError):
        service.get_session_messages(reply.session_id, "bob")


# -- career tools ------------------------------------------------------------


def test_analyze_document(service) -> None:
    result = service.analyze_document("alice", "Product designer with a portfolio", "cv_2025.txt")

    assert result.document_type == "resume"
    assert result.word_count == 5
    assert service.get_user_sessions("alice") == []


@pytest.mark.parametrize("content,file_name", [("text", ""), ("text", "  "), ("", "resume.txt"), ("\n ", "resume.txt")])
def test_analyze_document_rejects_blank_input(service, content: str, file_name: str) -> None:
    with pytest.raises(ValidationError):
        service.analyze_document("alice", content, file_name)


def test_generate_career_roadmap(service) -> None:
    request = CareerRoadmapRequest(career_field="design", experience_level="intermediate", timeline_months=18)

    roadmap = service.generate_career_roadmap("alice", request)

    assert roadmap.title == "Your Personalized Design Career Roadmap"
    assert roadmap.current_level == "intermediate"
    assert len(roadmap.phases) == 3


# -- wiring ------------------------------------------------------------------


def test_from_settings(make_settings, db) -> None:
    settings = make_settings(openai_api_key="sk-test", context_message_limit=4)
    service = ChatService.from_settings(settings, db=db)

    assert service.context_message_limit == 4
    assert [g.name for g in service.engine.orchestrator.configured] == ["openai"]
