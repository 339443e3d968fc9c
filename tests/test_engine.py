"""Tests for the assistant engine pipeline."""

from unittest.mock import MagicMock, patch

import pytest

from career_assistant.core.exceptions import PersistenceError
from career_assistant.llm.engine import AssistantEngine
from career_assistant.llm.orchestrator import FallbackOrchestrator, OFFLINE
from career_assistant.memory.conversation import Memory
from career_assistant.models.chat import ChatContext, UserProfile


@pytest.fixture
def session_id(sessions) -> str:
    return sessions.create("owner").id


def _stored_memory(sessions, session_id: str) -> Memory:
    return Memory.from_json(sessions.find(session_id).context)


# -- provenance --------------------------------------------------------------


def test_provider_reply_with_persona(memory_store, gateway, session_id) -> None:
    engine = AssistantEngine(memory_store, FallbackOrchestrator([gateway("deepseek")]))

    result = engine.generate_response("How do I become a nurse?", session_id=session_id)

    assert result.text == "reply from deepseek"
    assert result.provider == "deepseek"
    assert result.persona == "mentor"


@pytest.mark.parametrize("message,persona", [
    ("I need motivation to keep going", "coach"),
    ("What are the industry trends?", "expert"),
    ("Can you explain my assessment?", "counselor"),
    ("Tell me about nursing", "mentor"),
])
def test_persona_selected_per_message(memory_store, gateway, message, persona) -> None:
    engine = AssistantEngine(memory_store, FallbackOrchestrator([gateway("deepseek")]))
    assert engine.generate_response(message).persona == persona


def test_turns_start_with_system_and_end_with_message(memory_store, gateway, session_id) -> None:
    g = gateway("deepseek")
    engine = AssistantEngine(memory_store, FallbackOrchestrator([g]))

    engine.generate_response("Any tips for interviews?", session_id=session_id)

    turns = g.calls[0]
    assert turns[0].role == "system"
    assert "Career Mentor Alex" in turns[0].content
    assert turns[-1].role == "user"
    assert turns[-1].content == "Any tips for interviews?"


def test_default_provider_used_without_preference(memory_store, gateway) -> None:
    orchestrator = FallbackOrchestrator([gateway("deepseek"), gateway("openai")])
    engine = AssistantEngine(memory_store, orchestrator, default_provider="openai")

    assert engine.generate_response("hello").provider == "openai"
    assert engine.generate_response("hello", preferred_provider="deepseek").provider == "deepseek"


def test_offline_reply_uses_first_name(memory_store) -> None:
    engine = AssistantEngine(memory_store, FallbackOrchestrator([]))
    context = ChatContext(user_profile=UserProfile(first_name="Maya"))

    result = engine.generate_response("hello", context=context)

    assert result.provider == OFFLINE
    assert "Maya" in result.text


# -- memory updates ----------------------------------------------------------


def test_memory_updated_after_provider_reply(memory_store, sessions, gateway, session_id) -> None:
    engine = AssistantEngine(memory_store, FallbackOrchestrator([gateway("deepseek")]))

    engine.generate_response("I want to become a nurse", session_id=session_id)

    memory = _stored_memory(sessions, session_id)
    assert memory.user_goals == ["become a nurse"]
    assert [t.content for t in memory.trimmed_history] == ["I want to become a nurse", "reply from deepseek"]
    assert memory.personality_insights["lastPersona"] == "mentor"


def test_memory_updated_when_no_provider_configured(memory_store, sessions, session_id) -> None:
    engine = AssistantEngine(memory_store, FallbackOrchestrator([]))

    result = engine.generate_response("Any salary advice?", session_id=session_id)

    assert result.degraded is False
    memory = _stored_memory(sessions, session_id)
    assert "salary" in memory.mentioned_topics
    assert len(memory.trimmed_history) == 2


def test_memory_untouched_when_degraded(memory_store, sessions, failing_gateway, session_id) -> None:
    engine = AssistantEngine(memory_store, FallbackOrchestrator([failing_gateway("deepseek")]))

    result = engine.generate_response("Any salary advice?", session_id=session_id)

    assert result.degraded is True
    assert result.text
    assert sessions.find(session_id).context is None


def test_memory_kept_when_load_fails(memory_store, sessions, gateway, session_id) -> None:
    memory_store.save(session_id, Memory(user_goals=["become a nurse"]))
    engine = AssistantEngine(memory_store, FallbackOrchestrator([gateway("deepseek")]))

    with patch.object(sessions, "find", side_effect=PersistenceError("db down")):
        result = engine.generate_response("hello", session_id=session_id)

    assert result.text == "reply from deepseek"
    memory = _stored_memory(sessions, session_id)
    assert memory.user_goals == ["become a nurse"]
    assert memory.trimmed_history == []


def test_context_preferences_reach_memory(memory_store, sessions, gateway, session_id) -> None:
    engine = AssistantEngine(memory_store, FallbackOrchestrator([gateway("deepseek")]))

    engine.generate_response("hello", session_id=session_id, context=ChatContext(preferences={"tone": "casual"}))

    assert _stored_memory(sessions, session_id).user_preferences == {"tone": "casual"}


def test_no_session_skips_memory(gateway) -> None:
    store = MagicMock()
    engine = AssistantEngine(store, FallbackOrchestrator([gateway("deepseek")]))

    engine.generate_response("hello")

    store.load.assert_not_called()
    store.update.assert_not_called()


def test_memory_replayed_on_next_request(memory_store, gateway, session_id) -> None:
    g = gateway("deepseek")
    engine = AssistantEngine(memory_store, FallbackOrchestrator([g]))

    engine.generate_response("I want to become a nurse", session_id=session_id)
    engine.generate_response("What should I study?", session_id=session_id)

    second = g.calls[1]
    assert "User's Goals: become a nurse" in second[0].content
    assert [t.content for t in second[1:]] == [
        "I want to become a nurse", "reply from deepseek", "What should I study?"
    ]


# -- from_settings -----------------------------------------------------------


def test_from_settings_wires_gateways(make_settings, memory_store) -> None:
    settings = make_settings(anthropic_api_key="ak", default_provider="anthropic",
                             preferred_provider_fallthrough=True, prompt_history_turns=4)
    engine = AssistantEngine.from_settings(settings, memory_store)

    assert [g.name for g in engine.orchestrator.configured] == ["anthropic"]
    assert engine.orchestrator.fallthrough is True
    assert engine.default_provider == "anthropic"
    assert engine.history_turns == 4
