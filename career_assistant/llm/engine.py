"""
Assistant Engine - One generated reply per user message.

Pipeline for a single request:
    load memory -> select persona -> assemble turns -> orchestrate
    -> update memory

Memory is updated when a provider answered, or when the offline reply
was used because no provider is configured. A degraded reply (every
attempted provider failed) leaves memory untouched, and so does a
session whose memory could not be loaded.
"""
from typing import Optional, Sequence

from career_assistant.core.config import Settings
from career_assistant.core.logging_config import get_logger
from career_assistant.llm.orchestrator import FallbackOrchestrator, GenerationResult
from career_assistant.llm.personas import PERSONAS, select_persona_key
from career_assistant.llm.prompts.offline_responses import OfflineRequest
from career_assistant.llm.prompts.system_prompts import assemble_turns
from career_assistant.llm.providers import build_gateways
from career_assistant.memory.conversation import Turn
from career_assistant.memory.store import MemoryStore
from career_assistant.models.chat import ChatContext

logger = get_logger(__name__)


class AssistantEngine:
    """
    Generates replies and keeps session memory current.

    Example:
        >>> engine = AssistantEngine(memory_store, orchestrator)
        >>> result = engine.generate_response("How do I get into nursing?", session_id=sid)
        >>> result.persona
        'mentor'
    """

    def __init__(
        self,
        memory_store: MemoryStore,
        orchestrator: FallbackOrchestrator,
        default_provider: str = "auto",
        history_turns: int = 6
    ):
        self.memory_store = memory_store
        self.orchestrator = orchestrator
        self.default_provider = default_provider
        self.history_turns = history_turns

    @classmethod
    def from_settings(cls, settings: Settings, memory_store: MemoryStore) -> "AssistantEngine":
        """Build an engine with gateways for every provider in settings."""
        orchestrator = FallbackOrchestrator(
            build_gateways(settings),
            fallthrough=settings.preferred_provider_fallthrough,
        )
        return cls(
            memory_store,
            orchestrator,
            default_provider=settings.default_provider,
            history_turns=settings.prompt_history_turns,
        )

    def generate_response(
        self,
        message: str,
        prior_turns: Sequence[Turn] = (),
        context: Optional[ChatContext] = None,
        session_id: Optional[str] = None,
        preferred_provider: Optional[str] = None
    ) -> GenerationResult:
        """
        Generate the assistant reply to a user message.

        Args:
            message: Raw user message (without any context prompt)
            prior_turns: Recent stored turns of the session, oldest first
            context: Optional caller context
            session_id: Session whose memory is loaded and updated
            preferred_provider: Provider token; the configured default if None

        Returns:
            GenerationResult with text, provider, persona and attempts
        """
        memory = self.memory_store.load(session_id) if session_id else None

        key = select_persona_key(message)
        persona = PERSONAS[key]

        turns = assemble_turns(
            persona,
            message,
            prior_turns=prior_turns,
            context=context,
            memory=memory,
            history_limit=self.history_turns,
        )

        offline_request = OfflineRequest(
            message=message,
            persona=persona,
            memory=memory,
            first_name=context.first_name if context else None,
        )

        result = self.orchestrator.generate(
            turns,
            offline_request,
            preferred=preferred_provider or self.default_provider,
        )
        result.persona = key

        logger.info(
            f"Generated reply: session={session_id}, persona={key}, "
            f"provider={result.provider}, degraded={result.degraded}"
        )

        if session_id and memory is not None and not result.degraded:
            self.memory_store.update(
                session_id,
                memory,
                message,
                result.text,
                key,
                preferences=context.preferences if context else None,
            )

        return result
