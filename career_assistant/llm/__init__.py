"""
LLM module - Reply generation.

This module handles:
- Persona selection
- Prompt construction
- Provider gateways over HTTP
- Ordered fallback with offline templated replies
"""
from career_assistant.llm.personas import Persona, PERSONAS, select_persona, select_persona_key, persona_key
from career_assistant.llm.providers import (
    ProviderGateway,
    OpenAICompatibleGateway,
    AnthropicGateway,
    PROVIDER_SPECS,
    build_gateways,
)
from career_assistant.llm.orchestrator import FallbackOrchestrator, GenerationResult, ProviderAttempt
from career_assistant.llm.engine import AssistantEngine

__all__ = [
    # Personas
    "Persona",
    "PERSONAS",
    "select_persona",
    "select_persona_key",
    "persona_key",
    # Providers
    "ProviderGateway",
    "OpenAICompatibleGateway",
    "AnthropicGateway",
    "PROVIDER_SPECS",
    "build_gateways",
    # Orchestration
    "FallbackOrchestrator",
    "GenerationResult",
    "ProviderAttempt",
    "AssistantEngine",
]
