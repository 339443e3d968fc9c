"""
Fallback Orchestrator - Ordered provider attempts with an offline floor.

Per request:
1. A concrete, configured preference is tried first. On failure the
   request is fail-fast (straight to the offline reply) unless
   fallthrough is enabled, in which case the remaining configured
   providers are tried in automatic order.
2. An auto or unset preference tries the configured providers in
   automatic order, once each.
3. A concrete preference that is unknown or not configured makes no
   provider call at all and goes straight to the offline reply.
4. If nothing is configured or every attempt failed, the offline
   responder produces a templated reply.

generate() never raises. Calls are sequential: a provider is only tried
after the previous one has definitively failed.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from career_assistant.core.exceptions import ProviderError
from career_assistant.core.logging_config import get_logger
from career_assistant.llm.prompts.offline_responses import OfflineResponder, OfflineRequest
from career_assistant.llm.providers import ProviderGateway
from career_assistant.memory.conversation import Turn

logger = get_logger(__name__)

AUTO = "auto"
OFFLINE = "offline"


@dataclass(frozen=True)
class ProviderAttempt:
    """Outcome of one provider call."""
    name: str
    succeeded: bool
    error: Optional[str] = None


@dataclass
class GenerationResult:
    """
    A reply and how it was produced.

    Attributes:
        text: The reply (never empty)
        provider: Provider that produced it, or "offline"
        persona: Persona key, filled in by the engine
        attempts: Every provider call made, in order
        degraded: True when the offline reply follows provider failures
    """
    text: str
    provider: str
    persona: Optional[str] = None
    attempts: List[ProviderAttempt] = field(default_factory=list)
    degraded: bool = False

    @property
    def is_offline(self) -> bool:
        return self.provider == OFFLINE


class FallbackOrchestrator:
    """
    Tries provider gateways in order and falls back to offline replies.

    Example:
        >>> orchestrator = FallbackOrchestrator(build_gateways(settings))
        >>> result = orchestrator.generate(turns, OfflineRequest(message))
        >>> result.provider
        'deepseek'
    """

    def __init__(
        self,
        gateways: Sequence[ProviderGateway],
        offline: Optional[OfflineResponder] = None,
        fallthrough: bool = False
    ):
        """
        Args:
            gateways: Gateways in automatic priority order
            offline: Responder used as the terminal fallback
            fallthrough: Continue in auto order after a preferred provider fails
        """
        self.gateways = list(gateways)
        self.offline = offline or OfflineResponder()
        self.fallthrough = fallthrough

    @property
    def configured(self) -> List[ProviderGateway]:
        return [gateway for gateway in self.gateways if gateway.is_configured]

    def plan(self, preferred: Optional[str] = None) -> List[ProviderGateway]:
        """
        Gateways to attempt for a preference token, in order.

        An unknown or unconfigured preference yields an empty plan, so
        the request is answered offline without any provider call.
        """
        configured = self.configured
        token = (preferred or "").strip().lower() or AUTO
        if token == AUTO:
            return configured

        chosen = next((g for g in configured if g.name == token), None)
        if chosen is None:
            logger.warning(f"Preferred provider '{token}' is not available, answering offline")
            return []

        if self.fallthrough:
            return [chosen] + [g for g in configured if g is not chosen]
        return [chosen]

    def generate(
        self,
        turns: Sequence[Turn],
        offline_request: OfflineRequest,
        preferred: Optional[str] = None
    ) -> GenerationResult:
        """
        Produce a reply for the assembled turns.

        Args:
            turns: System, history and live turns
            offline_request: Inputs for the templated reply if needed
            preferred: Provider token (deepseek, gpt-oss, openai, anthropic, auto)

        Returns:
            GenerationResult; never raises
        """
        attempts: List[ProviderAttempt] = []

        for gateway in self.plan(preferred):
            try:
                text = gateway.invoke(turns)
            except ProviderError as e:
                logger.warning(f"Provider {gateway.name} failed: {e.message} ({e.details})")
                attempts.append(ProviderAttempt(gateway.name, False, e.message))
                continue
            except Exception as e:
                logger.exception(f"Unexpected error from provider {gateway.name}: {e}")
                attempts.append(ProviderAttempt(gateway.name, False, str(e)))
                continue

            if not text or not text.strip():
                attempts.append(ProviderAttempt(gateway.name, False, "empty reply"))
                continue

            attempts.append(ProviderAttempt(gateway.name, True))
            if len(attempts) > 1:
                logger.info(f"Reply from {gateway.name} after {len(attempts) - 1} failed attempt(s)")
            return GenerationResult(text=text, provider=gateway.name, attempts=attempts)

        degraded = bool(attempts)
        if degraded:
            logger.warning(f"All {len(attempts)} provider attempt(s) failed, using offline reply")
        else:
            logger.info("No provider to try, using offline reply")

        return GenerationResult(
            text=self._offline_reply(offline_request),
            provider=OFFLINE,
            attempts=attempts,
            degraded=degraded,
        )

    def _offline_reply(self, request: OfflineRequest) -> str:
        try:
            text = self.offline.respond(request)
        except Exception as e:
            logger.exception(f"Offline responder failed: {e}")
            text = ""
        return text or (
            "I'm here to help with your career questions. "
            "Could you tell me a bit more about what you're looking for?"
        )
