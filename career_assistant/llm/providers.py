"""
Provider Gateways - One HTTP client per text-generation provider.

Every gateway exposes the same capability:

    invoke(turns) -> str

and fails with ProviderError on network failure, timeout, non-2xx
status, non-JSON body or a response without text. There are no retries
here; switching to another provider is the orchestrator's job.

Providers are described by PROVIDER_SPECS, in automatic priority order.
Adding a provider that speaks one of the two wire formats is a new
table entry.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import requests

from career_assistant.core.config import Settings
from career_assistant.core.exceptions import ProviderError
from career_assistant.core.logging_config import LoggerMixin
from career_assistant.memory.conversation import Turn


class ProviderGateway(ABC, LoggerMixin):
    """
    Base class for provider gateways.

    Attributes:
        name: Provider token (deepseek, gpt-oss, openai, anthropic)
        model: Model identifier sent upstream
    """

    def __init__(
        self,
        name: str,
        api_key: str,
        model: str,
        base_url: str,
        temperature: float = 0.7,
        max_tokens: int = 500,
        timeout: float = 30
    ):
        self.name = name
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Full URL of the generation endpoint."""

    @abstractmethod
    def build_request(self, turns: Sequence[Turn]) -> Dict[str, Any]:
        """Request body for the given turns."""

    @abstractmethod
    def build_headers(self) -> Dict[str, str]:
        """Request headers, including the credential."""

    @abstractmethod
    def extract_text(self, body: Dict[str, Any]) -> Optional[str]:
        """Generated text from a response body, or None if absent."""

    def invoke(self, turns: Sequence[Turn]) -> str:
        """
        Send the turns upstream and return the generated text.

        Raises:
            ProviderError: On any failure of this single call
        """
        if not self.is_configured:
            raise ProviderError(self.name, "Provider is not configured")

        self.logger.info(f"Calling {self.name} (model={self.model}, turns={len(turns)})")

        try:
            response = requests.post(
                self.endpoint,
                headers=self.build_headers(),
                json=self.build_request(turns),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise ProviderError(self.name, f"Request timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise ProviderError(self.name, f"Request failed: {e.__class__.__name__}") from e

        if not 200 <= response.status_code < 300:
            raise ProviderError(
                self.name,
                f"Upstream returned HTTP {response.status_code}: {response.text[:200]}",
                upstream_status=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderError(
                self.name, "Response body is not JSON", upstream_status=response.status_code
            ) from e

        try:
            text = self.extract_text(body)
        except (KeyError, IndexError, TypeError, AttributeError):
            text = None

        if not isinstance(text, str) or not text.strip():
            raise ProviderError(
                self.name, "Response contained no text", upstream_status=response.status_code
            )

        self.logger.info(f"{self.name} replied ({len(text)} chars)")
        return text.strip()


class OpenAICompatibleGateway(ProviderGateway):
    """Chat-completions wire format (OpenAI, DeepSeek and compatible hosts)."""

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def build_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def build_request(self, turns: Sequence[Turn]) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [turn.to_dict() for turn in turns],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    def extract_text(self, body: Dict[str, Any]) -> Optional[str]:
        return body["choices"][0]["message"]["content"]


class AnthropicGateway(ProviderGateway):
    """
    Messages wire format.

    System turns are lifted into the top-level `system` field; the
    remaining turns go in `messages`.
    """

    def __init__(self, *args, api_version: str = "2023-06-01", **kwargs):
        super().__init__(*args, **kwargs)
        self.api_version = api_version

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/messages"

    def build_headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
            "Content-Type": "application/json",
        }

    def build_request(self, turns: Sequence[Turn]) -> Dict[str, Any]:
        system = "\n\n".join(turn.content for turn in turns if turn.role == "system")
        payload: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [turn.to_dict() for turn in turns if turn.role != "system"],
        }
        if system:
            payload["system"] = system
        return payload

    def extract_text(self, body: Dict[str, Any]) -> Optional[str]:
        return body["content"][0]["text"]


@dataclass(frozen=True)
class ProviderSpec:
    """
    Table entry describing one provider.

    `settings_prefix` names the Settings fields: <prefix>_api_key,
    <prefix>_model and <prefix>_base_url.
    """
    name: str
    gateway: type
    settings_prefix: str


# Automatic priority order
PROVIDER_SPECS = (
    ProviderSpec("deepseek", OpenAICompatibleGateway, "deepseek"),
    ProviderSpec("gpt-oss", OpenAICompatibleGateway, "gpt_oss"),
    ProviderSpec("openai", OpenAICompatibleGateway, "openai"),
    ProviderSpec("anthropic", AnthropicGateway, "anthropic"),
)


def build_gateways(settings: Settings) -> List[ProviderGateway]:
    """
    Build one gateway per provider, in automatic priority order.

    Unconfigured providers are included; callers filter on is_configured.
    """
    gateways = []
    for spec in PROVIDER_SPECS:
        kwargs = dict(
            name=spec.name,
            api_key=getattr(settings, f"{spec.settings_prefix}_api_key"),
            model=getattr(settings, f"{spec.settings_prefix}_model"),
            base_url=getattr(settings, f"{spec.settings_prefix}_base_url"),
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            timeout=settings.provider_timeout_seconds,
        )
        if spec.gateway is AnthropicGateway:
            kwargs["api_version"] = settings.anthropic_version
        gateways.append(spec.gateway(**kwargs))
    return gateways
