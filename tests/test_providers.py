"""Tests for the provider gateways."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from career_assistant.core.exceptions import ProviderError
from career_assistant.llm.providers import (
    PROVIDER_SPECS,
    AnthropicGateway,
    OpenAICompatibleGateway,
    build_gateways,
)
from career_assistant.memory.conversation import Turn


TURNS = [
    Turn("system", "You are Career Mentor Alex."),
    Turn("user", "How do I become a nurse?"),
]


def _response(status: int = 200, body=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.text = text
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def openai_gateway() -> OpenAICompatibleGateway:
    return OpenAICompatibleGateway(
        name="deepseek",
        api_key="sk-test",
        model="deepseek-chat",
        base_url="https://api.deepseek.com/v1/",
        timeout=30,
    )


@pytest.fixture
def anthropic_gateway() -> AnthropicGateway:
    return AnthropicGateway(
        name="anthropic",
        api_key="ak-test",
        model="claude-3-haiku-20240307",
        base_url="https://api.anthropic.com/v1",
    )


# -- OpenAI-compatible -------------------------------------------------------


def test_openai_request_shape(openai_gateway) -> None:
    body = {"choices": [{"message": {"content": "  Start with an accredited program.  "}}]}
    with patch("career_assistant.llm.providers.requests.post", return_value=_response(body=body)) as post:
        text = openai_gateway.invoke(TURNS)

    assert text == "Start with an accredited program."
    args, kwargs = post.call_args
    assert args[0] == "https://api.deepseek.com/v1/chat/completions"
    assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
    assert kwargs["json"] == {
        "model": "deepseek-chat",
        "messages": [
            {"role": "system", "content": "You are Career Mentor Alex."},
            {"role": "user", "content": "How do I become a nurse?"},
        ],
        "max_tokens": 500,
        "temperature": 0.7,
    }
    assert kwargs["timeout"] == 30


# -- Anthropic ---------------------------------------------------------------


def test_anthropic_lifts_system_turn(anthropic_gateway) -> None:
    body = {"content": [{"type": "text", "text": "Nursing is a great path."}]}
    with patch("career_assistant.llm.providers.requests.post", return_value=_response(body=body)) as post:
        text = anthropic_gateway.invoke(TURNS)

    assert text == "Nursing is a great path."
    args, kwargs = post.call_args
    assert args[0] == "https://api.anthropic.com/v1/messages"
    assert kwargs["headers"]["x-api-key"] == "ak-test"
    assert kwargs["headers"]["anthropic-version"] == "2023-06-01"
    assert kwargs["json"]["system"] == "You are Career Mentor Alex."
    assert kwargs["json"]["messages"] == [{"role": "user", "content": "How do I become a nurse?"}]


# -- error normalization -----------------------------------------------------


def test_timeout_raises_provider_error(openai_gateway) -> None:
    with patch("career_assistant.llm.providers.requests.post", side_effect=requests.exceptions.Timeout("slow")):
        with pytest.raises(ProviderError) as exc_info:
            openai_gateway.invoke(TURNS)
    assert exc_info.value.provider == "deepseek"
    assert "timed out" in exc_info.value.message


def test_connection_error_raises_provider_error(openai_gateway) -> None:
    with patch("career_assistant.llm.providers.requests.post",
               side_effect=requests.exceptions.ConnectionError("refused")):
        with pytest.raises(ProviderError):
            openai_gateway.invoke(TURNS)


@pytest.mark.parametrize("status", [400, 401, 429, 500, 503])
def test_non_2xx_raises_with_status(openai_gateway, status: int) -> None:
    with patch("career_assistant.llm.providers.requests.post",
               return_value=_response(status=status, text="quota exceeded")):
        with pytest.raises(ProviderError) as exc_info:
            openai_gateway.invoke(TURNS)
    assert exc_info.value.upstream_status == status


def test_non_json_body_raises(openai_gateway) -> None:
    with patch("career_assistant.llm.providers.requests.post",
               return_value=_response(body=ValueError("no json"))):
        with pytest.raises(ProviderError, match="not JSON"):
            openai_gateway.invoke(TURNS)


@pytest.mark.parametrize("body", [
    {},
    {"choices": []},
    {"choices": [{"message": {}}]},
    {"choices": [{"message": {"content": "   "}}]},
    {"choices": [{"message": {"content": None}}]},
])
def test_missing_text_raises(openai_gateway, body) -> None:
    with patch("career_assistant.llm.providers.requests.post", return_value=_response(body=body)):
        with pytest.raises(ProviderError, match="no text"):
            openai_gateway.invoke(TURNS)


def test_unconfigured_gateway_raises_without_calling() -> None:
    gateway = OpenAICompatibleGateway(name="openai", api_key="", model="m", base_url="https://x")
    with patch("career_assistant.llm.providers.requests.post") as post:
        with pytest.raises(ProviderError):
            gateway.invoke(TURNS)
    post.assert_not_called()


# -- build_gateways ----------------------------------------------------------


def test_build_gateways_priority_order(make_settings) -> None:
    gateways = build_gateways(make_settings(openai_api_key="sk-openai", anthropic_api_key="ak"))

    assert [g.name for g in gateways] == ["deepseek", "gpt-oss", "openai", "anthropic"]
    assert [g.name for g in gateways if g.is_configured] == ["openai", "anthropic"]
    assert isinstance(gateways[3], AnthropicGateway)
    assert gateways[1].model == "gpt-4o-mini"


def test_build_gateways_applies_generation_settings(make_settings) -> None:
    gateways = build_gateways(make_settings(llm_max_tokens=256, provider_timeout_seconds=5))
    assert all(g.max_tokens == 256 and g.timeout == 5 for g in gateways)


def test_provider_specs_cover_all_tokens() -> None:
    assert [spec.name for spec in PROVIDER_SPECS] == ["deepseek", "gpt-oss", "openai", "anthropic"]
