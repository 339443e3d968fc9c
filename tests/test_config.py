"""Tests for settings loading."""

import pytest

from career_assistant.core.config import get_settings, normalize_database_url


@pytest.fixture
def fresh_settings(monkeypatch):
    """Re-read settings from a patched environment."""
    for key in ("DEEPSEEK_API_KEY", "GPT_OSS_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(key, raising=False)

    def _load(**env):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        get_settings.cache_clear()
        return get_settings()

    yield _load
    get_settings.cache_clear()


@pytest.mark.parametrize("url,expected", [
    ("postgres://u:p@host/db", "postgresql://u:p@host/db"),
    ("mysql://u:p@host/db", "mysql+pymysql://u:p@host/db"),
    ("mysql://u:p@host/db?ssl-mode=REQUIRED", "mysql+pymysql://u:p@host/db"),
    ("mysql://u:p@host/db?ssl-mode=REQUIRED&charset=utf8mb4", "mysql+pymysql://u:p@host/db?charset=utf8mb4"),
    ("sqlite:///./assistant.db", "sqlite:///./assistant.db"),
])
def test_normalize_database_url(url: str, expected: str) -> None:
    assert normalize_database_url(url) == expected


def test_configured_providers_in_priority_order(make_settings) -> None:
    settings = make_settings(anthropic_api_key="ak", deepseek_api_key="dk")
    assert settings.configured_providers() == ["deepseek", "anthropic"]


def test_no_providers_configured(settings) -> None:
    assert settings.configured_providers() == []


def test_environment_flags(make_settings) -> None:
    assert make_settings(app_env="Development").is_development()
    assert make_settings(app_env="production").is_production()
    assert not make_settings(app_env="testing").is_development()


def test_get_settings_reads_environment(fresh_settings) -> None:
    settings = fresh_settings(
        OPENAI_API_KEY="sk-test",
        DEFAULT_PROVIDER=" OpenAI ",
        PREFERRED_PROVIDER_FALLTHROUGH="true",
        MEMORY_HISTORY_LIMIT="20",
        LLM_TEMPERATURE="0.2",
    )

    assert settings.configured_providers() == ["openai"]
    assert settings.default_provider == "openai"
    assert settings.preferred_provider_fallthrough is True
    assert settings.memory_history_limit == 20
    assert settings.llm_temperature == 0.2


def test_get_settings_defaults(fresh_settings, monkeypatch) -> None:
    for key in ("DEFAULT_PROVIDER", "PREFERRED_PROVIDER_FALLTHROUGH", "MEMORY_HISTORY_LIMIT",
                "PROMPT_HISTORY_TURNS", "PROVIDER_TIMEOUT_SECONDS"):
        monkeypatch.delenv(key, raising=False)

    settings = fresh_settings()

    assert settings.default_provider == "auto"
    assert settings.preferred_provider_fallthrough is False
    assert settings.memory_history_limit == 15
    assert settings.prompt_history_turns == 6
    assert settings.provider_timeout_seconds == 30


def test_get_settings_normalizes_database_url(fresh_settings) -> None:
    settings = fresh_settings(DATABASE_URL="postgres://u:p@host/db")
    assert settings.database_url == "postgresql://u:p@host/db"


def test_get_settings_is_cached(fresh_settings) -> None:
    first = fresh_settings()
    assert get_settings() is first
