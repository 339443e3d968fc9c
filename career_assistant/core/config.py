"""
Configuration management via environment variables.

This module loads configuration from .env file using python-dotenv.
All configuration values are accessed through the Settings class.

Provider credentials are optional: a provider without an API key is
simply not configured, and the assistant falls back to the remaining
providers or to its offline templates.
"""
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


# Load .env file from project root
# This must happen before accessing os.environ
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)


# Auto-selection priority used when no provider is requested explicitly
PROVIDER_PRIORITY = ("deepseek", "gpt-oss", "openai", "anthropic")


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    frozen=True makes the dataclass immutable, preventing accidental
    modification of settings at runtime.

    Attributes:
        app_name: Application identifier for logging
        app_env: Environment name (development, staging, production)
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        database_url: SQLAlchemy connection string for sessions/messages
        *_api_key / *_model / *_base_url: Per-provider credentials and endpoints
        llm_temperature: Sampling temperature sent to every provider
        llm_max_tokens: Maximum reply length requested from providers
        provider_timeout_seconds: Hard ceiling for a single provider call
        default_provider: Provider token used when the caller sends none
        preferred_provider_fallthrough: Continue in auto order after an
            explicitly preferred provider fails
        memory_history_limit: Cap on turns kept in session memory
        prompt_history_turns: Memory turns replayed ahead of the live message
        context_message_limit: Prior log messages sent with each request
        memory_scan_messages: Recent messages scanned for topics on load
        anonymous_owner_id: Owner used when no identity is supplied
    """
    # Application settings
    app_name: str
    app_env: str
    log_level: str

    # Database settings
    database_url: str

    # Provider settings
    deepseek_api_key: str
    deepseek_model: str
    deepseek_base_url: str
    gpt_oss_api_key: str
    gpt_oss_model: str
    gpt_oss_base_url: str
    openai_api_key: str
    openai_model: str
    openai_base_url: str
    anthropic_api_key: str
    anthropic_model: str
    anthropic_base_url: str
    anthropic_version: str

    # Generation settings
    llm_temperature: float
    llm_max_tokens: int
    provider_timeout_seconds: int
    default_provider: str
    preferred_provider_fallthrough: bool

    # Memory settings
    memory_history_limit: int
    prompt_history_turns: int
    context_message_limit: int
    memory_scan_messages: int

    # Identity
    anonymous_owner_id: str

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"

    def configured_providers(self) -> List[str]:
        """Providers that have credentials, in auto-selection order."""
        keys = {
            "deepseek": self.deepseek_api_key,
            "gpt-oss": self.gpt_oss_api_key,
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
        }
        return [name for name in PROVIDER_PRIORITY if keys[name]]


def _get_env(key: str, default: Optional[str] = None) -> str:
    """
    Get environment variable with optional default.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value

    Raises:
        ValueError: If required variable is not set and no default provided
    """
    value = os.environ.get(key, default)
    if value is None:
        raise ValueError(
            f"Required environment variable '{key}' is not set. "
            f"Please check your .env file."
        )
    return value


def _get_bool(key: str, default: str) -> bool:
    return _get_env(key, default).strip().lower() in ("1", "true", "yes")


def normalize_database_url(database_url: str) -> str:
    """
    Fix driver prefixes that SQLAlchemy does not accept as-is.

    Hosted databases often hand out postgres:// or mysql:// URLs;
    SQLAlchemy needs postgresql:// and mysql+pymysql:// respectively.
    """
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)
    if database_url.startswith("mysql://"):
        database_url = database_url.replace("mysql://", "mysql+pymysql://", 1)

    # ssl-mode is not understood by pymysql
    if "ssl-mode=" in database_url:
        database_url = re.sub(r"[?&]ssl-mode=[^&]+", "", database_url)
        if "?" not in database_url and "&" in database_url:
            database_url = database_url.replace("&", "?", 1)

    return database_url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are read once at startup; call get_settings.cache_clear()
    to force a re-read (tests do this after patching the environment).

    Returns:
        Settings instance with all configuration values
    """
    return Settings(
        # Application
        app_name=_get_env("APP_NAME", "CareerAssistant"),
        app_env=_get_env("APP_ENV", "development"),
        log_level=_get_env("LOG_LEVEL", "INFO"),

        # Database
        database_url=normalize_database_url(
            _get_env("DATABASE_URL", "sqlite:///./career_assistant.db")
        ),

        # Providers
        deepseek_api_key=_get_env("DEEPSEEK_API_KEY", ""),
        deepseek_model=_get_env("DEEPSEEK_MODEL", "deepseek-chat"),
        deepseek_base_url=_get_env("DEEPSEEK_BASE_URL", "https://api.deepseek.com/v1"),
        gpt_oss_api_key=_get_env("GPT_OSS_API_KEY", ""),
        gpt_oss_model=_get_env("GPT_OSS_MODEL", "gpt-4o-mini"),
        gpt_oss_base_url=_get_env("GPT_OSS_BASE_URL", "https://api.openai.com/v1"),
        openai_api_key=_get_env("OPENAI_API_KEY", ""),
        openai_model=_get_env("OPENAI_MODEL", "gpt-4o-mini"),
        openai_base_url=_get_env("OPENAI_BASE_URL", "https://api.openai.com/v1"),
        anthropic_api_key=_get_env("ANTHROPIC_API_KEY", ""),
        anthropic_model=_get_env("ANTHROPIC_MODEL", "claude-3-haiku-20240307"),
        anthropic_base_url=_get_env("ANTHROPIC_BASE_URL", "https://api.anthropic.com/v1"),
        anthropic_version=_get_env("ANTHROPIC_VERSION", "2023-06-01"),

        # Generation
        llm_temperature=float(_get_env("LLM_TEMPERATURE", "0.7")),
        llm_max_tokens=int(_get_env("LLM_MAX_TOKENS", "500")),
        provider_timeout_seconds=int(_get_env("PROVIDER_TIMEOUT_SECONDS", "30")),
        default_provider=_get_env("DEFAULT_PROVIDER", "auto").strip().lower(),
        preferred_provider_fallthrough=_get_bool("PREFERRED_PROVIDER_FALLTHROUGH", "false"),

        # Memory
        memory_history_limit=int(_get_env("MEMORY_HISTORY_LIMIT", "15")),
        prompt_history_turns=int(_get_env("PROMPT_HISTORY_TURNS", "6")),
        context_message_limit=int(_get_env("CONTEXT_MESSAGE_LIMIT", "10")),
        memory_scan_messages=int(_get_env("MEMORY_SCAN_MESSAGES", "20")),

        # Identity
        anonymous_owner_id=_get_env("ANONYMOUS_OWNER_ID", "anonymous"),
    )
