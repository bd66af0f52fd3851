"""Runtime configuration loaded from environment variables."""

import os
from dataclasses import dataclass


def _env_int(name: str, default: int | None) -> int | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


@dataclass
class AgentConfig:
    """Configuration for the conversational agent."""

    api_key: str | None = None
    model: str = "claude-3-5-sonnet-20241022"
    temperature: float = 0.7
    max_tokens: int = 1024
    max_retries: int = 3  # Exponential backoff is handled by the model client
    timeout: float = 60.0

    recursion_limit: int = 25  # Graph steps per turn (agent <-> tools loop)
    requests_per_minute: int = 50
    max_message_chars: int = 4000

    # Checkpointing
    checkpoint_dir: str | None = None  # JSON file store when set, in-memory otherwise
    session_timeout_minutes: int | None = None  # No eviction when unset

    @classmethod
    def from_env(cls) -> "AgentConfig":
        """Build configuration from environment variables."""
        defaults = cls()
        return cls(
            api_key=os.getenv("ANTHROPIC_API_KEY"),
            model=os.getenv("SOCIAL_OS_MODEL", defaults.model),
            temperature=_env_float("SOCIAL_OS_TEMPERATURE", defaults.temperature),
            max_tokens=_env_int("SOCIAL_OS_MAX_TOKENS", defaults.max_tokens),
            max_retries=_env_int("SOCIAL_OS_MAX_RETRIES", defaults.max_retries),
            timeout=_env_float("SOCIAL_OS_TIMEOUT", defaults.timeout),
            recursion_limit=_env_int("SOCIAL_OS_RECURSION_LIMIT", defaults.recursion_limit),
            requests_per_minute=_env_int("SOCIAL_OS_REQUESTS_PER_MINUTE", defaults.requests_per_minute),
            max_message_chars=_env_int("SOCIAL_OS_MAX_MESSAGE_CHARS", defaults.max_message_chars),
            checkpoint_dir=os.getenv("SOCIAL_OS_CHECKPOINT_DIR") or None,
            session_timeout_minutes=_env_int("SOCIAL_OS_SESSION_TIMEOUT_MINUTES", None),
        )
