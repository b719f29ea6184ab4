"""Build the LLM provider the intent oracle talks to."""

import os

import structlog

from .base import LLMError, LLMProvider

logger = structlog.get_logger()

# name -> env var holding its key; order is the auto-detect preference
PROVIDER_KEYS = {
    "openai": "OPENAI_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
}


def create_llm_provider(
    provider: str | None = None,
    api_key: str | None = None,
    model: str | None = None,
    client=None,
) -> LLMProvider:
    """Create the provider named in config, or pick one from the available keys.

    Args:
        provider: "openai", "claude", "auto" or None
        api_key: Key from config; falls back to the provider's env var
        model: Model override (None = provider default)
        client: Pre-built SDK client, used by tests
    """
    name = provider or "auto"
    if name == "auto":
        name = _auto_detect_provider(api_key)
    if name not in PROVIDER_KEYS:
        raise LLMError(f"Unknown provider: {name}. Use: {', '.join(PROVIDER_KEYS)}")

    if not api_key and client is None:
        api_key = os.getenv(PROVIDER_KEYS[name])

    logger.debug("llm.provider_selected", provider=name, model=model)
    if name == "claude":
        from .providers.claude import ClaudeProvider

        return ClaudeProvider(api_key=api_key, model=model, client=client)

    from .providers.openai import OpenAIProvider

    return OpenAIProvider(api_key=api_key, model=model, client=client)


def _detect_provider_from_key(api_key: str) -> str | None:
    """Anthropic keys start with sk-ant-, OpenAI keys with sk-."""
    if api_key.startswith("sk-ant-"):
        return "claude"
    if api_key.startswith("sk-"):
        return "openai"
    return None


def _auto_detect_provider(api_key: str | None = None) -> str:
    if api_key:
        inferred = _detect_provider_from_key(api_key)
        if inferred:
            return inferred

    for name, env_var in PROVIDER_KEYS.items():
        if os.getenv(env_var):
            return name
    raise LLMError(
        f"No LLM API key found. Set one of: {', '.join(PROVIDER_KEYS.values())}"
    )
