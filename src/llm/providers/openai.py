"""OpenAI LLM provider."""

from ..base import LLMAuthError, LLMError, LLMProvider, LLMRateLimitError

DEFAULT_MODEL = "gpt-4o-mini"


def _translate_error(e: Exception) -> LLMError:
    try:
        from openai import APIError, AuthenticationError, RateLimitError
    except ImportError:
        return LLMError(f"OpenAI error: {e}")

    if isinstance(e, AuthenticationError):
        return LLMAuthError(f"OpenAI auth failed: {e}")
    if isinstance(e, RateLimitError):
        return LLMRateLimitError(f"OpenAI rate limit: {e}")
    if isinstance(e, APIError):
        return LLMError(f"OpenAI API error: {e}")
    return LLMError(f"OpenAI error: {e}")


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completions provider."""

    provider_name = "openai"

    def __init__(self, api_key: str | None = None, model: str | None = None, client=None):
        self.model = model or DEFAULT_MODEL

        if client:
            self.client = client
            return

        try:
            from openai import OpenAI
        except ImportError:
            raise LLMError("openai package not installed. Run: pip install openai")

        self.client = OpenAI(api_key=api_key)

    def generate(
        self,
        messages: list[dict],
        system: str | None = None,
        max_tokens: int = 600,
        temperature: float = 0.3,
    ) -> str:
        full_messages = []
        if system:
            full_messages.append({"role": "system", "content": system})
        full_messages.extend(messages)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=full_messages,
            )
        except Exception as e:
            raise _translate_error(e) from e
        return (response.choices[0].message.content or "").strip()
