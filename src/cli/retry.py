"""Retry utilities with exponential backoff for LLM calls."""

import logging

import structlog
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from llm.base import LLMAuthError, LLMError

logger = structlog.stdlib.get_logger(__name__)


def _is_transient(exc: BaseException) -> bool:
    """Rate limits and API hiccups are worth retrying; bad credentials are not."""
    return isinstance(exc, LLMError) and not isinstance(exc, LLMAuthError)


def llm_retry(
    max_attempts: int = 3,
    min_wait: float = 2.0,
    max_wait: float = 30.0,
):
    """Retry decorator for LLM API calls.

    Args:
        max_attempts: Max attempts, including the first call
        min_wait: Min wait between retries (seconds)
        max_wait: Max wait between retries (seconds)
    """
    return retry(
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception(_is_transient),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )