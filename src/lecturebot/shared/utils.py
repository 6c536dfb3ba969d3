"""
Utilities Module - Common helper functions.
==========================================

Provides utility functions for:
- Text truncation for log lines
- Secret masking for diagnostics
- Bounded retries around remote calls
"""

from typing import Callable, TypeVar

from tenacity import (
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from lecturebot.shared.errors import UpstreamError
from lecturebot.shared.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


# ─────────────────────────────────────────────────────────────────────────────
# Text Utilities
# ─────────────────────────────────────────────────────────────────────────────


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length.

    Args:
        text: Text to truncate
        max_length: Maximum length
        suffix: Suffix to add if truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix


def mask_secret(value: str, visible: int = 4) -> str:
    """
    Mask a credential for display.

    Example:
        >>> mask_secret("abcdefghijkl")
        'abcd********'
    """
    if not value:
        return "(not set)"
    if len(value) <= visible:
        return "*" * len(value)
    return value[:visible] + "*" * (len(value) - visible)


# ─────────────────────────────────────────────────────────────────────────────
# Remote Call Retries
# ─────────────────────────────────────────────────────────────────────────────


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, UpstreamError) and exc.retryable


def call_with_retry(
    func: Callable[[], T],
    *,
    operation: str,
    max_attempts: int = 2,
    min_wait: float = 0.5,
    max_wait: float = 4.0,
) -> T:
    """
    Run a remote call with bounded exponential backoff.

    Only UpstreamError instances flagged retryable (network failures,
    timeouts, 429/5xx) are retried. The final error is re-raised unchanged.

    Args:
        func: Zero-argument callable performing the remote call
        operation: Name used in log messages
        max_attempts: Total attempts including the first one
        min_wait: Minimum backoff in seconds
        max_wait: Maximum backoff in seconds

    Returns:
        Whatever func returns
    """
    retrying = Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=min_wait, min=min_wait, max=max_wait),
        retry=retry_if_exception(_is_retryable),
        reraise=True,
    )

    for attempt in retrying:
        with attempt:
            if attempt.retry_state.attempt_number > 1:
                logger.warning(
                    f"Retrying {operation} "
                    f"(attempt {attempt.retry_state.attempt_number}/{max_attempts})"
                )
            return func()

    # Unreachable: Retrying either returns or re-raises
    raise RuntimeError(f"{operation} retry loop exited without a result")
