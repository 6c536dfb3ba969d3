"""
Gemini Client Module - Shared Google GenAI client construction.
===============================================================

Both the embedding provider and the answer generator talk to the Gemini
API. This module builds clients with an explicit per-call deadline and
translates SDK failures into UpstreamError.
"""

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from lecturebot.shared.errors import UpstreamError
from lecturebot.shared.logging import get_logger

logger = get_logger(__name__)


def create_client(api_key: str, timeout_seconds: float) -> genai.Client:
    """
    Create a Google GenAI client.

    Args:
        api_key: Gemini API key
        timeout_seconds: Deadline applied to every request made by the client

    Raises:
        ValueError: If the API key is missing
    """
    if not api_key:
        raise ValueError(
            "Gemini API key not found. Set GEMINI_API_KEY environment variable."
        )

    # HttpOptions.timeout is expressed in milliseconds
    http_options = types.HttpOptions(timeout=int(timeout_seconds * 1000))
    client = genai.Client(api_key=api_key, http_options=http_options)
    logger.debug(f"Gemini client initialized (timeout={timeout_seconds}s)")
    return client


def translate_error(provider: str, exc: Exception) -> UpstreamError:
    """
    Map an exception raised by the SDK to UpstreamError.

    API errors keep their HTTP status; timeouts and transport failures are
    marked retryable; anything else is treated as a permanent failure.
    """
    if isinstance(exc, UpstreamError):
        return exc

    if isinstance(exc, genai_errors.APIError):
        return UpstreamError.from_status(provider, exc.code, exc.message or str(exc))

    if isinstance(exc, (httpx.TimeoutException, httpx.TransportError)):
        return UpstreamError(provider, f"transport failure: {exc}", retryable=True)

    return UpstreamError(provider, f"{type(exc).__name__}: {exc}")
