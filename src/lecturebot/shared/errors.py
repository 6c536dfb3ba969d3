"""
Errors Module - Exception taxonomy for the request pipeline.
============================================================

Local conditions (InvalidInput, EmptyInput, NoRelevantContent) are resolved
into fixed user-facing messages. Remote conditions (UpstreamError and its
MalformedAnswer subclass) are logged for operators and turned into a generic
apology at the top of the pipeline.

Every remote call either returns its value or raises UpstreamError, so the
pipeline only ever has one remote error type to handle.
"""

from typing import Optional

# HTTP statuses worth retrying
RETRYABLE_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})


class LectureBotError(Exception):
    """Base class for all pipeline errors."""


class InvalidInput(LectureBotError):
    """The request body carries no utterance field."""


class EmptyInput(LectureBotError):
    """The utterance is empty or whitespace-only after trimming."""


class NoRelevantContent(LectureBotError):
    """Similarity search returned no passages for the question."""


class UpstreamError(LectureBotError):
    """
    A remote call (embedding, similarity search, generation) failed.

    Attributes:
        provider: Which collaborator failed ("embedding", "search", "generation")
        status_code: HTTP status when the failure came with one
        retryable: Whether repeating the call may succeed
    """

    def __init__(
        self,
        provider: str,
        message: str,
        status_code: Optional[int] = None,
        retryable: bool = False,
    ):
        self.provider = provider
        self.message = message
        self.status_code = status_code
        self.retryable = retryable
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.provider} error ({self.status_code}): {self.message}"
        return f"{self.provider} error: {self.message}"

    @classmethod
    def from_status(cls, provider: str, status_code: int, message: str) -> "UpstreamError":
        """Build an error from a non-success HTTP status."""
        return cls(
            provider,
            message,
            status_code=status_code,
            retryable=status_code in RETRYABLE_STATUS_CODES,
        )


class MalformedAnswer(UpstreamError):
    """Generation succeeded transport-wise but returned no usable text."""

    def __init__(self, message: str):
        super().__init__("generation", message, retryable=False)
