"""
Gemini Embeddings Module - Google GenAI embeddings API.
=======================================================

Embeds student questions with Google's Gemini embedding models.
Requires a GEMINI_API_KEY from Google AI Studio.

Available models:
- text-embedding-004: 768 dimensions (matches the lecture index)
- embedding-001: Legacy model
"""

import threading
from typing import Any, Optional

from lecturebot.indexing.embeddings_base import EmbeddingProvider
from lecturebot.indexing.gemini import create_client, translate_error
from lecturebot.shared.config import Settings
from lecturebot.shared.errors import UpstreamError
from lecturebot.shared.logging import get_logger
from lecturebot.shared.utils import call_with_retry

logger = get_logger(__name__)


PROVIDER = "embedding"


class GeminiEmbeddingProvider(EmbeddingProvider):
    """
    Gemini embedding provider using Google GenAI SDK.

    Every call re-embeds; nothing is cached between requests.

    Example:
        >>> provider = GeminiEmbeddingProvider(settings)
        >>> embedding = provider.embed_query("환불 정책이 어떻게 되나요?")
        >>> print(len(embedding))  # 768
    """

    def __init__(
        self,
        settings: Settings,
        model_name: Optional[str] = None,
        task_type: Optional[str] = None,
        client: Any = None,
    ):
        """
        Initialize the Gemini provider.

        Args:
            settings: Application settings
            model_name: Embedding model name (default from config)
            task_type: Task type for embeddings (default from config)
            client: Pre-built genai.Client, mainly for tests
        """
        embed_config = settings.embeddings

        self._model_name = model_name or embed_config.model_name
        self._task_type = task_type or embed_config.task_type
        self._api_key = settings.gemini_api_key
        self._timeout = embed_config.timeout_seconds
        self._resilience = settings.resilience
        # Must match the vector column of the lecture index
        self._dimensions = embed_config.dimensions

        # Initialize client lazily
        self._client = client
        self._client_lock = threading.Lock()

        logger.debug(
            f"Gemini embedding provider configured: model={self._model_name}, "
            f"task_type={self._task_type}, timeout={self._timeout}s"
        )

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return "gemini"

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._model_name

    @property
    def dimensions(self) -> int:
        """Get embedding dimensions."""
        return self._dimensions

    @property
    def client(self):
        """Lazy load and return the Gemini client."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = create_client(self._api_key, self._timeout)
        return self._client

    def embed_query(self, query: str) -> list[float]:
        """
        Embed a question using the configured task type.

        Args:
            query: Question text

        Returns:
            Embedding vector

        Raises:
            UpstreamError: If the API call fails or the payload has no vector
        """
        return call_with_retry(
            lambda: self._embed_once(query),
            operation="embedding",
            max_attempts=self._resilience.max_attempts,
            min_wait=self._resilience.retry_min_wait,
            max_wait=self._resilience.retry_max_wait,
        )

    def _embed_once(self, query: str) -> list[float]:
        try:
            result = self.client.models.embed_content(
                model=self._model_name,
                contents=query,
                config={"task_type": self._task_type},
            )
        except Exception as e:
            raise translate_error(PROVIDER, e) from e

        return self._parse_embedding(result)

    def _parse_embedding(self, result: Any) -> list[float]:
        """Extract the vector from an embed_content response."""
        embeddings = getattr(result, "embeddings", None)
        if not embeddings:
            raise UpstreamError(PROVIDER, "response contains no embeddings")

        values = getattr(embeddings[0], "values", None)
        if not values:
            raise UpstreamError(PROVIDER, "embedding has no values")

        if len(values) != self._dimensions:
            raise UpstreamError(
                PROVIDER, f"expected {self._dimensions} dimensions, got {len(values)}"
            )

        return [float(v) for v in values]

    def get_info(self) -> dict:
        """Get provider information."""
        info = super().get_info()
        info["task_type"] = self._task_type
        info["api_key_set"] = bool(self._api_key)
        return info
