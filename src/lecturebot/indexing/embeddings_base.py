"""
Embeddings Base Module - Abstract interface for embedding providers.
===================================================================

Defines the abstract base class for embedding providers so the pipeline
can be driven by the Gemini provider in production and by fakes in tests.
"""

from abc import ABC, abstractmethod


# ─────────────────────────────────────────────────────────────────────────────
# Abstract Base Class
# ─────────────────────────────────────────────────────────────────────────────


class EmbeddingProvider(ABC):
    """
    Abstract base class for embedding providers.

    Implementations must provide:
    - embed_query(): Embed a single question

    Properties:
    - model_name: Name of the embedding model
    - dimensions: Expected embedding vector dimensions
    - provider_name: Provider identifier

    Failures of the underlying remote call must surface as UpstreamError.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the provider name identifier."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name being used."""
        pass

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Get the embedding vector dimensions."""
        pass

    @abstractmethod
    def embed_query(self, query: str) -> list[float]:
        """
        Embed a question for similarity search.

        Args:
            query: Trimmed question text

        Returns:
            Embedding vector as list of floats

        Raises:
            UpstreamError: If the provider call fails or returns no vector
        """
        pass

    def get_info(self) -> dict:
        """
        Get provider information.

        Returns:
            Dictionary with provider details
        """
        return {
            "provider": self.provider_name,
            "model": self.model_name,
            "dimensions": self.dimensions,
        }
