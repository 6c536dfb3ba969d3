"""
Retriever Module - Passage retrieval from the similarity index.
===============================================================

Takes a question embedding and returns the top-k lecture passages in the
order reported by the search service. No re-ranking is performed.
"""

from typing import Optional, Protocol

from lecturebot.shared.config import Settings
from lecturebot.shared.logging import get_logger
from lecturebot.shared.schemas import PassageChunk

logger = get_logger(__name__)


class SimilaritySearch(Protocol):
    """Anything that can answer a nearest-neighbour query."""

    def query(
        self,
        embedding: list[float],
        match_count: int,
        match_threshold: Optional[float] = None,
    ) -> list[PassageChunk]:
        ...


class Retriever:
    """
    Retrieves relevant passages from the similarity search service.

    An empty result is a valid outcome ("no sufficiently relevant content")
    and is returned as an empty list. Service failures propagate as
    UpstreamError.

    Example:
        >>> retriever = Retriever(store, top_k=3)
        >>> chunks = retriever.retrieve(embedding)
    """

    def __init__(
        self,
        store: SimilaritySearch,
        top_k: int = 3,
        similarity_threshold: Optional[float] = None,
    ):
        """
        Initialize the retriever.

        Args:
            store: Similarity search backend
            top_k: Number of passages to request
            similarity_threshold: Minimum similarity score (None disables filtering)
        """
        if top_k < 1:
            raise ValueError(f"top_k must be at least 1, got {top_k}")

        self.store = store
        self.top_k = top_k
        self.similarity_threshold = similarity_threshold

        logger.debug(
            f"Retriever initialized: top_k={self.top_k}, "
            f"threshold={self.similarity_threshold}"
        )

    @classmethod
    def from_settings(cls, store: SimilaritySearch, settings: Settings) -> "Retriever":
        """Build a retriever using the effective top-k and threshold."""
        return cls(
            store,
            top_k=settings.get_effective_top_k(),
            similarity_threshold=settings.get_effective_threshold(),
        )

    def retrieve(self, embedding: list[float]) -> list[PassageChunk]:
        """
        Fetch the passages most similar to a question embedding.

        Args:
            embedding: Question embedding

        Returns:
            At most top_k passages, most similar first
        """
        chunks = self.store.query(
            embedding,
            match_count=self.top_k,
            match_threshold=self.similarity_threshold,
        )

        # The RPC may ignore match_threshold; enforce it here as well
        if self.similarity_threshold is not None:
            chunks = [
                c for c in chunks
                if c.score is None or c.score >= self.similarity_threshold
            ]

        return list(chunks[: self.top_k])
