"""
Pipeline Module - End-to-end question answering.
================================================

Runs the four stages strictly in order, each awaiting the previous one:

    normalize → embed → retrieve → compose

The pipeline is the single top-level failure handler: every path ends in a
PipelineResult with user-safe text, never in an exception. Instances hold
no per-request state and can serve concurrent requests.
"""

from typing import Any, Optional

from lecturebot.indexing.embeddings_base import EmbeddingProvider
from lecturebot.rag.composer import AnswerComposer
from lecturebot.rag.normalizer import extract_utterance, normalize_question
from lecturebot.rag.retriever import Retriever
from lecturebot.shared.config import MessagesConfig, Settings
from lecturebot.shared.errors import (
    EmptyInput,
    InvalidInput,
    NoRelevantContent,
    UpstreamError,
)
from lecturebot.shared.logging import get_logger
from lecturebot.shared.schemas import PipelineOutcome, PipelineResult
from lecturebot.shared.utils import truncate_text

logger = get_logger(__name__)


class RAGPipeline:
    """
    Question → grounded answer pipeline.

    Example:
        >>> pipeline = RAGPipeline.from_settings(get_settings())
        >>> result = pipeline.answer("환불 정책이 어떻게 되나요?")
        >>> print(result.outcome, result.text)
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        retriever: Retriever,
        composer: AnswerComposer,
        messages: Optional[MessagesConfig] = None,
    ):
        self.embedder = embedder
        self.retriever = retriever
        self.composer = composer
        self.messages = messages or MessagesConfig()

    @classmethod
    def from_settings(cls, settings: Settings) -> "RAGPipeline":
        """
        Wire the production providers from a Settings instance.

        Remote clients are created lazily, on first use.
        """
        from lecturebot.indexing.embeddings_gemini import GeminiEmbeddingProvider
        from lecturebot.indexing.vector_store import SupabaseVectorStore
        from lecturebot.rag.generator import Generator

        embedder = GeminiEmbeddingProvider(settings)
        retriever = Retriever.from_settings(SupabaseVectorStore(settings), settings)
        composer = AnswerComposer.from_settings(Generator(settings), settings)

        return cls(embedder, retriever, composer, messages=settings.messages)

    def handle_payload(self, payload: Any) -> PipelineResult:
        """Answer a raw skill payload (already JSON-decoded)."""
        return self.answer(extract_utterance(payload))

    def answer(self, utterance: Optional[str]) -> PipelineResult:
        """
        Run the full pipeline for one utterance.

        Args:
            utterance: Raw utterance, or None when the field was absent

        Returns:
            PipelineResult whose text is always safe to show the user
        """
        try:
            question = normalize_question(utterance)
        except InvalidInput:
            logger.warning("Request without utterance field")
            return PipelineResult(
                text=self.messages.invalid_request,
                outcome=PipelineOutcome.INVALID,
            )
        except EmptyInput:
            return PipelineResult(
                text=self.messages.empty_input,
                outcome=PipelineOutcome.EMPTY_INPUT,
            )

        logger.info(f"Question: {truncate_text(question, 80)}")

        try:
            embedding = self.embedder.embed_query(question)
            logger.info(f"Embedding done, dim={len(embedding)}")

            chunks = self.retriever.retrieve(embedding)
            logger.info(f"Passages found: {len(chunks)}")

            if not chunks:
                raise NoRelevantContent(question)

            answer = self.composer.compose(question, chunks)
            logger.info(f"Answer generated, length={len(answer)}")

        except NoRelevantContent:
            logger.info("No passages retrieved; answering with refusal")
            return PipelineResult(
                text=self.composer.not_found_message,
                outcome=PipelineOutcome.REFUSED,
            )
        except UpstreamError as e:
            logger.error(f"Pipeline failed: {e}")
            return self._failed()
        except Exception:
            logger.exception("Unexpected pipeline failure")
            return self._failed()

        return PipelineResult(
            text=answer,
            outcome=PipelineOutcome.ANSWERED,
            chunks=list(chunks),
        )

    def _failed(self) -> PipelineResult:
        return PipelineResult(text=self.messages.apology, outcome=PipelineOutcome.FAILED)
