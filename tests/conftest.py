"""
Pytest Configuration and Fixtures.
===================================

Shared fixtures for all test modules:
- Settings built explicitly (no YAML, no process-wide cache)
- Sample passages
- Mocked providers and a pipeline factory wired to them
"""

from types import SimpleNamespace
from typing import Callable, Optional
from unittest.mock import MagicMock

import pytest

from lecturebot.indexing.embeddings_base import EmbeddingProvider
from lecturebot.rag.composer import AnswerComposer
from lecturebot.rag.pipeline import RAGPipeline
from lecturebot.rag.retriever import Retriever
from lecturebot.shared.config import LoggingConfig, ResilienceConfig, Settings
from lecturebot.shared.schemas import PassageChunk


# ─────────────────────────────────────────────────────────────────────────────
# Settings Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def settings() -> Settings:
    """Settings with fast retries and fake credentials."""
    return Settings(
        GEMINI_API_KEY="test-gemini-key",
        SUPABASE_URL="https://example.supabase.co",
        SUPABASE_SERVICE_KEY="test-service-key",
        TOP_K=None,
        SIMILARITY_THRESHOLD=None,
        resilience=ResilienceConfig(max_attempts=2, retry_min_wait=0, retry_max_wait=0),
        logging=LoggingConfig(level="DEBUG", rich_console=False),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Sample Data Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_embedding() -> list[float]:
    """A short deterministic embedding."""
    return [0.1, 0.2, 0.3, 0.4]


@pytest.fixture
def refund_chunks() -> list[PassageChunk]:
    """Two passages about the refund policy."""
    return [
        PassageChunk(
            content="수강 시작 후 7일 이내에는 전액 환불이 가능합니다.",
            source="OT 강의",
            score=0.91,
        ),
        PassageChunk(
            content="7일이 지난 경우 남은 강의 비율에 따라 부분 환불됩니다.",
            source="OT 강의",
            score=0.84,
        ),
    ]


@pytest.fixture
def ad_chunks() -> list[PassageChunk]:
    """Three passages about Meta ad campaigns."""
    return [
        PassageChunk(content="캠페인 예산은 광고 세트가 아닌 캠페인 단위로 설정합니다.", source="3강", score=0.88),
        PassageChunk(content="학습 단계에서는 예산을 크게 바꾸지 않는 것이 좋습니다.", source="3강", score=0.8),
        PassageChunk(content="전환 캠페인은 픽셀 이벤트 설정이 선행되어야 합니다.", score=0.7),
    ]


# ─────────────────────────────────────────────────────────────────────────────
# Mock Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_pipeline(settings: Settings, sample_embedding: list[float]) -> Callable:
    """
    Factory building a pipeline on mocked collaborators.

    Returns (pipeline, embedder, store, generator); the mocks expose call
    counts for assertions.
    """

    def _make(
        chunks: Optional[list[PassageChunk]] = None,
        answer: str = "모의 답변입니다.",
        embed_error: Optional[Exception] = None,
        search_error: Optional[Exception] = None,
        generate_error: Optional[Exception] = None,
    ):
        embedder = MagicMock(spec=EmbeddingProvider)
        if embed_error is not None:
            embedder.embed_query.side_effect = embed_error
        else:
            embedder.embed_query.return_value = sample_embedding

        store = MagicMock()
        if search_error is not None:
            store.query.side_effect = search_error
        else:
            store.query.return_value = list(chunks or [])

        generator = MagicMock()
        if generate_error is not None:
            generator.generate.side_effect = generate_error
        else:
            generator.generate.return_value = answer

        pipeline = RAGPipeline(
            embedder,
            Retriever.from_settings(store, settings),
            AnswerComposer.from_settings(generator, settings),
            messages=settings.messages,
        )
        return pipeline, embedder, store, generator

    return _make


def make_genai_response(*texts: Optional[str]) -> SimpleNamespace:
    """Build an object shaped like a generate_content response."""
    parts = [SimpleNamespace(text=t) for t in texts]
    candidate = SimpleNamespace(content=SimpleNamespace(parts=parts), finish_reason="STOP")
    return SimpleNamespace(candidates=[candidate])


@pytest.fixture
def genai_response() -> Callable[..., SimpleNamespace]:
    """Factory for fake generate_content responses."""
    return make_genai_response


# ─────────────────────────────────────────────────────────────────────────────
# Pytest Configuration
# ─────────────────────────────────────────────────────────────────────────────


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "requires_api: marks tests that require API keys"
    )
