"""
Tests for Shared Module.
========================

Tests for:
- Configuration loading and environment overrides
- Error taxonomy
- Retry helper and text utilities
- Skill envelope schemas
"""

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from lecturebot.shared.errors import (
    EmptyInput,
    InvalidInput,
    LectureBotError,
    MalformedAnswer,
    UpstreamError,
)


# ─────────────────────────────────────────────────────────────────────────────
# Configuration Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestConfig:
    """Tests for configuration loading."""

    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        for name in ("TOP_K", "SIMILARITY_THRESHOLD", "LOG_LEVEL", "GEMINI_API_KEY"):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        """Test built-in defaults."""
        from lecturebot.shared.config import Settings

        settings = Settings()

        assert settings.get_effective_top_k() == 3
        assert settings.get_effective_threshold() is None
        assert settings.generation.temperature == 0.3
        assert settings.server.path == "/api/chat"
        assert settings.messages.method_not_allowed == "Method not allowed"

    def test_load_settings_from_yaml(self, tmp_path):
        """Test that YAML values override defaults."""
        from lecturebot.shared.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text(
            "retrieval:\n"
            "  top_k: 5\n"
            "  similarity_threshold: 0.7\n"
            "generation:\n"
            "  model_name: gemini-test\n"
            "logging:\n"
            "  level: warning\n",
            encoding="utf-8",
        )

        settings = load_settings(config_file)

        assert settings.get_effective_top_k() == 5
        assert settings.get_effective_threshold() == 0.7
        assert settings.generation.model_name == "gemini-test"
        assert settings.get_effective_log_level() == "WARNING"

    def test_missing_yaml_falls_back_to_defaults(self, tmp_path):
        """Test that a missing file is not an error."""
        from lecturebot.shared.config import load_settings

        settings = load_settings(tmp_path / "absent.yaml")

        assert settings.get_effective_top_k() == 3

    def test_env_overrides(self, tmp_path, monkeypatch):
        """Test that environment variables win over YAML."""
        from lecturebot.shared.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("retrieval:\n  top_k: 5\n", encoding="utf-8")
        monkeypatch.setenv("TOP_K", "8")
        monkeypatch.setenv("SIMILARITY_THRESHOLD", "0.55")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("GEMINI_API_KEY", "  env-key  ")

        settings = load_settings(config_file)

        assert settings.get_effective_top_k() == 8
        assert settings.get_effective_threshold() == 0.55
        assert settings.get_effective_log_level() == "DEBUG"
        assert settings.gemini_api_key == "env-key"

    def test_invalid_top_k_rejected(self, tmp_path):
        """Test that a zero result count is a configuration error."""
        from lecturebot.shared.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("retrieval:\n  top_k: 0\n", encoding="utf-8")

        with pytest.raises(ValidationError):
            load_settings(config_file)


# ─────────────────────────────────────────────────────────────────────────────
# Error Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestErrors:
    """Tests for the error taxonomy."""

    def test_hierarchy(self):
        assert issubclass(InvalidInput, LectureBotError)
        assert issubclass(EmptyInput, LectureBotError)
        assert issubclass(MalformedAnswer, UpstreamError)

    @pytest.mark.parametrize(
        "status, retryable",
        [(400, False), (401, False), (404, False), (408, True), (429, True), (500, True), (503, True)],
    )
    def test_from_status(self, status, retryable):
        """Test which statuses are worth retrying."""
        error = UpstreamError.from_status("search", status, "boom")

        assert error.status_code == status
        assert error.retryable is retryable

    def test_str_includes_provider_and_status(self):
        error = UpstreamError.from_status("generation", 429, "quota exceeded")

        assert str(error) == "generation error (429): quota exceeded"

    def test_malformed_answer_not_retryable(self):
        error = MalformedAnswer("no candidates")

        assert error.provider == "generation"
        assert error.retryable is False


# ─────────────────────────────────────────────────────────────────────────────
# Utility Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestUtils:
    """Tests for utility functions."""

    def test_truncate_text(self):
        from lecturebot.shared.utils import truncate_text

        assert truncate_text("short", 10) == "short"
        assert truncate_text("a" * 20, 10) == "aaaaaaa..."

    @pytest.mark.parametrize(
        "value, expected",
        [("", "(not set)"), ("abc", "***"), ("abcdefgh", "abcd****")],
    )
    def test_mask_secret(self, value, expected):
        from lecturebot.shared.utils import mask_secret

        assert mask_secret(value) == expected

    def test_retry_returns_first_success(self):
        from lecturebot.shared.utils import call_with_retry

        func = MagicMock(return_value="ok")

        assert call_with_retry(func, operation="test", min_wait=0, max_wait=0) == "ok"
        assert func.call_count == 1

    def test_retry_recovers_from_retryable_error(self):
        from lecturebot.shared.utils import call_with_retry

        func = MagicMock(
            side_effect=[UpstreamError("search", "timeout", retryable=True), "ok"]
        )

        assert call_with_retry(func, operation="test", min_wait=0, max_wait=0) == "ok"
        assert func.call_count == 2

    def test_retry_bounded(self):
        """Test that attempts stop at the limit and the last error propagates."""
        from lecturebot.shared.utils import call_with_retry

        error = UpstreamError("search", "timeout", retryable=True)
        func = MagicMock(side_effect=error)

        with pytest.raises(UpstreamError) as exc_info:
            call_with_retry(func, operation="test", max_attempts=3, min_wait=0, max_wait=0)

        assert exc_info.value is error
        assert func.call_count == 3

    @pytest.mark.parametrize(
        "error",
        [UpstreamError("search", "bad request", status_code=400), ValueError("bug")],
    )
    def test_retry_skips_permanent_errors(self, error):
        from lecturebot.shared.utils import call_with_retry

        func = MagicMock(side_effect=error)

        with pytest.raises(type(error)):
            call_with_retry(func, operation="test", max_attempts=3, min_wait=0, max_wait=0)

        assert func.call_count == 1


# ─────────────────────────────────────────────────────────────────────────────
# Schema Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestSchemas:
    """Tests for Pydantic schemas."""

    def test_skill_response_payload(self):
        from lecturebot.shared.schemas import SkillResponse

        payload = SkillResponse.from_text("안녕하세요").to_payload()

        assert payload == {
            "version": "2.0",
            "template": {"outputs": [{"simpleText": {"text": "안녕하세요"}}]},
        }

    def test_skill_request_reads_utterance(self):
        from lecturebot.shared.schemas import SkillRequest

        request = SkillRequest.model_validate(
            {"intent": {"id": "x"}, "userRequest": {"utterance": "질문", "lang": "ko"}}
        )

        assert request.utterance == "질문"

    def test_skill_request_without_user_request(self):
        from lecturebot.shared.schemas import SkillRequest

        assert SkillRequest.model_validate({}).utterance is None

    def test_passage_chunk_is_frozen(self):
        from lecturebot.shared.schemas import PassageChunk

        chunk = PassageChunk(content="내용", source="1강", score=0.9)

        with pytest.raises(ValidationError):
            chunk.content = "변경"

    def test_pipeline_result_chunk_count(self):
        from lecturebot.shared.schemas import PassageChunk, PipelineOutcome, PipelineResult

        result = PipelineResult(
            text="답변",
            outcome=PipelineOutcome.ANSWERED,
            chunks=[PassageChunk(content="a"), PassageChunk(content="b")],
        )

        assert result.chunk_count == 2
