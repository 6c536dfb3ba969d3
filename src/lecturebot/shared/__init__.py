"""
Shared Module - Common configuration, schemas, errors, and logging.
===================================================================

This module provides foundational components used across all other modules:

- config: Configuration loading and management
- logging: Structured logging setup
- schemas: Pydantic data models (passages, Kakao skill envelope)
- errors: Error taxonomy for the request pipeline
- utils: Small helpers (truncation, secret masking, remote-call retries)
"""

from lecturebot.shared.config import get_settings, reload_settings, Settings
from lecturebot.shared.errors import (
    LectureBotError,
    InvalidInput,
    EmptyInput,
    NoRelevantContent,
    UpstreamError,
    MalformedAnswer,
)
from lecturebot.shared.logging import get_logger, setup_logging
from lecturebot.shared.schemas import (
    PassageChunk,
    PipelineOutcome,
    PipelineResult,
    SkillRequest,
    SkillResponse,
)
from lecturebot.shared.utils import call_with_retry, mask_secret, truncate_text

__all__ = [
    # Config
    "get_settings",
    "reload_settings",
    "Settings",
    # Errors
    "LectureBotError",
    "InvalidInput",
    "EmptyInput",
    "NoRelevantContent",
    "UpstreamError",
    "MalformedAnswer",
    # Logging
    "get_logger",
    "setup_logging",
    # Schemas
    "PassageChunk",
    "PipelineOutcome",
    "PipelineResult",
    "SkillRequest",
    "SkillResponse",
    # Utils
    "call_with_retry",
    "mask_secret",
    "truncate_text",
]
