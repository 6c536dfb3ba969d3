"""
Schemas Module - Pydantic data models for the application.
==========================================================

Defines all data contracts used across the application:
- Retrieved passage chunks
- Pipeline outcome
- Kakao i Open Builder skill request and response envelope
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────


class PipelineOutcome(str, Enum):
    """Terminal state of one pipeline run."""

    INVALID = "invalid"
    EMPTY_INPUT = "empty_input"
    REFUSED = "refused"
    ANSWERED = "answered"
    FAILED = "failed"


# ─────────────────────────────────────────────────────────────────────────────
# Retrieval Models
# ─────────────────────────────────────────────────────────────────────────────


class PassageChunk(BaseModel):
    """
    A retrieved unit of lecture content.

    Produced by the retriever, consumed only by the answer composer.
    Immutable once returned.
    """

    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Passage text")
    source: Optional[str] = Field(default=None, description="Lecture or section label")
    score: Optional[float] = Field(default=None, description="Similarity reported by the index")


class PipelineResult(BaseModel):
    """Answer text plus the state the pipeline ended in."""

    text: str = Field(..., description="Text to place in the response envelope")
    outcome: PipelineOutcome = Field(..., description="Terminal pipeline state")
    chunks: list[PassageChunk] = Field(
        default_factory=list, description="Passages the answer was grounded on"
    )

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)


# ─────────────────────────────────────────────────────────────────────────────
# Kakao Skill Request
# ─────────────────────────────────────────────────────────────────────────────


class SkillUserRequest(BaseModel):
    """The userRequest block of a skill payload."""

    model_config = ConfigDict(extra="allow")

    utterance: Optional[str] = None


class SkillRequest(BaseModel):
    """
    Inbound skill payload.

    Only userRequest.utterance carries meaning here; every other field the
    platform sends (bot, intent, action, ...) is accepted and ignored.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    user_request: Optional[SkillUserRequest] = Field(default=None, alias="userRequest")

    @property
    def utterance(self) -> Optional[str]:
        """Raw utterance, or None when the field is absent."""
        if self.user_request is None:
            return None
        return self.user_request.utterance


# ─────────────────────────────────────────────────────────────────────────────
# Kakao Skill Response
# ─────────────────────────────────────────────────────────────────────────────


class SimpleText(BaseModel):
    text: str


class SimpleTextOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    simple_text: SimpleText = Field(..., alias="simpleText")


class SkillTemplate(BaseModel):
    outputs: list[SimpleTextOutput]


class SkillResponse(BaseModel):
    """
    Outbound skill envelope holding exactly one simpleText output.

    Serialized shape:
        {"version": "2.0", "template": {"outputs": [{"simpleText": {"text": ...}}]}}
    """

    version: str = "2.0"
    template: SkillTemplate

    @classmethod
    def from_text(cls, text: str) -> "SkillResponse":
        """Wrap a single answer string."""
        return cls(
            template=SkillTemplate(
                outputs=[SimpleTextOutput(simple_text=SimpleText(text=text))]
            )
        )

    @property
    def text(self) -> str:
        """The wrapped answer string."""
        return self.template.outputs[0].simple_text.text

    def to_payload(self) -> dict[str, Any]:
        """Serialize with the platform's camelCase field names."""
        return self.model_dump(by_alias=True)
