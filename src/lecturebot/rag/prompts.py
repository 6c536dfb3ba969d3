"""
Prompts Module - Grounded prompt construction.
==============================================

A prompt is assembled from three sections:

- policy: who the assistant is and how it must answer (system instruction)
- context: the retrieved lecture passages
- task: the student's literal question

Provider limits (how much context fits) are handled here, so the composer
never deals with them.
"""

from dataclasses import dataclass
from typing import Optional

from lecturebot.shared.config import AssistantConfig
from lecturebot.shared.logging import get_logger
from lecturebot.shared.schemas import PassageChunk

logger = get_logger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Templates
# ─────────────────────────────────────────────────────────────────────────────


POLICY_TEMPLATE = """당신은 "{academy_name}"의 {subject} 전문 교육 AI 어시스턴트입니다.

아래 강의 내용을 기반으로 {audience}의 질문에 답변하세요.

답변 원칙:
- 한국어, 존댓말 사용
- 친절하지만 간결하게 답변
- 실용적이고 구체적으로 답변 (추상적 조언 X)
- 강의 내용에 없는 질문이면 솔직하게 "{refusal}" 라고 안내
- 답변은 {channel} 메시지에 적합한 길이로 (너무 길지 않게)"""

CONTEXT_TEMPLATE = "[강의 내용]\n{context}"

TASK_TEMPLATE = "[{audience} 질문]\n{question}"


@dataclass(frozen=True)
class Prompt:
    """A provider-neutral prompt: system instruction plus user message."""

    system: str
    user: str


# ─────────────────────────────────────────────────────────────────────────────
# Context Formatting
# ─────────────────────────────────────────────────────────────────────────────


def format_chunk(index: int, chunk: PassageChunk, include_source: bool = True) -> str:
    """Format one passage as "[i] (source) content" with a 1-based index."""
    if include_source and chunk.source:
        return f"[{index}] ({chunk.source}) {chunk.content}"
    return f"[{index}] {chunk.content}"


def format_context(
    chunks: list[PassageChunk],
    include_sources: bool = True,
    max_chars: Optional[int] = None,
) -> str:
    """
    Join passages in received order, separated by blank lines.

    When max_chars is set, passages are added until the budget is spent.
    The first passage is always kept, cut down to the budget if necessary.
    """
    parts: list[str] = []
    used = 0

    for i, chunk in enumerate(chunks, 1):
        text = format_chunk(i, chunk, include_source=include_sources)
        separator = 2 if parts else 0

        if max_chars is not None and used + separator + len(text) > max_chars:
            if not parts:
                parts.append(text[:max_chars])
            logger.debug(f"Context budget reached after {len(parts)} of {len(chunks)} passages")
            break

        parts.append(text)
        used += separator + len(text)

    return "\n\n".join(parts)


# ─────────────────────────────────────────────────────────────────────────────
# Prompt Builder
# ─────────────────────────────────────────────────────────────────────────────


class PromptBuilder:
    """
    Builds grounded prompts for answer generation.

    Example:
        >>> builder = PromptBuilder(AssistantConfig(), refusal_message="...")
        >>> prompt = builder.build(question, chunks)
        >>> prompt.system, prompt.user
    """

    def __init__(
        self,
        assistant: AssistantConfig,
        refusal_message: str,
        include_sources: bool = True,
        max_context_chars: Optional[int] = None,
    ):
        """
        Initialize the prompt builder.

        Args:
            assistant: Persona settings
            refusal_message: Text the model must use when the context does not cover the question
            include_sources: Whether to prefix passages with their source label
            max_context_chars: Character budget for the context section
        """
        self.assistant = assistant
        self.refusal_message = refusal_message
        self.include_sources = include_sources
        self.max_context_chars = max_context_chars

    def policy_section(self) -> str:
        """Behavior policy used as the system instruction."""
        return POLICY_TEMPLATE.format(
            academy_name=self.assistant.academy_name,
            subject=self.assistant.subject,
            audience=self.assistant.audience,
            channel=self.assistant.channel,
            refusal=self.refusal_message,
        )

    def context_section(self, chunks: list[PassageChunk]) -> str:
        context = format_context(
            chunks,
            include_sources=self.include_sources,
            max_chars=self.max_context_chars,
        )
        return CONTEXT_TEMPLATE.format(context=context)

    def task_section(self, question: str) -> str:
        return TASK_TEMPLATE.format(audience=self.assistant.audience, question=question)

    def build(self, question: str, chunks: list[PassageChunk]) -> Prompt:
        """
        Build the full prompt.

        Args:
            question: Trimmed student question
            chunks: Retrieved passages (non-empty)

        Returns:
            Prompt with system instruction and user message
        """
        user = f"{self.context_section(chunks)}\n\n{self.task_section(question)}"
        return Prompt(system=self.policy_section(), user=user)
