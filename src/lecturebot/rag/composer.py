"""
Composer Module - Refusal policy and answer composition.
========================================================

Turns a question and its retrieved passages into the final answer text:

- no passages → fixed refusal, the model is never called
- passages → grounded prompt → generator → answer text
"""

from typing import Protocol

from lecturebot.rag.prompts import Prompt, PromptBuilder
from lecturebot.shared.config import Settings
from lecturebot.shared.logging import get_logger
from lecturebot.shared.schemas import PassageChunk

logger = get_logger(__name__)


class TextGenerator(Protocol):
    def generate(self, prompt: Prompt) -> str:
        ...


class AnswerComposer:
    """
    Composes policy-constrained answers.

    Example:
        >>> composer = AnswerComposer(generator, builder, not_found, placeholder)
        >>> answer = composer.compose("환불 정책이 어떻게 되나요?", chunks)
    """

    def __init__(
        self,
        generator: TextGenerator,
        prompt_builder: PromptBuilder,
        not_found_message: str,
        empty_answer_message: str,
    ):
        """
        Initialize the composer.

        Args:
            generator: Text generator
            prompt_builder: Builds the grounded prompt
            not_found_message: Returned when no passages were retrieved
            empty_answer_message: Returned when the model answers with blank text
        """
        self.generator = generator
        self.prompt_builder = prompt_builder
        self.not_found_message = not_found_message
        self.empty_answer_message = empty_answer_message

    @classmethod
    def from_settings(cls, generator: TextGenerator, settings: Settings) -> "AnswerComposer":
        """Build a composer wired to the configured persona and messages."""
        messages = settings.messages
        builder = PromptBuilder(
            settings.assistant,
            refusal_message=messages.not_found,
            include_sources=settings.generation.include_sources,
            max_context_chars=settings.generation.max_context_chars,
        )
        return cls(
            generator,
            builder,
            not_found_message=messages.not_found,
            empty_answer_message=messages.empty_answer,
        )

    def compose(self, question: str, chunks: list[PassageChunk]) -> str:
        """
        Compose the answer for a question.

        Args:
            question: Trimmed question
            chunks: Retrieved passages, most similar first

        Returns:
            Answer text

        Raises:
            UpstreamError: If generation fails (MalformedAnswer included)
        """
        if not chunks:
            logger.info("No passages retrieved; returning refusal without generation")
            return self.not_found_message

        prompt = self.prompt_builder.build(question, chunks)
        answer = self.generator.generate(prompt)

        if not answer.strip():
            logger.warning("Model returned a blank answer; using placeholder")
            return self.empty_answer_message

        return answer
