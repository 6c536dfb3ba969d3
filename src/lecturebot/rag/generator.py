"""
Generator Module - LLM generation for grounded answers.
=======================================================

Sends a Prompt to the Gemini API with bounded decoding parameters (low
temperature, short output) and extracts the answer text from the response.
"""

import threading
from typing import Any, Optional

from google.genai import types

from lecturebot.indexing.gemini import create_client, translate_error
from lecturebot.rag.prompts import Prompt
from lecturebot.shared.config import Settings
from lecturebot.shared.errors import MalformedAnswer
from lecturebot.shared.logging import get_logger
from lecturebot.shared.utils import call_with_retry

logger = get_logger(__name__)

PROVIDER = "generation"


class Generator:
    """
    LLM generator using the Gemini API.

    Example:
        >>> generator = Generator(settings)
        >>> text = generator.generate(prompt)
    """

    def __init__(
        self,
        settings: Settings,
        model_name: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        client: Any = None,
    ):
        """
        Initialize the generator.

        Args:
            settings: Application settings
            model_name: Gemini model name (default from config)
            temperature: Generation temperature (default from config)
            max_tokens: Maximum tokens to generate (default from config)
            client: Pre-built genai.Client, mainly for tests
        """
        gen_config = settings.generation

        self.model_name = model_name or gen_config.model_name
        self.temperature = temperature if temperature is not None else gen_config.temperature
        self.max_tokens = max_tokens or gen_config.max_output_tokens
        self.timeout = gen_config.timeout_seconds
        self._api_key = settings.gemini_api_key
        self._resilience = settings.resilience
        self._client = client
        self._client_lock = threading.Lock()

        logger.debug(
            f"Generator initialized: model={self.model_name}, "
            f"temp={self.temperature}, max_tokens={self.max_tokens}"
        )

    @property
    def client(self):
        """Lazy-load Gemini client."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = create_client(self._api_key, self.timeout)
        return self._client

    def build_config(self, prompt: Prompt) -> types.GenerateContentConfig:
        """Decoding parameters sent with every request."""
        return types.GenerateContentConfig(
            system_instruction=prompt.system,
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
        )

    def generate(self, prompt: Prompt) -> str:
        """
        Generate an answer for a prompt.

        Args:
            prompt: System instruction and user message

        Returns:
            The generated text, unmodified. May be blank if the model
            produced an empty answer.

        Raises:
            UpstreamError: If the call fails
            MalformedAnswer: If the response carries no text field
        """
        return call_with_retry(
            lambda: self._generate_once(prompt),
            operation="generation",
            max_attempts=self._resilience.max_attempts,
            min_wait=self._resilience.retry_min_wait,
            max_wait=self._resilience.retry_max_wait,
        )

    def _generate_once(self, prompt: Prompt) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt.user,
                config=self.build_config(prompt),
            )
        except Exception as e:
            raise translate_error(PROVIDER, e) from e

        return extract_text(response)


def extract_text(response: Any) -> str:
    """
    Pull the answer text out of a generate_content response.

    Text from every part of the first candidate is concatenated. A part list
    with no text at all is malformed; text that is present but blank is
    returned as-is so the caller can decide what to show.
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        raise MalformedAnswer("response contains no candidates")

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) if content is not None else None
    if not parts:
        finish_reason = getattr(candidates[0], "finish_reason", None)
        raise MalformedAnswer(f"candidate has no content parts (finish_reason={finish_reason})")

    texts = [part.text for part in parts if isinstance(getattr(part, "text", None), str)]
    if not texts:
        raise MalformedAnswer("candidate parts carry no text")

    return "".join(texts)
