"""
Normalizer Module - Utterance extraction and validation.
========================================================

Classifies the incoming question before any remote call is made:

- utterance field absent → InvalidInput
- blank after trimming → EmptyInput
- otherwise → trimmed question
"""

from typing import Any, Optional

from pydantic import ValidationError

from lecturebot.shared.errors import EmptyInput, InvalidInput
from lecturebot.shared.schemas import SkillRequest


def extract_utterance(payload: Any) -> Optional[str]:
    """
    Read userRequest.utterance from a skill payload.

    Returns None when the payload is not an object, the field is missing,
    or the field is not a string.
    """
    if not isinstance(payload, dict):
        return None

    try:
        request = SkillRequest.model_validate(payload)
    except ValidationError:
        return None

    return request.utterance


def normalize_question(utterance: Optional[str]) -> str:
    """
    Validate and trim an utterance.

    Raises:
        InvalidInput: If the utterance is absent
        EmptyInput: If the utterance is empty or whitespace-only
    """
    if utterance is None:
        raise InvalidInput("userRequest.utterance is missing")

    question = utterance.strip()
    if not question:
        raise EmptyInput("utterance is blank")

    return question
