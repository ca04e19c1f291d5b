"""Explanation translation with silent fallback.

translate_explanation() never raises: it reports success or failure through
a TranslationOutcome, and localize() keeps the original explanation unless
the outcome is a success.
"""

from typing import Optional

from pydantic import BaseModel

from ..errors import LLMCallError, LocalizationError
from ..log import get_logger
from ..schemas.outputs import VerdictPayload
from .client import ChatModel
from .prompts import DEFAULT_LANGUAGE, get_profile, resolve_language

logger = get_logger("localize")


class TranslationOutcome(BaseModel):
    ok: bool
    text: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, text: str) -> "TranslationOutcome":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, error: str) -> "TranslationOutcome":
        return cls(ok=False, error=error)


def needs_translation(language: str) -> bool:
    lang = resolve_language(language)
    if lang is None or lang == DEFAULT_LANGUAGE:
        return False
    return bool(get_profile(lang.value).translation_prompt)


async def _request_translation(text: str, prompt: str, llm: ChatModel, model: str) -> str:
    try:
        translated = await llm.complete(
            [
                {"role": "system", "content": prompt},
                {"role": "user", "content": text},
            ],
            model=model,
        )
    except LLMCallError as e:
        raise LocalizationError(f"Translation request failed: {e}") from e

    translated = translated.strip()
    if not translated:
        raise LocalizationError("Translation response was empty")
    return translated


async def translate_explanation(text: str, language: str, llm: ChatModel, model: str) -> TranslationOutcome:
    prompt = get_profile(language).translation_prompt
    if not prompt:
        return TranslationOutcome.failure(f"No translation prompt for '{language}'")

    try:
        return TranslationOutcome.success(await _request_translation(text, prompt, llm, model))
    except Exception as e:
        # Translation is best effort, any failure keeps the original text.
        logger.warning(f"Error translating explanation: {e}")
        return TranslationOutcome.failure(str(e))


async def localize(payload: VerdictPayload, language: str, llm: ChatModel, model: str) -> VerdictPayload:
    """
    Returns `payload` with its explanation translated into `language`,
    or unchanged when no translation applies or the translation failed.
    """
    if not needs_translation(language) or not payload.explanation.strip():
        return payload

    outcome = await translate_explanation(payload.explanation, language, llm, model)
    if not outcome.ok:
        return payload

    return payload.model_copy(update={"explanation": outcome.text})
