"""Translation client."""

import logging
from typing import Protocol, Sequence

from .prompts import build_translation_prompt
from ..errors import DerivationError, InvalidInput, LLMServiceError

logger = logging.getLogger(__name__)


class PromptEngine(Protocol):
    """Protocol for engines that turn a prompt into text."""

    async def send_prompt(self, prompt: str, **kwargs) -> str:
        """Send a prompt to the engine and get response."""
        ...


class TranslationClient:
    """Translates text through a language model. Holds no state between calls."""

    def __init__(self, engine: PromptEngine):
        self.engine = engine

    async def translate(self,
                        text: str,
                        target_language: str,
                        previous_translations: Sequence[str] = (),
                        original_context: str = "") -> str:
        """Translate `text` into `target_language`.

        Continuity context is supplied by the caller: prior translated
        segments and original-language context keep multi-segment
        translations terminologically consistent.

        Raises:
            InvalidInput: text is empty (no network call is made)
            DerivationError: the language model call failed
        """
        if not text or not text.strip():
            raise InvalidInput("Text is required for translation", stage="derivation")
        if not target_language:
            raise InvalidInput("Target language is required for translation", stage="derivation")

        logger.info(f"Translation request: text='{text[:50]}...', target_language={target_language}")
        prompt = build_translation_prompt(text, target_language, previous_translations, original_context)
        try:
            translated = await self.engine.send_prompt(prompt)
        except LLMServiceError as e:
            logger.error(f"Translation failed: {e}")
            raise DerivationError(f"Translation failed: {e}") from e

        logger.info(f"Translation success: '{translated[:50]}...'")
        return translated
