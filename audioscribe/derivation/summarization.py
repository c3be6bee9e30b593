"""Summarization client."""

import logging
from typing import Union

from .prompts import build_summary_prompt
from .translation import PromptEngine
from ..errors import DerivationError, InvalidInput, LLMServiceError
from ..models.derivation import SummaryType

logger = logging.getLogger(__name__)


def parse_summary_type(value: Union[str, SummaryType]) -> SummaryType:
    """Accept "short" / "medium" / "detailed" or a SummaryType."""
    if isinstance(value, SummaryType):
        return value
    try:
        return SummaryType(str(value).lower())
    except ValueError:
        choices = ", ".join(t.value for t in SummaryType)
        raise InvalidInput(f"Unknown summary type '{value}' (expected one of: {choices})",
                           stage="derivation") from None


class SummarizationClient:
    """Summarizes a transcript through a language model.

    The requested level is passed to the model as-is; the returned text is
    neither truncated nor padded locally.
    """

    def __init__(self, engine: PromptEngine):
        self.engine = engine

    async def summarize(self,
                        transcript: str,
                        summary_type: Union[str, SummaryType] = SummaryType.MEDIUM,
                        summary_language: str = "ja") -> str:
        """Summarize `transcript`.

        Raises:
            InvalidInput: empty transcript or unknown summary type (no network call)
            DerivationError: the language model call failed
        """
        if not transcript or not transcript.strip():
            raise InvalidInput("Transcript is required for summarization", stage="derivation")
        level = parse_summary_type(summary_type)

        logger.info(f"Summarize request: type={level.value}, language={summary_language}")
        prompt = build_summary_prompt(transcript, level, summary_language)
        try:
            summary = await self.engine.send_prompt(prompt)
        except LLMServiceError as e:
            logger.error(f"Summarization failed: {e}")
            raise DerivationError(f"Summarization failed: {e}") from e

        logger.info(f"Summarize success: '{summary[:50]}...'")
        return summary
