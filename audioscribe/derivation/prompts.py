"""Prompt construction for translation and summarization."""

from typing import Sequence

from ..models.derivation import SummaryType

LANGUAGE_NAMES = {
    "en": "English",
    "ja": "Japanese",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "zh": "Chinese",
    "ko": "Korean",
}

SUMMARY_DIRECTIVES = {
    SummaryType.SHORT: "Write a short summary of 4-5 lines covering only the key points.",
    SummaryType.MEDIUM: "Write a medium-length summary of 3-4 paragraphs covering the main topics and conclusions.",
    SummaryType.DETAILED: (
        "Write a detailed summary organized into multiple sections with headings: "
        "overview, main topics discussed, decisions or conclusions, and action items or open questions."
    ),
}


def language_name(code: str) -> str:
    """Readable name for a language code; unknown codes are passed through."""
    return LANGUAGE_NAMES.get(code.lower(), code)


def build_translation_prompt(text: str,
                             target_language: str,
                             previous_translations: Sequence[str] = (),
                             original_context: str = "") -> str:
    """Build the translation prompt, including continuity context when given."""
    target = language_name(target_language)
    prompt = f"""You are a professional translator. Translate the text below into {target}.
Keep names, numbers and technical terms accurate. Return only the translation, with no commentary.

"""
    if original_context:
        prompt += f"Original-language context (for reference, do not translate):\n{original_context}\n\n"

    if previous_translations:
        joined = "\n".join(f"{i}. {segment}" for i, segment in enumerate(previous_translations, 1))
        prompt += (f"Previously translated segments (keep terminology and style consistent with these):\n"
                   f"{joined}\n\n")

    prompt += f"Text to translate:\n{text}\n\n{target} translation:"
    return prompt


def build_summary_prompt(transcript: str, summary_type: SummaryType, summary_language: str) -> str:
    """Build the summarization prompt for the requested detail level."""
    return f"""You are an assistant that summarizes spoken transcripts.
{SUMMARY_DIRECTIVES[summary_type]}
Write the summary in {language_name(summary_language)}. Only use information present in the transcript.

Transcript:
{transcript}

Summary:"""
