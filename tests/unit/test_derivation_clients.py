"""Unit tests for TranslationClient, SummarizationClient and prompt building."""

import asyncio

import pytest

from audioscribe.derivation.prompts import build_summary_prompt, build_translation_prompt, language_name
from audioscribe.derivation.summarization import SummarizationClient, parse_summary_type
from audioscribe.derivation.translation import TranslationClient
from audioscribe.errors import DerivationError, InvalidInput, LLMServiceError
from audioscribe.models.derivation import SummaryType

from conftest import FakePromptEngine


@pytest.mark.unit
class TestTranslationClient:

    def test_translate(self):
        engine = FakePromptEngine(["Hola mundo"])
        client = TranslationClient(engine)

        result = asyncio.run(client.translate("Hello world", "es"))

        assert result == "Hola mundo"
        assert len(engine.prompts) == 1
        assert "Hello world" in engine.prompts[0]
        assert "Spanish" in engine.prompts[0]

    def test_continuity_context_in_prompt(self):
        engine = FakePromptEngine(["Part two"])
        client = TranslationClient(engine)

        asyncio.run(client.translate("第二部", "en",
                                     previous_translations=["Part one"],
                                     original_context="第一部"))

        prompt = engine.prompts[0]
        assert "1. Part one" in prompt
        assert "第一部" in prompt

    @pytest.mark.parametrize("text", ["", "   \n"])
    def test_empty_text_makes_no_call(self, text):
        engine = FakePromptEngine()

        with pytest.raises(InvalidInput):
            asyncio.run(TranslationClient(engine).translate(text, "en"))

        assert engine.prompts == []

    def test_engine_failure(self):
        engine = FakePromptEngine([LLMServiceError("LLM API error: 500 - oops", status=500)])

        with pytest.raises(DerivationError) as excinfo:
            asyncio.run(TranslationClient(engine).translate("Hello", "ja"))

        assert str(excinfo.value).startswith("Translation failed:")


@pytest.mark.unit
class TestSummarizationClient:

    @pytest.mark.parametrize("summary_type,marker", [
        ("short", "4-5 lines"),
        ("medium", "3-4 paragraphs"),
        ("detailed", "multiple sections"),
    ])
    def test_summary_level_reaches_prompt(self, summary_type, marker):
        engine = FakePromptEngine(["summary"])

        asyncio.run(SummarizationClient(engine).summarize("transcript text", summary_type, "en"))

        assert marker in engine.prompts[0]
        assert "English" in engine.prompts[0]

    def test_model_text_returned_unchanged(self):
        long_text = "\n".join(f"line {i}" for i in range(40))
        engine = FakePromptEngine([long_text])

        result = asyncio.run(SummarizationClient(engine).summarize("text", SummaryType.SHORT, "ja"))

        assert result == long_text

    def test_empty_transcript_makes_no_call(self):
        engine = FakePromptEngine()

        with pytest.raises(InvalidInput):
            asyncio.run(SummarizationClient(engine).summarize("", "short", "ja"))

        assert engine.prompts == []

    def test_unknown_summary_type(self):
        engine = FakePromptEngine()

        with pytest.raises(InvalidInput):
            asyncio.run(SummarizationClient(engine).summarize("text", "tiny", "ja"))

        assert engine.prompts == []

    def test_engine_failure(self):
        engine = FakePromptEngine([LLMServiceError("LLM request timed out after 1s")])

        with pytest.raises(DerivationError) as excinfo:
            asyncio.run(SummarizationClient(engine).summarize("text", "medium", "ja"))

        assert "Summarization failed" in str(excinfo.value)


@pytest.mark.unit
def test_parse_summary_type():
    assert parse_summary_type("SHORT") is SummaryType.SHORT
    assert parse_summary_type(SummaryType.DETAILED) is SummaryType.DETAILED


@pytest.mark.unit
def test_language_name_passthrough():
    assert language_name("ja") == "Japanese"
    assert language_name("pt-BR") == "pt-BR"


@pytest.mark.unit
def test_prompts_without_context():
    prompt = build_translation_prompt("text", "fr")
    assert "Previously translated" not in prompt
    assert "Original-language context" not in prompt
    assert "French translation:" in prompt
    assert "Transcript:\nhello" in build_summary_prompt("hello", SummaryType.MEDIUM, "ja")
