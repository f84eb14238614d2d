"""Unit tests for prompt templates and the enhance/translate stage adapters."""

from __future__ import annotations

from podtranslate.llm.enhancer import TranscriptEnhancer
from podtranslate.llm.prompts import DEFAULT_TRANSCRIPTION_CONTEXT, PromptLibrary, language_name
from podtranslate.llm.translator import OllamaTranslator
from tests.fakes import FakeOllamaClient


def test_language_name_maps_known_codes_and_passes_unknown_through() -> None:
    """Prompts use English language names where known."""

    assert language_name("fr") == "French"
    assert language_name("EN") == "English"
    assert language_name("nl") == "nl"


def test_transcription_prompt_includes_context_hints_and_episode() -> None:
    """Domain context, word hints and episode context are joined in order."""

    prompt = PromptLibrary().transcription_prompt(
        ("Java", "JDK", "GraalVM"), episode_context="Guest: Duke."
    )

    assert prompt.startswith(DEFAULT_TRANSCRIPTION_CONTEXT)
    assert "Java, JDK, GraalVM." in prompt
    assert prompt.endswith("Guest: Duke.")


def test_transcription_prompt_without_hints_is_just_context() -> None:
    """No hints and no episode context leave only the domain preamble."""

    assert PromptLibrary("Custom context.").transcription_prompt(()) == "Custom context."


def test_translate_prompt_names_languages_and_ends_with_cue() -> None:
    """The translation prompt names both languages and ends with the answer cue."""

    prompt = PromptLibrary().translate_prompt("Hello there.", "en", "fr")

    assert "Translate the following English text to French." in prompt
    assert "Hello there." in prompt
    assert prompt.endswith("Translation in French:")


def test_enhancer_sends_one_generate_call_with_enhance_stage() -> None:
    """Enhancement is a single generate call tagged with the `enhance` stage."""

    client = FakeOllamaClient(responses={"enhance": "Clean text."})

    result = TranscriptEnhancer(client, "llama3.1").enhance("uh clean text")

    assert result == "Clean text."
    assert len(client.calls) == 1
    model, prompt, stage = client.calls[0]
    assert (model, stage) == ("llama3.1", "enhance")
    assert prompt.endswith("uh clean text")


def test_translator_sends_one_generate_call_with_translate_stage() -> None:
    """Translation is a single generate call tagged with the `translate` stage."""

    client = FakeOllamaClient(responses={"translate": "Bonjour."})

    result = OllamaTranslator(client, "mistral").translate("Hello.", "en", "fr")

    assert result == "Bonjour."
    assert client.calls[0][0] == "mistral"
    assert client.calls[0][2] == "translate"
