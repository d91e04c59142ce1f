"""
Unit tests for language identification and phrase translation
"""

import pytest

from negotiation_lens.services.language_service import LanguageIdentificationService
from negotiation_lens.services.translation_service import PhraseTranslationService


class TestLanguageIdentification:
    """언어 식별 테스트"""

    @pytest.fixture
    def detector(self):
        return LanguageIdentificationService()

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("你好，我们可以谈谈吗", "zh"),
            ("مرحبا كيف حالك", "ar"),
            ("नमस्ते आप कैसे हैं", "hi"),
            ("Привет, как дела", "ru"),
        ],
    )
    def test_script_ranges_short_circuit(self, detector, text, expected):
        assert detector.detect_language(text) == expected

    def test_english_function_words(self, detector):
        assert detector.detect_language("I would like to know what you want from us") == "en"

    def test_spanish_function_words(self, detector):
        assert detector.detect_language("Hola, quiero hablar con ellos por favor") == "es"

    def test_german_function_words(self, detector):
        assert detector.detect_language("Ich bin nicht sicher, ob wir das machen") == "de"

    def test_short_text_is_unknown(self, detector):
        assert detector.detect_language("ok") == "unknown"
        assert detector.detect_language("") == "unknown"
        assert detector.detect_language(None) == "unknown"

    def test_no_function_words_is_unknown(self, detector):
        assert detector.detect_language("xyzzy plugh") == "unknown"

    def test_min_matches_threshold(self):
        strict = LanguageIdentificationService(min_matches=5)
        assert strict.detect_language("hello there") == "unknown"

    def test_display_name(self, detector):
        assert detector.display_name("es") == "Spanish"
        assert detector.display_name("xx") == "XX"


class TestPhraseTranslation:
    """구문 번역 테스트"""

    @pytest.fixture
    def translator(self):
        return PhraseTranslationService()

    def test_hola_to_french(self, translator):
        assert translator.translate("hola", "es", "fr") == "bonjour"

    def test_unmapped_spanish_sentence_is_marked(self, translator):
        text = "El perro come manzanas verdes"
        result = translator.translate(text, "es", "fr")
        assert result == f"[Untranslated from ES] {text}"

    def test_case_insensitive_match(self, translator):
        assert translator.translate("HOLA", "es", "fr") == "bonjour"

    def test_same_language_is_identity(self, translator):
        assert translator.translate("hola", "es", "es") == "hola"

    def test_english_and_unknown_sources_pass_through(self, translator):
        assert translator.translate("hello", "en", "fr") == "hello"
        assert translator.translate("zzz", "unknown", "fr") == "zzz"

    def test_empty_text(self, translator):
        assert translator.translate("", "es", "fr") == ""

    def test_unsupported_source_language_is_marked(self, translator):
        result = translator.translate("ciao a tutti", "it", "en")
        assert translator.is_untranslated(result)
        assert translator.strip_marker(result) == "ciao a tutti"

    def test_missing_target_falls_back_to_english(self):
        translator = PhraseTranslationService(phrase_table={"es": {"hola": {"en": "hello"}}})
        assert translator.translate("hola", "es", "de") == "hello"

    def test_replacement_is_single_pass(self):
        # A replacement that is itself a source phrase must not be translated again
        table = {"es": {"uno": {"en": "dos"}, "dos": {"en": "three"}}}
        translator = PhraseTranslationService(phrase_table=table)
        assert translator.translate("uno", "es", "en") == "dos"

    def test_longest_phrase_wins(self):
        table = {"es": {"buenos": {"en": "good"}, "buenos días": {"en": "good morning"}}}
        translator = PhraseTranslationService(phrase_table=table)
        assert translator.translate("buenos días", "es", "en") == "good morning"

    def test_translate_to_english(self, translator):
        assert translator.translate_to_english("gracias", "es") == "thank you"
