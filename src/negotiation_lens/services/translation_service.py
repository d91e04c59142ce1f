"""
Phrase Translation Service

Dictionary-substitution translation used to normalize non-English entries
before classification and to render on-demand translations. This is not a
real translator: text with no known phrase comes back marked as untranslated.
"""

import logging
import re
from typing import Dict, Optional

from negotiation_lens.data import get_phrase_table

logger = logging.getLogger(__name__)

# source language -> phrase -> target language -> translation
PhraseTable = Dict[str, Dict[str, Dict[str, str]]]

PASSTHROUGH_SOURCES = {"unknown", "en"}


class PhraseTranslationService:
    """
    Phrase-table translator

    Every phrase of the source table that occurs in the text (case-insensitive)
    is replaced in a single pass, longest phrase first, so a replacement is
    never re-translated.
    """

    UNTRANSLATED_MARKER = "[Untranslated from {lang}]"

    def __init__(self, phrase_table: Optional[PhraseTable] = None):
        """
        Args:
            phrase_table: Phrase table override (defaults to data/phrase_table.json)
        """
        if phrase_table is None:
            phrase_table = self._load_phrase_table()
        self.phrase_table: PhraseTable = {
            lang: {phrase.lower(): targets for phrase, targets in phrases.items()}
            for lang, phrases in phrase_table.items()
        }
        self._matchers: Dict[str, re.Pattern] = {
            lang: self._build_matcher(phrases) for lang, phrases in self.phrase_table.items()
        }

    def _load_phrase_table(self) -> PhraseTable:
        try:
            return get_phrase_table().get("phrases", {})
        except FileNotFoundError:
            logger.warning("phrase_table.json not found, using built-in greeting table")
            return self._get_default_phrase_table()

    def _get_default_phrase_table(self) -> PhraseTable:
        """Minimal built-in table (used when the data file is missing)"""
        return {
            "es": {
                "hola": {"en": "hello", "fr": "bonjour", "de": "hallo", "pt": "olá"},
                "gracias": {"en": "thank you", "fr": "merci", "de": "danke", "pt": "obrigado"},
            },
            "fr": {
                "bonjour": {"en": "hello", "es": "hola", "de": "hallo", "pt": "olá"},
                "merci": {"en": "thank you", "es": "gracias", "de": "danke", "pt": "obrigado"},
            },
            "de": {
                "hallo": {"en": "hello", "es": "hola", "fr": "bonjour", "pt": "olá"},
                "danke": {"en": "thank you", "es": "gracias", "fr": "merci", "pt": "obrigado"},
            },
        }

    @staticmethod
    def _build_matcher(phrases: Dict[str, Dict[str, str]]) -> Optional[re.Pattern]:
        if not phrases:
            return None
        ordered = sorted(phrases, key=len, reverse=True)
        return re.compile("|".join(re.escape(p) for p in ordered), re.IGNORECASE)

    def translate(self, text: str, from_lang: str, to_lang: str) -> str:
        """
        Translate text with the phrase table

        Args:
            text: Source text
            from_lang: Source language code
            to_lang: Target language code

        Returns:
            Substituted text, the unchanged input for no-op pairs, or the input
            prefixed with an untranslated marker when nothing matched
        """
        if not text or not text.strip():
            return text
        if from_lang == to_lang or from_lang in PASSTHROUGH_SOURCES:
            return text

        matcher = self._matchers.get(from_lang)
        phrases = self.phrase_table.get(from_lang, {})
        translated_any = False

        def substitute(match: re.Match) -> str:
            nonlocal translated_any
            targets = phrases.get(match.group(0).lower(), {})
            replacement = targets.get(to_lang) or targets.get("en")
            if not replacement:
                return match.group(0)
            translated_any = True
            return replacement

        if matcher is not None:
            result = matcher.sub(substitute, text)
            if translated_any:
                return result

        logger.warning(f"No phrase matched for {from_lang}->{to_lang}, returning marked text")
        return self.mark_untranslated(text, from_lang)

    def translate_to_english(self, text: str, from_lang: str) -> str:
        """Normalize text to English for classification"""
        return self.translate(text, from_lang, "en")

    def mark_untranslated(self, text: str, from_lang: str) -> str:
        return f"{self.UNTRANSLATED_MARKER.format(lang=from_lang.upper())} {text}"

    def is_untranslated(self, text: str) -> bool:
        """Whether text carries the untranslated marker"""
        return text.startswith("[Untranslated from ")

    def strip_marker(self, text: str) -> str:
        """Remove a leading untranslated marker"""
        if not self.is_untranslated(text):
            return text
        _, _, rest = text.partition("] ")
        return rest
