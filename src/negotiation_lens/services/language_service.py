"""
Language Identification Service

Unicode script range checks followed by stop-word scoring for
Latin-script languages.
"""

import logging
import re
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"


def _word_pattern(words: List[str]) -> re.Pattern:
    return re.compile(r"\b(?:" + "|".join(words) + r")\b", re.IGNORECASE)


class LanguageIdentificationService:
    """
    언어 식별 서비스

    1. Script ranges (CJK, Arabic, Devanagari, Cyrillic) short-circuit
    2. Latin-script languages are scored by function-word hits
    3. Best score below min_matches returns "unknown"
    """

    MIN_TEXT_LENGTH = 3

    SCRIPT_RANGES = [
        ("zh", re.compile(r"[\u4E00-\u9FFF\u3400-\u4DBF\u3040-\u309F\u30A0-\u30FF]")),
        ("ar", re.compile(r"[\u0600-\u06FF\u0750-\u077F]")),
        ("hi", re.compile(r"[\u0900-\u097F]")),
        ("ru", re.compile(r"[\u0400-\u04FF]")),
    ]

    # Dict order is the tie-break order
    FUNCTION_WORDS: Dict[str, List[str]] = {
        "es": [
            "el", "la", "los", "las", "un", "una", "unos", "unas", "de", "del", "en", "con",
            "por", "para", "que", "es", "son", "está", "están", "yo", "tú", "él", "ella",
            "nosotros", "ellos", "ellas", "me", "te", "se", "nos", "le", "les", "lo", "muy",
            "más", "pero", "si", "no", "sí", "también", "como", "cuando", "donde", "quien",
            "este", "esta", "estos", "estas", "ese", "esa", "mi", "tu", "su", "nuestro",
            "hola", "gracias", "por favor", "buenos días", "buenas tardes", "buenas noches",
        ],
        "fr": [
            "le", "la", "les", "un", "une", "des", "de", "du", "en", "avec", "pour", "que",
            "est", "sont", "je", "tu", "il", "elle", "nous", "vous", "ils", "elles", "me",
            "te", "se", "lui", "leur", "y", "très", "plus", "mais", "si", "non", "oui",
            "aussi", "comme", "quand", "où", "qui", "quel", "quelle", "ce", "cet", "cette",
            "ces", "mon", "ton", "son", "notre", "votre", "bonjour", "merci",
            "s'il vous plaît", "bonsoir", "bonne nuit",
        ],
        "de": [
            "der", "die", "das", "ein", "eine", "einen", "einem", "einer", "eines", "und",
            "oder", "aber", "nicht", "ist", "sind", "ich", "du", "er", "sie", "es", "wir",
            "ihr", "mich", "dich", "sich", "uns", "euch", "ihm", "ihnen", "sehr", "mehr",
            "auch", "wenn", "wo", "wer", "was", "wie", "dieser", "diese", "dieses", "mein",
            "dein", "sein", "unser", "euer", "hallo", "danke", "bitte", "guten morgen",
            "guten abend", "gute nacht",
        ],
        "pt": [
            "o", "a", "os", "as", "um", "uma", "uns", "umas", "de", "do", "da", "dos", "das",
            "em", "no", "na", "nos", "nas", "com", "por", "para", "que", "é", "são", "eu",
            "tu", "ele", "ela", "nós", "eles", "elas", "me", "te", "se", "lhe", "lhes",
            "muito", "mais", "mas", "não", "sim", "também", "como", "quando", "onde",
            "quem", "qual", "este", "esta", "esse", "essa", "meu", "teu", "seu", "nosso",
            "olá", "obrigado", "por favor", "bom dia", "boa tarde", "boa noite",
        ],
        "it": [
            "il", "lo", "la", "i", "gli", "le", "un", "uno", "una", "di", "del", "della",
            "dei", "degli", "delle", "in", "nel", "nella", "con", "per", "che", "è", "sono",
            "io", "tu", "lui", "lei", "noi", "voi", "loro", "mi", "ti", "si", "ci", "vi",
            "molto", "più", "ma", "se", "no", "sì", "anche", "come", "quando", "dove", "chi",
            "quale", "questo", "questa", "mio", "tuo", "suo", "ciao", "grazie", "prego",
            "buongiorno", "buonasera", "buonanotte",
        ],
        "en": [
            "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
            "with", "by", "from", "is", "are", "was", "were", "be", "been", "being", "have",
            "has", "had", "do", "does", "did", "will", "would", "could", "should", "may",
            "might", "shall", "can", "need", "i", "you", "he", "she", "it", "we", "they",
            "me", "him", "her", "us", "them", "my", "your", "his", "its", "our", "their",
            "this", "that", "these", "those", "what", "which", "who", "whom", "whose",
            "when", "where", "why", "how", "all", "each", "every", "both", "few", "more",
            "most", "other", "some", "such", "no", "not", "only", "same", "so", "than",
            "too", "very", "just", "hello", "thank", "please", "good morning",
            "good evening", "good night",
        ],
    }

    DISPLAY_NAMES = {
        "en": "English",
        "es": "Spanish",
        "fr": "French",
        "de": "German",
        "ar": "Arabic",
        "zh": "Chinese",
        "pt": "Portuguese",
        "ru": "Russian",
        "it": "Italian",
        "hi": "Hindi",
        UNKNOWN: "Unknown",
    }

    def __init__(self, min_matches: int = 1):
        """
        Args:
            min_matches: Minimum function-word hits for a Latin-script verdict
        """
        self.min_matches = min_matches
        self._patterns: Dict[str, re.Pattern] = {
            lang: _word_pattern(words) for lang, words in self.FUNCTION_WORDS.items()
        }

    def detect_language(self, text: Optional[str]) -> str:
        """
        Detect the language of text

        Args:
            text: Text to classify

        Returns:
            ISO 639-1 code (en, es, fr, de, pt, it, ru, zh, ar, hi) or "unknown"
        """
        if not text or len(text.strip()) < self.MIN_TEXT_LENGTH:
            return UNKNOWN

        trimmed = text.strip()

        for code, script in self.SCRIPT_RANGES:
            if script.search(trimmed):
                return code

        scores = self.score_languages(trimmed)
        best_lang = UNKNOWN
        best_score = 0
        for lang, score in scores.items():
            if score > best_score:
                best_lang, best_score = lang, score

        if best_score < self.min_matches:
            logger.debug(f"Language undetermined (best score {best_score})")
            return UNKNOWN
        return best_lang

    def score_languages(self, text: str) -> Dict[str, int]:
        """Count function-word hits per Latin-script language"""
        return {lang: len(pattern.findall(text)) for lang, pattern in self._patterns.items()}

    def display_name(self, code: str) -> str:
        """Display name for a language code (upper-cased code when unmapped)"""
        return self.DISPLAY_NAMES.get(code, code.upper())
