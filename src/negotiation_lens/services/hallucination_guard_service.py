"""
Hallucination Guard Service

Flags generated text that asserts fabricated specificity (uncited studies,
named authorities, precise statistics) or makes absolute claims the prior
conversation contradicts.
"""

import logging
import re
from typing import List, NamedTuple, Optional, Sequence

from negotiation_lens.models import HallucinationResult, SuspectPhrase

logger = logging.getLogger(__name__)

PHRASE_LENGTH = 60
CONTRADICTION_REASON = "Absolute claim contradicts prior context"


class SpecificityPattern(NamedTuple):
    pattern: re.Pattern
    reason: str
    weight: float


def _ci(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


class HallucinationGuardService:
    """
    환각 검사 서비스

    confidence = min(1, sum of matched pattern weights + contradiction weights)
    flagged    = confidence >= threshold
    """

    PATTERNS = [
        SpecificityPattern(_ci(r"\bstudies show\b"), "Unsupported research claim without citation", 0.25),
        SpecificityPattern(_ci(r"\bresearch (proves?|shows?|confirms?|demonstrates?)\b"), "Unverified research reference", 0.25),
        SpecificityPattern(_ci(r"\bscientists (say|found|discovered|proved?)\b"), "Vague scientific authority claim", 0.2),
        SpecificityPattern(_ci(r"\bexperts (agree|say|confirm|believe)\b"), "Unspecified expert consensus claim", 0.2),
        SpecificityPattern(_ci(r"\baccording to (experts?|scientists?|researchers?|studies)\b"), "Unverifiable authority reference", 0.2),
        SpecificityPattern(
            _ci(r"\b\d{1,3}(\.\d+)?%\s+of\s+(people|users|cases|patients|respondents)\b"),
            "Specific statistic without source",
            0.3,
        ),
        SpecificityPattern(
            _ci(r"\b(exactly|precisely|specifically)\s+\d+\s+(times|cases|instances|people)\b"),
            "Invented precise figure",
            0.3,
        ),
        # Named authorities are case-sensitive: a capitalized surname is the signal
        SpecificityPattern(re.compile(r"\bDr\.?\s+[A-Z][a-z]+\s+(said|found|proved?|showed?)\b"), "Unverifiable named authority", 0.35),
        SpecificityPattern(re.compile(r"\b(Professor|Prof\.)\s+[A-Z][a-z]+\b"), "Unverifiable named authority", 0.3),
        SpecificityPattern(_ci(r"\bthe (study|research|report|survey) (from|by|at)\b"), "Unverifiable specific study reference", 0.25),
        SpecificityPattern(_ci(r"\bit (has been|is) (proven|established|confirmed) that\b"), "Unverified established fact claim", 0.2),
        SpecificityPattern(_ci(r"\bstatistics (show|indicate|prove|confirm)\b"), "Unverified statistics claim", 0.25),
        SpecificityPattern(_ci(r"\bdata (shows?|proves?|confirms?|indicates?)\b"), "Unverified data claim", 0.2),
        SpecificityPattern(
            _ci(r"\bin \d{4},?\s+(scientists?|researchers?|experts?)\b"),
            "Specific year + authority without citation",
            0.3,
        ),
    ]

    DEFINITIVE_PATTERNS = [
        _ci(r"\b(always|never|everyone|nobody|all|none)\b"),
        _ci(r"\b(definitely|certainly|absolutely|without doubt)\b"),
    ]

    # absolute term -> softer context phrase that contradicts it
    CONTRADICTIONS = {
        "always": "sometimes",
        "never": "sometimes",
        "everyone": "some people",
    }

    def __init__(self, threshold: float = 0.3, contradiction_weight: float = 0.2):
        """
        Args:
            threshold: Minimum confidence for a flag
            contradiction_weight: Weight added per contradicted absolute claim
        """
        self.threshold = threshold
        self.contradiction_weight = contradiction_weight

    def check(self, text: str, context: Optional[Sequence[str]] = None) -> HallucinationResult:
        """
        Check candidate text for hallucination signals

        Args:
            text: Generated text (e.g. "strategy: rationale")
            context: Prior conversation texts

        Returns:
            HallucinationResult
        """
        if not text:
            return HallucinationResult(flagged=False, confidence=0.0)

        suspects: List[SuspectPhrase] = []
        total = 0.0

        for item in self.PATTERNS:
            match = item.pattern.search(text)
            if match:
                suspects.append(SuspectPhrase(phrase=match.group(0)[:PHRASE_LENGTH], reason=item.reason))
                total += item.weight

        for contradiction in self._find_contradictions(text, context or []):
            suspects.append(contradiction)
            total += self.contradiction_weight

        confidence = round(min(1.0, total), 4)
        flagged = confidence >= self.threshold
        if flagged:
            logger.debug(f"Hallucination flagged ({confidence:.2f}): {[s.phrase for s in suspects]}")

        return HallucinationResult(flagged=flagged, confidence=confidence, suspect_phrases=suspects)

    def _find_contradictions(self, text: str, context: Sequence[str]) -> List[SuspectPhrase]:
        if not context:
            return []

        lowered_context = [ctx.lower() for ctx in context]
        found = []
        seen = set()
        for pattern in self.DEFINITIVE_PATTERNS:
            for match in pattern.finditer(text):
                term = match.group(0).lower()
                softer = self.CONTRADICTIONS.get(term)
                if term in seen or not softer:
                    continue
                if any(softer in ctx for ctx in lowered_context):
                    seen.add(term)
                    found.append(SuspectPhrase(phrase=match.group(0), reason=CONTRADICTION_REASON))
        return found
