"""
Semantic Analysis Service

Topic, entity, sentiment and keyword tags for a single utterance.
Deterministic: identical text always produces identical tags.
"""

import logging
import re
from collections import Counter
from typing import Dict, List

from negotiation_lens.models import SemanticAnalysis, SemanticTag, SemanticTagType

logger = logging.getLogger(__name__)


class SemanticAnalysisService:
    """의미 분석 서비스"""

    TOPIC_KEYWORDS: Dict[str, List[str]] = {
        "Negotiation": ["negotiate", "deal", "offer", "counter", "terms", "agreement", "contract", "price", "value", "worth"],
        "Conflict": ["disagree", "dispute", "conflict", "problem", "issue", "concern", "objection", "reject", "refuse"],
        "Collaboration": ["together", "partner", "collaborate", "cooperate", "mutual", "share", "joint", "team", "work with"],
        "Finance": ["money", "cost", "budget", "payment", "revenue", "profit", "invest", "fund", "capital", "financial"],
        "Timeline": ["deadline", "schedule", "time", "date", "when", "urgent", "soon", "delay", "timeline", "period"],
        "Strategy": ["plan", "strategy", "approach", "method", "solution", "option", "alternative", "proposal", "suggest"],
        "Trust": ["trust", "reliable", "honest", "transparent", "credible", "verify", "confirm", "guarantee", "promise"],
        "Risk": ["risk", "danger", "threat", "uncertain", "concern", "worry", "potential", "liability", "exposure"],
    }

    ENTITY_PATTERNS = [
        ("Person", re.compile(r"\b[A-Z][a-z]+ [A-Z][a-z]+\b")),
        ("Organization", re.compile(r"\b[A-Z]{2,}\b")),
        ("Amount", re.compile(r"\$[\d,]+(?:\.\d{2})?(?:M|K|B)?\b")),
        (
            "Date",
            re.compile(
                r"\b\d{1,2}/\d{1,2}/\d{2,4}\b"
                r"|\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]* \d{1,2}(?:,? \d{4})?\b"
            ),
        ),
        ("Percentage", re.compile(r"\b\d+%")),
    ]

    POSITIVE_WORDS = [
        "agree", "accept", "good", "great", "excellent", "positive", "benefit", "advantage",
        "opportunity", "success", "happy", "pleased", "satisfied", "confident", "support",
        "approve", "yes", "absolutely", "certainly", "perfect",
    ]
    NEGATIVE_WORDS = [
        "reject", "refuse", "bad", "terrible", "negative", "problem", "issue", "concern", "risk",
        "fail", "unhappy", "dissatisfied", "worried", "doubt", "oppose", "no", "never",
        "impossible", "unacceptable", "wrong",
    ]

    STOP_WORDS = frozenset(
        """
        the a an is are was were be been being have has had do does did will would could
        should may might shall can need dare ought used to of in for on with at by from up
        about into through during before after above below between out off over under again
        further then once and but or nor so yet both either neither not only own same than
        too very just i me my we our you your he she it they them this that these those what
        which who whom how when where why all each every few more most other some such no
        """.split()
    )

    ENTITY_CONFIDENCE = 0.85
    ENTITIES_PER_TYPE = 2
    MAX_TOPICS = 3
    MAX_KEYWORDS = 5

    def analyze(self, text: str) -> SemanticAnalysis:
        """
        Extract semantic tags

        Args:
            text: Utterance text

        Returns:
            SemanticAnalysis
        """
        text = text or ""
        lower = text.lower()
        words = lower.split()

        result = SemanticAnalysis(
            topics=self._topics(lower),
            entities=self._entities(text),
            sentiment=self._sentiment(words),
            keywords=self._keywords(words),
        )
        logger.debug(
            f"Semantic tags: {len(result.topics)} topics, {len(result.entities)} entities, "
            f"sentiment={result.sentiment.value}"
        )
        return result

    def _topics(self, lower: str) -> List[SemanticTag]:
        scores = {}
        for topic, keywords in self.TOPIC_KEYWORDS.items():
            hits = sum(1 for kw in keywords if kw in lower)
            if hits:
                scores[topic] = hits

        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
        return [
            SemanticTag(
                type=SemanticTagType.TOPIC,
                value=topic,
                confidence=round(min(0.95, 0.5 + hits * 0.1), 4),
            )
            for topic, hits in ranked[: self.MAX_TOPICS]
        ]

    def _entities(self, text: str) -> List[SemanticTag]:
        entities = []
        seen = set()
        for entity_type, pattern in self.ENTITY_PATTERNS:
            for match in [m.group(0) for m in pattern.finditer(text)][: self.ENTITIES_PER_TYPE]:
                if match in seen:
                    continue
                seen.add(match)
                entities.append(
                    SemanticTag(
                        type=SemanticTagType.ENTITY,
                        value=f"{entity_type}: {match}",
                        confidence=self.ENTITY_CONFIDENCE,
                    )
                )
        return entities

    def _sentiment(self, words: List[str]) -> SemanticTag:
        positive = sum(1 for w in words if any(p in w for p in self.POSITIVE_WORDS))
        negative = sum(1 for w in words if any(n in w for n in self.NEGATIVE_WORDS))

        if positive > negative * 1.5:
            value, confidence = "Positive", 0.6 + min(0.35, positive * 0.05)
        elif negative > positive * 1.5:
            value, confidence = "Negative", 0.6 + min(0.35, negative * 0.05)
        elif positive or negative:
            value, confidence = "Mixed", 0.6
        else:
            value, confidence = "Neutral", 0.8

        return SemanticTag(type=SemanticTagType.SENTIMENT, value=value, confidence=round(confidence, 4))

    def _keywords(self, words: List[str]) -> List[SemanticTag]:
        frequency = Counter()
        for word in words:
            clean = re.sub(r"[^a-z]", "", word)
            if len(clean) > 3 and clean not in self.STOP_WORDS:
                frequency[clean] += 1

        # most_common keeps first-seen order for equal counts
        return [
            SemanticTag(
                type=SemanticTagType.KEYWORD,
                value=word,
                confidence=round(min(0.9, 0.6 + 0.1 * count), 4),
            )
            for word, count in frequency.most_common(self.MAX_KEYWORDS)
        ]
