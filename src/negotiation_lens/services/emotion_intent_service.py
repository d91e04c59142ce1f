"""
Emotion & Intent Classification Service

Keyword-hit classifier producing up to three emotion and three intent labels
per utterance. Every label is scored independently; the ranking is a stable
sort so equal confidences keep taxonomy order.
"""

import logging
from typing import Dict, List, Tuple

from negotiation_lens.models import (
    EmotionLabel,
    EmotionScore,
    IntentLabel,
    IntentScore,
)

logger = logging.getLogger(__name__)

MAX_LABELS = 3


class EmotionIntentClassifier:
    """
    감정/의도 분류기

    Confidence per label:
        emotions: min(0.95, 0.5 + 0.15 * hits)
        intents:  min(0.95, 0.45 + 0.2 * hits)
    """

    EMOTION_KEYWORDS: Dict[EmotionLabel, List[str]] = {
        EmotionLabel.ANGER: [
            "angry", "furious", "mad", "rage", "hate", "kill", "hurt", "attack", "threat",
        ],
        EmotionLabel.FEAR: [
            "scared", "afraid", "terrified", "fear", "panic", "worried", "anxious", "nervous",
        ],
        EmotionLabel.SADNESS: [
            "sad", "cry", "depressed", "hopeless", "miserable", "grief", "loss", "alone",
        ],
        EmotionLabel.JOY: [
            "happy", "glad", "excited", "great", "wonderful", "love", "amazing", "fantastic",
        ],
        EmotionLabel.SURPRISE: [
            "shocked", "surprised", "unexpected", "sudden", "wow", "unbelievable",
        ],
        EmotionLabel.DISGUST: ["disgusting", "horrible", "awful", "terrible", "gross", "sick"],
    }

    INTENT_KEYWORDS: Dict[IntentLabel, List[str]] = {
        IntentLabel.REQUEST_HELP: ["help", "need", "please", "assist", "support", "can you"],
        IntentLabel.EXPRESS_GRIEVANCE: [
            "unfair", "wrong", "unjust", "complaint", "problem", "issue",
        ],
        IntentLabel.MAKE_THREAT: [
            "will hurt", "going to", "you will", "regret", "pay for", "threat",
        ],
        IntentLabel.SEEK_INFORMATION: [
            "what", "why", "how", "when", "where", "who", "tell me", "explain",
        ],
        IntentLabel.NEGOTIATE: [
            "deal", "agree", "compromise", "offer", "accept", "terms", "condition",
        ],
        IntentLabel.DENY_ACCUSATION: [
            "didn't", "didn’t", "not me", "innocent", "false", "lie", "wrong",
        ],
        IntentLabel.COOPERATE: [
            "okay", "yes", "agree", "understand", "cooperate", "comply", "will do",
        ],
    }

    EMOTION_BASE, EMOTION_STEP = 0.5, 0.15
    INTENT_BASE, INTENT_STEP = 0.45, 0.2
    CONFIDENCE_CAP = 0.95

    NEUTRAL_FALLBACK = 0.75
    STATEMENT_FALLBACK = 0.7

    def classify_emotions(self, text: str) -> List[EmotionScore]:
        """
        Classify emotions

        Args:
            text: Utterance (English or normalized to English)

        Returns:
            Up to 3 EmotionScore sorted by confidence, or neutral fallback
        """
        scored = self._score(text, self.EMOTION_KEYWORDS, self.EMOTION_BASE, self.EMOTION_STEP)
        if not scored:
            return [EmotionScore(label=EmotionLabel.NEUTRAL, confidence=self.NEUTRAL_FALLBACK)]
        return [EmotionScore(label=label, confidence=conf) for label, conf in scored]

    def classify_intents(self, text: str) -> List[IntentScore]:
        """Classify intents (statement fallback when nothing matches)"""
        scored = self._score(text, self.INTENT_KEYWORDS, self.INTENT_BASE, self.INTENT_STEP)
        if not scored:
            return [IntentScore(label=IntentLabel.STATEMENT, confidence=self.STATEMENT_FALLBACK)]
        return [IntentScore(label=label, confidence=conf) for label, conf in scored]

    def classify(self, text: str) -> Tuple[List[EmotionScore], List[IntentScore]]:
        emotions = self.classify_emotions(text)
        intents = self.classify_intents(text)
        logger.debug(
            f"Classified emotion={emotions[0].label.value} intent={intents[0].label.value}"
        )
        return emotions, intents

    def _score(self, text: str, keywords: Dict, base: float, step: float) -> List[Tuple]:
        if not text or not text.strip():
            return []

        lower = text.lower()
        scored = []
        for label, words in keywords.items():
            hits = sum(1 for word in words if word in lower)
            if hits > 0:
                scored.append((label, round(min(self.CONFIDENCE_CAP, base + hits * step), 4)))

        # sorted() is stable: ties keep taxonomy order
        scored = sorted(scored, key=lambda item: item[1], reverse=True)
        return scored[:MAX_LABELS]
