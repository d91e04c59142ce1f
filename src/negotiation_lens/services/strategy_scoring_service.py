"""
Strategy Scoring Service

Ranks a fixed catalog of dialogue strategies against the current belief state
and the dominant emotion/intent of the recent window. Guard screening is not
applied here; see StrategyScreeningService.
"""

import logging
from collections import defaultdict
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from negotiation_lens.config import AnalysisConfig
from negotiation_lens.models import (
    BeliefState,
    EmotionLabel,
    IntentLabel,
    StrategyCandidate,
    StrategyRecommendation,
    StrategyTag,
    TranscriptEntry,
)

logger = logging.getLogger(__name__)

T = StrategyTag


def _candidate(strategy: str, rationale: str, base_score: float, *tags: StrategyTag) -> StrategyCandidate:
    return StrategyCandidate(
        strategy=strategy, rationale=rationale, base_score=base_score, tags=frozenset(tags)
    )


# Catalog order matters: cold start returns the head of this list
STRATEGY_CATALOG: List[StrategyCandidate] = [
    _candidate("Active Listening", "Build rapport through attentive engagement", 0.7, T.RAPPORT, T.TRUST),
    _candidate("Open-Ended Questions", "Encourage elaboration and information sharing", 0.65, T.INFORMATION, T.ENGAGEMENT),
    _candidate("Empathetic Acknowledgment", "Validate the speaker's perspective", 0.6, T.TRUST, T.RAPPORT),
    _candidate("Reframing", "Present the situation from a different angle", 0.6, T.PERSUASION, T.NEGOTIATION),
    _candidate("Common Ground", "Identify shared interests to build alignment", 0.65, T.COOPERATION, T.TRUST),
    _candidate("Gradual Commitment", "Secure small agreements to build momentum", 0.55, T.NEGOTIATION, T.PERSUASION),
    _candidate("Mirroring", "Reflect language and tone to build connection", 0.6, T.RAPPORT, T.TRUST),
    _candidate("Strategic Pause", "Allow silence to encourage the other party to fill the gap", 0.5, T.NEGOTIATION, T.INFORMATION),
    _candidate("Anchoring", "Set a reference point to influence the negotiation range", 0.6, T.NEGOTIATION, T.PERSUASION),
    _candidate("De-escalation", "Reduce tension to create a more productive dialogue", 0.75, T.TRUST, T.COOPERATION, T.DE_ESCALATION),
    _candidate("Socratic Questioning", "Guide reasoning through targeted questions", 0.6, T.INFORMATION, T.PERSUASION),
    _candidate("Concession Strategy", "Offer calculated concessions to advance negotiations", 0.55, T.NEGOTIATION, T.COOPERATION),
]

# (boosted tags, bonus)
EMOTION_BONUSES: Dict[EmotionLabel, Tuple[FrozenSet[StrategyTag], float]] = {
    EmotionLabel.ANGER: (frozenset({T.RAPPORT, T.DE_ESCALATION}), 0.12),
    EmotionLabel.FEAR: (frozenset({T.RAPPORT, T.DE_ESCALATION}), 0.12),
    EmotionLabel.JOY: (frozenset({T.NEGOTIATION}), 0.08),
}

INTENT_BONUSES: Dict[IntentLabel, Tuple[FrozenSet[StrategyTag], float]] = {
    IntentLabel.NEGOTIATE: (frozenset({T.NEGOTIATION}), 0.10),
    IntentLabel.MAKE_THREAT: (frozenset({T.DE_ESCALATION}), 0.15),
    IntentLabel.COOPERATE: (frozenset({T.COOPERATION}), 0.10),
    IntentLabel.SEEK_INFORMATION: (frozenset({T.INFORMATION}), 0.08),
}

RECENCY_TRIGGERS: Dict[EmotionLabel, Tuple[FrozenSet[StrategyTag], float]] = {
    EmotionLabel.ANGER: (frozenset({T.DE_ESCALATION}), 0.10),
}

LOW_TRUST_THRESHOLD = 50.0
LOW_TRUST_BONUS = 0.10
HIGH_PERSUASION_THRESHOLD = 75.0
HIGH_PERSUASION_BONUS = 0.08


def _table_bonus(table: Dict, key, tags: FrozenSet[StrategyTag]) -> float:
    boosted, bonus = table.get(key, (frozenset(), 0.0))
    return bonus if tags & boosted else 0.0


class StrategyScoringService:
    """
    전략 점수화 서비스

    score = base
          + 0.10 (trust tag, trust < 50)
          + 0.08 (persuasion tag, persuasion > 75)
          + emotion / intent table bonuses
          + recency bonus (latest top emotion)
    capped at max_score (0.99)
    """

    def __init__(
        self,
        top_k: Optional[int] = None,
        catalog: Optional[List[StrategyCandidate]] = None,
        config: Optional[AnalysisConfig] = None,
    ):
        """
        Args:
            top_k: Ranked strategies to return (defaults to config, 5)
            catalog: Candidate catalog override
            config: AnalysisConfig instance
        """
        config = config or AnalysisConfig()
        strategy_config = config.get_strategy_config()

        self.top_k = top_k if top_k is not None else config.get_strategy_top_k()
        self.cold_start_count = int(strategy_config.get("cold_start_count", 3))
        self.max_score = float(strategy_config.get("max_score", 0.99))
        self.window_size = int(config.get_prediction_config().get("window_size", 5))
        self.catalog = list(catalog) if catalog is not None else list(STRATEGY_CATALOG)

    def cold_start(self) -> List[StrategyRecommendation]:
        """First catalog entries at their base scores"""
        return [self._recommend(c, c.base_score) for c in self.catalog[: self.cold_start_count]]

    def rank(
        self,
        entries: Sequence[TranscriptEntry],
        belief_state: BeliefState,
        top_k: Optional[int] = None,
    ) -> List[StrategyRecommendation]:
        """
        Rank strategies for the current context

        Args:
            entries: Session entries in arrival order
            belief_state: Current belief state
            top_k: Per-call override of the result size

        Returns:
            Top-k StrategyRecommendation sorted by score
        """
        if not entries:
            return self.cold_start()

        window = list(entries[-self.window_size:])
        dominant_emotion, dominant_intent = self.dominant_labels(window)
        latest_emotion = window[-1].top_emotion

        scored = [
            self._recommend(
                candidate,
                self.score(candidate, belief_state, dominant_emotion, dominant_intent, latest_emotion),
            )
            for candidate in self.catalog
        ]
        scored.sort(key=lambda rec: rec.confidence, reverse=True)

        k = top_k if top_k is not None else self.top_k
        logger.debug(
            f"Ranked strategies for {dominant_emotion.value}/{dominant_intent.value}: "
            f"{[r.strategy for r in scored[:k]]}"
        )
        return scored[:k]

    def score(
        self,
        candidate: StrategyCandidate,
        belief_state: BeliefState,
        dominant_emotion: EmotionLabel,
        dominant_intent: IntentLabel,
        latest_emotion: EmotionLabel,
    ) -> float:
        score = candidate.base_score

        if belief_state.trust_level < LOW_TRUST_THRESHOLD and T.TRUST in candidate.tags:
            score += LOW_TRUST_BONUS
        if belief_state.persuasion_level > HIGH_PERSUASION_THRESHOLD and T.PERSUASION in candidate.tags:
            score += HIGH_PERSUASION_BONUS

        score += _table_bonus(EMOTION_BONUSES, dominant_emotion, candidate.tags)
        score += _table_bonus(INTENT_BONUSES, dominant_intent, candidate.tags)
        score += _table_bonus(RECENCY_TRIGGERS, latest_emotion, candidate.tags)

        return round(min(self.max_score, score), 4)

    @staticmethod
    def dominant_labels(window: Sequence[TranscriptEntry]) -> Tuple[EmotionLabel, IntentLabel]:
        """Confidence-weighted dominant emotion and intent of a window"""
        emotion_weights: Dict[EmotionLabel, float] = defaultdict(float)
        intent_weights: Dict[IntentLabel, float] = defaultdict(float)
        for entry in window:
            for emotion in entry.emotions:
                emotion_weights[emotion.label] += emotion.confidence
            for intent in entry.intents:
                intent_weights[intent.label] += intent.confidence

        # max() keeps the first label seen on ties
        emotion = max(emotion_weights, key=emotion_weights.get, default=EmotionLabel.NEUTRAL)
        intent = max(intent_weights, key=intent_weights.get, default=IntentLabel.STATEMENT)
        return emotion, intent

    @staticmethod
    def _recommend(candidate: StrategyCandidate, score: float) -> StrategyRecommendation:
        return StrategyRecommendation(
            strategy=candidate.strategy,
            confidence=score,
            rationale=candidate.rationale,
        )
