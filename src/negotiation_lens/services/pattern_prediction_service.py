"""
Pattern Prediction Service

Forecasts the next emotion/intent from the recent window, assesses whether the
conversation is escalating, and maps the result to an intervention window.
"""

import logging
from collections import Counter
from typing import List, Optional, Sequence, Tuple, Union

from negotiation_lens.config import AnalysisConfig
from negotiation_lens.models import (
    ActionWindow,
    ConversationDirection,
    EmotionLabel,
    HallucinationRisk,
    InsufficientData,
    IntentLabel,
    LabelPrediction,
    PatternPrediction,
    PatternProfile,
    TranscriptEntry,
    Urgency,
)

logger = logging.getLogger(__name__)

HOSTILE_EMOTIONS = {EmotionLabel.ANGER, EmotionLabel.FEAR, EmotionLabel.DISGUST}
HOSTILE_INTENTS = {IntentLabel.MAKE_THREAT, IntentLabel.DENY_ACCUSATION}
COOPERATIVE_EMOTIONS = {EmotionLabel.JOY}
COOPERATIVE_INTENTS = {IntentLabel.COOPERATE, IntentLabel.NEGOTIATE}

ESCALATION_TRIGGERS = {EmotionLabel.ANGER, EmotionLabel.DISGUST, IntentLabel.MAKE_THREAT}
CONSOLIDATION_INTENTS = {IntentLabel.COOPERATE, IntentLabel.NEGOTIATE}

PredictionResult = Union[PatternPrediction, InsufficientData]


class PatternPredictionService:
    """
    대화 패턴 예측 서비스

    Next label = mode of the last `window_size` top labels, with the most recent
    label counted twice. Ties go to the label seen most recently.
    """

    CONFIDENCE_FLOOR = 0.05
    CONFIDENCE_CEILING = 0.95

    def __init__(
        self,
        min_history: Optional[int] = None,
        config: Optional[AnalysisConfig] = None,
    ):
        """
        Args:
            min_history: Entries required before forecasting (defaults to config, 3)
            config: AnalysisConfig instance
        """
        config = config or AnalysisConfig()
        prediction = config.get_prediction_config()

        self.min_history = min_history if min_history is not None else config.get_min_history()
        if self.min_history < 1:
            raise ValueError(f"min_history must be >= 1, got {self.min_history}")
        self.window_size = int(prediction.get("window_size", 5))
        self.direction_window = int(prediction.get("direction_window", 4))
        self.direction_margin = int(prediction.get("direction_margin", 1))

    def predict(self, entries: Sequence[TranscriptEntry]) -> PredictionResult:
        """
        Forecast the next turn

        Args:
            entries: Session entries in arrival order

        Returns:
            PatternPrediction, or InsufficientData below min_history
        """
        if len(entries) < self.min_history:
            return InsufficientData(required=self.min_history, available=len(entries))

        recent = list(entries[-self.window_size:])
        total = len(entries)
        emotions = [e.top_emotion.value for e in recent]
        intents = [e.top_intent.value for e in recent]

        next_emotion = self._predict_label(emotions, total)
        next_intent = self._predict_label(intents, total)

        direction, reasoning = self.assess_direction(entries)
        window = self.action_window(
            direction, EmotionLabel(next_emotion.label), IntentLabel(next_intent.label)
        )
        risk = self._hallucination_risk(total, min(next_emotion.confidence, next_intent.confidence))

        logger.debug(
            f"Prediction: {next_emotion.label}/{next_intent.label} "
            f"{direction.value} urgency={window.urgency.value}"
        )
        return PatternPrediction(
            next_emotion=next_emotion,
            next_intent=next_intent,
            direction=direction,
            direction_reasoning=reasoning,
            action_window=window,
            hallucination_risk=risk,
        )

    def _predict_label(self, sequence: List[str], history_length: int) -> LabelPrediction:
        counts = Counter(sequence)
        counts[sequence[-1]] += 1  # recency bonus
        total = sum(counts.values())

        last_seen = {label: index for index, label in enumerate(sequence)}
        label = max(counts, key=lambda item: (counts[item], last_seen[item]))

        window = len(sequence)
        diversity = (len(set(sequence)) - 1) / (window - 1) if window > 1 else 0.0
        confidence = (
            0.5 * counts[label] / total
            + 0.35 * (1 - diversity)
            + min(history_length / 50, 0.1)
        )
        confidence = max(self.CONFIDENCE_FLOOR, min(self.CONFIDENCE_CEILING, confidence))
        return LabelPrediction(label=label, confidence=round(confidence, 4))

    def assess_direction(
        self, entries: Sequence[TranscriptEntry]
    ) -> Tuple[ConversationDirection, str]:
        """
        Compare hostile/cooperative signals between halves of the recent window

        Returns:
            (direction, reasoning)
        """
        recent = list(entries[-self.direction_window:])
        if len(recent) < 2:
            return ConversationDirection.STABLE, "Not enough turns to assess a trend."

        split = len(recent) // 2
        first, second = recent[:split], recent[split:]

        first_hostile, second_hostile = self._hostile(first), self._hostile(second)
        hostile_gain = second_hostile - first_hostile
        cooperative_gain = self._cooperative(second) - self._cooperative(first)

        if hostile_gain > self.direction_margin:
            return (
                ConversationDirection.ESCALATING,
                f"Hostile signals rose from {first_hostile} to {second_hostile} in the recent window.",
            )
        if -hostile_gain > self.direction_margin:
            return (
                ConversationDirection.DE_ESCALATING,
                f"Hostile signals fell from {first_hostile} to {second_hostile} in the recent window.",
            )
        if cooperative_gain > self.direction_margin and hostile_gain <= 0:
            return (
                ConversationDirection.DE_ESCALATING,
                "Cooperative signals are gaining without new hostility.",
            )
        return ConversationDirection.STABLE, "No significant shift in hostile or cooperative signals."

    @staticmethod
    def _hostile(entries: List[TranscriptEntry]) -> int:
        return sum(
            (e.top_emotion in HOSTILE_EMOTIONS) + (e.top_intent in HOSTILE_INTENTS) for e in entries
        )

    @staticmethod
    def _cooperative(entries: List[TranscriptEntry]) -> int:
        return sum(
            (e.top_emotion in COOPERATIVE_EMOTIONS) + (e.top_intent in COOPERATIVE_INTENTS)
            for e in entries
        )

    def action_window(
        self,
        direction: ConversationDirection,
        emotion: EmotionLabel,
        intent: IntentLabel,
    ) -> ActionWindow:
        """Decision table: first matching row wins"""
        escalating = direction == ConversationDirection.ESCALATING

        if escalating and (emotion in ESCALATION_TRIGGERS or intent in ESCALATION_TRIGGERS):
            return ActionWindow(
                timing="now",
                reasoning="Immediate de-escalation recommended. Use empathetic language and avoid confrontational framing.",
                urgency=Urgency.IMMEDIATE,
            )
        if escalating:
            return ActionWindow(
                timing="within the next exchange",
                reasoning="Tension is rising. Slow the pace and acknowledge concerns before it hardens.",
                urgency=Urgency.SOON,
            )
        if intent == IntentLabel.MAKE_THREAT:
            return ActionWindow(
                timing="within the next exchange",
                reasoning="Prepare counter-strategy. Acknowledge concerns while redirecting to shared interests.",
                urgency=Urgency.SOON,
            )
        if direction == ConversationDirection.DE_ESCALATING and intent in CONSOLIDATION_INTENTS:
            return ActionWindow(
                timing="now",
                reasoning="Cooperation is building. Consolidate agreement points while momentum holds.",
                urgency=Urgency.IMMEDIATE,
            )
        if emotion == EmotionLabel.FEAR:
            return ActionWindow(
                timing="within the next exchange",
                reasoning="Provide reassurance. Focus on safety and stability messaging.",
                urgency=Urgency.SOON,
            )
        if intent == IntentLabel.NEGOTIATE:
            return ActionWindow(
                timing="within the next exchange",
                reasoning="Optimal negotiation window. Present key proposals with clear mutual benefits.",
                urgency=Urgency.SOON,
            )
        if emotion == EmotionLabel.JOY:
            return ActionWindow(
                timing="within the next exchange",
                reasoning="High receptivity detected. Good moment to advance key objectives.",
                urgency=Urgency.SOON,
            )
        return ActionWindow(
            timing="ongoing",
            reasoning="Maintain current approach. Monitor for shifts in emotional tone.",
            urgency=Urgency.MONITOR,
        )

    @staticmethod
    def _hallucination_risk(history_length: int, confidence: float) -> HallucinationRisk:
        if history_length < 3:
            return HallucinationRisk.HIGH
        if history_length < 6:
            return HallucinationRisk.MEDIUM
        if confidence < 0.4:
            return HallucinationRisk.HIGH
        if confidence < 0.6:
            return HallucinationRisk.MEDIUM
        return HallucinationRisk.LOW

    def build_pattern_profile(
        self, entries: Sequence[TranscriptEntry], top_strategy: Optional[str] = None
    ) -> Optional[PatternProfile]:
        """Latest dominant labels plus trend (None for an empty session)"""
        if not entries:
            return None

        latest = entries[-1]
        direction, _ = self.assess_direction(entries)
        return PatternProfile(
            dominant_emotion=latest.top_emotion.value,
            dominant_intent=latest.top_intent.value,
            entry_count=len(entries),
            direction=direction,
            top_strategy=top_strategy,
        )
