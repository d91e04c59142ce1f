"""
Belief State Tracking Service

Folds classified transcript entries into the running trust/persuasion/concern
model of one session.
"""

import logging
import threading
from typing import List, Optional

from negotiation_lens.config import AnalysisConfig
from negotiation_lens.models import (
    BeliefState,
    EmotionLabel,
    IntentLabel,
    SpeakerState,
    TranscriptEntry,
)

logger = logging.getLogger(__name__)

LEVEL_MIN, LEVEL_MAX = 0.0, 100.0

# 신뢰도 변화량
COOPERATIVE_INTENTS = {IntentLabel.COOPERATE, IntentLabel.REQUEST_HELP}
POSITIVE_EMOTIONS = {EmotionLabel.JOY}
THREATENING_INTENTS = {IntentLabel.MAKE_THREAT}
DEFLECTING_INTENTS = {IntentLabel.DENY_ACCUSATION, IntentLabel.EXPRESS_GRIEVANCE}
NEGATIVE_EMOTIONS = {EmotionLabel.ANGER, EmotionLabel.DISGUST}

TRUST_GAIN = 2.0
THREAT_PENALTY = 3.0
DEFLECT_PENALTY = 2.0
NEGATIVE_EMOTION_PENALTY = 2.0

PERSUASION_GAIN = {IntentLabel.NEGOTIATE: 2.0, IntentLabel.COOPERATE: 1.0}

CONCERN_TOXICITY = "toxicity"
CONCERN_HOSTILITY = "hostility"
CONCERN_FEAR = "fear"


def _clamp(value: float) -> float:
    return max(LEVEL_MIN, min(LEVEL_MAX, value))


class BeliefStateTracker:
    """
    신뢰 상태 추적기

    One tracker per session. fold() is the only mutator and is serialized by
    a lock; apply() is the pure transition it uses.
    """

    def __init__(
        self,
        initial_trust: Optional[float] = None,
        initial_persuasion: Optional[float] = None,
        max_concerns: Optional[int] = None,
        config: Optional[AnalysisConfig] = None,
    ):
        """
        Args:
            initial_trust: Starting trust (defaults to config, canonical 50)
            initial_persuasion: Starting persuasion (defaults to config, canonical 0)
            max_concerns: Concern list capacity (defaults to config, canonical 4)
            config: AnalysisConfig instance
        """
        config = config or AnalysisConfig()
        self.initial_trust = (
            initial_trust if initial_trust is not None else config.get_initial_trust()
        )
        self.initial_persuasion = (
            initial_persuasion if initial_persuasion is not None else config.get_initial_persuasion()
        )
        self.max_concerns = max_concerns if max_concerns is not None else config.get_max_concerns()

        self._lock = threading.Lock()
        self._state = self.initial_state()
        logger.info(
            f"BeliefStateTracker initialized (trust={self.initial_trust}, "
            f"persuasion={self.initial_persuasion})"
        )

    def initial_state(self) -> BeliefState:
        return BeliefState(
            trust_level=self.initial_trust,
            persuasion_level=self.initial_persuasion,
        )

    @property
    def state(self) -> BeliefState:
        """Snapshot of the current state"""
        with self._lock:
            return self._state.model_copy(deep=True)

    def fold(self, entry: TranscriptEntry) -> BeliefState:
        """
        Fold one entry into the tracked state

        Args:
            entry: Classified transcript entry

        Returns:
            Snapshot of the new state
        """
        with self._lock:
            self._state = self.apply(self._state, entry)
            return self._state.model_copy(deep=True)

    def fold_all(self, entries: List[TranscriptEntry]) -> BeliefState:
        for entry in entries:
            self.fold(entry)
        return self.state

    def reset(self) -> None:
        with self._lock:
            self._state = self.initial_state()

    def apply(self, state: BeliefState, entry: TranscriptEntry) -> BeliefState:
        """
        Pure transition: previous state + entry -> next state

        Trust deltas stack within one entry: a threat with an angry tone
        costs -3 and -2 (-5 total), a deflection with disgust -2 and -2.
        The sum is applied once and clamped to 0..100.
        The input state is never modified.
        """
        emotion = entry.top_emotion
        intent = entry.top_intent

        trust_delta = 0.0
        if intent in COOPERATIVE_INTENTS or emotion in POSITIVE_EMOTIONS:
            trust_delta += TRUST_GAIN
        if intent in THREATENING_INTENTS:
            trust_delta -= THREAT_PENALTY
        if intent in DEFLECTING_INTENTS:
            trust_delta -= DEFLECT_PENALTY
        if emotion in NEGATIVE_EMOTIONS:
            trust_delta -= NEGATIVE_EMOTION_PENALTY

        persuasion_delta = PERSUASION_GAIN.get(intent, 0.0)

        concerns = list(state.concerns)
        for concern in self._concerns_for(entry):
            if concern in concerns:
                continue
            if len(concerns) >= self.max_concerns:
                logger.debug(f"Concern list full, dropping '{concern}'")
                continue
            concerns.append(concern)

        speakers = {key: value.model_copy() for key, value in state.per_speaker_state.items()}
        role = entry.speaker.value
        previous = speakers.get(role, SpeakerState())
        speakers[role] = SpeakerState(
            entry_count=previous.entry_count + 1,
            dominant_emotion=emotion,
        )

        return BeliefState(
            trust_level=_clamp(state.trust_level + trust_delta),
            persuasion_level=_clamp(state.persuasion_level + persuasion_delta),
            concerns=concerns,
            per_speaker_state=speakers,
        )

    @staticmethod
    def _concerns_for(entry: TranscriptEntry) -> List[str]:
        concerns = []
        if entry.toxicity_flags:
            concerns.append(CONCERN_TOXICITY)
        if entry.top_emotion == EmotionLabel.ANGER:
            concerns.append(CONCERN_HOSTILITY)
        elif entry.top_emotion == EmotionLabel.FEAR:
            concerns.append(CONCERN_FEAR)
        return concerns
