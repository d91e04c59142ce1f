"""
Conversation Session Service

Forward pipeline for one monitored conversation:

    text -> language -> (translation) -> emotion/intent -> toxicity flags
         -> belief state fold -> strategy ranking -> frozen TranscriptEntry

Plus the on-demand views the rendering and persistence layers read.
"""

import logging
import threading
from datetime import datetime
from typing import List, Optional, Union

from negotiation_lens.config import AnalysisConfig
from negotiation_lens.models import (
    BeliefState,
    ConversationPattern,
    EmotionLabel,
    EnforcementResult,
    EthicsResult,
    InsufficientData,
    PatternPrediction,
    PatternProfile,
    PlaybookResult,
    ScreenedStrategy,
    SemanticAnalysis,
    SessionMetrics,
    SessionPreferences,
    SpeakerRole,
    StrategyRecommendation,
    TranscriptEntry,
    TrustworthinessMetrics,
)
from negotiation_lens.services.belief_state_service import BeliefStateTracker
from negotiation_lens.services.bias_screening_service import BiasScreeningService
from negotiation_lens.services.emotion_intent_service import EmotionIntentClassifier
from negotiation_lens.services.ethical_constraint_service import EthicalConstraintService
from negotiation_lens.services.hallucination_guard_service import HallucinationGuardService
from negotiation_lens.services.language_service import UNKNOWN, LanguageIdentificationService
from negotiation_lens.services.negotiation_stance_service import NegotiationStanceClassifier
from negotiation_lens.services.pattern_prediction_service import PatternPredictionService
from negotiation_lens.services.semantic_analysis_service import SemanticAnalysisService
from negotiation_lens.services.strategy_screening_service import StrategyScreeningService
from negotiation_lens.services.strategy_scoring_service import StrategyScoringService
from negotiation_lens.services.translation_service import PhraseTranslationService
from negotiation_lens.services.trustworthiness_service import build_trustworthiness_metrics

logger = logging.getLogger(__name__)

TOPIC_LENGTH = 50
VIOLATION_HEALTH_PENALTY = 0.05


class ConversationSession:
    """
    대화 세션 분석 서비스

    Owns the entry list and the belief state tracker of exactly one session.
    add_entry() is serialized by a per-session lock; sessions share no state.
    Stateless analysis services may be shared between sessions.
    """

    def __init__(
        self,
        preferences: Optional[SessionPreferences] = None,
        config: Optional[AnalysisConfig] = None,
        language_service: Optional[LanguageIdentificationService] = None,
        translator: Optional[PhraseTranslationService] = None,
        classifier: Optional[EmotionIntentClassifier] = None,
        bias_screener: Optional[BiasScreeningService] = None,
        enforcer: Optional[EthicalConstraintService] = None,
        guard: Optional[HallucinationGuardService] = None,
        predictor: Optional[PatternPredictionService] = None,
        scorer: Optional[StrategyScoringService] = None,
        semantic_analyzer: Optional[SemanticAnalysisService] = None,
        stance_classifier: Optional[NegotiationStanceClassifier] = None,
    ):
        """
        Args:
            preferences: Session preferences (read on every call)
            config: AnalysisConfig instance
            language_service .. stance_classifier: Service overrides
        """
        self.config = config or AnalysisConfig()
        self.preferences = preferences or SessionPreferences()

        self.language_service = language_service or LanguageIdentificationService(
            min_matches=self.config.get_language_min_matches()
        )
        self.translator = translator or PhraseTranslationService()
        self.classifier = classifier or EmotionIntentClassifier()
        self.bias_screener = bias_screener or BiasScreeningService()
        self.enforcer = enforcer or EthicalConstraintService()
        self.guard = guard or HallucinationGuardService(
            threshold=self.config.get_hallucination_threshold(),
            contradiction_weight=self.config.get_contradiction_weight(),
        )
        self.predictor = predictor or PatternPredictionService(config=self.config)
        self.scorer = scorer or StrategyScoringService(config=self.config)
        self.semantic_analyzer = semantic_analyzer or SemanticAnalysisService()
        self.stance_classifier = stance_classifier or NegotiationStanceClassifier()
        self.strategy_screener = StrategyScreeningService(enforcer=self.enforcer, guard=self.guard)

        self.tracker = BeliefStateTracker(config=self.config)
        self._entries: List[TranscriptEntry] = []
        self._ethics: List[EthicsResult] = []
        self._enforcements: List[EnforcementResult] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def add_entry(
        self,
        text: str,
        speaker: Union[SpeakerRole, str] = SpeakerRole.UNKNOWN,
        detected_language: Optional[str] = None,
    ) -> TranscriptEntry:
        """
        Classify an utterance and append it to the session

        Args:
            text: Utterance text
            speaker: Speaker role (unrecognized values are stored as Unknown)
            detected_language: Language code from the capture layer (detected when None)

        Returns:
            The frozen TranscriptEntry
        """
        speaker = self._speaker_role(speaker)

        with self._lock:
            language = detected_language or self.language_service.detect_language(text)
            analysis_text = self._analysis_text(text, language)
            classifier_input = self.translator.strip_marker(analysis_text)

            emotions, intents = self.classifier.classify(classifier_input)
            toxicity_flags = self.bias_screener.detect_toxicity_flags(classifier_input)

            draft = TranscriptEntry(
                text=text,
                speaker=speaker,
                timestamp=datetime.now(),
                detected_language=language,
                analysis_text=analysis_text,
                emotions=emotions,
                intents=intents,
                toxicity_flags=toxicity_flags,
            )

            belief = self.tracker.fold(draft)
            strategies = self.scorer.rank(
                self._entries + [draft], belief, top_k=self.preferences.strategy_top_k
            )
            entry = draft.model_copy(update={"strategies": strategies})

            self._entries.append(entry)
            self._ethics.append(self.bias_screener.analyze(classifier_input))
            self._enforcements.append(self.enforcer.enforce(classifier_input))

            logger.debug(
                f"Entry #{len(self._entries)} [{speaker.value}] lang={language} "
                f"emotion={entry.top_emotion.value} intent={entry.top_intent.value} "
                f"trust={belief.trust_level:.0f}"
            )
            return entry

    @staticmethod
    def _speaker_role(speaker: Union[SpeakerRole, str]) -> SpeakerRole:
        try:
            return SpeakerRole(speaker)
        except ValueError:
            logger.warning(f"Unrecognized speaker '{speaker}', storing as {SpeakerRole.UNKNOWN.value}")
            return SpeakerRole.UNKNOWN

    def _analysis_text(self, text: str, language: str) -> str:
        if not self.preferences.translate_for_analysis:
            return text
        if language in (UNKNOWN, self.preferences.analysis_language):
            return text
        return self.translator.translate(text, language, self.preferences.analysis_language)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def entries(self) -> List[TranscriptEntry]:
        with self._lock:
            return list(self._entries)

    @property
    def belief_state(self) -> BeliefState:
        return self.tracker.state

    def prediction(self) -> Union[PatternPrediction, InsufficientData]:
        return self.predictor.predict(self.entries)

    def strategies(self) -> List[StrategyRecommendation]:
        """Current ranked strategies (cold start when the session is empty)"""
        with self._lock:
            return self.scorer.rank(
                self._entries, self.tracker.state, top_k=self.preferences.strategy_top_k
            )

    def screened_strategies(self) -> List[ScreenedStrategy]:
        """Current strategies after ethics and hallucination screening"""
        with self._lock:
            context = [e.analysis_text or e.text for e in self._entries]
            return self.strategy_screener.screen(self.strategies(), context)

    def ethics_results(self) -> List[EthicsResult]:
        with self._lock:
            return list(self._ethics)

    def trustworthiness_metrics(self) -> TrustworthinessMetrics:
        """
        Aggregate safety metrics

        bias count: bias categories per biased entry (1 for general-only bias)
        violations: entries that triggered an ethical constraint
        hallucination rate: percent of stored strategies flagged against their entry text
        """
        with self._lock:
            bias_count = sum(self.bias_screener.count_biases(result) for result in self._ethics)
            violation_count = self._violation_count()

            checked = flagged = 0
            for entry in self._entries:
                for strategy in entry.strategies:
                    checked += 1
                    result = self.guard.check(f"{strategy.strategy}: {strategy.rationale}", [entry.text])
                    flagged += result.flagged
            rate = (flagged / checked * 100.0) if checked else 0.0

            return build_trustworthiness_metrics(bias_count, violation_count, rate)

    def session_metrics(self) -> SessionMetrics:
        with self._lock:
            belief = self.tracker.state
            violations = self._violation_count()
            raw = (
                belief.trust_level / 100 * 50 + belief.persuasion_level / 100 * 30 + 20
            ) * (1 - VIOLATION_HEALTH_PENALTY * violations)
            health = max(0, min(100, round(raw)))

            dominant = self._entries[-1].top_emotion if self._entries else EmotionLabel.NEUTRAL
            ranked = self.strategies()

            return SessionMetrics(
                health_score=health,
                exchange_count=len(self._entries),
                dominant_emotion=dominant.value,
                top_strategy=ranked[0].strategy if ranked else "",
                bias_count=sum(self.bias_screener.count_biases(r) for r in self._ethics),
            )

    def pattern_profile(self) -> Optional[PatternProfile]:
        with self._lock:
            ranked = self.strategies() if self._entries else []
            return self.predictor.build_pattern_profile(
                self._entries, top_strategy=ranked[0].strategy if ranked else None
            )

    def raw_transcript(self) -> str:
        """Entries as "[Speaker] text" lines"""
        with self._lock:
            return "\n".join(f"[{e.speaker.value}] {e.text}" for e in self._entries)

    def conversation_patterns(self) -> List[ConversationPattern]:
        """One pattern tuple per entry for the persistence layer"""
        with self._lock:
            return [
                ConversationPattern(
                    speaker_role=e.speaker.value,
                    intent=e.top_intent.value,
                    emotion=e.top_emotion.value,
                    topic=e.text[:TOPIC_LENGTH],
                    occurrence=1,
                )
                for e in self._entries
            ]

    def translate_entry(self, index: int, to_lang: Optional[str] = None) -> str:
        """
        Translate a stored entry for display

        Raises:
            IndexError: index outside the session
        """
        with self._lock:
            entry = self._entry_at(index)
        target = to_lang or self.preferences.display_language
        return self.translator.translate(entry.text, entry.detected_language, target)

    def semantic_analysis(self, index: Optional[int] = None) -> Optional[SemanticAnalysis]:
        """
        Topic, entity, sentiment and keyword tags for one entry

        Args:
            index: Entry index (latest entry when None)

        Returns:
            SemanticAnalysis, or None for an empty session when index is None

        Raises:
            IndexError: index outside the session
        """
        with self._lock:
            if index is None and not self._entries:
                return None
            entry = self._entry_at(len(self._entries) - 1 if index is None else index)
        return self.semantic_analyzer.analyze(self._classifier_text(entry))

    def negotiation_playbook(self) -> Optional[PlaybookResult]:
        """Stance of the latest entry and playbook moves scaled by the current belief state"""
        with self._lock:
            if not self._entries:
                return None
            entry = self._entries[-1]
            belief = self.tracker.state
        return self.stance_classifier.recommend(
            self._classifier_text(entry), belief.trust_level, belief.persuasion_level
        )

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()
            self._ethics.clear()
            self._enforcements.clear()
            self.tracker.reset()
        logger.info("Session reset")

    def _entry_at(self, index: int) -> TranscriptEntry:
        if not 0 <= index < len(self._entries):
            raise IndexError(f"entry index {index} out of range (0..{len(self._entries) - 1})")
        return self._entries[index]

    def _classifier_text(self, entry: TranscriptEntry) -> str:
        return self.translator.strip_marker(entry.analysis_text or entry.text)

    def _violation_count(self) -> int:
        return sum(1 for result in self._enforcements if result.is_violation)
