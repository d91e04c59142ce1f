"""
서비스 패키지

Analysis services and the per-session pipeline.
"""

from negotiation_lens.services.language_service import LanguageIdentificationService
from negotiation_lens.services.translation_service import PhraseTranslationService
from negotiation_lens.services.emotion_intent_service import EmotionIntentClassifier
from negotiation_lens.services.negotiation_stance_service import NegotiationStanceClassifier
from negotiation_lens.services.bias_screening_service import BiasScreeningService
from negotiation_lens.services.ethical_constraint_service import EthicalConstraintService
from negotiation_lens.services.hallucination_guard_service import HallucinationGuardService
from negotiation_lens.services.belief_state_service import BeliefStateTracker
from negotiation_lens.services.pattern_prediction_service import PatternPredictionService
from negotiation_lens.services.strategy_scoring_service import (
    STRATEGY_CATALOG,
    StrategyScoringService,
)
from negotiation_lens.services.strategy_screening_service import StrategyScreeningService
from negotiation_lens.services.trustworthiness_service import (
    build_trustworthiness_metrics,
    calculate_trustworthiness_score,
)
from negotiation_lens.services.semantic_analysis_service import SemanticAnalysisService
from negotiation_lens.services.session_analysis_service import ConversationSession

__all__ = [
    "LanguageIdentificationService",
    "PhraseTranslationService",
    "EmotionIntentClassifier",
    "NegotiationStanceClassifier",
    "BiasScreeningService",
    "EthicalConstraintService",
    "HallucinationGuardService",
    "BeliefStateTracker",
    "PatternPredictionService",
    "STRATEGY_CATALOG",
    "StrategyScoringService",
    "StrategyScreeningService",
    "calculate_trustworthiness_score",
    "build_trustworthiness_metrics",
    "SemanticAnalysisService",
    "ConversationSession",
]
