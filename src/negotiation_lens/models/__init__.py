"""
Conversation Analysis Data Models
"""

from negotiation_lens.models.transcript import (
    SpeakerRole,
    EmotionLabel,
    IntentLabel,
    EmotionScore,
    IntentScore,
    ToxicityFlag,
    StrategyRecommendation,
    TranscriptEntry,
    ConversationPattern,
)
from negotiation_lens.models.ethics import (
    EthicsStatus,
    Severity,
    BiasCategory,
    EthicsResult,
    ViolationType,
    EnforcementResult,
    SuspectPhrase,
    HallucinationResult,
)
from negotiation_lens.models.belief import BeliefState, SpeakerState
from negotiation_lens.models.prediction import (
    ConversationDirection,
    Urgency,
    HallucinationRisk,
    LabelPrediction,
    ActionWindow,
    PatternPrediction,
    InsufficientData,
    PatternProfile,
)
from negotiation_lens.models.strategy import (
    StrategyTag,
    StrategyCandidate,
    ScreeningStatus,
    ScreenedStrategy,
    NegotiationEmotion,
    NegotiationIntent,
    NegotiationStance,
    PlaybookCategory,
    PlaybookMove,
    PlaybookResult,
)
from negotiation_lens.models.metrics import TrustworthinessMetrics, SessionMetrics
from negotiation_lens.models.semantic import SemanticTagType, SemanticTag, SemanticAnalysis
from negotiation_lens.models.preferences import SessionPreferences

__all__ = [
    # Transcript
    "SpeakerRole",
    "EmotionLabel",
    "IntentLabel",
    "EmotionScore",
    "IntentScore",
    "ToxicityFlag",
    "StrategyRecommendation",
    "TranscriptEntry",
    "ConversationPattern",
    # Ethics
    "EthicsStatus",
    "Severity",
    "BiasCategory",
    "EthicsResult",
    "ViolationType",
    "EnforcementResult",
    "SuspectPhrase",
    "HallucinationResult",
    # Belief
    "BeliefState",
    "SpeakerState",
    # Prediction
    "ConversationDirection",
    "Urgency",
    "HallucinationRisk",
    "LabelPrediction",
    "ActionWindow",
    "PatternPrediction",
    "InsufficientData",
    "PatternProfile",
    # Strategy
    "StrategyTag",
    "StrategyCandidate",
    "ScreeningStatus",
    "ScreenedStrategy",
    "NegotiationEmotion",
    "NegotiationIntent",
    "NegotiationStance",
    "PlaybookCategory",
    "PlaybookMove",
    "PlaybookResult",
    # Metrics
    "TrustworthinessMetrics",
    "SessionMetrics",
    # Semantic
    "SemanticTagType",
    "SemanticTag",
    "SemanticAnalysis",
    # Preferences
    "SessionPreferences",
]
