"""
Transcript Models

TranscriptEntry and the per-entry classification results attached to it.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SpeakerRole(str, Enum):
    """Speaker roles in a monitored conversation"""

    OPERATOR = "Operator"
    SUBJECT = "Subject"
    WITNESS = "Witness"
    UNKNOWN = "Unknown"


class EmotionLabel(str, Enum):
    """7 emotion classes"""

    ANGER = "anger"
    FEAR = "fear"
    SADNESS = "sadness"
    JOY = "joy"
    SURPRISE = "surprise"
    DISGUST = "disgust"
    NEUTRAL = "neutral"  # fallback


class IntentLabel(str, Enum):
    """7 intent classes plus the statement fallback"""

    REQUEST_HELP = "request-help"
    EXPRESS_GRIEVANCE = "express-grievance"
    MAKE_THREAT = "make-threat"
    SEEK_INFORMATION = "seek-information"
    NEGOTIATE = "negotiate"
    DENY_ACCUSATION = "deny-accusation"
    COOPERATE = "cooperate"
    STATEMENT = "statement"  # fallback


class EmotionScore(BaseModel):
    """Single emotion label with confidence"""

    model_config = ConfigDict(frozen=True)

    label: EmotionLabel = Field(..., description="Emotion label")
    confidence: float = Field(..., gt=0.0, le=1.0, description="Confidence (0.0, 1.0]")


class IntentScore(BaseModel):
    """Single intent label with confidence"""

    model_config = ConfigDict(frozen=True)

    label: IntentLabel = Field(..., description="Intent label")
    confidence: float = Field(..., gt=0.0, le=1.0, description="Confidence (0.0, 1.0]")


class ToxicityFlag(BaseModel):
    """Toxicity flag raised on an entry"""

    model_config = ConfigDict(frozen=True)

    flag_type: str = Field(..., description="threat, harassment, hate-speech, coercion")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence (0.0 ~ 1.0)")
    fragment: Optional[str] = Field(default=None, description="First matched keyword")


class StrategyRecommendation(BaseModel):
    """Ranked action strategy"""

    model_config = ConfigDict(frozen=True)

    strategy: str = Field(..., description="Strategy name")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Score (0.0 ~ 1.0)")
    rationale: str = Field(..., description="Why the strategy applies")


class TranscriptEntry(BaseModel):
    """
    One classified conversation turn.

    Immutable once built; the session keeps entries in insertion order.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Original utterance text")
    speaker: SpeakerRole = Field(default=SpeakerRole.UNKNOWN, description="Speaker role")
    timestamp: datetime = Field(default_factory=datetime.now, description="Arrival time")
    detected_language: str = Field(default="unknown", description="ISO 639-1 code or unknown")
    analysis_text: str = Field(default="", description="English text the classifiers saw")
    emotions: List[EmotionScore] = Field(default_factory=list, max_length=3)
    intents: List[IntentScore] = Field(default_factory=list, max_length=3)
    toxicity_flags: List[ToxicityFlag] = Field(default_factory=list)
    strategies: List[StrategyRecommendation] = Field(default_factory=list)

    @property
    def top_emotion(self) -> EmotionLabel:
        """Highest-confidence emotion (neutral when unclassified)"""
        return self.emotions[0].label if self.emotions else EmotionLabel.NEUTRAL

    @property
    def top_intent(self) -> IntentLabel:
        """Highest-confidence intent (statement when unclassified)"""
        return self.intents[0].label if self.intents else IntentLabel.STATEMENT


class ConversationPattern(BaseModel):
    """Pattern tuple handed to the persistence layer, one per entry"""

    speaker_role: str = Field(..., description="Speaker role value")
    intent: str = Field(..., description="Top intent label")
    emotion: str = Field(..., description="Top emotion label")
    topic: str = Field(..., description="First 50 characters of the entry text")
    occurrence: int = Field(default=1, ge=0, description="Occurrence count")
