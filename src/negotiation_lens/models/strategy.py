"""
Strategy Models

Strategy catalog candidates, screened recommendations and the
negotiation-playbook variant.
"""

from enum import Enum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from negotiation_lens.models.ethics import HallucinationResult, ViolationType


class StrategyTag(str, Enum):
    """Closed set of descriptive candidate tags"""

    TRUST = "trust"
    RAPPORT = "rapport"
    INFORMATION = "information"
    ENGAGEMENT = "engagement"
    PERSUASION = "persuasion"
    NEGOTIATION = "negotiation"
    COOPERATION = "cooperation"
    DE_ESCALATION = "de-escalation"


class StrategyCandidate(BaseModel):
    """Catalog entry scored against the current context"""

    model_config = ConfigDict(frozen=True)

    strategy: str
    rationale: str
    base_score: float = Field(..., ge=0.0, le=1.0)
    tags: FrozenSet[StrategyTag] = Field(default_factory=frozenset)


class ScreeningStatus(str, Enum):
    """Outcome of guard screening for a single recommendation"""

    PASSED = "passed"
    ANNOTATED = "annotated"  # hallucination guard flagged the rationale
    SUPPRESSED = "suppressed"  # ethical constraint triggered, rationale withheld


class ScreenedStrategy(BaseModel):
    """Recommendation after the ethics and hallucination guards ran"""

    strategy: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    rationale: Optional[str] = Field(default=None, description="None when suppressed")
    status: ScreeningStatus
    violation_type: ViolationType = ViolationType.NONE
    hallucination: Optional[HallucinationResult] = None

    @property
    def is_visible(self) -> bool:
        return self.status != ScreeningStatus.SUPPRESSED


class NegotiationEmotion(str, Enum):
    """Negotiation stance emotions"""

    NEUTRAL = "Neutral"
    FRUSTRATED = "Frustrated"
    CONFIDENT = "Confident"
    CURIOUS = "Curious"
    HOSTILE = "Hostile"
    ANXIOUS = "Anxious"
    OPTIMISTIC = "Optimistic"


class NegotiationIntent(str, Enum):
    """Negotiation stance intents"""

    NEGOTIATING = "Negotiating"
    DEMANDING = "Demanding"
    CONCEDING = "Conceding"
    PROBING = "Probing"
    AGREEING = "Agreeing"
    DEFLECTING = "Deflecting"
    ASSERTING = "Asserting"


class PlaybookCategory(str, Enum):
    """Playbook move category"""

    DE_ESCALATE = "de-escalate"
    ADVANCE = "advance"
    PROBE = "probe"
    ANCHOR = "anchor"
    REFRAME = "reframe"
    BUILD_TRUST = "build-trust"


class NegotiationStance(BaseModel):
    """Dominant negotiation emotion and intent of one utterance"""

    emotion: NegotiationEmotion
    emotion_confidence: float = Field(..., gt=0.0, le=1.0)
    intent: NegotiationIntent
    intent_confidence: float = Field(..., gt=0.0, le=1.0)


class PlaybookMove(BaseModel):
    """Negotiation playbook recommendation"""

    strategy: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    rationale: str
    category: PlaybookCategory


class PlaybookResult(BaseModel):
    """Playbook moves for a stance"""

    stance: NegotiationStance
    moves: List[PlaybookMove] = Field(default_factory=list)
