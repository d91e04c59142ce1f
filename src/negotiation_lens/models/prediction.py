"""
Pattern Prediction Models
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ConversationDirection(str, Enum):
    """Trend of the recent window"""

    ESCALATING = "escalating"
    DE_ESCALATING = "de-escalating"
    STABLE = "stable"


class Urgency(str, Enum):
    """Operator intervention urgency"""

    IMMEDIATE = "immediate"
    SOON = "soon"
    MONITOR = "monitor"


class HallucinationRisk(str, Enum):
    """How far a forecast can be trusted given the evidence behind it"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LabelPrediction(BaseModel):
    """Predicted next label"""

    label: str = Field(..., description="Predicted label")
    confidence: float = Field(..., gt=0.0, le=1.0, description="Confidence (0.0, 1.0]")


class ActionWindow(BaseModel):
    """Predicted timing for an operator intervention"""

    timing: str = Field(..., description="When to act")
    reasoning: str = Field(..., description="Advice for the operator")
    urgency: Urgency = Field(..., description="Urgency tier")


class PatternPrediction(BaseModel):
    """Forecast of the next turn and the conversation trend"""

    kind: Literal["prediction"] = "prediction"
    next_emotion: LabelPrediction
    next_intent: LabelPrediction
    direction: ConversationDirection
    direction_reasoning: str
    action_window: ActionWindow
    hallucination_risk: HallucinationRisk = Field(default=HallucinationRisk.MEDIUM)


class InsufficientData(BaseModel):
    """Returned instead of a forecast when history is too short"""

    kind: Literal["insufficient_data"] = "insufficient_data"
    required: int = Field(..., ge=1, description="Minimum entries needed")
    available: int = Field(..., ge=0, description="Entries supplied")
    message: str = Field(default="insufficient data")


class PatternProfile(BaseModel):
    """Snapshot of the latest dominant labels"""

    dominant_emotion: str
    dominant_intent: str
    entry_count: int = Field(..., ge=1)
    direction: ConversationDirection
    top_strategy: Optional[str] = None
