"""
Session Metrics Models
"""

from pydantic import BaseModel, Field


class TrustworthinessMetrics(BaseModel):
    """Aggregate safety metrics for a session"""

    bias_count: int = Field(default=0, ge=0)
    hallucination_flag_rate: float = Field(default=0.0, ge=0.0, le=100.0, description="Percent")
    ethical_violation_count: int = Field(default=0, ge=0)
    trustworthiness_score: int = Field(default=100, ge=0, le=100)


class SessionMetrics(BaseModel):
    """Summary bar metrics"""

    health_score: int = Field(..., ge=0, le=100)
    exchange_count: int = Field(..., ge=0)
    dominant_emotion: str
    top_strategy: str
    bias_count: int = Field(..., ge=0)
