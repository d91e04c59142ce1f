"""
Belief State Models
"""

from typing import Dict, List

from pydantic import BaseModel, Field

from negotiation_lens.models.transcript import EmotionLabel


class SpeakerState(BaseModel):
    """Running per-speaker summary"""

    entry_count: int = Field(default=0, ge=0, description="Entries folded for the speaker")
    dominant_emotion: EmotionLabel = Field(
        default=EmotionLabel.NEUTRAL, description="Top emotion of the latest entry"
    )


class BeliefState(BaseModel):
    """Running trust/persuasion/concern model for one session"""

    trust_level: float = Field(default=50.0, ge=0.0, le=100.0, description="Rapport (0 ~ 100)")
    persuasion_level: float = Field(
        default=0.0, ge=0.0, le=100.0, description="Susceptibility to influence (0 ~ 100)"
    )
    concerns: List[str] = Field(default_factory=list, description="Append-only concern labels")
    per_speaker_state: Dict[str, SpeakerState] = Field(
        default_factory=dict, description="Speaker role value -> SpeakerState"
    )
