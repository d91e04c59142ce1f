"""
Session Preferences

Explicit preference object handed to a ConversationSession; the session reads
it on every call, so a caller that mutates the same instance changes the
behaviour of every session it was given to.
"""

from pydantic import BaseModel, ConfigDict, Field


class SessionPreferences(BaseModel):
    """Per-session user preferences"""

    model_config = ConfigDict(validate_assignment=True)

    display_language: str = Field(default="en", description="Language for on-demand translation")
    analysis_language: str = Field(default="en", description="Language the classifiers read")
    translate_for_analysis: bool = Field(
        default=True, description="Normalize non-English entries to English before classifying"
    )
    strategy_top_k: int = Field(default=5, ge=1, le=12, description="Ranked strategies to keep")
