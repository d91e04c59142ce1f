"""
Shared fixtures for negotiation_lens tests
"""

from typing import List, Optional

import pytest

from negotiation_lens.config import AnalysisConfig
from negotiation_lens.models import (
    EmotionLabel,
    EmotionScore,
    IntentLabel,
    IntentScore,
    SpeakerRole,
    ToxicityFlag,
    TranscriptEntry,
)


def make_entry(
    emotion: EmotionLabel = EmotionLabel.NEUTRAL,
    intent: IntentLabel = IntentLabel.STATEMENT,
    text: str = "test utterance",
    speaker: SpeakerRole = SpeakerRole.SUBJECT,
    emotion_confidence: float = 0.8,
    intent_confidence: float = 0.8,
    toxicity: Optional[List[str]] = None,
) -> TranscriptEntry:
    """Build a classified entry without running the classifier"""
    return TranscriptEntry(
        text=text,
        speaker=speaker,
        detected_language="en",
        analysis_text=text,
        emotions=[EmotionScore(label=emotion, confidence=emotion_confidence)],
        intents=[IntentScore(label=intent, confidence=intent_confidence)],
        toxicity_flags=[ToxicityFlag(flag_type=t, confidence=0.75) for t in (toxicity or [])],
    )


@pytest.fixture(name="make_entry")
def make_entry_fixture():
    """Factory for classified entries"""
    return make_entry


@pytest.fixture
def missing_config(tmp_path) -> AnalysisConfig:
    """Config pointing at a file that does not exist (built-in defaults)"""
    return AnalysisConfig(config_path=tmp_path / "absent.yaml")


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    for name in (
        "NEGOTIATION_LENS_INITIAL_TRUST",
        "NEGOTIATION_LENS_INITIAL_PERSUASION",
        "NEGOTIATION_LENS_MIN_HISTORY",
        "NEGOTIATION_LENS_STRATEGY_TOP_K",
    ):
        monkeypatch.delenv(name, raising=False)
