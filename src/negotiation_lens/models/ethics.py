"""
Ethics Screening Models

Bias/toxicity verdicts, ethical constraint enforcement results and
hallucination guard results.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class EthicsStatus(str, Enum):
    """Screening verdict, highest priority first"""

    TOXIC = "Toxic Language Detected"
    BIAS = "Bias"
    POTENTIAL_BIAS = "Potential Bias"
    CLEAN = "Clean"


class Severity(str, Enum):
    """Rule severity tier"""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.LOW: 1, Severity.MEDIUM: 2, Severity.HIGH: 3}


class BiasCategory(BaseModel):
    """Categorized bias finding"""

    category: str = Field(..., description="gender, racial, socioeconomic, confirmation")
    severity: Severity = Field(..., description="Severity tier")
    fragment: str = Field(..., description="Matched text fragment (<= 40 chars)")


class EthicsResult(BaseModel):
    """Bias & toxicity screening verdict"""

    status: EthicsStatus = Field(..., description="Screening status")
    severity: Severity = Field(default=Severity.LOW, description="Maximum firing severity")
    explanation: str = Field(..., description="Human readable summary")
    flags: List[str] = Field(default_factory=list, description="All firing rule labels")
    bias_categories: List[BiasCategory] = Field(default_factory=list)

    @property
    def is_biased(self) -> bool:
        return self.status in (EthicsStatus.BIAS, EthicsStatus.POTENTIAL_BIAS)


class ViolationType(str, Enum):
    """Ethical rule categories, in scan priority order"""

    PERSONAL_ATTACK = "personal-attack"
    MANIPULATIVE_FRAMING = "manipulative-framing"
    DEHUMANIZING_LANGUAGE = "dehumanizing-language"
    COERCIVE_PRESSURE = "coercive-pressure"
    NONE = "none"


class EnforcementResult(BaseModel):
    """Ethical constraint enforcement outcome"""

    model_config = ConfigDict(frozen=True)

    is_violation: bool = Field(..., description="Whether any rule group matched")
    violation_type: ViolationType = Field(default=ViolationType.NONE)
    sanitized_text: str = Field(..., description="Text with the group's spans redacted")


class SuspectPhrase(BaseModel):
    """Phrase that raised hallucination suspicion"""

    phrase: str = Field(..., description="Matched phrase (<= 60 chars)")
    reason: str = Field(..., description="Why the phrase is suspect")


class HallucinationResult(BaseModel):
    """Hallucination guard outcome"""

    flagged: bool = Field(..., description="confidence >= threshold")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Accumulated weight")
    suspect_phrases: List[SuspectPhrase] = Field(default_factory=list)
