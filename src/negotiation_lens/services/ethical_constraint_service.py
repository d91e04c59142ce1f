"""
Ethical Constraint Enforcement Service

First-match rule groups: the first group with a matching detection pattern
decides the violation type, and only that group's redaction patterns are
applied to the text.
"""

import logging
import re
from typing import List, NamedTuple

from negotiation_lens.models import EnforcementResult, ViolationType

logger = logging.getLogger(__name__)

REDACTION_TOKEN = "[REDACTED]"


class EthicalRule(NamedTuple):
    violation_type: ViolationType
    patterns: List[re.Pattern]
    redact_patterns: List[re.Pattern]


def _compile(patterns: List[str]) -> List[re.Pattern]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


class EthicalConstraintService:
    """
    윤리 제약 적용 서비스

    Groups are checked in priority order:
        personal-attack > manipulative-framing > dehumanizing-language > coercive-pressure
    """

    RULES = [
        EthicalRule(
            ViolationType.PERSONAL_ATTACK,
            _compile([
                r"\b(you('re| are) (an? )?(idiot|moron|fool|stupid|dumb|worthless|pathetic|loser|trash|garbage|scum))\b",
                r"\b(shut up|go to hell|drop dead|get lost|you suck)\b",
                r"\b(I (hate|despise|loathe) you)\b",
                r"\b(you (disgust|repulse) me)\b",
                r"\b(nobody (likes|wants|cares about) you)\b",
                r"\b(you('re| are) (a )?(failure|nothing|nobody|worthless))\b",
            ]),
            _compile([
                r"\b(idiot|moron|fool|stupid|dumb|worthless|pathetic|loser|trash|garbage|scum)\b",
                r"\b(shut up|go to hell|drop dead|get lost)\b",
                r"\b(hate|despise|loathe) you\b",
                r"\b(disgust|repulse) me\b",
            ]),
        ),
        EthicalRule(
            ViolationType.MANIPULATIVE_FRAMING,
            _compile([
                r"\b(you('re| are) (just )?(imagining|making it up|being paranoid|overreacting|too sensitive))\b",
                r"\b(that never happened|you('re| are) crazy|you('re| are) losing your mind)\b",
                r"\b(everyone (thinks|knows|agrees) you('re| are) wrong)\b",
                r"\b(you('re| are) (always|never) (wrong|right|lying|making things up))\b",
                r"\b(I('m| am) doing this for your own good)\b",
                r"\b(you (made|forced) me (do|say) this)\b",
            ]),
            _compile([
                r"\b(imagining|making it up|being paranoid)\b",
                r"\b(you('re| are) crazy|losing your mind)\b",
            ]),
        ),
        EthicalRule(
            ViolationType.DEHUMANIZING_LANGUAGE,
            _compile([
                r"\b(subhuman|less than human|not (fully |even )?human)\b",
                r"\b(animals?|beasts?|vermin|parasites?|cockroaches?|rats?) (like you|like them|like those)\b",
                r"\b(you('re| are) (just |only |merely )?(an? )?(object|thing|tool|instrument))\b",
                r"\b(those (people|creatures|things) (are|aren't|don't|can't))\b",
                r"\b(they('re| are) (not|less than) (real |true |actual )?people)\b",
            ]),
            _compile([
                r"\b(subhuman|less than human)\b",
                r"\b(animals?|beasts?|vermin|parasites?|cockroaches?|rats?) (like you|like them)\b",
            ]),
        ),
        EthicalRule(
            ViolationType.COERCIVE_PRESSURE,
            _compile([
                r"\b(do (it|this|that) or (else|I will|you will|there will be))\b",
                r"\b(you (have|must|need to) (do|comply|agree|accept) (or|otherwise))\b",
                r"\b(I('ll| will) (destroy|ruin|end|hurt|harm) (you|your|them))\b",
                r"\b(you('ll| will) (regret|pay for|suffer for) (this|that))\b",
                r"\b(no (choice|option|alternative) (but|except|other than))\b",
                r"\b(comply or (face|suffer|experience) (consequences|punishment|retaliation))\b",
            ]),
            _compile([
                r"\b(destroy|ruin|end|hurt|harm) (you|your|them)\b",
                r"\b(regret|pay for|suffer for) (this|that)\b",
            ]),
        ),
    ]

    VIOLATION_LABELS = {
        ViolationType.PERSONAL_ATTACK: "Personal Attack",
        ViolationType.MANIPULATIVE_FRAMING: "Manipulative Framing",
        ViolationType.DEHUMANIZING_LANGUAGE: "Dehumanizing Language",
        ViolationType.COERCIVE_PRESSURE: "Coercive Pressure",
    }

    def enforce(self, text: str) -> EnforcementResult:
        """
        Check text against the ethical rule groups

        Args:
            text: Candidate text (typically a strategy rationale)

        Returns:
            EnforcementResult; sanitized_text equals the input when no group matched
        """
        if not text:
            return EnforcementResult(is_violation=False, sanitized_text=text or "")

        for rule in self.RULES:
            if any(pattern.search(text) for pattern in rule.patterns):
                sanitized = text
                for redact in rule.redact_patterns:
                    sanitized = redact.sub(REDACTION_TOKEN, sanitized)

                logger.debug(f"Ethical violation: {rule.violation_type.value}")
                return EnforcementResult(
                    is_violation=True,
                    violation_type=rule.violation_type,
                    sanitized_text=sanitized,
                )

        return EnforcementResult(is_violation=False, sanitized_text=text)

    def format_violation_type(self, violation_type: ViolationType) -> str:
        """Display label for a violation type ("" for none)"""
        return self.VIOLATION_LABELS.get(violation_type, "")
