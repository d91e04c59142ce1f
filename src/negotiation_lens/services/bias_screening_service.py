"""
Bias & Toxicity Screening Service

Cumulative rule scan: every rule of every group is evaluated and all firing
rules are reported. Compare EthicalConstraintService, which stops at the
first matching group.
"""

import logging
import re
from typing import Dict, List, NamedTuple, Optional, Tuple

from negotiation_lens.models import (
    BiasCategory,
    EthicsResult,
    EthicsStatus,
    Severity,
    ToxicityFlag,
)

logger = logging.getLogger(__name__)

FRAGMENT_LENGTH = 40


class LabelRule(NamedTuple):
    pattern: re.Pattern
    label: str
    severity: Severity


class CategoryRule(NamedTuple):
    pattern: re.Pattern
    fragment: str
    severity: Severity


def _rx(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


H, M, L = Severity.HIGH, Severity.MEDIUM, Severity.LOW


class BiasScreeningService:
    """
    편향/유해성 검사 서비스

    Groups are scanned in order: toxicity, general bias, then the gender,
    racial, socioeconomic and confirmation categories.
    """

    TOXICITY_RULES = [
        LabelRule(_rx(r"\b(idiot|stupid|moron|fool|dumb|incompetent)\b"), "Personal insult detected", H),
        LabelRule(_rx(r"\b(threat|threaten|destroy|crush|eliminate|annihilate)\b"), "Threatening language", H),
        LabelRule(_rx(r"\b(lie|liar|dishonest|fraud|cheat|deceive|manipulate)\b"), "Accusatory language", M),
        LabelRule(_rx(r"\b(hate|despise|loathe|detest)\b"), "Hostile sentiment", M),
        LabelRule(_rx(r"\b(worthless|useless|pathetic|ridiculous|absurd)\b"), "Dismissive language", L),
    ]

    BIAS_RULES = [
        LabelRule(_rx(r"\b(always|never|everyone|nobody|all of them|none of them)\b"), "Absolute generalization", L),
        LabelRule(_rx(r"\b(obviously|clearly|of course|everyone knows|it's obvious)\b"), "Assumption of shared knowledge", L),
        LabelRule(_rx(r"\b(typical|as expected|predictably|naturally they)\b"), "Stereotyping language", M),
        LabelRule(_rx(r"\b(inferior|superior|better than|worse than|beneath)\b"), "Comparative bias", M),
        LabelRule(_rx(r"\b(those people|their kind|people like them)\b"), "Othering language", H),
    ]

    CATEGORY_RULES: Dict[str, List[CategoryRule]] = {
        "gender": [
            CategoryRule(_rx(r"\bmen are\b"), "men are", M),
            CategoryRule(_rx(r"\bwomen should\b"), "women should", M),
            CategoryRule(_rx(r"\bwomen are (too|just|only|always|never)\b"), "women are [qualifier]", H),
            CategoryRule(_rx(r"\bmen (can't|cannot|don't|never)\b"), "men [negative]", M),
            CategoryRule(_rx(r"\b(girls|boys) (can't|shouldn't|don't)\b"), "gendered capability denial", M),
            CategoryRule(_rx(r"\b(hysterical|bossy|aggressive for a woman|weak for a man)\b"), "gendered stereotype", H),
            CategoryRule(_rx(r"\b(man up|like a girl|throw like a girl)\b"), "gendered expression", M),
        ],
        "racial": [
            CategoryRule(_rx(r"\b(racial|racist|racism|racially)\b"), "racial reference", M),
            CategoryRule(_rx(r"\bethnic (slur|stereotype|group)\b"), "ethnic reference", H),
            CategoryRule(_rx(r"\b(skin color|skin colour)\b"), "skin color reference", M),
            CategoryRule(_rx(r"\b(those (people|immigrants|foreigners))\b"), "othering by origin", H),
            CategoryRule(_rx(r"\b(they all|they always|they never) (steal|lie|cheat|are lazy)\b"), "group stereotype", H),
            CategoryRule(_rx(r"\b(minority|minorities) (are|always|never|can't)\b"), "minority generalization", H),
        ],
        "socioeconomic": [
            CategoryRule(_rx(r"\bpoor people (are|always|never|just|only)\b"), "poor people generalization", H),
            CategoryRule(_rx(r"\bwelfare (queen|cheat|fraud|abuse)\b"), "welfare stereotype", H),
            CategoryRule(_rx(r"\b(homeless|poor) (are|deserve|should)\b"), "class-based judgment", H),
            CategoryRule(_rx(r"\b(rich people|wealthy) (are|always|never|just)\b"), "wealth generalization", M),
            CategoryRule(_rx(r"\b(lower class|working class) (can't|don't|never)\b"), "class capability denial", H),
            CategoryRule(_rx(r"\b(born poor|stay poor|poverty mentality)\b"), "poverty determinism", M),
        ],
        "confirmation": [
            CategoryRule(_rx(r"\bonly my (view|opinion|perspective|side)\b"), "only my view", M),
            CategoryRule(_rx(r"\beveryone knows\b"), "everyone knows", L),
            CategoryRule(_rx(r"\bobviously (everyone|all|no one)\b"), "obvious generalization", L),
            CategoryRule(_rx(r"\b(I'm|we're|they're) (always|never) (right|wrong)\b"), "absolute certainty", M),
            CategoryRule(
                _rx(r"\b(the facts|the truth|the evidence) (clearly|obviously|definitely) (show|prove|confirm)\b"),
                "certainty framing",
                L,
            ),
            CategoryRule(
                _rx(r"\b(anyone who disagrees|those who disagree) (is|are) (wrong|stupid|ignorant)\b"),
                "dismissing disagreement",
                H,
            ),
            CategoryRule(_rx(r"\b(it's common sense|it's obvious|it goes without saying)\b"), "assumed consensus", L),
        ],
    }

    # Per-entry toxicity flags (substring keyword groups)
    TOXICITY_FLAG_KEYWORDS: Dict[str, List[str]] = {
        "threat": ["kill", "hurt", "attack", "destroy", "harm", "threat", "going to get you"],
        "harassment": ["stupid", "idiot", "moron", "loser", "worthless", "pathetic"],
        "hate-speech": ["hate", "despise", "disgusting person"],
        "coercion": ["must", "have to", "no choice", "or else", "forced"],
    }

    CLEAN_EXPLANATION = "No bias or toxicity indicators detected."

    def analyze(self, text: str) -> EthicsResult:
        """
        Screen text for toxicity and bias

        Args:
            text: Text to screen

        Returns:
            EthicsResult with every firing rule label and bias category
        """
        if not text or not text.strip():
            return self._clean()

        toxic_flags, toxic_severity = self._scan_labels(text, self.TOXICITY_RULES)
        bias_flags, bias_severity = self._scan_labels(text, self.BIAS_RULES)
        categories = self._scan_categories(text)

        severities = [s for s in (toxic_severity, bias_severity) if s is not None]
        severities.extend(c.severity for c in categories)
        max_severity = max(severities, key=lambda s: s.rank, default=Severity.LOW)

        flags = toxic_flags + bias_flags

        if toxic_flags:
            logger.debug(f"Toxic language: {toxic_flags}")
            return EthicsResult(
                status=EthicsStatus.TOXIC,
                severity=max_severity,
                explanation=(
                    f"Detected: {', '.join(flags[:2])}. "
                    "Consider rephrasing to maintain constructive dialogue."
                ),
                flags=flags,
                bias_categories=categories,
            )

        if bias_flags or categories:
            labels = list(dict.fromkeys(c.category for c in categories))
            all_flags = flags + [f"{label} bias" for label in labels]
            return EthicsResult(
                status=EthicsStatus.BIAS if categories else EthicsStatus.POTENTIAL_BIAS,
                severity=max_severity,
                explanation=(
                    f"Detected: {', '.join(all_flags[:3])}. "
                    "Review for unintended bias or assumptions."
                ),
                flags=all_flags,
                bias_categories=categories,
            )

        return self._clean()

    def detect_toxicity_flags(self, text: str) -> List[ToxicityFlag]:
        """
        Keyword toxicity flags for a transcript entry

        Confidence per flag type: min(0.95, 0.55 + 0.2 * hits)
        """
        if not text:
            return []

        lower = text.lower()
        flags = []
        for flag_type, keywords in self.TOXICITY_FLAG_KEYWORDS.items():
            matched = [kw for kw in keywords if kw in lower]
            if matched:
                flags.append(
                    ToxicityFlag(
                        flag_type=flag_type,
                        confidence=round(min(0.95, 0.55 + len(matched) * 0.2), 4),
                        fragment=matched[0],
                    )
                )
        return sorted(flags, key=lambda f: f.confidence, reverse=True)

    def count_biases(self, result: EthicsResult) -> int:
        """Bias findings of one verdict (general-only bias counts once)"""
        if not result.is_biased:
            return 0
        return len(result.bias_categories) or 1

    @staticmethod
    def _scan_labels(text: str, rules: List[LabelRule]) -> Tuple[List[str], Optional[Severity]]:
        labels = []
        worst = None
        for rule in rules:
            if rule.pattern.search(text):
                labels.append(rule.label)
                if worst is None or rule.severity.rank > worst.rank:
                    worst = rule.severity
        return labels, worst

    def _scan_categories(self, text: str) -> List[BiasCategory]:
        found = []
        for category, rules in self.CATEGORY_RULES.items():
            for rule in rules:
                match = rule.pattern.search(text)
                if match:
                    found.append(
                        BiasCategory(
                            category=category,
                            severity=rule.severity,
                            fragment=match.group(0)[:FRAGMENT_LENGTH] or rule.fragment,
                        )
                    )
        return found

    def _clean(self) -> EthicsResult:
        return EthicsResult(
            status=EthicsStatus.CLEAN,
            severity=Severity.LOW,
            explanation=self.CLEAN_EXPLANATION,
        )
