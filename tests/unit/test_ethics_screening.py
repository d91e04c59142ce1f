"""
Unit tests for bias screening, ethical constraint enforcement and the
hallucination guard
"""

import pytest

from negotiation_lens.models import EthicsStatus, Severity, ViolationType
from negotiation_lens.services.bias_screening_service import BiasScreeningService
from negotiation_lens.services.ethical_constraint_service import EthicalConstraintService
from negotiation_lens.services.hallucination_guard_service import HallucinationGuardService


class TestBiasScreening:
    """편향/유해성 검사 테스트"""

    @pytest.fixture
    def screener(self):
        return BiasScreeningService()

    def test_clean_text(self, screener):
        result = screener.analyze("Let's review the schedule for next week.")
        assert result.status == EthicsStatus.CLEAN
        assert result.severity == Severity.LOW
        assert result.flags == []
        assert result.explanation == "No bias or toxicity indicators detected."

    def test_toxic_takes_priority(self, screener):
        result = screener.analyze("You are an idiot and everyone knows it")
        assert result.status == EthicsStatus.TOXIC
        assert result.severity == Severity.HIGH
        assert "Personal insult detected" in result.flags
        assert result.explanation.startswith("Detected: Personal insult detected")

    def test_cumulative_matching(self, screener):
        # Every firing rule is reported, not only the first
        result = screener.analyze("You liar, I hate this stupid offer")
        assert result.flags[:3] == [
            "Personal insult detected",
            "Accusatory language",
            "Hostile sentiment",
        ]

    def test_general_bias_only_is_potential(self, screener):
        result = screener.analyze("You always say that")
        assert result.status == EthicsStatus.POTENTIAL_BIAS
        assert result.bias_categories == []
        assert result.flags == ["Absolute generalization"]

    def test_category_bias(self, screener):
        result = screener.analyze("Poor people are just lazy")
        assert result.status == EthicsStatus.BIAS
        assert result.severity == Severity.HIGH
        categories = {c.category for c in result.bias_categories}
        assert "socioeconomic" in categories
        assert "socioeconomic bias" in result.flags

    def test_fragment_is_actual_match(self, screener):
        result = screener.analyze("Women are too emotional for this")
        gender = [c for c in result.bias_categories if c.category == "gender"]
        assert any(c.fragment.lower() == "women are too" for c in gender)
        assert all(len(c.fragment) <= 40 for c in result.bias_categories)

    def test_count_biases(self, screener):
        assert screener.count_biases(screener.analyze("You always say that")) == 1
        assert screener.count_biases(screener.analyze("Nice to meet you")) == 0

    def test_toxicity_flags_sorted(self, screener):
        flags = screener.detect_toxicity_flags("You stupid idiot, I will hurt you, you must pay")
        types = [f.flag_type for f in flags]
        assert types[0] == "harassment"
        assert set(types) == {"harassment", "threat", "coercion"}
        confidences = [f.confidence for f in flags]
        assert confidences == sorted(confidences, reverse=True)

    def test_no_toxicity_flags(self, screener):
        assert screener.detect_toxicity_flags("Good morning") == []


class TestEthicalConstraintEnforcement:
    """윤리 제약 적용 테스트"""

    @pytest.fixture
    def enforcer(self):
        return EthicalConstraintService()

    def test_personal_attack_is_redacted(self, enforcer):
        result = enforcer.enforce("You are an idiot and I hate you")
        assert result.is_violation
        assert result.violation_type == ViolationType.PERSONAL_ATTACK
        assert "idiot" not in result.sanitized_text.lower()
        assert result.sanitized_text == "You are an [REDACTED] and I [REDACTED]"

    def test_redaction_is_idempotent(self, enforcer):
        first = enforcer.enforce("You are an idiot and I hate you")
        second = enforcer.enforce(first.sanitized_text)
        assert not second.is_violation
        assert second.sanitized_text == first.sanitized_text

    def test_first_matching_group_wins(self, enforcer):
        # Matches personal-attack and coercive-pressure; only the first is reported
        text = "Shut up. I will destroy you"
        result = enforcer.enforce(text)
        assert result.violation_type == ViolationType.PERSONAL_ATTACK
        # coercive-pressure redactions are not applied
        assert "destroy you" in result.sanitized_text

    def test_manipulative_framing(self, enforcer):
        result = enforcer.enforce("That never happened, you're imagining things")
        assert result.violation_type == ViolationType.MANIPULATIVE_FRAMING
        assert "[REDACTED]" in result.sanitized_text

    def test_dehumanizing_language(self, enforcer):
        result = enforcer.enforce("They are vermin like them")
        assert result.violation_type == ViolationType.DEHUMANIZING_LANGUAGE

    def test_coercive_pressure(self, enforcer):
        result = enforcer.enforce("You will regret this")
        assert result.violation_type == ViolationType.COERCIVE_PRESSURE
        assert result.sanitized_text == "You will [REDACTED]"

    def test_clean_text_unchanged(self, enforcer):
        text = "Build rapport through attentive engagement"
        result = enforcer.enforce(text)
        assert not result.is_violation
        assert result.violation_type == ViolationType.NONE
        assert result.sanitized_text == text

    def test_format_violation_type(self, enforcer):
        assert enforcer.format_violation_type(ViolationType.COERCIVE_PRESSURE) == "Coercive Pressure"
        assert enforcer.format_violation_type(ViolationType.NONE) == ""


class TestHallucinationGuard:
    """환각 검사 테스트"""

    @pytest.fixture
    def guard(self):
        return HallucinationGuardService()

    @pytest.mark.parametrize(
        "text",
        [
            "Studies show this works",
            "Experts agree that 75% of people prefer this",
            "Dr. Smith said it is safe",
            "Build rapport through attentive engagement",
            "Research proves it, statistics show it, data confirms it",
            "",
        ],
    )
    def test_flagged_matches_threshold(self, guard, text):
        result = guard.check(text, [])
        assert result.flagged == (result.confidence >= 0.3)
        assert 0.0 <= result.confidence <= 1.0

    def test_single_weak_pattern_not_flagged(self, guard):
        result = guard.check("Studies show this works", [])
        assert result.confidence == pytest.approx(0.25)
        assert not result.flagged

    def test_combined_patterns_flagged(self, guard):
        result = guard.check("Experts agree that 75% of people prefer this", [])
        assert result.confidence == pytest.approx(0.5)
        assert result.flagged
        assert len(result.suspect_phrases) == 2

    def test_named_authority_is_case_sensitive(self, guard):
        assert guard.check("Dr. Smith said so", []).flagged
        assert not guard.check("dr. smith said so", []).flagged

    def test_confidence_is_clamped(self, guard):
        text = (
            "Studies show, research proves, statistics show, data shows, "
            "Dr. Smith said, Professor Jones, in 2019, scientists found"
        )
        assert guard.check(text, []).confidence == 1.0

    def test_context_contradiction(self, guard):
        result = guard.check("They always refuse", ["Sometimes they agree"])
        assert result.confidence == pytest.approx(0.2)
        assert result.suspect_phrases[0].reason == "Absolute claim contradicts prior context"

    def test_contradiction_found_after_earlier_absolute(self, guard):
        # "All" matches first but has no softer counterpart; "always" still counts
        result = guard.check("All of them always refuse", ["Sometimes they agree"])
        assert [p.phrase for p in result.suspect_phrases] == ["always"]
        assert result.confidence == pytest.approx(0.2)

    def test_repeated_absolute_counted_once(self, guard):
        result = guard.check("They always refuse, always", ["Sometimes they agree"])
        assert len(result.suspect_phrases) == 1

    def test_no_contradiction_without_context(self, guard):
        assert guard.check("They always refuse", []).confidence == 0.0

    def test_phrase_truncated(self, guard):
        result = guard.check("The study from " + "x" * 100, [])
        assert all(len(p.phrase) <= 60 for p in result.suspect_phrases)
