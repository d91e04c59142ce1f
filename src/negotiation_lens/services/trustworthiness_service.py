"""
Trustworthiness Score Calculator

Pure aggregation of session safety metrics into a 0-100 score.
"""

from negotiation_lens.models import TrustworthinessMetrics

BIAS_PENALTY, BIAS_CAP = 5.0, 30.0
VIOLATION_PENALTY, VIOLATION_CAP = 10.0, 40.0
HALLUCINATION_PENALTY, HALLUCINATION_CAP = 0.3, 20.0


def calculate_trustworthiness_score(
    bias_count: int, violation_count: int, hallucination_rate: float
) -> int:
    """
    Calculate the trustworthiness score

    Args:
        bias_count: Bias incidents
        violation_count: Ethical violations
        hallucination_rate: Hallucination flag rate in percent (0 ~ 100)

    Returns:
        Score clamped to 0 ~ 100
    """
    bias_count = max(0, bias_count)
    violation_count = max(0, violation_count)
    hallucination_rate = max(0.0, hallucination_rate)

    score = 100.0
    score -= min(BIAS_CAP, bias_count * BIAS_PENALTY)
    score -= min(VIOLATION_CAP, violation_count * VIOLATION_PENALTY)
    score -= min(HALLUCINATION_CAP, hallucination_rate * HALLUCINATION_PENALTY)
    return int(max(0, min(100, round(score))))


def build_trustworthiness_metrics(
    bias_count: int, violation_count: int, hallucination_rate: float
) -> TrustworthinessMetrics:
    rate = max(0.0, min(100.0, hallucination_rate))
    return TrustworthinessMetrics(
        bias_count=max(0, bias_count),
        hallucination_flag_rate=round(rate, 2),
        ethical_violation_count=max(0, violation_count),
        trustworthiness_score=calculate_trustworthiness_score(bias_count, violation_count, rate),
    )
