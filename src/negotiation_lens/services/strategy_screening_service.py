"""
Strategy Screening Service

Runs ranked recommendations through the ethical constraint enforcer and the
hallucination guard before they are surfaced.
"""

import logging
from typing import List, Optional, Sequence

from negotiation_lens.models import (
    ScreenedStrategy,
    ScreeningStatus,
    StrategyRecommendation,
)
from negotiation_lens.services.ethical_constraint_service import EthicalConstraintService
from negotiation_lens.services.hallucination_guard_service import HallucinationGuardService

logger = logging.getLogger(__name__)


class StrategyScreeningService:
    """
    Rationale violating an ethical rule -> suppressed (rationale withheld)
    "strategy: rationale" flagged by the guard -> annotated
    otherwise -> passed
    """

    def __init__(
        self,
        enforcer: Optional[EthicalConstraintService] = None,
        guard: Optional[HallucinationGuardService] = None,
    ):
        self.enforcer = enforcer or EthicalConstraintService()
        self.guard = guard or HallucinationGuardService()

    def screen_one(
        self, recommendation: StrategyRecommendation, context: Sequence[str] = ()
    ) -> ScreenedStrategy:
        enforcement = self.enforcer.enforce(recommendation.rationale)
        if enforcement.is_violation:
            logger.warning(
                f"Suppressed strategy '{recommendation.strategy}': "
                f"{enforcement.violation_type.value}"
            )
            return ScreenedStrategy(
                strategy=recommendation.strategy,
                confidence=recommendation.confidence,
                rationale=None,
                status=ScreeningStatus.SUPPRESSED,
                violation_type=enforcement.violation_type,
            )

        check = self.guard.check(
            f"{recommendation.strategy}: {recommendation.rationale}", list(context)
        )
        return ScreenedStrategy(
            strategy=recommendation.strategy,
            confidence=recommendation.confidence,
            rationale=recommendation.rationale,
            status=ScreeningStatus.ANNOTATED if check.flagged else ScreeningStatus.PASSED,
            hallucination=check if check.flagged else None,
        )

    def screen(
        self, recommendations: Sequence[StrategyRecommendation], context: Sequence[str] = ()
    ) -> List[ScreenedStrategy]:
        """
        Screen ranked recommendations, preserving order

        Args:
            recommendations: Output of StrategyScoringService.rank
            context: Prior conversation texts for contradiction checks

        Returns:
            One ScreenedStrategy per recommendation
        """
        return [self.screen_one(rec, context) for rec in recommendations]
