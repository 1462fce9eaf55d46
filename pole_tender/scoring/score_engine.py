# pole_tender/scoring/score_engine.py
"""
Score Engine
------------
Computes the technical evaluation score of a concrete pole bid from a
BidSnapshot.

Formula (per criterion i):
    subscore_i = (60 + bonus_i) × weight_i
    total      = Σ subscore_i

For the two mechanical criteria the (60 + bonus) term is the two-level
average produced by pole_tender.scoring.mechanical. Weights live in
pole_tender.scoring.weights and sum to 1.00, so an all-unset bid scores 60.

The engine is pure: it keeps no state between calls and never raises on
missing or malformed inputs; they simply earn no bonus.
"""
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict

from pole_tender.models.enumerations import Criterion
from pole_tender.scoring import criteria, mechanical
from pole_tender.scoring.snapshot import BidSnapshot
from pole_tender.scoring.utils import ZERO, quantize
from pole_tender.scoring.weights import BASE_SCORE, CRITERION_WEIGHTS

logger = structlog.get_logger(__name__)

# Criterion -> function returning (60 + bonus) before weighting
_UNWEIGHTED_SCORERS: Dict[Criterion, Callable[[BidSnapshot], Decimal]] = {
    Criterion.STONE_QUALITY:           lambda s: BASE_SCORE + criteria.stone_quality_bonus(s),
    Criterion.WATER_QUALITY:           lambda s: BASE_SCORE + criteria.water_quality_bonus(s),
    Criterion.SATISFACTION:            lambda s: BASE_SCORE + criteria.satisfaction_bonus(s),
    Criterion.FAILURE_LOAD:            mechanical.failure_load_score,
    Criterion.RESIDUAL_DISPLACEMENT:   mechanical.residual_displacement_score,
    Criterion.WARRANTY:                lambda s: BASE_SCORE + criteria.warranty_bonus(s),
    Criterion.PRODUCTION_HISTORY:      lambda s: BASE_SCORE + criteria.production_history_bonus(s),
    Criterion.ANNUAL_CAPACITY:         lambda s: BASE_SCORE + criteria.annual_capacity_bonus(s),
    Criterion.DESIGN_LIFESPAN:         lambda s: BASE_SCORE + criteria.design_lifespan_bonus(s),
    Criterion.PRODUCTION_LINE_QUALITY: lambda s: BASE_SCORE + criteria.production_line_quality_bonus(s),
    Criterion.PRODUCTION_METHOD:       lambda s: BASE_SCORE + criteria.production_method_bonus(s),
    Criterion.MIXER_TYPE:              lambda s: BASE_SCORE + criteria.mixer_type_bonus(s),
    Criterion.PERMEABILITY:            lambda s: BASE_SCORE + criteria.permeability_bonus(s),
    Criterion.TRANSPORT_DISTANCE:      lambda s: BASE_SCORE + criteria.transport_distance_bonus(s),
}


@dataclass(frozen=True)
class ScoreBreakdown:
    """Output of ScoreEngine.score()."""
    subscores: Dict[Criterion, Decimal]   # weight folded in, ordered as Criterion
    bonuses: Dict[Criterion, Decimal]     # (averaged) bonus before weighting
    total: Decimal                        # Σ subscores

    def rounded(self, places: int = 2) -> Dict[str, Decimal]:
        """Sub-scores keyed by criterion value, rounded for display."""
        return {c.value: quantize(v, places) for c, v in self.subscores.items()}

    def rounded_total(self, places: int = 2) -> Decimal:
        return quantize(self.total, places)


class ScoreEngine:
    """Calculate the weighted technical score of a pole bid."""

    def score(self, snapshot: BidSnapshot) -> ScoreBreakdown:
        """
        Args:
            snapshot: Immutable BidSnapshot built by the form adapter.

        Returns:
            ScoreBreakdown with all 14 criteria, in Criterion order.

        Examples:
            >>> ScoreEngine().score(BidSnapshot()).total
            Decimal('60.0000')
        """
        subscores: Dict[Criterion, Decimal] = {}
        bonuses: Dict[Criterion, Decimal] = {}

        for criterion in Criterion:
            unweighted = _UNWEIGHTED_SCORERS[criterion](snapshot)
            bonuses[criterion] = quantize(unweighted - BASE_SCORE, 4)
            subscores[criterion] = quantize(unweighted * CRITERION_WEIGHTS[criterion], 4)

        total = sum(subscores.values(), ZERO)

        logger.info(
            "score_calculated",
            test_groups=len(snapshot.test_groups),
            test_sheets=sum(len(g.tests) for g in snapshot.test_groups),
            subscores={c.value: float(v) for c, v in subscores.items()},
            total=float(total),
        )

        return ScoreBreakdown(subscores=subscores, bonuses=bonuses, total=total)
