"""
Mechanical Test Aggregation
pole_tender/scoring/mechanical.py

Scores the failure-load margin and residual displacement of each test
sheet, then averages within each pole-type group and across groups.

Per sheet (score = 60 + bonus):
    failure ratio  = failure_load / (nominal_strength × 2)
    failure bonus  = max(0, 80 × (ratio − 1))
    residual %     = residual_disp / max_disp × 100
    residual bonus = max(0, 8 × (10 − residual %))

A sheet missing a critical measurement scores the neutral 60 and still
counts towards the average. Groups are averaged first so that a pole type
with many sheets does not outweigh one with few.
"""

from decimal import Decimal
from typing import Callable, Optional

from pole_tender.scoring.snapshot import BidSnapshot, MechanicalTest, TestGroup
from pole_tender.scoring.utils import ZERO, clamp, mean
from pole_tender.scoring.weights import BASE_SCORE

SheetScorer = Callable[[MechanicalTest, Optional[Decimal]], Decimal]


def effective_nominal_strength(
    test: MechanicalTest,
    group: TestGroup,
    shared_nominal: Optional[Decimal],
) -> Optional[Decimal]:
    """Pole-type reference, else the sheet's own value, else the shared form value."""
    if group.pole_type is not None:
        return group.pole_type.nominal_strength
    if test.nominal_strength is not None:
        return test.nominal_strength
    return shared_nominal


def failure_load_sheet_score(test: MechanicalTest, nominal: Optional[Decimal]) -> Decimal:
    if test.actual_failure_load is None or nominal is None or nominal <= ZERO:
        return BASE_SCORE
    ratio = test.actual_failure_load / (nominal * Decimal("2"))
    return BASE_SCORE + clamp(Decimal("80") * (ratio - Decimal("1")))


def residual_displacement_sheet_score(test: MechanicalTest, nominal: Optional[Decimal]) -> Decimal:
    max_disp = test.max_displacement
    if max_disp is None or max_disp <= ZERO or test.residual_displacement is None:
        return BASE_SCORE
    residual_pct = test.residual_displacement / max_disp * Decimal("100")
    return BASE_SCORE + clamp(Decimal("8") * (Decimal("10") - residual_pct))


def group_average(group: TestGroup, shared_nominal: Optional[Decimal], scorer: SheetScorer) -> Optional[Decimal]:
    """Mean sheet score of one group, or None for a group without sheets."""
    if not group.tests:
        return None
    return mean(
        (scorer(t, effective_nominal_strength(t, group, shared_nominal)) for t in group.tests),
        BASE_SCORE,
    )


def averaged_score(snapshot: BidSnapshot, scorer: SheetScorer) -> Decimal:
    """Mean of group means over non-empty groups; 60 when there are no sheets."""
    group_means = [
        m for m in (
            group_average(g, snapshot.nominal_strength, scorer)
            for g in snapshot.test_groups
        )
        if m is not None
    ]
    return mean(group_means, BASE_SCORE)


def failure_load_score(snapshot: BidSnapshot) -> Decimal:
    return averaged_score(snapshot, failure_load_sheet_score)


def residual_displacement_score(snapshot: BidSnapshot) -> Decimal:
    return averaged_score(snapshot, residual_displacement_sheet_score)
