"""
Criterion Bonus Functions
pole_tender/scoring/criteria.py

One function per non-averaged criterion. Each returns the clamped bonus
(points added to the 60 base before weighting). An unset input feeds no
bonus into the term that uses it.

Stone quality (each term clamped, then summed):
    FM term       = 50  × (0.4 − |FM − 2.7|)          [0, 20]
    sand clay     = 500 × (0.02 − clay_sand / 100)     [0, 5]
    gravel clay   = 250 × (0.03 − clay_gravel / 100)   [0, 5]
    sand value    = 100 × (sand_value / 100 − 0.75)    [0, 10]

Water quality (each term clamped, then summed):
    suspended / dissolved / sulfate = 0.01 × (1000 − x)   [0, 5]
    chloride                        = 0.02 × (500 − x)    [0, 5]
    alkali equivalent               = 0.0125 × (600 − x)  [0, 5]
    pH                              = 10 × (1.5 − |pH − 7|) [0, 15]
"""

from decimal import Decimal
from typing import Optional

from pole_tender.scoring.snapshot import BidSnapshot
from pole_tender.scoring.utils import ZERO, clamp


def _term(
    value: Optional[Decimal],
    formula,
    upper: Optional[Decimal] = None,
) -> Decimal:
    """Clamp formula(value) to [0, upper]; an unset value contributes nothing."""
    if value is None:
        return ZERO
    return clamp(formula(value), ZERO, upper)


# ---------------------------------------------------------------------------
# Measured criteria
# ---------------------------------------------------------------------------

def stone_quality_bonus(s: BidSnapshot) -> Decimal:
    return (
        _term(s.sand_fineness_modulus,
              lambda fm: Decimal("50") * (Decimal("0.4") - abs(fm - Decimal("2.7"))),
              Decimal("20"))
        + _term(s.sand_clay_impurity,
                lambda pct: Decimal("500") * (Decimal("0.02") - pct / Decimal("100")),
                Decimal("5"))
        + _term(s.gravel_clay_impurity,
                lambda pct: Decimal("250") * (Decimal("0.03") - pct / Decimal("100")),
                Decimal("5"))
        + _term(s.sand_value,
                lambda pct: Decimal("100") * (pct / Decimal("100") - Decimal("0.75")),
                Decimal("10"))
    )


def water_quality_bonus(s: BidSnapshot) -> Decimal:
    five = Decimal("5")
    return (
        _term(s.suspended_solids, lambda x: Decimal("0.01") * (Decimal("1000") - x), five)
        + _term(s.dissolved_solids, lambda x: Decimal("0.01") * (Decimal("1000") - x), five)
        + _term(s.chloride_ions, lambda x: Decimal("0.02") * (Decimal("500") - x), five)
        + _term(s.sulfate_ions, lambda x: Decimal("0.01") * (Decimal("1000") - x), five)
        + _term(s.alkali_equivalent, lambda x: Decimal("0.0125") * (Decimal("600") - x), five)
        + _term(s.water_ph,
                lambda ph: Decimal("10") * (Decimal("1.5") - abs(ph - Decimal("7"))),
                Decimal("15"))
    )


def satisfaction_bonus(s: BidSnapshot) -> Decimal:
    """Sum of the five 0-8 sub-ratings. Not clamped: range checks belong to the form."""
    return sum((r for r in s.satisfaction_ratings if r is not None), ZERO)


def warranty_bonus(s: BidSnapshot) -> Decimal:
    return _term(s.warranty_years, lambda years: Decimal("40") * (years - Decimal("2")))


def production_history_bonus(s: BidSnapshot) -> Decimal:
    return _term(s.history_years, lambda years: Decimal("2") * years)


def annual_capacity_bonus(s: BidSnapshot) -> Decimal:
    return _term(s.annual_capacity, lambda units: Decimal("0.004") * units)


def design_lifespan_bonus(s: BidSnapshot) -> Decimal:
    return _term(s.lifespan_years, lambda years: Decimal("2") * (years - Decimal("40")))


# ---------------------------------------------------------------------------
# Discrete criteria
# ---------------------------------------------------------------------------

def production_line_quality_bonus(s: BidSnapshot) -> Decimal:
    """40 for all three covered areas, 20 for the line plus one other, else 0."""
    flags = s.production_line
    if flags.covered_line and flags.covered_materials and flags.covered_processing:
        return Decimal("40")
    if flags.covered_line and (flags.covered_materials or flags.covered_processing):
        return Decimal("20")
    return ZERO


def _choice_points(choice) -> Decimal:
    return Decimal(choice.points) if choice is not None else ZERO


def production_method_bonus(s: BidSnapshot) -> Decimal:
    return _choice_points(s.production_method)


def mixer_type_bonus(s: BidSnapshot) -> Decimal:
    return _choice_points(s.mixer_type)


def permeability_bonus(s: BidSnapshot) -> Decimal:
    return _choice_points(s.permeability)


def transport_distance_bonus(s: BidSnapshot) -> Decimal:
    return _choice_points(s.transport_distance)
