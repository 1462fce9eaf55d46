"""Criterion weights, labels and the neutral base score.

All fourteen weights must sum to 1.00, so a bid with every input unset
scores exactly BASE_SCORE.
"""

from decimal import Decimal
from typing import Dict, Optional

from pole_tender.models.enumerations import Criterion

# Neutral score every criterion starts from before its bonus
BASE_SCORE = Decimal("60")

CRITERION_WEIGHTS: Dict[Criterion, Decimal] = {
    Criterion.STONE_QUALITY:           Decimal("0.15"),
    Criterion.WATER_QUALITY:           Decimal("0.10"),
    Criterion.SATISFACTION:            Decimal("0.05"),
    Criterion.FAILURE_LOAD:            Decimal("0.10"),
    Criterion.RESIDUAL_DISPLACEMENT:   Decimal("0.05"),
    Criterion.WARRANTY:                Decimal("0.03"),
    Criterion.PRODUCTION_HISTORY:      Decimal("0.03"),
    Criterion.ANNUAL_CAPACITY:         Decimal("0.03"),
    Criterion.DESIGN_LIFESPAN:         Decimal("0.05"),
    Criterion.PRODUCTION_LINE_QUALITY: Decimal("0.05"),
    Criterion.PRODUCTION_METHOD:       Decimal("0.13"),
    Criterion.MIXER_TYPE:              Decimal("0.05"),
    Criterion.PERMEABILITY:            Decimal("0.15"),
    Criterion.TRANSPORT_DISTANCE:      Decimal("0.03"),
}

CRITERION_LABELS: Dict[Criterion, str] = {
    Criterion.STONE_QUALITY:           "Aggregate (stone) quality",
    Criterion.WATER_QUALITY:           "Mixing water quality",
    Criterion.SATISFACTION:            "Operator satisfaction",
    Criterion.FAILURE_LOAD:            "Pole failure-load margin",
    Criterion.RESIDUAL_DISPLACEMENT:   "Pole-top residual displacement",
    Criterion.WARRANTY:                "Replacement warranty",
    Criterion.PRODUCTION_HISTORY:      "Production history",
    Criterion.ANNUAL_CAPACITY:         "Annual production capacity",
    Criterion.DESIGN_LIFESPAN:         "Pole design lifespan",
    Criterion.PRODUCTION_LINE_QUALITY: "Production line and depot quality",
    Criterion.PRODUCTION_METHOD:       "Production method",
    Criterion.MIXER_TYPE:              "Mixer type",
    Criterion.PERMEABILITY:            "Concrete permeability and durability",
    Criterion.TRANSPORT_DISTANCE:      "Transport distance",
}

# Largest bonus a criterion can earn under valid inputs. None = no ceiling.
MAX_BONUS: Dict[Criterion, Optional[Decimal]] = {
    Criterion.STONE_QUALITY:           Decimal("40"),
    Criterion.WATER_QUALITY:           Decimal("40"),
    Criterion.SATISFACTION:            Decimal("40"),
    Criterion.FAILURE_LOAD:            None,
    Criterion.RESIDUAL_DISPLACEMENT:   Decimal("80"),
    Criterion.WARRANTY:                None,
    Criterion.PRODUCTION_HISTORY:      None,
    Criterion.ANNUAL_CAPACITY:         None,
    Criterion.DESIGN_LIFESPAN:         None,
    Criterion.PRODUCTION_LINE_QUALITY: Decimal("40"),
    Criterion.PRODUCTION_METHOD:       Decimal("40"),
    Criterion.MIXER_TYPE:              Decimal("40"),
    Criterion.PERMEABILITY:            Decimal("40"),
    Criterion.TRANSPORT_DISTANCE:      Decimal("40"),
}


def total_weight() -> Decimal:
    return sum(CRITERION_WEIGHTS.values(), Decimal("0"))
