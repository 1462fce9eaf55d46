from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional


class Criterion(str, Enum):
    """The 14 weighted evaluation criteria, in breakdown order."""
    STONE_QUALITY = "stone_quality"
    WATER_QUALITY = "water_quality"
    SATISFACTION = "satisfaction"
    FAILURE_LOAD = "failure_load"
    RESIDUAL_DISPLACEMENT = "residual_displacement"
    WARRANTY = "warranty"
    PRODUCTION_HISTORY = "production_history"
    ANNUAL_CAPACITY = "annual_capacity"
    DESIGN_LIFESPAN = "design_lifespan"
    PRODUCTION_LINE_QUALITY = "production_line_quality"
    PRODUCTION_METHOD = "production_method"
    MIXER_TYPE = "mixer_type"
    PERMEABILITY = "permeability"
    TRANSPORT_DISTANCE = "transport_distance"


class ScoredChoice(str, Enum):
    """
    Categorical choice whose variants carry their own point value.

    Members are declared as (value, points, label) tuples; the form code
    of a choice is its point value.
    """

    def __new__(cls, value: str, points: int, label: str):
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.points = points
        obj.label = label
        return obj

    @classmethod
    def from_code(cls, code) -> Optional["ScoredChoice"]:
        """Look up a variant by its form code (= points). Unknown codes give None."""
        if code is None or isinstance(code, bool):
            return None
        try:
            number = Decimal(str(code).strip())
        except InvalidOperation:
            return None
        if not number.is_finite():
            return None
        for member in cls:
            if member.points == number:
                return member
        return None


class ProductionMethod(ScoredChoice):
    OPEN_MOLD_AUTOMATIC_REBAR = ("open_mold_automatic_rebar", 40, "Open mould, automatic rebar caging")
    OPEN_MOLD_MANUAL_REBAR = ("open_mold_manual_rebar", 30, "Open mould, manual rebar caging")
    CLOSED_MOLD_AUTOMATIC_REBAR = ("closed_mold_automatic_rebar", 20, "Closed mould, automatic rebar caging")
    CLOSED_MOLD_MANUAL_REBAR = ("closed_mold_manual_rebar", 0, "Closed mould, manual rebar caging")


class MixerType(ScoredChoice):
    TWIN_SHAFT = ("twin_shaft", 40, "Twin-shaft horizontal")
    SINGLE_SHAFT = ("single_shaft", 30, "Single-shaft horizontal")
    PAN = ("pan", 20, "Vertical-axis pan")


class PermeabilityEvidence(ScoredChoice):
    COMPLETE = ("complete", 40, "Complete test results submitted")
    PARTIAL = ("partial", 20, "Partial test results submitted")
    NONE = ("none", 0, "No test results submitted")


class TransportDistance(ScoredChoice):
    UP_TO_250_KM = ("up_to_250_km", 40, "Up to 250 km")
    UP_TO_500_KM = ("up_to_500_km", 30, "250 to 500 km")
    UP_TO_750_KM = ("up_to_750_km", 20, "500 to 750 km")
    UP_TO_1000_KM = ("up_to_1000_km", 10, "750 to 1000 km")
    OVER_1000_KM = ("over_1000_km", 0, "More than 1000 km")
