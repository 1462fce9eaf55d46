"""
Bid Snapshot
pole_tender/scoring/snapshot.py

Immutable input to ScoreEngine. Every optional scalar is either a finite
Decimal or None ("unset"); an unset value never counts as zero.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Tuple

from pole_tender.models.enumerations import (
    MixerType,
    PermeabilityEvidence,
    ProductionMethod,
    TransportDistance,
)


@dataclass(frozen=True)
class PoleType:
    """Standard pole: grouping key plus its reference nominal strength and length."""
    key: str
    nominal_strength: Decimal   # kgf
    pole_length: Decimal        # m


@dataclass(frozen=True)
class MechanicalTest:
    """One laboratory test sheet for a single pole sample."""
    nominal_strength: Optional[Decimal] = None       # kgf
    pole_length: Optional[Decimal] = None            # m
    actual_failure_load: Optional[Decimal] = None    # kgf
    max_displacement: Optional[Decimal] = None       # mm, at 1.5x working load
    residual_displacement: Optional[Decimal] = None  # mm, after unloading


@dataclass(frozen=True)
class TestGroup:
    """Test sheets for one pole type. pole_type is None for ungrouped sheets."""
    __test__ = False  # keep pytest from collecting this as a test class

    tests: Tuple[MechanicalTest, ...] = ()
    pole_type: Optional[PoleType] = None

    @property
    def key(self) -> Optional[str]:
        return self.pole_type.key if self.pole_type else None


@dataclass(frozen=True)
class ProductionLineFlags:
    covered_line: bool = False
    covered_materials: bool = False
    covered_processing: bool = False


@dataclass(frozen=True)
class TenderHeader:
    company: str = ""
    tender_number: str = ""
    evaluation_date: str = ""


@dataclass(frozen=True)
class BidSnapshot:
    """All inputs of one evaluation run."""

    # Aggregates
    sand_fineness_modulus: Optional[Decimal] = None
    sand_clay_impurity: Optional[Decimal] = None      # %
    gravel_clay_impurity: Optional[Decimal] = None    # %
    sand_value: Optional[Decimal] = None              # %

    # Mixing water (ppm unless noted)
    suspended_solids: Optional[Decimal] = None
    dissolved_solids: Optional[Decimal] = None
    chloride_ions: Optional[Decimal] = None
    sulfate_ions: Optional[Decimal] = None
    alkali_equivalent: Optional[Decimal] = None
    water_ph: Optional[Decimal] = None

    # Operator satisfaction sub-ratings, 0-8 each
    sat_quality: Optional[Decimal] = None
    sat_stability: Optional[Decimal] = None
    sat_performance: Optional[Decimal] = None
    sat_commitment: Optional[Decimal] = None
    sat_disposal: Optional[Decimal] = None

    # History and operations
    warranty_years: Optional[Decimal] = None
    history_years: Optional[Decimal] = None
    annual_capacity: Optional[Decimal] = None
    lifespan_years: Optional[Decimal] = None

    production_line: ProductionLineFlags = field(default_factory=ProductionLineFlags)

    # Categorical choices; None means nothing selected
    production_method: Optional[ProductionMethod] = None
    mixer_type: Optional[MixerType] = None
    permeability: Optional[PermeabilityEvidence] = None
    transport_distance: Optional[TransportDistance] = None

    # Mechanical tests
    nominal_strength: Optional[Decimal] = None  # shared by ungrouped sheets
    test_groups: Tuple[TestGroup, ...] = ()

    header: TenderHeader = field(default_factory=TenderHeader)

    @property
    def satisfaction_ratings(self) -> Tuple[Optional[Decimal], ...]:
        return (
            self.sat_quality,
            self.sat_stability,
            self.sat_performance,
            self.sat_commitment,
            self.sat_disposal,
        )
