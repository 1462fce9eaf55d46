# tests/test_score_engine.py

"""
Score Engine Tests - weighted composition, per-criterion bonuses and
two-level averaging of mechanical test sheets
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from pole_tender.models.enumerations import (
    Criterion,
    MixerType,
    ProductionMethod,
    TransportDistance,
)
from pole_tender.scoring import criteria
from pole_tender.scoring.parsing import build_snapshot
from pole_tender.scoring.score_engine import ScoreEngine
from pole_tender.scoring.snapshot import BidSnapshot, ProductionLineFlags
from pole_tender.scoring.weights import BASE_SCORE, CRITERION_WEIGHTS, total_weight


@pytest.fixture
def engine():
    return ScoreEngine()


def D(value) -> Decimal:
    return Decimal(str(value))


# =============================================================================
# NEUTRAL SCORE
# =============================================================================

class TestNeutralScore:
    """A bid with nothing filled in scores the 60 base on every criterion."""

    def test_empty_snapshot_totals_sixty(self, engine, empty_snapshot):
        assert engine.score(empty_snapshot).total == Decimal("60")

    def test_blank_form_totals_sixty(self, engine, blank_form):
        breakdown = engine.score(build_snapshot(blank_form))
        assert breakdown.rounded_total() == Decimal("60.00")

    def test_each_subscore_is_base_times_weight(self, engine, empty_snapshot):
        breakdown = engine.score(empty_snapshot)
        for criterion, weight in CRITERION_WEIGHTS.items():
            assert breakdown.subscores[criterion] == BASE_SCORE * weight
            assert breakdown.bonuses[criterion] == 0

    def test_non_numeric_text_is_unset(self, engine, blank_form):
        blank_form.update({"waterPH": "seven", "warrantyYears": "n/a", "sandValue": "--"})
        assert engine.score(build_snapshot(blank_form)).total == Decimal("60")


# =============================================================================
# WEIGHTS AND OUTPUT SHAPE
# =============================================================================

class TestWeights:

    def test_weights_sum_to_one(self):
        assert total_weight() == Decimal("1.00")

    def test_every_criterion_has_a_weight(self):
        assert set(CRITERION_WEIGHTS) == set(Criterion)

    def test_breakdown_follows_criterion_order(self, engine, empty_snapshot):
        breakdown = engine.score(empty_snapshot)
        assert list(breakdown.subscores) == list(Criterion)
        assert len(breakdown.subscores) == 14

    def test_rounded_is_keyed_by_criterion_value(self, engine, empty_snapshot):
        rounded = engine.score(empty_snapshot).rounded()
        assert rounded["stone_quality"] == Decimal("9.00")
        assert rounded["production_method"] == Decimal("7.80")

    def test_full_marks_form(self, engine, full_marks_form):
        # 0.71 of the weight at 100, the remaining 0.29 at the 60 base
        breakdown = engine.score(build_snapshot(full_marks_form))
        assert breakdown.rounded_total() == Decimal("88.40")


# =============================================================================
# STONE AND WATER QUALITY
# =============================================================================

class TestStoneQuality:

    def test_ideal_fineness_modulus_earns_twenty(self):
        assert criteria.stone_quality_bonus(BidSnapshot(sand_fineness_modulus=D("2.7"))) == 20

    @pytest.mark.parametrize("fm", ["2.3", "3.1", "3.5", "1.0"])
    def test_fineness_modulus_at_or_beyond_limits_earns_nothing(self, fm):
        assert criteria.stone_quality_bonus(BidSnapshot(sand_fineness_modulus=D(fm))) == 0

    def test_fineness_modulus_partial_credit(self):
        # 50 × (0.4 − 0.2) = 10
        assert criteria.stone_quality_bonus(BidSnapshot(sand_fineness_modulus=D("2.9"))) == 10

    def test_clean_sand_is_clamped_to_five(self):
        assert criteria.stone_quality_bonus(BidSnapshot(sand_clay_impurity=D("0"))) == 5

    def test_sand_value_clamped_to_ten(self):
        assert criteria.stone_quality_bonus(BidSnapshot(sand_value=D("100"))) == 10
        assert criteria.stone_quality_bonus(BidSnapshot(sand_value=D("80"))) == 5

    def test_fineness_modulus_subscore(self, engine):
        breakdown = engine.score(BidSnapshot(sand_fineness_modulus=D("2.7")))
        assert breakdown.subscores[Criterion.STONE_QUALITY] == Decimal("12.00")
        assert breakdown.total == Decimal("63.00")


class TestWaterQuality:

    def test_neutral_ph_earns_fifteen(self):
        assert criteria.water_quality_bonus(BidSnapshot(water_ph=D("7"))) == 15

    def test_ph_at_edge_earns_nothing(self):
        assert criteria.water_quality_bonus(BidSnapshot(water_ph=D("8.5"))) == 0

    def test_each_ion_term_capped_at_five(self):
        snapshot = BidSnapshot(
            suspended_solids=D(0), dissolved_solids=D(0), chloride_ions=D(0),
            sulfate_ions=D(0), alkali_equivalent=D(0),
        )
        assert criteria.water_quality_bonus(snapshot) == 25

    def test_chloride_partial_credit(self):
        # 0.02 × (500 − 400) = 2
        assert criteria.water_quality_bonus(BidSnapshot(chloride_ions=D(400))) == 2

    def test_excess_ions_never_go_negative(self):
        assert criteria.water_quality_bonus(BidSnapshot(sulfate_ions=D(5000))) == 0


# =============================================================================
# MANUFACTURER CRITERIA
# =============================================================================

class TestManufacturerCriteria:

    def test_satisfaction_sums_ratings(self):
        snapshot = BidSnapshot(sat_quality=D(8), sat_stability=D(6), sat_disposal=D(2))
        assert criteria.satisfaction_bonus(snapshot) == 16

    def test_satisfaction_is_not_clamped(self):
        snapshot = BidSnapshot(sat_quality=D(10), sat_stability=D(10), sat_performance=D(10),
                               sat_commitment=D(10), sat_disposal=D(10))
        assert criteria.satisfaction_bonus(snapshot) == 50

    @pytest.mark.parametrize("years,bonus", [("1", 0), ("2", 0), ("3", 40), ("4.5", 100)])
    def test_warranty(self, years, bonus):
        assert criteria.warranty_bonus(BidSnapshot(warranty_years=D(years))) == bonus

    def test_history_and_capacity_have_no_ceiling(self):
        assert criteria.production_history_bonus(BidSnapshot(history_years=D(50))) == 100
        assert criteria.annual_capacity_bonus(BidSnapshot(annual_capacity=D(25000))) == 100

    def test_lifespan_below_forty_earns_nothing(self):
        assert criteria.design_lifespan_bonus(BidSnapshot(lifespan_years=D(30))) == 0
        assert criteria.design_lifespan_bonus(BidSnapshot(lifespan_years=D(50))) == 20


class TestProductionLineQuality:

    @pytest.mark.parametrize("line,materials,processing,bonus", [
        (True, True, True, 40),
        (True, True, False, 20),
        (True, False, True, 20),
        (True, False, False, 0),
        (False, True, True, 0),
        (False, False, False, 0),
    ])
    def test_flag_combinations(self, line, materials, processing, bonus):
        snapshot = BidSnapshot(production_line=ProductionLineFlags(line, materials, processing))
        assert criteria.production_line_quality_bonus(snapshot) == bonus


class TestCategoricalChoices:

    def test_choice_points_are_the_bonus(self):
        snapshot = BidSnapshot(
            production_method=ProductionMethod.OPEN_MOLD_MANUAL_REBAR,
            mixer_type=MixerType.PAN,
            transport_distance=TransportDistance.UP_TO_1000_KM,
        )
        assert criteria.production_method_bonus(snapshot) == 30
        assert criteria.mixer_type_bonus(snapshot) == 20
        assert criteria.transport_distance_bonus(snapshot) == 10

    def test_unselected_choice_earns_nothing(self, empty_snapshot):
        assert criteria.permeability_bonus(empty_snapshot) == 0
        assert criteria.mixer_type_bonus(empty_snapshot) == 0

    @pytest.mark.parametrize("code", ["35", "0", "abc", "", None])
    def test_unknown_mixer_code_is_unset(self, code):
        assert MixerType.from_code(code) is None

    def test_from_code_accepts_numeric_forms(self):
        assert ProductionMethod.from_code("40") is ProductionMethod.OPEN_MOLD_AUTOMATIC_REBAR
        assert ProductionMethod.from_code(0) is ProductionMethod.CLOSED_MOLD_MANUAL_REBAR
        assert TransportDistance.from_code(" 30.0 ") is TransportDistance.UP_TO_500_KM


# =============================================================================
# MECHANICAL TESTS
# =============================================================================

class TestFailureLoad:

    def test_ratio_of_one_scores_base(self, engine, make_sheet, make_group):
        snapshot = BidSnapshot(test_groups=(
            make_group(None, make_sheet(nominal_strength=400, actual_failure_load=800)),
        ))
        assert engine.score(snapshot).rounded()["failure_load"] == Decimal("6.00")

    def test_ratio_of_one_and_a_half_scores_ten(self, engine, make_sheet, make_group):
        snapshot = BidSnapshot(test_groups=(
            make_group(None, make_sheet(nominal_strength=400, actual_failure_load=1200)),
        ))
        breakdown = engine.score(snapshot)
        assert breakdown.bonuses[Criterion.FAILURE_LOAD] == 40
        assert breakdown.rounded()["failure_load"] == Decimal("10.00")

    def test_weak_pole_never_scores_below_base(self, engine, make_sheet, make_group):
        snapshot = BidSnapshot(test_groups=(
            make_group(None, make_sheet(nominal_strength=400, actual_failure_load=500)),
        ))
        assert engine.score(snapshot).bonuses[Criterion.FAILURE_LOAD] == 0

    def test_unset_failure_load_counts_as_base(self, engine, make_sheet, make_group):
        snapshot = BidSnapshot(test_groups=(
            make_group("12-400", make_sheet(actual_failure_load=1200), make_sheet()),
        ))
        # (100 + 60) / 2 = 80
        assert engine.score(snapshot).rounded()["failure_load"] == Decimal("8.00")

    def test_pole_type_nominal_overrides_sheet_value(self, engine, make_sheet, make_group):
        snapshot = BidSnapshot(test_groups=(
            make_group("12-600", make_sheet(nominal_strength=400, actual_failure_load=1200)),
        ))
        assert engine.score(snapshot).bonuses[Criterion.FAILURE_LOAD] == 0

    def test_shared_nominal_used_for_bare_sheet(self, engine, make_sheet, make_group):
        snapshot = BidSnapshot(
            nominal_strength=D(400),
            test_groups=(make_group(None, make_sheet(actual_failure_load=1200)),),
        )
        assert engine.score(snapshot).bonuses[Criterion.FAILURE_LOAD] == 40

    @pytest.mark.parametrize("nominal", [None, "0", "-400"])
    def test_missing_or_non_positive_nominal_scores_base(self, engine, make_sheet, make_group, nominal):
        values = {"actual_failure_load": 1200}
        if nominal is not None:
            values["nominal_strength"] = nominal
        snapshot = BidSnapshot(test_groups=(make_group(None, make_sheet(**values)),))
        assert engine.score(snapshot).bonuses[Criterion.FAILURE_LOAD] == 0


class TestResidualDisplacement:

    def test_eight_percent_residual(self, engine, make_sheet, make_group):
        snapshot = BidSnapshot(test_groups=(
            make_group(None, make_sheet(max_displacement=100, residual_displacement=8)),
        ))
        breakdown = engine.score(snapshot)
        assert breakdown.bonuses[Criterion.RESIDUAL_DISPLACEMENT] == 16
        assert breakdown.rounded()["residual_displacement"] == Decimal("3.80")

    def test_zero_residual_earns_ceiling(self, engine, make_sheet, make_group):
        snapshot = BidSnapshot(test_groups=(
            make_group(None, make_sheet(max_displacement=100, residual_displacement=0)),
        ))
        assert engine.score(snapshot).rounded()["residual_displacement"] == Decimal("7.00")

    @pytest.mark.parametrize("max_disp", ["0", "-5"])
    def test_non_positive_max_displacement_scores_base(self, engine, make_sheet, make_group, max_disp):
        snapshot = BidSnapshot(test_groups=(
            make_group(None, make_sheet(max_displacement=max_disp, residual_displacement=1)),
        ))
        assert engine.score(snapshot).bonuses[Criterion.RESIDUAL_DISPLACEMENT] == 0


class TestGroupAveraging:
    """Sheets are averaged per pole type first, then across pole types."""

    def test_groups_weigh_equally(self, engine, grouped_tests_form):
        # group means 100 and 60 -> 80; pooling all four sheets would give 90
        breakdown = engine.score(build_snapshot(grouped_tests_form))
        assert breakdown.rounded()["failure_load"] == Decimal("8.00")

    def test_repeated_pole_type_is_one_group(self, engine):
        # one group of four sheets: (3 * 100 + 60) / 4 = 90
        form = {"testGroups": [
            {"poleType": "12-400", "tests": [{"actualFailureStrength": "1200"}] * 3},
            {"poleType": "12-400", "tests": [{"actualFailureStrength": "800"}]},
        ]}
        breakdown = engine.score(build_snapshot(form))
        assert breakdown.rounded()["failure_load"] == Decimal("9.00")

    def test_sheets_without_pole_type_share_the_default_group(self, engine):
        form = {
            "nominalStrength": "400",
            "mechanicalTests": [{"actualFailureStrength": "1200"}] * 3,
            "testGroups": [
                {"poleType": "no-such", "tests": [{"actualFailureStrength": "800"}]},
            ],
        }
        snapshot = build_snapshot(form)
        assert [(g.key, len(g.tests)) for g in snapshot.test_groups] == [(None, 4)]
        assert engine.score(snapshot).rounded()["failure_load"] == Decimal("9.00")

    def test_empty_groups_are_skipped(self, engine, make_sheet, make_group):
        snapshot = BidSnapshot(test_groups=(
            make_group("12-400"),
            make_group("9-400", make_sheet(actual_failure_load=1200)),
        ))
        assert engine.score(snapshot).bonuses[Criterion.FAILURE_LOAD] == 40

    def test_no_sheets_scores_base(self, engine, make_group):
        snapshot = BidSnapshot(test_groups=(make_group("12-400"),))
        assert engine.score(snapshot).bonuses[Criterion.FAILURE_LOAD] == 0


# =============================================================================
# PURITY
# =============================================================================

class TestPurity:

    def test_idempotent(self, engine, full_marks_form, grouped_tests_form):
        snapshot = build_snapshot({**full_marks_form, **grouped_tests_form})
        assert engine.score(snapshot) == engine.score(snapshot)

    def test_separate_engines_agree(self, full_marks_form):
        snapshot = build_snapshot(full_marks_form)
        assert ScoreEngine().score(snapshot) == ScoreEngine().score(snapshot)

    def test_snapshot_is_not_mutated(self, engine, full_marks_form):
        snapshot = build_snapshot(full_marks_form)
        before = replace(snapshot)
        engine.score(snapshot)
        assert snapshot == before
