"""
Form Adapter
pole_tender/scoring/parsing.py

Turns the raw evaluation form (free-text values keyed the way the web form
names its fields) into an immutable BidSnapshot. Nothing here raises on bad
input: empty, non-numeric, NaN or infinite text becomes None ("unset").

Form layout:
    {
      "sandFinenessModulus": "2.7", ..., "waterPH": "7",
      "sat_quality": "8", ..., "warrantyYears": "5",
      "prodLineQuality": {"line": true, "materials": true, "processing": false},
      "prodMethod": "40", "mixerType": "30", "permeability": "20", "transportDistance": "40",
      "nominalStrength": "400",
      "mechanicalTests": [{"nominalStrength": "400", "actualFailureStrength": "850", ...}],
      "testGroups": [{"poleType": "12-600", "tests": [{...}, {...}]}],
      "header": {"company": "...", "tender": "...", "date": "..."}
    }

"mechanicalTests" holds ungrouped sheets; "testGroups" holds sheets per pole type.
Entries naming the same pole type are merged into one group, and every sheet
without a known pole type joins the single default group.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from pole_tender.models.enumerations import (
    MixerType,
    PermeabilityEvidence,
    ProductionMethod,
    TransportDistance,
)
from pole_tender.scoring.pole_types import find_pole_type
from pole_tender.scoring.snapshot import (
    BidSnapshot,
    MechanicalTest,
    ProductionLineFlags,
    TenderHeader,
    TestGroup,
)

# Snapshot attribute -> form field
SCALAR_FIELDS: Dict[str, str] = {
    "sand_fineness_modulus": "sandFinenessModulus",
    "sand_clay_impurity": "sandClayImpurity",
    "gravel_clay_impurity": "gravelClayImpurity",
    "sand_value": "sandValue",
    "suspended_solids": "suspendedSolids",
    "dissolved_solids": "dissolvedSolids",
    "chloride_ions": "chlorideIons",
    "sulfate_ions": "sulfateIons",
    "alkali_equivalent": "alkaliEquivalent",
    "water_ph": "waterPH",
    "sat_quality": "sat_quality",
    "sat_stability": "sat_stability",
    "sat_performance": "sat_performance",
    "sat_commitment": "sat_commitment",
    "sat_disposal": "sat_disposal",
    "warranty_years": "warrantyYears",
    "history_years": "historyYears",
    "annual_capacity": "annualCapacity",
    "lifespan_years": "lifespanYears",
    "nominal_strength": "nominalStrength",
}

TEST_FIELDS: Dict[str, str] = {
    "nominal_strength": "nominalStrength",
    "pole_length": "poleLength",
    "actual_failure_load": "actualFailureStrength",
    "max_displacement": "maxDispAt1_5x",
    "residual_displacement": "residualDispAfterLoad",
}

CHOICE_FIELDS = {
    "production_method": ("prodMethod", ProductionMethod),
    "mixer_type": ("mixerType", MixerType),
    "permeability": ("permeability", PermeabilityEvidence),
    "transport_distance": ("transportDistance", TransportDistance),
}

# Persian/Arabic decimal and thousands separators typed into the form
_SEPARATORS = str.maketrans({"٫": ".", "٬": "", ",": "", "_": ""})

_TRUE_TEXT = {"1", "true", "yes", "on"}

# Beyond the range of a double; such entries are treated as non-numeric
_MAX_EXPONENT = 308


def parse_number(value: Any) -> Optional[Decimal]:
    """
    Parse a free-text form value into a finite Decimal.

    Accepts ints, floats, Decimals and strings (surrounding whitespace,
    thousands separators and Persian/Arabic-Indic digits are tolerated).

    Returns:
        Decimal, or None when the value is empty, non-numeric, NaN, infinite
        or outside the range of a double.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    else:
        text = str(value).strip().translate(_SEPARATORS)
        if not text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
    if not number.is_finite():
        return None
    if number and abs(number.adjusted()) > _MAX_EXPONENT:
        return None
    return number


def parse_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_TEXT


def _parse_test(raw: Mapping[str, Any]) -> MechanicalTest:
    return MechanicalTest(**{attr: parse_number(raw.get(key)) for attr, key in TEST_FIELDS.items()})


def _entries(value: Any) -> List[Mapping[str, Any]]:
    """Mapping items of a list/tuple form value; anything else is empty."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def group_test_sheets(form: Mapping[str, Any]) -> Dict[Optional[str], List[Mapping[str, Any]]]:
    """
    Collect the raw test sheets of a form by pole-type key.

    Sheets sharing a catalog key are merged into one list, whichever
    "testGroups" entry they came from. "mechanicalTests" sheets and groups
    with a missing or unknown pole type all land in the single None group.
    Keys keep the order in which they first appear.
    """
    grouped: Dict[Optional[str], List[Mapping[str, Any]]] = {}

    ungrouped = _entries(form.get("mechanicalTests"))
    if ungrouped:
        grouped[None] = list(ungrouped)

    for raw_group in _entries(form.get("testGroups")):
        pole = find_pole_type(raw_group.get("poleType"))
        key = pole.key if pole else None
        grouped.setdefault(key, []).extend(_entries(raw_group.get("tests")))
    return grouped


def _parse_groups(form: Mapping[str, Any]) -> tuple:
    return tuple(
        TestGroup(
            tests=tuple(_parse_test(t) for t in sheets),
            pole_type=find_pole_type(key),
        )
        for key, sheets in group_test_sheets(form).items()
    )


def _parse_header(raw: Any) -> TenderHeader:
    if not isinstance(raw, Mapping):
        return TenderHeader()
    return TenderHeader(
        company=str(raw.get("company") or "").strip(),
        tender_number=str(raw.get("tender") or "").strip(),
        evaluation_date=str(raw.get("date") or "").strip(),
    )


def build_snapshot(form: Mapping[str, Any]) -> BidSnapshot:
    """Build a BidSnapshot from a raw form mapping. Unknown keys are ignored."""
    scalars = {attr: parse_number(form.get(key)) for attr, key in SCALAR_FIELDS.items()}
    choices = {
        attr: enum_cls.from_code(form.get(key))
        for attr, (key, enum_cls) in CHOICE_FIELDS.items()
    }

    flags = form.get("prodLineQuality")
    if not isinstance(flags, Mapping):
        flags = {}

    return BidSnapshot(
        **scalars,
        **choices,
        production_line=ProductionLineFlags(
            covered_line=parse_flag(flags.get("line")),
            covered_materials=parse_flag(flags.get("materials")),
            covered_processing=parse_flag(flags.get("processing")),
        ),
        test_groups=_parse_groups(form),
        header=_parse_header(form.get("header")),
    )
