"""
Field Validation Rules
pole_tender/validation/field_rules.py

Advisory range checks for the evaluation form. A flagged field still feeds
the score engine; the messages only tell the evaluator which entries fall
outside the tender's documented limits.

Feedback is keyed by FieldKey(field, group, index):
    scalar field        -> FieldKey("waterPH", None, None)
    ungrouped test n    -> FieldKey("actualFailureStrength", None, n)
    pole-type test n    -> FieldKey("actualFailureStrength", "12-600", n)
    too many sheets     -> FieldKey("mechanicalTests", "12-600", None)
    unknown pole type   -> FieldKey("poleType", "99-1", None)

Sheet indexes count across every entry merged into the same pole type.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

import structlog

from pole_tender.scoring.parsing import SCALAR_FIELDS, TEST_FIELDS, group_test_sheets, parse_number
from pole_tender.scoring.pole_types import find_pole_type

logger = structlog.get_logger(__name__)

NON_NUMERIC_MESSAGE = "value must be numeric"
UNKNOWN_POLE_TYPE_MESSAGE = "unknown pole type; its sheets join the ungrouped tests"
DEFAULT_MAX_TEST_SHEETS = 6


class FieldKey(NamedTuple):
    field: str
    group: Optional[str] = None
    index: Optional[int] = None


@dataclass(frozen=True)
class FieldRule:
    min: Optional[Decimal] = None
    max: Optional[Decimal] = None
    message: Optional[str] = None

    def check(self, value: Decimal) -> Optional[str]:
        if self.min is not None and value < self.min:
            return self.message or f"value must be at least {self.min}"
        if self.max is not None and value > self.max:
            return self.message or f"value must be at most {self.max}"
        return None


def _rule(min=None, max=None, message=None) -> FieldRule:
    return FieldRule(
        min=Decimal(min) if min is not None else None,
        max=Decimal(max) if max is not None else None,
        message=message,
    )


_SATISFACTION = _rule("0", "8", "must be between 0 and 8")
_POSITIVE = _rule("1", None, "must be a positive value")
_NON_NEGATIVE = _rule("0", None, "cannot be negative")

VALIDATION_RULES: Dict[str, FieldRule] = {
    "sandFinenessModulus": _rule("2.3", "3.1", "must be between 2.3 and 3.1"),
    "sandClayImpurity": _rule(None, "2", "must be at most 2%"),
    "gravelClayImpurity": _rule(None, "3", "must be at most 3%"),
    "sandValue": _rule("75", None, "must be at least 75%"),
    "suspendedSolids": _rule(None, "1000", "must be at most 1000"),
    "dissolvedSolids": _rule(None, "1000", "must be at most 1000"),
    "chlorideIons": _rule(None, "500", "must be at most 500"),
    "sulfateIons": _rule(None, "1000", "must be at most 1000"),
    "alkaliEquivalent": _rule(None, "600", "must be at most 600"),
    "waterPH": _rule("5.5", "8.5", "must be between 5.5 and 8.5"),
    "sat_quality": _SATISFACTION,
    "sat_stability": _SATISFACTION,
    "sat_performance": _SATISFACTION,
    "sat_commitment": _SATISFACTION,
    "sat_disposal": _SATISFACTION,
    "warrantyYears": _rule("2", None, "minimum 2 years"),
    "lifespanYears": _rule("40", None, "minimum 40 years"),
    "nominalStrength": _POSITIVE,
    "poleLength": _POSITIVE,
    "actualFailureStrength": _NON_NEGATIVE,
    "maxDispAt1_5x": _NON_NEGATIVE,
    "residualDispAfterLoad": _NON_NEGATIVE,
}


def validate_field(name: str, value: Any) -> Optional[str]:
    """
    Check one raw form value against its rule.

    Returns:
        None when the field has no rule, is empty, or is within range;
        otherwise the feedback message.
    """
    rule = VALIDATION_RULES.get(name)
    if rule is None:
        return None
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    number = parse_number(value)
    if number is None:
        return NON_NUMERIC_MESSAGE
    return rule.check(number)


def _validate_tests(
    tests: List[Mapping[str, Any]],
    group: Optional[str],
    max_sheets: int,
) -> Dict[FieldKey, Optional[str]]:
    feedback: Dict[FieldKey, Optional[str]] = {}
    for index, raw in enumerate(tests):
        for name in TEST_FIELDS.values():
            feedback[FieldKey(name, group, index)] = validate_field(name, raw.get(name))
    if len(tests) > max_sheets:
        feedback[FieldKey("mechanicalTests", group, None)] = (
            f"at most {max_sheets} test sheets per pole type"
        )
    return feedback


def _unknown_pole_types(form: Mapping[str, Any]) -> Dict[FieldKey, Optional[str]]:
    feedback: Dict[FieldKey, Optional[str]] = {}
    raw_groups = form.get("testGroups")
    if not isinstance(raw_groups, (list, tuple)):
        return feedback
    for raw_group in raw_groups:
        if not isinstance(raw_group, Mapping):
            continue
        key = str(raw_group.get("poleType") or "").strip()
        if key and find_pole_type(key) is None:
            feedback[FieldKey("poleType", key)] = UNKNOWN_POLE_TYPE_MESSAGE
    return feedback


def validate_form(
    form: Mapping[str, Any],
    max_sheets: int = DEFAULT_MAX_TEST_SHEETS,
) -> Dict[FieldKey, Optional[str]]:
    """
    Validate every ruled field of a raw form.

    Test sheets are grouped the same way the score engine sees them, so a
    sheet's index runs across every entry that names its pole type.

    Returns:
        Mapping of FieldKey -> message (None for fields that passed).
    """
    feedback: Dict[FieldKey, Optional[str]] = {
        FieldKey(name): validate_field(name, form.get(name))
        for name in SCALAR_FIELDS.values()
        if name in VALIDATION_RULES
    }

    for group_key, tests in group_test_sheets(form).items():
        feedback.update(_validate_tests(tests, group_key, max_sheets))
    feedback.update(_unknown_pole_types(form))

    flagged = sum(1 for message in feedback.values() if message)
    logger.info("form_validated", fields_checked=len(feedback), fields_flagged=flagged)
    return feedback


def errors_only(feedback: Mapping[FieldKey, Optional[str]]) -> Dict[FieldKey, str]:
    """Drop the fields that passed."""
    return {key: message for key, message in feedback.items() if message}
