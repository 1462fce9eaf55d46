"""
Pole Type Catalog
pole_tender/scoring/pole_types.py

Standard concrete distribution poles, keyed "<length>-<nominal strength>".
Test sheets are grouped under these keys; a group's reference nominal
strength replaces any per-sheet value when scoring the failure-load margin.
"""

from decimal import Decimal
from typing import Dict, List, Optional

from pole_tender.core.exceptions import UnknownPoleTypeException
from pole_tender.scoring.snapshot import PoleType


def _pole(length: str, nominal: str) -> PoleType:
    return PoleType(
        key=f"{length}-{nominal}",
        nominal_strength=Decimal(nominal),
        pole_length=Decimal(length),
    )


POLE_TYPE_CATALOG: Dict[str, PoleType] = {
    pole.key: pole
    for pole in (
        _pole("9", "200"),
        _pole("9", "250"),
        _pole("9", "400"),
        _pole("9", "600"),
        _pole("12", "400"),
        _pole("12", "600"),
        _pole("12", "800"),
        _pole("12", "1200"),
        _pole("15", "800"),
        _pole("15", "1200"),
        _pole("15", "2000"),
    )
}


def find_pole_type(key: Optional[str]) -> Optional[PoleType]:
    """Return the catalog entry for key, or None if it is missing, unknown or not text."""
    if not key or not isinstance(key, str):
        return None
    return POLE_TYPE_CATALOG.get(key.strip())


def get_pole_type(key: str) -> PoleType:
    """Return the catalog entry for key. Raises UnknownPoleTypeException."""
    pole = find_pole_type(key)
    if pole is None:
        raise UnknownPoleTypeException(key)
    return pole


def list_pole_types() -> List[PoleType]:
    """Catalog entries ordered by length, then nominal strength."""
    return sorted(
        POLE_TYPE_CATALOG.values(),
        key=lambda p: (p.pole_length, p.nominal_strength),
    )
