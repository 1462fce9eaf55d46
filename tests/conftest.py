# tests/conftest.py

"""
Pytest Fixtures - Shared test client, raw forms and snapshot builders

SAMPLE DATA REFERENCE:
- Pole types: "12-400" (nominal 400 kgf), "9-400" (nominal 400 kgf), "12-600" (nominal 600 kgf)
- full_marks_form: every bounded criterion at its ceiling, no test sheets
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from pole_tender.main import app
from pole_tender.scoring.pole_types import get_pole_type
from pole_tender.scoring.snapshot import BidSnapshot, MechanicalTest, TestGroup


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture(scope="module")
def client():
    """Create a TestClient for FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# SNAPSHOT BUILDERS
# =============================================================================

def sheet(**values) -> MechanicalTest:
    """MechanicalTest from keyword numbers (str or int)."""
    return MechanicalTest(**{k: Decimal(str(v)) for k, v in values.items()})


def group(pole_key=None, *tests) -> TestGroup:
    pole = get_pole_type(pole_key) if pole_key else None
    return TestGroup(tests=tuple(tests), pole_type=pole)


@pytest.fixture
def make_sheet():
    return sheet


@pytest.fixture
def make_group():
    return group


@pytest.fixture
def empty_snapshot():
    return BidSnapshot()


# =============================================================================
# RAW FORM FIXTURES
# =============================================================================

@pytest.fixture
def blank_form():
    """Every field present but empty, as the web form submits it untouched."""
    return {
        "sandFinenessModulus": "", "sandClayImpurity": "", "gravelClayImpurity": "",
        "sandValue": "", "suspendedSolids": "", "dissolvedSolids": "",
        "chlorideIons": "", "sulfateIons": "", "alkaliEquivalent": "", "waterPH": "",
        "sat_quality": "", "sat_stability": "", "sat_performance": "",
        "sat_commitment": "", "sat_disposal": "",
        "warrantyYears": "", "historyYears": "", "annualCapacity": "", "lifespanYears": "",
        "prodLineQuality": {"line": False, "materials": False, "processing": False},
        "prodMethod": "", "mixerType": "", "permeability": "", "transportDistance": "",
        "nominalStrength": "",
        "mechanicalTests": [],
        "testGroups": [],
        "header": {"company": "", "tender": "", "date": ""},
    }


@pytest.fixture
def full_marks_form():
    """Bounded criteria at their ceilings: each earns a 40 bonus (100 before weighting)."""
    return {
        "sandFinenessModulus": "2.7", "sandClayImpurity": "0", "gravelClayImpurity": "0",
        "sandValue": "90",
        "suspendedSolids": "0", "dissolvedSolids": "0", "chlorideIons": "0",
        "sulfateIons": "0", "alkaliEquivalent": "0", "waterPH": "7",
        "sat_quality": "8", "sat_stability": "8", "sat_performance": "8",
        "sat_commitment": "8", "sat_disposal": "8",
        "prodLineQuality": {"line": True, "materials": True, "processing": True},
        "prodMethod": "40", "mixerType": "40", "permeability": "40", "transportDistance": "40",
        "header": {"company": "Acme Poles", "tender": "T-17", "date": "2026-10-18"},
    }


@pytest.fixture
def grouped_tests_form():
    """Two pole types with unequal sheet counts."""
    return {
        "testGroups": [
            {
                "poleType": "12-400",
                "tests": [
                    {"actualFailureStrength": "1200"},
                    {"actualFailureStrength": "1200"},
                    {"actualFailureStrength": "1200"},
                ],
            },
            {
                "poleType": "9-400",
                "tests": [{"actualFailureStrength": "800"}],
            },
        ],
    }
