"""
routers/scoring.py - Bid Evaluation Endpoints

Endpoints:
  GET  /api/v1/scoring/criteria             - Criterion table (labels, weights, max bonus)
  GET  /api/v1/scoring/choices              - Categorical choices with their points
  GET  /api/v1/scoring/pole-types           - Standard pole catalog
  GET  /api/v1/scoring/pole-types/{key}     - One catalog entry
  POST /api/v1/scoring/evaluate             - Score a raw evaluation form
  POST /api/v1/scoring/validate             - Advisory field feedback only
  POST /api/v1/scoring/report               - Download the evaluation as .md
"""

import io
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

import structlog
from fastapi import APIRouter, HTTPException, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from pole_tender.config import get_settings
from pole_tender.core.exceptions import UnknownPoleTypeException
from pole_tender.models.enumerations import (
    MixerType,
    PermeabilityEvidence,
    ProductionMethod,
    TransportDistance,
)
from pole_tender.reports.evaluation_report import rating_band, render_evaluation_report
from pole_tender.scoring.parsing import build_snapshot
from pole_tender.scoring.pole_types import get_pole_type, list_pole_types
from pole_tender.scoring.score_engine import ScoreBreakdown, ScoreEngine
from pole_tender.scoring.snapshot import PoleType
from pole_tender.scoring.utils import quantize
from pole_tender.scoring.weights import (
    BASE_SCORE,
    CRITERION_LABELS,
    CRITERION_WEIGHTS,
    MAX_BONUS,
    total_weight,
)
from pole_tender.validation.field_rules import FieldKey, errors_only, validate_form

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/scoring", tags=["Bid Scoring"])

FormValue = Optional[Union[str, int, float]]


# =====================================================================
# Request Models
# =====================================================================

class MechanicalTestForm(BaseModel):
    nominalStrength: FormValue = None
    poleLength: FormValue = None
    actualFailureStrength: FormValue = None
    maxDispAt1_5x: FormValue = None
    residualDispAfterLoad: FormValue = None


class TestGroupForm(BaseModel):
    poleType: Optional[str] = None
    tests: List[MechanicalTestForm] = Field(default_factory=list)


class ProductionLineForm(BaseModel):
    line: bool = False
    materials: bool = False
    processing: bool = False


class TenderHeaderForm(BaseModel):
    company: str = ""
    tender: str = ""
    date: str = ""


class EvaluationForm(BaseModel):
    """Raw evaluation form. Numeric fields are free text; blanks mean unset."""
    sandFinenessModulus: FormValue = None
    sandClayImpurity: FormValue = None
    gravelClayImpurity: FormValue = None
    sandValue: FormValue = None
    suspendedSolids: FormValue = None
    dissolvedSolids: FormValue = None
    chlorideIons: FormValue = None
    sulfateIons: FormValue = None
    alkaliEquivalent: FormValue = None
    waterPH: FormValue = None
    sat_quality: FormValue = None
    sat_stability: FormValue = None
    sat_performance: FormValue = None
    sat_commitment: FormValue = None
    sat_disposal: FormValue = None
    warrantyYears: FormValue = None
    historyYears: FormValue = None
    annualCapacity: FormValue = None
    lifespanYears: FormValue = None
    prodLineQuality: ProductionLineForm = Field(default_factory=ProductionLineForm)
    prodMethod: FormValue = None
    mixerType: FormValue = None
    permeability: FormValue = None
    transportDistance: FormValue = None
    nominalStrength: FormValue = None
    mechanicalTests: List[MechanicalTestForm] = Field(default_factory=list)
    testGroups: List[TestGroupForm] = Field(default_factory=list)
    header: TenderHeaderForm = Field(default_factory=TenderHeaderForm)


# =====================================================================
# Response Models
# =====================================================================

class CriterionInfo(BaseModel):
    key: str
    label: str
    weight: float
    max_bonus: Optional[float] = None


class CriteriaResponse(BaseModel):
    base_score: float
    total_weight: float
    criteria: List[CriterionInfo]


class ChoiceInfo(BaseModel):
    code: int
    value: str
    label: str


class PoleTypeInfo(BaseModel):
    key: str
    nominal_strength: float
    pole_length: float


class FieldFeedback(BaseModel):
    field: str
    group: Optional[str] = None
    index: Optional[int] = None
    message: str


class CriterionScore(BaseModel):
    key: str
    label: str
    weight: float
    bonus: float
    score: float


class EvaluationResponse(BaseModel):
    total: float
    rating: str
    subscores: Dict[str, float]
    criteria: List[CriterionScore]
    feedback: List[FieldFeedback]
    scored_at: str


class ValidationResponse(BaseModel):
    valid: bool
    feedback: List[FieldFeedback]


# =====================================================================
# Helpers
# =====================================================================

def _to_float(value, places: int) -> float:
    return float(quantize(value, places))


def _pole_type_info(pole: PoleType) -> PoleTypeInfo:
    return PoleTypeInfo(
        key=pole.key,
        nominal_strength=float(pole.nominal_strength),
        pole_length=float(pole.pole_length),
    )


def _feedback_list(feedback: Dict[FieldKey, Optional[str]]) -> List[FieldFeedback]:
    return [
        FieldFeedback(field=key.field, group=key.group, index=key.index, message=message)
        for key, message in errors_only(feedback).items()
    ]


def _evaluate(form: EvaluationForm):
    settings = get_settings()
    raw = form.model_dump()
    snapshot = build_snapshot(raw)
    breakdown = ScoreEngine().score(snapshot)
    feedback = validate_form(raw, max_sheets=settings.MAX_TEST_SHEETS_PER_GROUP)
    return snapshot, breakdown, feedback


def _evaluation_response(
    breakdown: ScoreBreakdown,
    feedback: Dict[FieldKey, Optional[str]],
    places: int,
) -> EvaluationResponse:
    criteria = [
        CriterionScore(
            key=criterion.value,
            label=CRITERION_LABELS[criterion],
            weight=float(CRITERION_WEIGHTS[criterion]),
            bonus=_to_float(breakdown.bonuses[criterion], places),
            score=_to_float(subscore, places),
        )
        for criterion, subscore in breakdown.subscores.items()
    ]
    return EvaluationResponse(
        total=_to_float(breakdown.total, places),
        rating=rating_band(breakdown.total),
        subscores={c.key: c.score for c in criteria},
        criteria=criteria,
        feedback=_feedback_list(feedback),
        scored_at=datetime.now(timezone.utc).isoformat(),
    )


# =====================================================================
# Reference Endpoints
# =====================================================================

@router.get("/criteria", response_model=CriteriaResponse, summary="List the 14 weighted criteria")
def get_criteria():
    return CriteriaResponse(
        base_score=float(BASE_SCORE),
        total_weight=float(total_weight()),
        criteria=[
            CriterionInfo(
                key=criterion.value,
                label=CRITERION_LABELS[criterion],
                weight=float(weight),
                max_bonus=float(MAX_BONUS[criterion]) if MAX_BONUS[criterion] is not None else None,
            )
            for criterion, weight in CRITERION_WEIGHTS.items()
        ],
    )


@router.get("/choices", response_model=Dict[str, List[ChoiceInfo]], summary="Categorical choices and their points")
def get_choices():
    choice_fields = {
        "prodMethod": ProductionMethod,
        "mixerType": MixerType,
        "permeability": PermeabilityEvidence,
        "transportDistance": TransportDistance,
    }
    return {
        field: [ChoiceInfo(code=m.points, value=m.value, label=m.label) for m in enum_cls]
        for field, enum_cls in choice_fields.items()
    }


@router.get("/pole-types", response_model=List[PoleTypeInfo], summary="Standard pole catalog")
def get_pole_types():
    return [_pole_type_info(p) for p in list_pole_types()]


@router.get(
    "/pole-types/{key}",
    response_model=PoleTypeInfo,
    responses={404: {"description": "Unknown pole type"}},
    summary="One pole type",
)
def get_pole_type_by_key(key: str):
    try:
        return _pole_type_info(get_pole_type(key))
    except UnknownPoleTypeException as e:
        logger.warning("unknown_pole_type", key=key)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


# =====================================================================
# Evaluation Endpoints
# =====================================================================

@router.post("/evaluate", response_model=EvaluationResponse, summary="Score a bid evaluation form")
def evaluate(form: EvaluationForm):
    """
    Score a raw form. Invalid or blank fields never fail the request;
    they earn no bonus and are listed under `feedback`.
    """
    places = get_settings().SCORE_DISPLAY_PLACES
    _, breakdown, feedback = _evaluate(form)
    return _evaluation_response(breakdown, feedback, places)


@router.post("/validate", response_model=ValidationResponse, summary="Advisory field feedback")
def validate(form: EvaluationForm):
    feedback = validate_form(
        form.model_dump(),
        max_sheets=get_settings().MAX_TEST_SHEETS_PER_GROUP,
    )
    items = _feedback_list(feedback)
    return ValidationResponse(valid=not items, feedback=items)


@router.post(
    "/report",
    summary="Download the evaluation report as a .md file",
    responses={
        200: {
            "content": {"text/markdown": {}},
            "description": "Downloadable Markdown report file",
        }
    },
)
def download_report(form: EvaluationForm):
    """Score the form and return the Markdown report as a download."""
    places = get_settings().SCORE_DISPLAY_PLACES
    snapshot, breakdown, feedback = _evaluate(form)
    md_content = render_evaluation_report(snapshot.header, breakdown, feedback, places)

    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    filename = f"pole_bid_evaluation_{ts}.md"
    payload = md_content.encode("utf-8")

    return StreamingResponse(
        content=io.BytesIO(payload),
        media_type="text/markdown",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Content-Length": str(len(payload)),
        },
    )
