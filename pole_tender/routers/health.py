"""
Health Check Router - Pole Tender Scoring
pole_tender/routers/health.py

The service has no external dependencies; health reports the engine's own
invariants (weights sum to 1.00, an empty bid scores the 60 base).
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pole_tender.config import get_settings
from pole_tender.scoring.score_engine import ScoreEngine
from pole_tender.scoring.snapshot import BidSnapshot
from pole_tender.scoring.weights import BASE_SCORE, total_weight

router = APIRouter(tags=["Health"])


#  Schemas


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    checks: Dict[str, str]


#  Engine Self Checks


def check_weights() -> str:
    total = total_weight()
    if total == Decimal("1"):
        return "healthy"
    return f"unhealthy: weights sum to {total}"


def check_neutral_score() -> str:
    total = ScoreEngine().score(BidSnapshot()).total
    if total == BASE_SCORE:
        return "healthy"
    return f"unhealthy: empty bid scored {total}"


#  Main Health Check Route


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "Engine invariants hold"},
        503: {"description": "One or more engine checks failed"},
    },
    summary="Health check",
    description="Check the scoring engine's invariants.",
)
def health_check():
    """Check the scoring engine's invariants."""
    checks = {
        "weights": check_weights(),
        "neutral_score": check_neutral_score(),
    }

    all_healthy = all(v == "healthy" for v in checks.values())

    response = HealthResponse(
        status="healthy" if all_healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=get_settings().APP_VERSION,
        checks=checks,
    )

    if all_healthy:
        return response
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )
