"""
reports/evaluation_report.py

Markdown report for one bid evaluation: tender header, total and rating
band, per-criterion breakdown, and any advisory field feedback.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Mapping, Optional

import structlog

from pole_tender.scoring.score_engine import ScoreBreakdown
from pole_tender.scoring.snapshot import TenderHeader
from pole_tender.scoring.utils import quantize
from pole_tender.scoring.weights import CRITERION_LABELS, CRITERION_WEIGHTS
from pole_tender.validation.field_rules import FieldKey

logger = structlog.get_logger(__name__)

STRONG_MIN = Decimal("80")
ACCEPTABLE_MIN = Decimal("50")


def rating_band(total: Decimal) -> str:
    """Band used for the gauge colour: strong >= 80, acceptable >= 50, else weak."""
    if total >= STRONG_MIN:
        return "strong"
    if total >= ACCEPTABLE_MIN:
        return "acceptable"
    return "weak"


def _describe_key(key: FieldKey) -> str:
    where = []
    if key.group:
        where.append(f"pole type {key.group}")
    if key.index is not None:
        where.append(f"sheet #{key.index + 1}")
    return f"{key.field} ({', '.join(where)})" if where else key.field


def render_evaluation_report(
    header: TenderHeader,
    breakdown: ScoreBreakdown,
    feedback: Optional[Mapping[FieldKey, Optional[str]]] = None,
    places: int = 2,
) -> str:
    """Render the evaluation as a Markdown document."""
    now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    total = quantize(breakdown.total, places)

    lines = []
    lines.append("# Technical Evaluation: Concrete Pole Tender")
    lines.append("")
    lines.append(f"**Company:** {header.company or '-'}")
    lines.append(f"**Tender number:** {header.tender_number or '-'}")
    lines.append(f"**Evaluation date:** {header.evaluation_date or '-'}")
    lines.append(f"**Generated:** {now}")
    lines.append("")
    lines.append(f"## Total score: {total} / 100 ({rating_band(breakdown.total)})")
    lines.append("")

    # ---- Breakdown ----
    lines.append("| Criterion | Weight | Bonus | Score |")
    lines.append("|-----------|--------|-------|-------|")
    for criterion, subscore in breakdown.subscores.items():
        weight_pct = int(CRITERION_WEIGHTS[criterion] * 100)
        lines.append(
            f"| {CRITERION_LABELS[criterion]} | {weight_pct}% "
            f"| {quantize(breakdown.bonuses[criterion], places)} "
            f"| {quantize(subscore, places)} |"
        )
    lines.append(f"| **Total** | 100% | | **{total}** |")
    lines.append("")

    # ---- Field feedback ----
    flagged = {k: m for k, m in (feedback or {}).items() if m}
    if flagged:
        lines.append("## Field feedback")
        lines.append("")
        for key, message in flagged.items():
            lines.append(f"- `{_describe_key(key)}`: {message}")
        lines.append("")

    lines.append("---")
    lines.append("")
    lines.append("*Score per criterion = (60 + bonus) × weight; unset inputs earn no bonus.*")

    content = "\n".join(lines)
    logger.info("report_generated", chars=len(content), flagged_fields=len(flagged))
    return content
