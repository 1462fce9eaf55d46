#!/usr/bin/env python
"""
Score a pole bid evaluation form from a JSON file.

The file holds the same raw form the API accepts (free-text values keyed by
form field name). Prints the per-criterion breakdown and the total, and can
write the Markdown evaluation report next to it.

Usage:
    python -m pole_tender.scripts.score_bid bid.json
    python -m pole_tender.scripts.score_bid bid.json --report evaluation.md
    python -m pole_tender.scripts.score_bid bid.json --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pole_tender.config import get_settings
from pole_tender.logging_config import configure_logging
from pole_tender.reports.evaluation_report import rating_band, render_evaluation_report
from pole_tender.scoring.parsing import build_snapshot
from pole_tender.scoring.score_engine import ScoreEngine
from pole_tender.scoring.utils import quantize
from pole_tender.scoring.weights import CRITERION_LABELS
from pole_tender.validation.field_rules import errors_only, validate_form

logger = logging.getLogger(__name__)


def load_form(path: Path) -> dict:
    with path.open(encoding="utf-8") as f:
        form = json.load(f)
    if not isinstance(form, dict):
        raise ValueError(f"{path}: expected a JSON object at the top level")
    return form


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Score a concrete pole bid evaluation form")
    ap.add_argument("form", type=Path, help="JSON file holding the raw evaluation form")
    ap.add_argument("--report", type=Path, help="Write the Markdown evaluation report to this path")
    ap.add_argument("--json", action="store_true", help="Print the breakdown as JSON")
    args = ap.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)
    places = settings.SCORE_DISPLAY_PLACES

    try:
        form = load_form(args.form)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read form: {e}")
        return 1

    snapshot = build_snapshot(form)
    breakdown = ScoreEngine().score(snapshot)
    feedback = validate_form(form, max_sheets=settings.MAX_TEST_SHEETS_PER_GROUP)
    flagged = errors_only(feedback)

    if args.json:
        print(json.dumps({
            "total": str(breakdown.rounded_total(places)),
            "rating": rating_band(breakdown.total),
            "subscores": {k: str(v) for k, v in breakdown.rounded(places).items()},
            "feedback": [
                {"field": k.field, "group": k.group, "index": k.index, "message": m}
                for k, m in flagged.items()
            ],
        }, indent=2, ensure_ascii=False))
    else:
        print(f"{'=' * 60}")
        print(f"  {'Criterion':<32} {'Bonus':>10} {'Score':>10}")
        print(f"  {'-' * 32} {'-' * 10} {'-' * 10}")
        for criterion, subscore in breakdown.subscores.items():
            bonus = quantize(breakdown.bonuses[criterion], places)
            print(f"  {CRITERION_LABELS[criterion]:<32} {bonus!s:>10} {quantize(subscore, places)!s:>10}")
        print(f"  {'-' * 32} {'-' * 10} {'-' * 10}")
        print(f"  {'Total':<32} {'':>10} {breakdown.rounded_total(places)!s:>10}  ({rating_band(breakdown.total)})")
        print(f"{'=' * 60}")
    for key, message in flagged.items():
        where = f"{key.field}" + (f"[{key.group}]" if key.group else "") + (
            f"#{key.index + 1}" if key.index is not None else ""
        )
        logger.warning(f"{where}: {message}")

    if args.report:
        content = render_evaluation_report(snapshot.header, breakdown, feedback, places)
        args.report.write_text(content, encoding="utf-8")
        logger.info(f"Report written to {args.report}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
