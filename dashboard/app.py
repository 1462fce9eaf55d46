# dashboard/app.py
# Concrete Pole Tender - Technical Evaluation UI
#
# Run with:  streamlit run dashboard/app.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

from components.charts import breakdown_bar_chart, score_gauge
from pole_tender.config import get_settings
from pole_tender.models.enumerations import (
    MixerType,
    PermeabilityEvidence,
    ProductionMethod,
    ScoredChoice,
    TransportDistance,
)
from pole_tender.reports.evaluation_report import rating_band, render_evaluation_report
from pole_tender.scoring.parsing import build_snapshot
from pole_tender.scoring.pole_types import list_pole_types
from pole_tender.scoring.score_engine import ScoreEngine
from pole_tender.scoring.weights import BASE_SCORE, CRITERION_LABELS, CRITERION_WEIGHTS
from pole_tender.validation.field_rules import errors_only, validate_field, validate_form

load_dotenv()

# =====================================================================
# Page config (must be first Streamlit call)
# =====================================================================

st.set_page_config(
    page_title="Pole Tender Evaluation",
    layout="wide",
    page_icon="🏗️",
)

settings = get_settings()
MAX_SHEETS = settings.MAX_TEST_SHEETS_PER_GROUP
PLACES = settings.SCORE_DISPLAY_PLACES

UNGROUPED = "(no pole type)"
POLE_TYPE_KEYS = [UNGROUPED] + [p.key for p in list_pole_types()]

# =====================================================================
# Session state init
# =====================================================================

if "group_count" not in st.session_state:
    st.session_state["group_count"] = 1

# =====================================================================
# Input helpers
# =====================================================================

def text_field(label: str, name: str, *, key: Optional[str] = None,
               help: Optional[str] = None) -> str:
    """Free-text numeric input; shows its validation message under it."""
    value = st.text_input(label, key=key or name, help=help)
    message = validate_field(name, value)
    if message:
        st.caption(f":red[{message}]")
    return value


def choice_field(label: str, name: str, enum_cls) -> Optional[int]:
    members: List[Optional[ScoredChoice]] = [None] + list(enum_cls)
    picked = st.selectbox(
        label,
        members,
        key=name,
        format_func=lambda m: "(not set)" if m is None else f"{m.label} ({m.points})",
    )
    return None if picked is None else picked.points


def test_sheet_inputs(group_idx: int, sheet_idx: int) -> Dict[str, str]:
    prefix = f"g{group_idx}_s{sheet_idx}"
    st.markdown(f"**Sheet #{sheet_idx + 1}**")
    c1, c2, c3, c4, c5 = st.columns(5)
    sheet = {}
    fields = [
        (c1, "nominalStrength", "Nominal strength (kgf)"),
        (c2, "poleLength", "Pole length (m)"),
        (c3, "actualFailureStrength", "Failure load (kgf)"),
        (c4, "maxDispAt1_5x", "Max displacement at 1.5× (mm)"),
        (c5, "residualDispAfterLoad", "Residual displacement (mm)"),
    ]
    for col, name, label in fields:
        with col:
            sheet[name] = text_field(label, name, key=f"{prefix}_{name}")
    return sheet


# =====================================================================
# Form
# =====================================================================

def collect_form() -> Dict[str, Any]:
    form: Dict[str, Any] = {}

    with st.sidebar:
        st.header("Tender")
        form["header"] = {
            "company": st.text_input("Company", key="company"),
            "tender": st.text_input("Tender number", key="tender"),
            "date": st.text_input("Evaluation date", key="date"),
        }
        st.divider()
        st.caption(f"Up to {MAX_SHEETS} test sheets per pole type. Blank fields earn no bonus.")

    tab_mat, tab_mfr, tab_mech = st.tabs(["Materials", "Manufacturer", "Mechanical tests"])

    with tab_mat:
        st.subheader("Stone (aggregates)")
        c1, c2, c3, c4 = st.columns(4)
        with c1:
            form["sandFinenessModulus"] = text_field("Sand fineness modulus", "sandFinenessModulus")
        with c2:
            form["sandClayImpurity"] = text_field("Sand clay impurity (%)", "sandClayImpurity")
        with c3:
            form["gravelClayImpurity"] = text_field("Gravel clay impurity (%)", "gravelClayImpurity")
        with c4:
            form["sandValue"] = text_field("Sand equivalent (%)", "sandValue")

        st.subheader("Mixing water")
        c1, c2, c3 = st.columns(3)
        with c1:
            form["suspendedSolids"] = text_field("Suspended solids (ppm)", "suspendedSolids")
            form["dissolvedSolids"] = text_field("Dissolved solids (ppm)", "dissolvedSolids")
        with c2:
            form["chlorideIons"] = text_field("Chloride ions (ppm)", "chlorideIons")
            form["sulfateIons"] = text_field("Sulfate ions (ppm)", "sulfateIons")
        with c3:
            form["alkaliEquivalent"] = text_field("Alkali equivalent (ppm)", "alkaliEquivalent")
            form["waterPH"] = text_field("pH", "waterPH")

    with tab_mfr:
        st.subheader("Customer satisfaction (0 to 8 each)")
        cols = st.columns(5)
        ratings = [
            ("sat_quality", "Quality"),
            ("sat_stability", "Stability"),
            ("sat_performance", "Performance"),
            ("sat_commitment", "Commitment"),
            ("sat_disposal", "Disposal"),
        ]
        for col, (name, label) in zip(cols, ratings):
            with col:
                form[name] = text_field(label, name)

        st.subheader("Track record")
        c1, c2, c3, c4 = st.columns(4)
        with c1:
            form["warrantyYears"] = text_field("Warranty (years)", "warrantyYears")
        with c2:
            form["historyYears"] = text_field("Production history (years)", "historyYears")
        with c3:
            form["annualCapacity"] = text_field("Annual capacity (poles)", "annualCapacity")
        with c4:
            form["lifespanYears"] = text_field("Design lifespan (years)", "lifespanYears")

        st.subheader("Production")
        c1, c2, c3 = st.columns(3)
        with c1:
            form["prodLineQuality"] = {
                "line": st.checkbox("Production line covered", key="pl_line"),
                "materials": st.checkbox("Raw materials covered", key="pl_materials"),
                "processing": st.checkbox("Processing covered", key="pl_processing"),
            }
        with c2:
            form["prodMethod"] = choice_field("Production method", "prodMethod", ProductionMethod)
            form["mixerType"] = choice_field("Mixer type", "mixerType", MixerType)
        with c3:
            form["permeability"] = choice_field("Permeability evidence", "permeability", PermeabilityEvidence)
            form["transportDistance"] = choice_field("Transport distance", "transportDistance", TransportDistance)

    with tab_mech:
        form["nominalStrength"] = text_field(
            "Shared nominal strength (kgf)", "nominalStrength",
            help="Used for sheets without a pole type or their own nominal strength.",
        )
        groups = []
        for g in range(st.session_state["group_count"]):
            with st.expander(f"Pole type group {g + 1}", expanded=True):
                c1, c2 = st.columns([2, 1])
                with c1:
                    pole_key = st.selectbox("Pole type", POLE_TYPE_KEYS, key=f"g{g}_pole")
                with c2:
                    n_sheets = st.number_input(
                        "Test sheets", min_value=0, max_value=MAX_SHEETS, value=1, key=f"g{g}_n",
                    )
                group_key = None if pole_key == UNGROUPED else pole_key
                tests = [test_sheet_inputs(g, i) for i in range(int(n_sheets))]
                groups.append({"poleType": group_key, "tests": tests})
        form["testGroups"] = groups

        if st.button("➕ Add pole type group"):
            st.session_state["group_count"] += 1
            st.rerun()

    return form


# =====================================================================
# Results
# =====================================================================

def render_results(form: Dict[str, Any]) -> None:
    snapshot = build_snapshot(form)
    breakdown = ScoreEngine().score(snapshot)
    feedback = validate_form(form, max_sheets=MAX_SHEETS)

    total = float(breakdown.rounded_total(PLACES))
    band = rating_band(breakdown.total)

    st.divider()
    col_gauge, col_bar = st.columns([1, 2])
    with col_gauge:
        st.plotly_chart(score_gauge(total, band), use_container_width=True, key="score_gauge")
        st.metric("Rating", band.title())

        report = render_evaluation_report(snapshot.header, breakdown, feedback, PLACES)
        st.download_button(
            "📄 Download report (.md)",
            data=report.encode("utf-8"),
            file_name="pole_bid_evaluation.md",
            mime="text/markdown",
        )

    rows = [
        {
            "Criterion": CRITERION_LABELS[c],
            "Weight": float(CRITERION_WEIGHTS[c]),
            "Bonus": float(breakdown.bonuses[c]),
            "Score": float(v),
            "Baseline": float(BASE_SCORE * CRITERION_WEIGHTS[c]),
        }
        for c, v in breakdown.subscores.items()
    ]
    df = pd.DataFrame(rows)
    with col_bar:
        st.plotly_chart(breakdown_bar_chart(df), use_container_width=True, key="breakdown_bar")

    with st.expander("View score table"):
        st.dataframe(
            df.drop(columns=["Baseline"]).round(PLACES),
            use_container_width=True, hide_index=True,
        )

    flagged = errors_only(feedback)
    if flagged:
        with st.expander(f"{len(flagged)} field(s) outside the accepted range"):
            for key, message in flagged.items():
                where = key.field
                if key.group:
                    where += f" · {key.group}"
                if key.index is not None:
                    where += f" · sheet #{key.index + 1}"
                st.write(f"- `{where}`: {message}")


# =====================================================================
# Page
# =====================================================================

st.title("🏗️ Concrete Pole Tender: Technical Evaluation")

render_results(collect_form())
