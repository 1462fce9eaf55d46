"""
components/charts.py - Plotly chart builders for the bid evaluation dashboard.
"""

import plotly.graph_objects as go
import pandas as pd


BAND_COLORS = {
    "weak": "#ef4444",
    "acceptable": "#f59e0b",
    "strong": "#10b981",
}


def score_gauge(total: float, band: str) -> go.Figure:
    """Gauge for the total technical score with weak / acceptable / strong bands."""
    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=total,
        title={"text": "Technical Score"},
        number={"valueformat": ".2f"},
        gauge={
            "axis": {"range": [0, 100]},
            "bar": {"color": BAND_COLORS.get(band, "#6b7280")},
            "steps": [
                {"range": [0, 50], "color": "#fee2e2"},
                {"range": [50, 80], "color": "#fef3c7"},
                {"range": [80, 100], "color": "#d1fae5"},
            ],
            "threshold": {"line": {"color": "#1e293b", "width": 3}, "value": 60},
        },
    ))
    fig.update_layout(height=280, margin=dict(t=50, b=20))
    return fig


def breakdown_bar_chart(df: pd.DataFrame) -> go.Figure:
    """Horizontal bars: weighted sub-score per criterion against its 60-point baseline."""
    fig = go.Figure()

    fig.add_trace(go.Bar(
        x=df["Baseline"], y=df["Criterion"], orientation="h",
        name="Baseline (60 × weight)", marker_color="#cbd5e1",
    ))
    fig.add_trace(go.Bar(
        x=df["Score"], y=df["Criterion"], orientation="h",
        name="Score", marker_color="#6366f1",
        text=df["Score"].round(2), textposition="outside",
    ))

    fig.update_layout(
        title="Weighted Score per Criterion",
        barmode="overlay",
        xaxis=dict(title="Weighted points"),
        yaxis=dict(autorange="reversed"),
        height=520, margin=dict(l=200, r=40, t=50, b=40),
        plot_bgcolor="white",
        legend=dict(orientation="h", y=-0.1),
    )
    return fig
