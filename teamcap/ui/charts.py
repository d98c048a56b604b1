"""
Plotly figures for team status, workload and production.
"""
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from typing import Dict, Optional


# =============================================================================
# THEME
# =============================================================================

STATUS_COLORS = {
    "available": "#28a745",
    "finishing": "#ffc107",
    "busy": "#1f77b4",
    "overdue": "#dc3545",
    "unassigned": "#6c757d",
    "produced": "#2e8b57",
}

BASE_LAYOUT = {
    "template": "plotly_white",
    "font": {"family": "Arial, sans-serif", "size": 12},
    "margin": {"l": 40, "r": 24, "t": 48, "b": 40},
}


def apply_layout(fig: go.Figure, **overrides) -> go.Figure:
    fig.update_layout(**{**BASE_LAYOUT, **overrides})
    return fig


# =============================================================================
# PROJECT COMPLETION
# =============================================================================

def kpi_gauge(value: float, title: str = "", suffix: str = "%") -> go.Figure:
    """
    Completion gauge, banded red / amber / green at 50% and 85%.
    """
    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=value,
        title={"text": title},
        number={"suffix": suffix, "valueformat": ".1f"},
        gauge={
            "axis": {"range": [0, 100]},
            "bar": {"color": STATUS_COLORS["busy"]},
            "steps": [
                {"range": [0, 50], "color": "#fdecea"},
                {"range": [50, 85], "color": "#fff8e1"},
                {"range": [85, 100], "color": "#e8f5e9"},
            ],
        },
    ))
    return apply_layout(fig, height=220)


# =============================================================================
# TEAM
# =============================================================================

def team_status_donut(summary: Dict[str, int], title: str = "Team now") -> go.Figure:
    """Available / finishing / busy headcount from ``team_status_summary``."""
    keys = ["available", "finishing", "busy"]
    fig = go.Figure(go.Pie(
        labels=[k.title() for k in keys],
        values=[summary.get(k, 0) for k in keys],
        hole=0.55,
        marker={"colors": [STATUS_COLORS[k] for k in keys]},
        sort=False,
    ))
    return apply_layout(fig, title=title, height=260, showlegend=True)


# =============================================================================
# SHARES AND TOTALS
# =============================================================================

def _bar(df: pd.DataFrame, x: str, y: str, title: str,
         text: Optional[str] = None, color: Optional[str] = None,
         color_map: Optional[Dict[str, str]] = None) -> go.Figure:
    fig = px.bar(df, x=x, y=y, orientation="h", title=title, text=text,
                 color=color, color_discrete_map=color_map)
    fig.update_traces(textposition="outside", cliponaxis=False)
    fig.update_layout(yaxis={"categoryorder": "total ascending"}, showlegend=False)
    return apply_layout(fig)


def workload_share_chart(workload_df: pd.DataFrame, title: str = "Workload share") -> go.Figure:
    """Share of project workload per worker, unassigned in grey."""
    df = workload_df.assign(
        bucket=workload_df["is_unassigned"].map({True: "unassigned", False: "busy"}),
        label=workload_df["share_pct"].map(lambda v: f"{v:.1f}%"),
    )
    fig = _bar(df, x="share_pct", y="worker_name", title=title, text="label",
               color="bucket", color_map=STATUS_COLORS)
    fig.update_layout(xaxis_title="Share of project (%)", yaxis_title="")
    return fig


def production_by_worker_chart(summary_df: pd.DataFrame, title: str = "Production by worker") -> go.Figure:
    """Monthly production totals per worker."""
    df = summary_df.assign(label=summary_df["total"].map(lambda v: f"${v:,.0f}"))
    fig = _bar(df, x="total", y="worker_name", title=title, text="label")
    fig.update_traces(marker_color=STATUS_COLORS["produced"])
    fig.update_layout(xaxis_title="Value produced", yaxis_title="")
    return fig
