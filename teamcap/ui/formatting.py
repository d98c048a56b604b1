"""
Display formatting for money, percentages, counts and status markers.
"""
import pandas as pd
from typing import Union

from teamcap.config import FORMAT_COUNT, FORMAT_CURRENCY, FORMAT_CURRENCY_DECIMAL, FORMAT_PERCENT
from teamcap.ui.charts import STATUS_COLORS


Number = Union[float, int, None]

MISSING = "—"

CURRENCY_COLUMNS = {"value", "total", "catalog_value", "production_value"}
PERCENT_COLUMNS = {"month_pct", "share_pct", "progress_pct", "active_progress", "completion_rate"}
COUNT_COLUMNS = {"job_count", "overdue_count", "conflict_count"}


def _missing(value: Number) -> bool:
    return value is None or pd.isna(value)


def fmt_currency(value: Number, decimals: int = 0) -> str:
    """$1,234 or, with decimals=2, $1,234.56"""
    if _missing(value):
        return MISSING
    return (FORMAT_CURRENCY_DECIMAL if decimals else FORMAT_CURRENCY).format(value)


def fmt_percent(value: Number, decimals: int = 1) -> str:
    if _missing(value):
        return MISSING
    if decimals == 1:
        return FORMAT_PERCENT.format(value)
    return f"{value:.{decimals}f}%"


def fmt_count(value: Number) -> str:
    if _missing(value):
        return MISSING
    return FORMAT_COUNT.format(int(value))


def format_metric_df(df: pd.DataFrame) -> pd.DataFrame:
    """
    Copy of an engine frame with known money, percent and count columns
    rendered as strings for st.dataframe.
    """
    out = df.copy()
    for col in out.columns:
        if col in CURRENCY_COLUMNS:
            out[col] = out[col].map(lambda v: fmt_currency(v, decimals=2))
        elif col in PERCENT_COLUMNS:
            out[col] = out[col].map(fmt_percent)
        elif col in COUNT_COLUMNS:
            out[col] = out[col].map(fmt_count)
    return out


def status_dot(status: str) -> str:
    """Coloured dot for available / finishing / busy / overdue."""
    color = STATUS_COLORS.get(status.lower(), STATUS_COLORS["unassigned"])
    return f'<span style="color: {color}; font-size: 1.2em;">●</span>'
