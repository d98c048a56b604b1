"""
CSV and Excel downloads. Every exporter returns (bytes, filename).
"""
import pandas as pd
from datetime import datetime
from io import BytesIO
from typing import Optional, Tuple

from teamcap.data.periods import month_key
from teamcap.metrics.production import (
    ProductionReport,
    production_frame,
    production_summary_frame,
)


def _stamp(fmt: str = "%Y%m%d_%H%M%S") -> str:
    return datetime.now().strftime(fmt)


def _csv(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False).encode("utf-8")


def export_dataframe_csv(df: pd.DataFrame, filename: Optional[str] = None) -> Tuple[bytes, str]:
    return _csv(df), filename or f"export_{_stamp()}.csv"


def export_production_csv(report: ProductionReport) -> Tuple[bytes, str]:
    """Accrual lines for the month followed by a TOTAL row."""
    lines = production_frame(report)
    total_row = {col: "" for col in lines.columns}
    total_row.update(worker_name="TOTAL", value=report.grand_total)
    out = pd.concat([lines, pd.DataFrame([total_row])], ignore_index=True)
    return _csv(out), f"production_{month_key(report.year, report.month)}.csv"


def _activity_frame(activity: dict) -> pd.DataFrame:
    return pd.DataFrame([
        {"worker_id": worker_id, **task}
        for worker_id, tasks in activity["per_worker"].items()
        for task in tasks
    ])


def export_production_excel(report: ProductionReport,
                            activity: Optional[dict] = None,
                            filename: Optional[str] = None) -> Tuple[bytes, str]:
    """
    Workbook with a ``summary`` sheet (one row per worker), a ``lines`` sheet
    (one row per accrual line) and, when month activity is given, an
    ``activity`` sheet with the jobs each worker had in the month.
    """
    sheets = {
        "summary": production_summary_frame(report),
        "lines": production_frame(report),
    }
    if activity and activity.get("per_worker"):
        sheets["activity"] = _activity_frame(activity)

    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for name, df in sheets.items():
            df.to_excel(writer, sheet_name=name, index=False)

    return buffer.getvalue(), filename or f"production_{month_key(report.year, report.month)}.xlsx"


def export_team_status_csv(status_df: pd.DataFrame,
                           filename: Optional[str] = None) -> Tuple[bytes, str]:
    return _csv(status_df), filename or f"team_status_{_stamp('%Y%m%d')}.csv"


def format_export_filename(base_name: str, extension: str = "csv",
                           include_timestamp: bool = True) -> str:
    if include_timestamp:
        return f"{base_name}_{_stamp()}.{extension}"
    return f"{base_name}.{extension}"
