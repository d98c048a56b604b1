"""
Tests for CSV and Excel exports.
"""
import pytest
import pandas as pd
import sys
from datetime import datetime
from io import BytesIO, StringIO
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from teamcap.data.snapshot import Job, RoleCategory, Worker
from teamcap.exports import (
    export_dataframe_csv,
    export_production_csv,
    export_production_excel,
    format_export_filename,
)
from teamcap.metrics.production import accrue_production, month_activity_summary


WORKERS = [
    Worker(id="w1", name="Carlos", role_category=RoleCategory.LEAD),
    Worker(id="w2", name="Ana", role_category=RoleCategory.LEAD),
]

JOBS = [
    Job(id="J1", project_id="P1", name="Kitchen", primary_worker_id="w1",
        scheduled_start=datetime(2024, 6, 3), scheduled_end=datetime(2024, 6, 7),
        progress_pct=100, completion_date=datetime(2024, 6, 7), catalog_value=1000),
    Job(id="J2", project_id="P1", name="Bedroom", primary_worker_id="w2",
        scheduled_start=datetime(2024, 6, 10), scheduled_end=datetime(2024, 6, 20),
        progress_pct=50, catalog_value=200),
]


class TestProductionCsv:

    def test_total_row(self):
        report = accrue_production(JOBS, WORKERS, 2024, 6)

        csv_bytes, filename = export_production_csv(report)
        df = pd.read_csv(StringIO(csv_bytes.decode("utf-8")))

        assert filename == "production_2024-06.csv"
        assert len(df) == 3
        assert df.iloc[-1]["worker_name"] == "TOTAL"
        assert df.iloc[-1]["value"] == pytest.approx(2300 + 230)

    def test_empty_report(self):
        report = accrue_production([], WORKERS, 2024, 6)

        csv_bytes, _ = export_production_csv(report)
        df = pd.read_csv(StringIO(csv_bytes.decode("utf-8")))

        assert len(df) == 1
        assert df.iloc[0]["value"] == 0


class TestProductionExcel:

    def test_sheets(self):
        report = accrue_production(JOBS, WORKERS, 2024, 6)
        activity = month_activity_summary(JOBS, WORKERS, 2024, 6)

        excel_bytes, filename = export_production_excel(report, activity)
        sheets = pd.read_excel(BytesIO(excel_bytes), sheet_name=None, engine="openpyxl")

        assert filename == "production_2024-06.xlsx"
        assert set(sheets) == {"summary", "lines", "activity"}
        assert len(sheets["lines"]) == 2
        assert len(sheets["activity"]) == 2

    def test_without_activity(self):
        report = accrue_production(JOBS, WORKERS, 2024, 6)

        excel_bytes, _ = export_production_excel(report)
        sheets = pd.read_excel(BytesIO(excel_bytes), sheet_name=None, engine="openpyxl")

        assert "activity" not in sheets


class TestGenericExports:

    def test_dataframe_csv(self):
        csv_bytes, filename = export_dataframe_csv(pd.DataFrame({"a": [1]}), "table.csv")

        assert filename == "table.csv"
        assert csv_bytes.decode("utf-8").splitlines() == ["a", "1"]

    def test_filename_without_timestamp(self):
        assert format_export_filename("team", "xlsx", include_timestamp=False) == "team.xlsx"
