"""
Tests for worker/job records, ingestion and period helpers.
"""
import pytest
import logging
import numpy as np
import pandas as pd
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from teamcap.data.periods import (
    day_bounds,
    format_period,
    is_after_month,
    month_bounds,
    next_month,
    parse_month,
)
from teamcap.data.snapshot import (
    Job,
    RoleCategory,
    classify_role,
    job_from_record,
    jobs_from_frame,
    worker_names,
    workers_from_frame,
)


class TestClassifyRole:

    @pytest.mark.parametrize("role,expected", [
        ("Montador", RoleCategory.LEAD),
        ("Ajudante", RoleCategory.HELPER),
        ("Auxiliar de montagem", RoleCategory.HELPER),
        ("Técnico", RoleCategory.TECHNICIAN),
        ("Assistência Técnica", RoleCategory.TECHNICIAN),
        ("Service technician", RoleCategory.TECHNICIAN),
        ("", RoleCategory.LEAD),
        (None, RoleCategory.LEAD),
    ])
    def test_categories(self, role, expected):
        assert classify_role(role) is expected

    def test_helper_wins_over_technician(self):
        assert classify_role("Ajudante técnico") is RoleCategory.HELPER


class TestJobRecord:
    """Derived properties on Job."""

    def test_effective_end_falls_back_to_start(self):
        start = datetime(2024, 6, 3)
        assert Job(id="J", project_id="P", name="J", scheduled_start=start).effective_end == start

    def test_closed(self):
        assert Job(id="J", project_id="P", name="J", progress_pct=100).is_closed
        assert Job(id="J", project_id="P", name="J", completion_date=datetime(2024, 6, 3)).is_closed
        assert not Job(id="J", project_id="P", name="J", progress_pct=99).is_closed

    def test_assigned(self):
        assert Job(id="J", project_id="P", name="J", helper_worker_id="h1").is_assigned
        assert not Job(id="J", project_id="P", name="J").is_assigned

    def test_production_value(self):
        assert Job(id="J", project_id="P", name="J", catalog_value=1000).production_value == pytest.approx(2300)

    def test_share_for_sole_lead(self):
        job = Job(id="J", project_id="P", name="J", primary_worker_id="w1", helper_worker_id="h1")

        assert job.share_pct_for("w1") == 100
        assert job.share_pct_for("h1") == 0
        assert job.share_pct_for("w9") == 0

    def test_share_for_secondary_only(self):
        job = Job(id="J", project_id="P", name="J", secondary_worker_id="w2")

        assert not job.is_shared
        assert job.share_pct_for("w2") == 100

    def test_share_for_shared_job(self):
        job = Job(id="J", project_id="P", name="J", primary_worker_id="w1",
                  secondary_worker_id="w2", primary_share_pct=70)

        assert job.share_pct_for("w1") == 70
        assert job.share_pct_for("w2") == 50


class TestIngestion:
    """Bad values degrade to missing instead of rejecting the row."""

    def test_full_record(self):
        job = job_from_record({
            "job_id": "J1",
            "project_id": "P1",
            "job_name": " Kitchen ",
            "primary_worker_id": "w1",
            "scheduled_start": "2024-06-03 08:00",
            "scheduled_end": pd.Timestamp("2024-06-05 18:00", tz="UTC"),
            "progress_pct": "40",
            "catalog_value": 1000,
            "weight_class": 2.0,
            "advance_month": "2024-3",
            "is_service_call": "sim",
        })

        assert job.name == "Kitchen"
        assert job.scheduled_start == datetime(2024, 6, 3, 8, 0)
        assert job.scheduled_end == datetime(2024, 6, 5, 18, 0)
        assert job.progress_pct == 40.0
        assert job.weight_class == 2
        assert job.advance_month == "2024-03"
        assert job.is_service_call is True

    def test_fractional_weight_class_rejected(self, caplog):
        with caplog.at_level(logging.WARNING):
            job = job_from_record({"job_id": "J3", "project_id": "P1", "job_name": "Closet",
                                   "weight_class": 2.7})

        assert job.weight_class == 1
        assert "weight class" in caplog.text

    def test_bad_values_degrade(self, caplog):
        with caplog.at_level(logging.WARNING):
            job = job_from_record({
                "job_id": "J2",
                "project_id": np.nan,
                "job_name": "Bedroom",
                "primary_worker_id": np.nan,
                "scheduled_start": "soon",
                "progress_pct": "lots",
                "catalog_value": None,
                "weight_class": 9,
                "advance_month": "March",
            })

        assert job.project_id == ""
        assert job.primary_worker_id is None
        assert job.scheduled_start is None
        assert job.progress_pct == 0.0
        assert job.catalog_value == 0.0
        assert job.weight_class == 1
        assert job.advance_month is None
        assert job.primary_share_pct is None
        assert "J2" in caplog.text

    def test_frames_preserve_order(self):
        workers = workers_from_frame(pd.DataFrame({
            "worker_id": ["w2", "w1"],
            "worker_name": ["Bruno", "Ana"],
            "role": ["Montador", "Ajudante"],
        }))
        jobs = jobs_from_frame(pd.DataFrame({
            "job_id": ["J2", "J1"],
            "project_id": ["P1", "P1"],
            "job_name": ["B", "A"],
        }))

        assert [w.id for w in workers] == ["w2", "w1"]
        assert workers[1].is_helper
        assert [j.id for j in jobs] == ["J2", "J1"]
        assert worker_names(workers) == {"w2": "Bruno", "w1": "Ana"}

    def test_empty_frames(self):
        assert workers_from_frame(pd.DataFrame()) == []
        assert jobs_from_frame(pd.DataFrame()) == []


class TestPeriods:

    def test_parse_month(self):
        assert parse_month("2024-03") == (2024, 3)
        assert parse_month("2024-3") == (2024, 3)
        assert parse_month("2024-13") is None
        assert parse_month("March") is None
        assert parse_month(None) is None

    def test_next_month_rolls_year(self):
        assert next_month(2024, 12) == (2025, 1)
        assert next_month(2024, 6) == (2024, 7)

    def test_month_bounds(self):
        start, end = month_bounds(2024, 2)

        assert start == datetime(2024, 2, 1)
        assert end == datetime(2024, 2, 29, 23, 59, 59)

    def test_is_after_month(self):
        assert is_after_month((2025, 1), (2024, 12))
        assert not is_after_month((2024, 3), (2024, 3))

    def test_day_bounds(self):
        start, end = day_bounds(datetime(2024, 6, 3, 8, 0), datetime(2024, 6, 5, 18, 0))

        assert start == datetime(2024, 6, 3)
        assert end.date() == datetime(2024, 6, 5).date()
        assert (end.hour, end.minute, end.second) == (23, 59, 59)

    def test_format_period(self):
        assert format_period(None, None) == "---"
        assert format_period(datetime(2024, 6, 3), datetime(2024, 6, 3)) == "03/06"
        assert format_period(datetime(2024, 6, 3), datetime(2024, 6, 5)) == "03/06 to 05/06"
