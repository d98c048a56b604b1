"""
Tests for worker availability and schedule overlap.
"""
import pytest
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from teamcap.data.snapshot import Job, RoleCategory, Worker
from teamcap.metrics.availability import (
    availability_frame,
    dates_overlap,
    find_conflicts,
    resolve_available_workers,
)


LEAD = Worker(id="w1", name="Carlos", role_category=RoleCategory.LEAD, role="Montador")
LEAD_2 = Worker(id="w2", name="Diego", role_category=RoleCategory.LEAD, role="Montador")
HELPER = Worker(id="h1", name="Hugo", role_category=RoleCategory.HELPER, role="Ajudante")
TECH = Worker(id="t1", name="Tiago", role_category=RoleCategory.TECHNICIAN, role="Técnico")

ROSTER = [LEAD, LEAD_2, HELPER, TECH]

# Mon 3 June 2024 08:00 -> Wed 5 June 2024 18:00
MON_0800 = datetime(2024, 6, 3, 8, 0)
WED_0900 = datetime(2024, 6, 5, 9, 0)
WED_1800 = datetime(2024, 6, 5, 18, 0)
THU_0800 = datetime(2024, 6, 6, 8, 0)
FRI_1700 = datetime(2024, 6, 7, 17, 0)


def make_job(job_id="J1", project_id="P1", **kwargs) -> Job:
    defaults = {
        "name": f"Kitchen {job_id}",
        "scheduled_start": MON_0800,
        "scheduled_end": WED_1800,
    }
    defaults.update(kwargs)
    return Job(id=job_id, project_id=project_id, **defaults)


class TestDatesOverlap:
    """Closed-interval overlap rule."""

    @pytest.mark.parametrize("a, b", [
        ((1, 5), (5, 9)),
        ((1, 5), (6, 9)),
        ((1, 9), (3, 4)),
        ((3, 4), (1, 9)),
        ((7, 9), (1, 2)),
    ])
    def test_symmetric(self, a, b):
        assert dates_overlap(a[0], a[1], b[0], b[1]) == dates_overlap(b[0], b[1], a[0], a[1])

    def test_touching_endpoints_overlap(self):
        assert dates_overlap(1, 5, 5, 9) is True

    def test_disjoint(self):
        assert dates_overlap(1, 4, 5, 9) is False

    def test_datetimes(self):
        assert dates_overlap(WED_0900, FRI_1700, MON_0800, WED_1800) is True
        assert dates_overlap(THU_0800, FRI_1700, MON_0800, WED_1800) is False


class TestResolveAvailableWorkers:
    """Availability filtering over the job snapshot."""

    def test_overlapping_window_conflicts(self):
        jobs = [make_job(primary_worker_id="w1")]

        available = resolve_available_workers(ROSTER, jobs, WED_0900, FRI_1700, RoleCategory.LEAD)

        assert LEAD not in available
        assert LEAD_2 in available

    def test_later_window_is_free(self):
        jobs = [make_job(primary_worker_id="w1")]

        available = resolve_available_workers(ROSTER, jobs, THU_0800, FRI_1700, RoleCategory.LEAD)

        assert LEAD in available

    def test_secondary_and_helper_slots_conflict(self):
        jobs = [
            make_job("J1", secondary_worker_id="w2"),
            make_job("J2", project_id="P2", helper_worker_id="h1"),
        ]

        leads = resolve_available_workers(ROSTER, jobs, WED_0900, FRI_1700, RoleCategory.LEAD)
        helpers = resolve_available_workers(ROSTER, jobs, WED_0900, FRI_1700,
                                            RoleCategory.HELPER, project_id="P1")

        assert LEAD_2 not in leads
        assert helpers == []

    def test_role_filter_narrows_candidates(self):
        helpers = resolve_available_workers(ROSTER, [], MON_0800, WED_1800, RoleCategory.HELPER)
        non_helpers = resolve_available_workers(ROSTER, [], MON_0800, WED_1800, RoleCategory.TECHNICIAN)

        assert helpers == [HELPER]
        assert non_helpers == [LEAD, LEAD_2, TECH]

    def test_missing_window_returns_candidates(self):
        jobs = [make_job(primary_worker_id="w1")]

        available = resolve_available_workers(ROSTER, jobs, None, FRI_1700)

        assert available == ROSTER

    def test_excluded_job_does_not_conflict_with_itself(self):
        jobs = [make_job("J1", primary_worker_id="w1")]

        available = resolve_available_workers(ROSTER, jobs, MON_0800, WED_1800,
                                              RoleCategory.LEAD, exclude_job_id="J1")

        assert LEAD in available

    def test_job_without_end_never_conflicts(self):
        jobs = [make_job(primary_worker_id="w1", scheduled_end=None)]

        available = resolve_available_workers(ROSTER, jobs, MON_0800, WED_1800, RoleCategory.LEAD)

        assert LEAD in available

    def test_does_not_mutate_inputs(self):
        roster = list(ROSTER)
        jobs = [make_job(primary_worker_id="w1")]

        resolve_available_workers(roster, jobs, WED_0900, FRI_1700, RoleCategory.LEAD)

        assert roster == ROSTER
        assert len(jobs) == 1


class TestHelperSameProjectWaiver:
    """Helpers may overlap on jobs of the same project only."""

    def test_same_project_is_waived(self):
        jobs = [make_job("J1", project_id="P1", helper_worker_id="h1")]

        available = resolve_available_workers(ROSTER, jobs, WED_0900, FRI_1700,
                                              RoleCategory.HELPER, project_id="P1")

        assert HELPER in available

    def test_other_project_conflicts(self):
        jobs = [make_job("J1", project_id="P2", helper_worker_id="h1")]

        available = resolve_available_workers(ROSTER, jobs, WED_0900, FRI_1700,
                                              RoleCategory.HELPER, project_id="P1")

        assert HELPER not in available

    def test_waiver_never_applies_to_leads(self):
        jobs = [make_job("J1", project_id="P1", primary_worker_id="w1")]

        available = resolve_available_workers(ROSTER, jobs, WED_0900, FRI_1700,
                                              RoleCategory.LEAD, project_id="P1")

        assert LEAD not in available


class TestConflictReporting:
    """Conflict listing and display table."""

    def test_find_conflicts_lists_jobs(self):
        jobs = [
            make_job("J1", primary_worker_id="w1"),
            make_job("J2", primary_worker_id="w1",
                     scheduled_start=THU_0800, scheduled_end=FRI_1700),
            make_job("J3", primary_worker_id="w2"),
        ]

        conflicts = find_conflicts(LEAD, jobs, WED_0900, WED_1800)

        assert [job.id for job in conflicts] == ["J1"]

    def test_availability_frame(self):
        jobs = [make_job("J1", primary_worker_id="w1")]

        table = availability_frame(ROSTER, jobs, WED_0900, FRI_1700, RoleCategory.LEAD)

        assert len(table) == 3
        row = table[table["worker_id"] == "w1"].iloc[0]
        assert not row["is_available"]
        assert row["conflict_count"] == 1
        assert table["is_available"].sum() == 2

    def test_availability_frame_empty(self):
        table = availability_frame([], [], WED_0900, FRI_1700)

        assert len(table) == 0
        assert "is_available" in table.columns
