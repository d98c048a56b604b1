"""
Availability metrics pack.

Single source of truth for: schedule overlap, free workers for a window.
"""
from datetime import datetime
from typing import Iterable, List, Optional

import pandas as pd

from teamcap.data.snapshot import Job, RoleCategory, Worker


def dates_overlap(a_start: datetime, a_end: datetime,
                  b_start: datetime, b_end: datetime) -> bool:
    """Closed-interval overlap. Touching endpoints count as overlapping."""
    return a_start <= b_end and a_end >= b_start


def _matches_role(worker: Worker, role_filter: Optional[RoleCategory]) -> bool:
    if role_filter is None:
        return True
    if role_filter is RoleCategory.HELPER:
        return worker.is_helper
    return not worker.is_helper


def find_conflicts(worker: Worker,
                   jobs: Iterable[Job],
                   window_start: datetime,
                   window_end: datetime,
                   role_filter: Optional[RoleCategory] = None,
                   exclude_job_id: Optional[str] = None,
                   project_id: Optional[str] = None) -> List[Job]:
    """
    Jobs that block a worker from the proposed window.

    Jobs without both schedule instants never conflict. When looking for a
    helper, overlapping jobs of the same project are waived.
    """
    conflicts = []
    for job in jobs:
        if exclude_job_id is not None and job.id == exclude_job_id:
            continue
        if job.scheduled_start is None or job.scheduled_end is None:
            continue
        if not job.involves(worker.id):
            continue
        if not dates_overlap(window_start, window_end, job.scheduled_start, job.scheduled_end):
            continue
        if (role_filter is RoleCategory.HELPER
                and project_id is not None
                and job.project_id == project_id):
            continue
        conflicts.append(job)
    return conflicts


def resolve_available_workers(candidates: Iterable[Worker],
                              jobs: Iterable[Job],
                              window_start: Optional[datetime],
                              window_end: Optional[datetime],
                              role_filter: Optional[RoleCategory] = None,
                              exclude_job_id: Optional[str] = None,
                              project_id: Optional[str] = None) -> List[Worker]:
    """
    Workers free for [window_start, window_end].

    Args:
        candidates: Roster to filter, order preserved
        jobs: Snapshot of all jobs across projects
        window_start, window_end: Proposed window; if either is missing the
            role-filtered roster is returned as is
        role_filter: HELPER selects helpers, LEAD/TECHNICIAN select non-helpers
        exclude_job_id: Job being edited, never conflicts with itself
        project_id: Project of the job being scheduled (helper waiver)
    """
    jobs = list(jobs)
    pool = [w for w in candidates if _matches_role(w, role_filter)]

    if window_start is None or window_end is None:
        return pool

    return [
        worker for worker in pool
        if not find_conflicts(worker, jobs, window_start, window_end,
                              role_filter, exclude_job_id, project_id)
    ]


def availability_frame(candidates: Iterable[Worker],
                       jobs: Iterable[Job],
                       window_start: Optional[datetime],
                       window_end: Optional[datetime],
                       role_filter: Optional[RoleCategory] = None,
                       exclude_job_id: Optional[str] = None,
                       project_id: Optional[str] = None) -> pd.DataFrame:
    """
    Availability table for display: one row per role-matching candidate.
    """
    jobs = list(jobs)
    pool = [w for w in candidates if _matches_role(w, role_filter)]

    rows = []
    for worker in pool:
        if window_start is None or window_end is None:
            conflicts = []
        else:
            conflicts = find_conflicts(worker, jobs, window_start, window_end,
                                       role_filter, exclude_job_id, project_id)
        rows.append({
            "worker_id": worker.id,
            "worker_name": worker.name,
            "role_category": worker.role_category.value,
            "is_available": len(conflicts) == 0,
            "conflict_count": len(conflicts),
            "conflicting_jobs": ", ".join(job.name for job in conflicts),
        })

    if not rows:
        return pd.DataFrame(columns=["worker_id", "worker_name", "role_category",
                                     "is_available", "conflict_count", "conflicting_jobs"])

    return pd.DataFrame(rows).sort_values(["is_available", "worker_name"], ascending=[False, True]).reset_index(drop=True)
