"""
Assignment status metrics pack.

Single source of truth for: active / scheduled / overdue assignments per
worker, team headcount status, role grouping.

Ordering contract: a worker's open jobs are stably sorted by scheduled start
before classification, so "first active" and "first scheduled" always mean
the earliest start. Ties, and jobs with no schedule, keep the order in which
the caller supplied them (projects, then jobs within each project).
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

import pandas as pd

from teamcap.config import config
from teamcap.data.periods import day_bounds
from teamcap.data.snapshot import Job, RoleCategory, Worker


@dataclass
class AssignmentStatus:
    """Classification of one worker's open assignments at an instant."""
    worker: Worker
    active: Optional[Job] = None
    scheduled: Optional[Job] = None
    overdue: List[Job] = field(default_factory=list)
    is_finishing: bool = False

    @property
    def is_helper_role(self) -> bool:
        return self.worker.is_helper

    @property
    def is_available(self) -> bool:
        return self.active is None


def assignment_role(job: Job, worker_id: str) -> Optional[str]:
    """Slot a worker holds on a job: primary, secondary, helper or None."""
    if job.primary_worker_id == worker_id:
        return "primary"
    if job.secondary_worker_id == worker_id:
        return "secondary"
    if job.helper_worker_id == worker_id:
        return "helper"
    return None


def _start_sort_key(job: Job):
    # Unscheduled jobs after scheduled ones; sorted() is stable for ties
    if job.scheduled_start is None:
        return (1, datetime.min)
    return (0, job.scheduled_start)


def is_finishing(active: Optional[Job], now: datetime) -> bool:
    """
    Emphasis flag for an active job close to done.

    True when progress is past the threshold or the scheduled end is less than
    the finishing window away.
    """
    if active is None:
        return False
    if active.progress_pct > config.FINISHING_PROGRESS_THRESHOLD:
        return True
    end = active.effective_end
    if end is None:
        return False
    return (end - now) < timedelta(hours=config.FINISHING_WINDOW_HOURS)


def classify_assignments(worker: Worker, jobs: Iterable[Job], now: datetime) -> AssignmentStatus:
    """
    Bucket a worker's open jobs into active, scheduled and overdue.

    At most one active and one scheduled job are kept; every overdue job is.
    """
    status = AssignmentStatus(worker=worker)

    open_jobs = [
        job for job in jobs
        if job.completion_date is None
        and job.progress_pct < 100
        and job.involves(worker.id)
    ]

    for job in sorted(open_jobs, key=_start_sort_key):
        if job.scheduled_start is None:
            status.overdue.append(job)
            continue

        start, end = day_bounds(job.scheduled_start, job.effective_end)

        if start <= now <= end:
            if status.active is None:
                status.active = job
        elif now < start:
            if status.scheduled is None:
                status.scheduled = job
        else:
            status.overdue.append(job)

    status.is_finishing = is_finishing(status.active, now)
    return status


def classify_team(workers: Iterable[Worker], jobs: Iterable[Job], now: datetime) -> List[AssignmentStatus]:
    """Classify every worker against the same snapshot."""
    jobs = list(jobs)
    return [classify_assignments(worker, jobs, now) for worker in workers]


def team_status_summary(statuses: List[AssignmentStatus]) -> Dict[str, int]:
    """
    Headcount summary: total, active, available, finishing, busy.
    """
    total = len(statuses)
    active = sum(1 for s in statuses if s.active is not None)
    finishing = sum(1 for s in statuses if s.active is not None and s.is_finishing)

    return {
        "total": total,
        "active": active,
        "available": max(0, total - active),
        "finishing": finishing,
        "busy": active - finishing,
    }


def compute_team_status(workers: Iterable[Worker], jobs: Iterable[Job], now: datetime) -> pd.DataFrame:
    """
    Team status table, one row per worker.
    """
    statuses = classify_team(workers, jobs, now)

    rows = []
    for s in statuses:
        rows.append({
            "worker_id": s.worker.id,
            "worker_name": s.worker.name,
            "role_category": s.worker.role_category.value,
            "active_project": s.active.project_name if s.active else None,
            "active_job": s.active.name if s.active else None,
            "active_progress": s.active.progress_pct if s.active else None,
            "active_as_helper": assignment_role(s.active, s.worker.id) == "helper" if s.active else False,
            "scheduled_job": s.scheduled.name if s.scheduled else None,
            "scheduled_start": s.scheduled.scheduled_start if s.scheduled else None,
            "overdue_count": len(s.overdue),
            "is_finishing": s.is_finishing,
            "is_available": s.is_available,
        })

    if not rows:
        return pd.DataFrame()

    return pd.DataFrame(rows).sort_values("worker_name").reset_index(drop=True)


ROLE_GROUP_ORDER = [RoleCategory.LEAD, RoleCategory.HELPER, RoleCategory.TECHNICIAN]


def group_workers_by_role(workers: Iterable[Worker]) -> Dict[RoleCategory, List[Worker]]:
    """Workers bucketed by role category, sorted by name within each bucket."""
    groups: Dict[RoleCategory, List[Worker]] = {role: [] for role in ROLE_GROUP_ORDER}
    for worker in sorted(workers, key=lambda w: w.name):
        groups[worker.role_category].append(worker)
    return groups
