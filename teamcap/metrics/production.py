"""
Production accrual metrics pack.

Single source of truth for: monthly production value per worker, with advance,
automatic balance and completion settlement prorated across months.

A job's full production value is recognized exactly once across all months,
provided the caller keeps the bookkeeping baseline current: once a month has
been finalized, ``advance_recognized_pct`` on each job must be raised by the
percentage recognized in that month. The advance month is the exception: its
percentage is deducted automatically in every later month, so it is never
added to the baseline. The engine never updates the baseline itself.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

import pandas as pd

from teamcap.data.periods import (
    format_day,
    format_period,
    is_after_month,
    month_bounds,
    month_of,
    next_month,
    parse_month,
)
from teamcap.data.snapshot import Job, Worker


LABEL_ADVANCE = "ADVANCE RECOGNIZED"
LABEL_BALANCE = "AUTOMATIC BALANCE"
LABEL_FULL_MONTH = "100% THIS MONTH"


@dataclass
class AccrualLine:
    """One job's contribution to one worker's month, for audit and reports."""
    project_id: str
    project_name: str
    job_id: str
    job_name: str
    purchase_order: str
    period: str
    month_pct: float
    label: str
    share_pct: float
    value: float
    is_helper: bool = False
    is_shared: bool = False
    is_extended: bool = False
    completion_date: Optional[str] = None


@dataclass
class WorkerProduction:
    worker: Worker
    lines: List[AccrualLine] = field(default_factory=list)
    total: float = 0.0


@dataclass
class ProductionReport:
    year: int
    month: int
    per_worker: Dict[str, WorkerProduction] = field(default_factory=dict)
    grand_total: float = 0.0


def _fmt_pct(value: float) -> str:
    return f"{value:g}"


def _validate_period(year: int, month: int):
    if not 1 <= month <= 12:
        raise ValueError(f"Report month must be 1-12, got {month}")


def _is_active_in_month(job: Job, month_start: datetime, month_end: datetime) -> bool:
    start = job.scheduled_start
    end = job.effective_end
    return start is not None and start <= month_end and (end is None or end >= month_start)


def compute_month_pct(job: Job, year: int, month: int):
    """
    Percentage of the job's full value recognized in a month, and its label.

    Returns (month_pct, label), or None when the job does not take part in
    the month at all. Priority: advance month, balance month, then completion
    or ongoing progress net of deductions.
    """
    _validate_period(year, month)
    report = (year, month)
    month_start, month_end = month_bounds(year, month)

    advance = parse_month(job.advance_month)
    is_advance_month = advance is not None and report == advance
    is_balance_month = advance is not None and report == next_month(*advance)
    is_completion_month = month_of(job.completion_date) == report
    is_active = _is_active_in_month(job, month_start, month_end)

    if not (is_active or is_completion_month or is_advance_month or is_balance_month):
        return None

    if is_advance_month:
        return job.advance_pct, LABEL_ADVANCE

    if is_balance_month:
        return max(0.0, 100 - job.advance_pct), LABEL_BALANCE

    deductions = job.advance_recognized_pct
    if advance is not None and is_after_month(report, advance):
        deductions += job.advance_pct

    if is_completion_month:
        label = f"BALANCE (DED. {_fmt_pct(deductions)}%)" if deductions > 0 else LABEL_FULL_MONTH
        return max(0.0, 100 - deductions), label

    month_pct = max(0.0, job.progress_pct - deductions)
    label = f"PROGRESS (DED. {_fmt_pct(deductions)}%)" if deductions > 0 and month_pct > 0 else ""
    return month_pct, label


def accrue_job_month(job: Job, worker_id: str, year: int, month: int) -> Optional[AccrualLine]:
    """
    Accrual line for one worker on one job in one month, or None.

    Helper assignments produce zero-value lines kept for visibility.
    """
    role_slots = (job.primary_worker_id, job.secondary_worker_id, job.helper_worker_id)
    if worker_id is None or worker_id not in role_slots:
        return None

    outcome = compute_month_pct(job, year, month)
    if outcome is None:
        return None
    month_pct, label = outcome
    if month_pct <= 0:
        return None

    is_helper = job.helper_worker_id == worker_id
    share_pct = 0.0 if is_helper else job.share_pct_for(worker_id)
    value = 0.0 if is_helper else job.production_value * (month_pct / 100) * (share_pct / 100)

    month_start, _ = month_bounds(year, month)
    return AccrualLine(
        project_id=job.project_id,
        project_name=job.project_name,
        job_id=job.id,
        job_name=job.name,
        purchase_order=job.purchase_order,
        period=format_period(job.scheduled_start, job.effective_end),
        month_pct=month_pct,
        label=label,
        share_pct=share_pct,
        value=value,
        is_helper=is_helper,
        is_shared=job.is_shared,
        is_extended=job.scheduled_start is not None and job.scheduled_start < month_start,
        completion_date=format_day(job.completion_date) or None,
    )


def accrue_worker_month(worker: Worker, jobs: Iterable[Job], year: int, month: int) -> WorkerProduction:
    """All accrual lines for one worker in a month, sorted by project then job."""
    production = WorkerProduction(worker=worker)
    for job in jobs:
        line = accrue_job_month(job, worker.id, year, month)
        if line is None:
            continue
        production.lines.append(line)
        production.total += line.value

    production.lines.sort(key=lambda l: (l.project_name, l.job_name))
    return production


def accrue_production(jobs: Iterable[Job], workers: Iterable[Worker],
                      year: int, month: int) -> ProductionReport:
    """
    Monthly production report for all non-helper workers.

    Workers with no lines are left out. Keyed by worker id, ordered by name.
    """
    _validate_period(year, month)
    jobs = list(jobs)
    report = ProductionReport(year=year, month=month)

    for worker in sorted(workers, key=lambda w: w.name):
        if worker.is_helper:
            continue
        production = accrue_worker_month(worker, jobs, year, month)
        if not production.lines:
            continue
        report.per_worker[worker.id] = production
        report.grand_total += production.total

    return report


def production_frame(report: ProductionReport) -> pd.DataFrame:
    """Flatten a report into one row per accrual line for rendering and exports."""
    rows = []
    for worker_id, production in report.per_worker.items():
        for line in production.lines:
            rows.append({
                "worker_id": worker_id,
                "worker_name": production.worker.name,
                "project_name": line.project_name,
                "job_name": line.job_name,
                "purchase_order": line.purchase_order,
                "period": line.period,
                "month_pct": line.month_pct,
                "label": line.label,
                "share_pct": line.share_pct,
                "value": line.value,
                "is_helper": line.is_helper,
                "is_shared": line.is_shared,
                "is_extended": line.is_extended,
                "completion_date": line.completion_date,
            })

    if not rows:
        return pd.DataFrame(columns=[
            "worker_id", "worker_name", "project_name", "job_name", "purchase_order",
            "period", "month_pct", "label", "share_pct", "value", "is_helper",
            "is_shared", "is_extended", "completion_date",
        ])

    return pd.DataFrame(rows)


def production_summary_frame(report: ProductionReport) -> pd.DataFrame:
    """One row per worker: line count and monthly total."""
    rows = [
        {
            "worker_id": worker_id,
            "worker_name": production.worker.name,
            "job_count": len(production.lines),
            "total": production.total,
        }
        for worker_id, production in report.per_worker.items()
    ]
    if not rows:
        return pd.DataFrame(columns=["worker_id", "worker_name", "job_count", "total"])
    return pd.DataFrame(rows)


def month_activity_summary(jobs: Iterable[Job], workers: Iterable[Worker],
                           year: int, month: int) -> Dict:
    """
    Operational summary for the monthly report.

    Counts, per non-helper worker, the jobs scheduled into the month and how
    many of them are done (completion recorded or progress at 100).
    """
    _validate_period(year, month)
    jobs = list(jobs)
    month_start, month_end = month_bounds(year, month)

    per_worker = {}
    total_tasks = 0
    completed_tasks = 0

    for worker in sorted(workers, key=lambda w: w.name):
        if worker.is_helper:
            continue
        tasks = []
        for job in jobs:
            if not job.involves(worker.id) or not _is_active_in_month(job, month_start, month_end):
                continue
            tasks.append({
                "project_name": job.project_name,
                "job_name": job.name,
                "start": job.scheduled_start,
                "end": job.effective_end,
                "progress_pct": job.progress_pct,
                "is_done": job.is_closed,
                "is_helper": job.helper_worker_id == worker.id,
            })
        if not tasks:
            continue
        total_tasks += len(tasks)
        completed_tasks += sum(1 for t in tasks if t["is_done"])
        per_worker[worker.id] = tasks

    return {
        "per_worker": per_worker,
        "total_tasks": total_tasks,
        "completed_tasks": completed_tasks,
        "completion_rate": completed_tasks / total_tasks * 100 if total_tasks > 0 else 0.0,
    }
