"""
Weighted workload metrics pack.

Single source of truth for: weighted project completion, per-worker ownership
share of a project's workload.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from teamcap.config import config
from teamcap.data.snapshot import Job, Worker


# per_worker key for jobs with no primary; never a valid worker id
UNASSIGNED = None


@dataclass
class WorkerShare:
    """Accumulated ownership for one worker (or the unassigned bucket)."""
    weight: float = 0.0
    share_pct: float = 0.0
    job_count: int = 0


@dataclass
class WorkloadResult:
    total_pct: float = 0.0
    total_possible_weight: float = 0.0
    weighted_progress: float = 0.0
    per_worker: Dict[Optional[str], WorkerShare] = field(default_factory=dict)


def weight_multiplier(weight_class: Optional[int]) -> float:
    """Weight class 1/2/3 -> 1.0/0.5/0.25; anything else counts as a full job."""
    return config.WEIGHT_MULTIPLIERS.get(weight_class, config.DEFAULT_WEIGHT_MULTIPLIER)


def _scoped_jobs(jobs: Iterable[Job], project_id: Optional[str]) -> List[Job]:
    return [
        job for job in jobs
        if not job.is_service_call
        and (project_id is None or job.project_id == project_id)
    ]


def aggregate_workload(jobs: Iterable[Job], project_id: Optional[str] = None) -> WorkloadResult:
    """
    Weighted completion and per-worker ownership for a project.

    Service calls are excluded. Keys are worker ids; jobs without a primary
    put the primary portion under the UNASSIGNED (None) key. Helpers do not count.
    """
    scoped = _scoped_jobs(jobs, project_id)
    result = WorkloadResult()

    if not scoped:
        return result

    result.total_possible_weight = sum(weight_multiplier(job.weight_class) for job in scoped)
    result.weighted_progress = sum(
        (job.progress_pct or 0) * weight_multiplier(job.weight_class) for job in scoped
    )
    result.total_pct = (
        result.weighted_progress / result.total_possible_weight
        if result.total_possible_weight > 0 else 0.0
    )

    def credit(key: Optional[str], weight: float):
        bucket = result.per_worker.setdefault(key, WorkerShare())
        bucket.weight += weight
        bucket.job_count += 1

    for job in scoped:
        base = weight_multiplier(job.weight_class)

        if job.secondary_worker_id:
            primary_split = job.primary_share_pct
            if primary_split is None:
                primary_split = config.DEFAULT_SHARED_SPLIT_PCT
        else:
            primary_split = 100.0
        credit(job.primary_worker_id or UNASSIGNED, base * primary_split / 100)

        if job.secondary_worker_id:
            secondary_split = job.secondary_share_pct
            if secondary_split is None:
                secondary_split = config.DEFAULT_SHARED_SPLIT_PCT
            credit(job.secondary_worker_id, base * secondary_split / 100)

    for bucket in result.per_worker.values():
        bucket.share_pct = (
            bucket.weight / result.total_possible_weight * 100
            if result.total_possible_weight > 0 else 0.0
        )

    return result


def progress_breakdown(jobs: Iterable[Job], project_id: Optional[str] = None) -> Dict[str, int]:
    """
    Count jobs by progress state: completed, in progress, not started.
    """
    scoped = _scoped_jobs(jobs, project_id)
    return {
        "total": len(scoped),
        "completed": sum(1 for j in scoped if j.progress_pct >= 100),
        "in_progress": sum(1 for j in scoped if 0 < j.progress_pct < 100),
        "not_started": sum(1 for j in scoped if j.progress_pct <= 0),
    }


def workload_frame(result: WorkloadResult, workers: Iterable[Worker]) -> pd.DataFrame:
    """
    Contribution table with names resolved for display.

    Sorted by share descending with the unassigned bucket last.
    """
    if not result.per_worker:
        return pd.DataFrame(columns=["worker_id", "worker_name", "job_count",
                                     "weight", "share_pct", "is_unassigned"])

    names = {w.id: w.name for w in workers}
    df = pd.DataFrame([
        {
            "worker_id": key,
            "worker_name": config.UNASSIGNED_BUCKET if key is UNASSIGNED else names.get(key, key),
            "job_count": share.job_count,
            "weight": share.weight,
            "share_pct": share.share_pct,
            "is_unassigned": key is UNASSIGNED,
        }
        for key, share in result.per_worker.items()
    ])
    df["share_pct"] = np.where(df["share_pct"].notna(), df["share_pct"], 0.0)

    return df.sort_values(["is_unassigned", "share_pct"], ascending=[True, False]).reset_index(drop=True)
