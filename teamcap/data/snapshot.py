"""
Worker and Job records, and ingestion from tabular snapshots.

Records are immutable: every engine function takes a snapshot and returns new
results. Role categories are resolved once here from free-text role strings.
"""
from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

import pandas as pd

from teamcap.config import config
from teamcap.data.periods import month_key, parse_month


logger = logging.getLogger(__name__)


class RoleCategory(str, Enum):
    """Worker role bucket. Helpers never receive monetary accrual."""
    LEAD = "Lead"
    HELPER = "Helper"
    TECHNICIAN = "Technician"


def _normalise_role_text(role: str) -> str:
    decomposed = unicodedata.normalize("NFKD", role or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).lower()


def classify_role(role: Optional[str]) -> RoleCategory:
    """
    Map a free-text role ("Montador", "Ajudante", "Técnico"...) to a category.

    Helper keywords win over technician keywords; anything unmatched is Lead.
    """
    text = _normalise_role_text(role or "")
    if any(keyword in text for keyword in config.HELPER_ROLE_KEYWORDS):
        return RoleCategory.HELPER
    if any(keyword in text for keyword in config.TECHNICIAN_ROLE_KEYWORDS):
        return RoleCategory.TECHNICIAN
    return RoleCategory.LEAD


@dataclass(frozen=True)
class Worker:
    """A team member."""
    id: str
    name: str
    role_category: RoleCategory = RoleCategory.LEAD
    role: str = ""

    @property
    def is_helper(self) -> bool:
        return self.role_category is RoleCategory.HELPER


@dataclass(frozen=True)
class Job:
    """One schedulable, priceable installation unit (an environment)."""
    id: str
    project_id: str
    name: str
    project_name: str = ""
    primary_worker_id: Optional[str] = None
    secondary_worker_id: Optional[str] = None
    helper_worker_id: Optional[str] = None
    primary_share_pct: Optional[float] = None
    secondary_share_pct: Optional[float] = None
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    completion_date: Optional[datetime] = None
    progress_pct: float = 0.0
    weight_class: int = 1
    catalog_value: float = 0.0
    advance_pct: float = 0.0
    advance_recognized_pct: float = 0.0
    advance_month: Optional[str] = None
    is_service_call: bool = False
    purchase_order: str = ""

    @property
    def effective_end(self) -> Optional[datetime]:
        """Scheduled end, falling back to the scheduled start."""
        return self.scheduled_end if self.scheduled_end is not None else self.scheduled_start

    @property
    def is_assigned(self) -> bool:
        return bool(self.primary_worker_id or self.secondary_worker_id or self.helper_worker_id)

    @property
    def is_shared(self) -> bool:
        """Both primary and secondary slots are filled."""
        return bool(self.primary_worker_id and self.secondary_worker_id)

    @property
    def is_closed(self) -> bool:
        return self.completion_date is not None or self.progress_pct >= 100

    @property
    def production_value(self) -> float:
        return (self.catalog_value or 0.0) * config.PRODUCTION_MARKUP

    def involves(self, worker_id: str) -> bool:
        return worker_id in (self.primary_worker_id, self.secondary_worker_id, self.helper_worker_id)

    def share_pct_for(self, worker_id: str) -> float:
        """
        Share of this job's value owed to a worker.

        Shared jobs split by the configured percentages (50/50 by default);
        otherwise whoever holds a lead slot takes 100. Helpers get 0.
        """
        if self.is_shared:
            if worker_id == self.primary_worker_id:
                return _or_default(self.primary_share_pct, config.DEFAULT_SHARED_SPLIT_PCT)
            if worker_id == self.secondary_worker_id:
                return _or_default(self.secondary_share_pct, config.DEFAULT_SHARED_SPLIT_PCT)
        elif worker_id in (self.primary_worker_id, self.secondary_worker_id):
            return 100.0
        return 0.0


def _or_default(value: Optional[float], default: float) -> float:
    return default if value is None else value


# =============================================================================
# INGESTION
# =============================================================================

def _clean_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


def _clean_float(value: Any, field_name: str, job_id: str,
                 default: Optional[float] = 0.0) -> Optional[float]:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return default
    number = pd.to_numeric(value, errors="coerce")
    if pd.isna(number):
        logger.warning("Job %s: non-numeric %s %r treated as missing", job_id, field_name, value,
                       extra={"job_id": job_id})
        return default
    return float(number)


def _clean_datetime(value: Any, field_name: str, job_id: str) -> Optional[datetime]:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        logger.warning("Job %s: unparseable %s %r treated as missing", job_id, field_name, value,
                       extra={"job_id": job_id})
        return None
    # Engine compares naive local instants
    if parsed.tzinfo is not None:
        parsed = parsed.tz_localize(None)
    return parsed.to_pydatetime()


def _clean_bool(value: Any) -> bool:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return False
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "y", "sim")
    return bool(value)


def _clean_weight_class(value: Any, job_id: str) -> int:
    number = _clean_float(value, "weight_class", job_id, default=1.0)
    if not number.is_integer() or int(number) not in config.WEIGHT_MULTIPLIERS:
        logger.warning("Job %s: unknown weight class %r treated as 1", job_id, value,
                       extra={"job_id": job_id})
        return 1
    return int(number)


def _clean_month(value: Any, job_id: str) -> Optional[str]:
    text = _clean_str(value)
    if text is None:
        return None
    parsed = parse_month(text)
    if parsed is None:
        logger.warning("Job %s: malformed advance month %r ignored", job_id, value,
                       extra={"job_id": job_id})
        return None
    return month_key(*parsed)


def worker_from_record(record: dict) -> Worker:
    """Build a Worker from a loose mapping (worker_id, worker_name, role)."""
    role = _clean_str(record.get("role")) or ""
    return Worker(
        id=str(record["worker_id"]),
        name=_clean_str(record.get("worker_name")) or "",
        role_category=classify_role(role),
        role=role,
    )


def job_from_record(record: dict) -> Job:
    """
    Build a Job from a loose mapping.

    Data-quality problems never reject the row: bad values degrade to
    "feature absent" and are logged.
    """
    job_id = str(record["job_id"])
    return Job(
        id=job_id,
        project_id=_clean_str(record.get("project_id")) or "",
        name=_clean_str(record.get("job_name")) or "",
        project_name=_clean_str(record.get("project_name")) or "",
        primary_worker_id=_clean_str(record.get("primary_worker_id")),
        secondary_worker_id=_clean_str(record.get("secondary_worker_id")),
        helper_worker_id=_clean_str(record.get("helper_worker_id")),
        primary_share_pct=_clean_float(record.get("primary_share_pct"), "primary_share_pct", job_id, default=None),
        secondary_share_pct=_clean_float(record.get("secondary_share_pct"), "secondary_share_pct", job_id, default=None),
        scheduled_start=_clean_datetime(record.get("scheduled_start"), "scheduled_start", job_id),
        scheduled_end=_clean_datetime(record.get("scheduled_end"), "scheduled_end", job_id),
        completion_date=_clean_datetime(record.get("completion_date"), "completion_date", job_id),
        progress_pct=_clean_float(record.get("progress_pct"), "progress_pct", job_id),
        weight_class=_clean_weight_class(record.get("weight_class"), job_id),
        catalog_value=_clean_float(record.get("catalog_value"), "catalog_value", job_id),
        advance_pct=_clean_float(record.get("advance_pct"), "advance_pct", job_id),
        advance_recognized_pct=_clean_float(record.get("advance_recognized_pct"), "advance_recognized_pct", job_id),
        advance_month=_clean_month(record.get("advance_month"), job_id),
        is_service_call=_clean_bool(record.get("is_service_call")),
        purchase_order=_clean_str(record.get("purchase_order")) or "",
    )


def workers_from_frame(df: pd.DataFrame) -> List[Worker]:
    """Convert a workers table into Worker records, preserving row order."""
    if len(df) == 0:
        return []
    return [worker_from_record(row) for row in df.to_dict("records")]


def jobs_from_frame(df: pd.DataFrame) -> List[Job]:
    """Convert a jobs table into Job records, preserving row order."""
    if len(df) == 0:
        return []
    return [job_from_record(row) for row in df.to_dict("records")]


def worker_names(workers: List[Worker]) -> dict:
    """id -> display name lookup, for presentation only."""
    return {w.id: w.name for w in workers}
