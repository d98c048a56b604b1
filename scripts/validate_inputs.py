#!/usr/bin/env python
"""
Check the workers/jobs snapshot before pointing the app at it.

Usage:
    python scripts/validate_inputs.py
    python scripts/validate_inputs.py --data-dir /path/to/data

Exits 1 when a table is missing or lacks required columns. Dangling worker
references and share splits that do not add up are reported as warnings.
"""
import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pandas as pd
from teamcap.config import config, TABLE_FILES
from teamcap.data.loader import find_table_file, read_table_file
from teamcap.data.schema import validate_schema, ensure_column_types
from teamcap.data.snapshot import jobs_from_frame, workers_from_frame
from teamcap.logging_config import setup_logging


logger = logging.getLogger(__name__)

ROLE_SLOTS = ("primary_worker_id", "secondary_worker_id", "helper_worker_id")


@dataclass
class TableCheck:
    table: str
    path: Optional[Path] = None
    df: Optional[pd.DataFrame] = None
    missing_required: List[str] = field(default_factory=list)
    missing_optional: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.df is not None and not self.missing_required and not self.errors


def check_table(processed_dir: Path, table: str) -> TableCheck:
    """Locate, read and schema-check one table (parquet preferred over csv)."""
    check = TableCheck(table=table, path=find_table_file(processed_dir, table))
    if check.path is None:
        stem = processed_dir / TABLE_FILES[table]
        check.errors.append(f"not found: {stem}.parquet or {stem}.csv")
        return check

    try:
        raw = read_table_file(check.path)
    except (OSError, ValueError) as e:
        check.errors.append(f"could not read {check.path.name}: {e}")
        return check

    result = validate_schema(raw, table, strict=False)
    check.missing_required = result["missing_required"]
    check.missing_optional = result["missing_optional"]
    if result["is_valid"]:
        check.df = ensure_column_types(raw)
    return check


def check_references(workers_df: pd.DataFrame, jobs_df: pd.DataFrame) -> List[str]:
    """Warnings for unknown worker ids on jobs and shared splits not totalling 100."""
    known = {w.id for w in workers_from_frame(workers_df)}

    warnings = []
    for job in jobs_from_frame(jobs_df):
        for slot in ROLE_SLOTS:
            worker_id = getattr(job, slot)
            if worker_id and worker_id not in known:
                warnings.append(f"job {job.id}: {slot} {worker_id} is not in workers")
        if job.is_shared:
            split = job.share_pct_for(job.primary_worker_id) + job.share_pct_for(job.secondary_worker_id)
            if abs(split - 100) > 0.01:
                warnings.append(f"job {job.id}: shares add up to {split:g}%")
    return warnings


def print_check(check: TableCheck):
    print(f"[{check.table}]")
    if check.path is not None:
        print(f"  file: {check.path.name}")
    if check.df is not None:
        print(f"  rows: {len(check.df):,}  columns: {len(check.df.columns)}")
    if check.missing_required:
        print(f"  ✗ missing required: {check.missing_required}")
    if check.missing_optional:
        print(f"  ⚠ missing optional: {check.missing_optional}")
    for err in check.errors:
        print(f"  ✗ {err}")
    if check.ok:
        print("  ✓ schema valid")
    print()


def main():
    parser = argparse.ArgumentParser(description="Validate the workers/jobs snapshot")
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Override data directory"
    )

    args = parser.parse_args()
    setup_logging()

    data_dir = Path(args.data_dir) if args.data_dir else config.data_dir
    processed_dir = data_dir / "processed"

    print("=" * 60)
    print(f"Snapshot validation: {processed_dir}")
    print("=" * 60)

    checks = {table: check_table(processed_dir, table) for table in TABLE_FILES}
    for check in checks.values():
        print_check(check)

    if checks["workers"].ok and checks["jobs"].ok:
        warnings = check_references(checks["workers"].df, checks["jobs"].df)
        for warning in warnings:
            print(f"  ⚠ {warning}")
        logger.info("Cross-table checks produced %d warnings", len(warnings))

    print("=" * 60)
    if all(check.ok for check in checks.values()):
        print("✓ Snapshot is usable")
        sys.exit(0)
    print("✗ Snapshot is not usable, see above")
    sys.exit(1)


if __name__ == "__main__":
    main()
