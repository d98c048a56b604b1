#!/usr/bin/env python
"""
Print or export one month of production accrual.

Usage:
    python scripts/production_report.py --month 2024-07
    python scripts/production_report.py --month 2024-07 --excel
    python scripts/production_report.py --month 2024-07 --data-dir /path/to/data
"""
import argparse
import logging
import sys
from pathlib import Path

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from teamcap.config import config
from teamcap.data.loader import load_table
from teamcap.data.periods import parse_month
from teamcap.data.schema import SchemaValidationError
from teamcap.data.snapshot import jobs_from_frame, workers_from_frame
from teamcap.exports import export_production_csv, export_production_excel
from teamcap.logging_config import setup_logging
from teamcap.metrics.production import accrue_production, month_activity_summary


logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Monthly production report")
    parser.add_argument(
        "--month",
        required=True,
        help="Report month as YYYY-MM"
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Override data directory"
    )
    parser.add_argument(
        "--csv",
        action="store_true",
        help="Write lines to CSV in the exports directory"
    )
    parser.add_argument(
        "--excel",
        action="store_true",
        help="Write summary, lines and activity to Excel in the exports directory"
    )
    
    args = parser.parse_args()
    setup_logging()
    
    period = parse_month(args.month)
    if period is None:
        print(f"ERROR: invalid month {args.month!r}, expected YYYY-MM")
        sys.exit(2)
    year, month = period
    
    data_dir = Path(args.data_dir) if args.data_dir else config.data_dir
    
    try:
        workers_df = load_table("workers", data_dir)
        jobs_df = load_table("jobs", data_dir)
    except SchemaValidationError as e:
        print(f"ERROR: {e}")
        sys.exit(1)
    
    if workers_df is None or jobs_df is None:
        print(f"ERROR: workers/jobs not found in {data_dir / 'processed'}")
        sys.exit(1)
    
    workers = workers_from_frame(workers_df)
    jobs = jobs_from_frame(jobs_df)
    logger.info("Loaded %d workers and %d jobs", len(workers), len(jobs))
    
    report = accrue_production(jobs, workers, year, month)
    activity = month_activity_summary(jobs, workers, year, month)
    
    print("=" * 72)
    print(f"Production {args.month}")
    print("=" * 72)
    for production in report.per_worker.values():
        print(f"{production.worker.name}  ${production.total:,.2f}")
        for line in production.lines:
            split = f" [{line.share_pct:g}%]" if line.is_shared else ""
            helper = " (helper)" if line.is_helper else ""
            print(
                f"  {line.project_name} / {line.job_name}{helper}  {line.period}  "
                f"{line.month_pct:g}%{split}  {line.label}  ${line.value:,.2f}"
            )
        print()
    print("-" * 72)
    print(f"Grand total: ${report.grand_total:,.2f}")
    print(
        f"Jobs in month: {activity['total_tasks']}  "
        f"completed: {activity['completed_tasks']} ({activity['completion_rate']:.1f}%)"
    )
    
    exports_dir = data_dir / "exports"
    if args.csv or args.excel:
        exports_dir.mkdir(parents=True, exist_ok=True)
    if args.csv:
        data, filename = export_production_csv(report)
        (exports_dir / filename).write_bytes(data)
        print(f"Wrote {exports_dir / filename}")
    if args.excel:
        data, filename = export_production_excel(report, activity)
        (exports_dir / filename).write_bytes(data)
        print(f"Wrote {exports_dir / filename}")


if __name__ == "__main__":
    main()
