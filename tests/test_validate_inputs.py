"""
Tests for the snapshot validation script.
"""
import pytest
import pandas as pd
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from teamcap.data.loader import find_table_file
from validate_inputs import check_references, check_table


def write_jobs(processed: Path, **columns) -> pd.DataFrame:
    df = pd.DataFrame({
        "job_id": ["J1"],
        "project_id": ["P1"],
        "job_name": ["Kitchen"],
        "primary_worker_id": ["w1"],
        "scheduled_start": ["2024-06-03"],
        "progress_pct": [40],
        "catalog_value": [1000],
        **columns,
    })
    processed.mkdir(parents=True, exist_ok=True)
    df.to_csv(processed / "jobs.csv", index=False)
    return df


class TestCheckTable:
    """Table lookup and schema check shared with the loader."""

    def test_missing_table(self, tmp_path):
        check = check_table(tmp_path, "jobs")

        assert not check.ok
        assert check.path is None
        assert "not found" in check.errors[0]

    def test_valid_csv(self, tmp_path):
        write_jobs(tmp_path)

        check = check_table(tmp_path, "jobs")

        assert check.ok
        assert check.path == tmp_path / "jobs.csv"
        assert check.df["job_id"].iloc[0] == "J1"

    def test_parquet_preferred_like_loader(self, tmp_path):
        df = write_jobs(tmp_path, job_name=["From csv"])
        df.assign(job_name="From parquet").to_parquet(tmp_path / "jobs.parquet", index=False)

        check = check_table(tmp_path, "jobs")

        assert check.path == find_table_file(tmp_path, "jobs")
        assert check.path.suffix == ".parquet"
        assert check.df["job_name"].iloc[0] == "From parquet"

    def test_missing_required_column(self, tmp_path):
        write_jobs(tmp_path).drop(columns=["catalog_value"]).to_csv(tmp_path / "jobs.csv", index=False)

        check = check_table(tmp_path, "jobs")

        assert not check.ok
        assert check.missing_required == ["catalog_value"]


class TestCheckReferences:

    def test_unknown_worker_and_bad_split(self):
        workers = pd.DataFrame({"worker_id": ["w1"], "worker_name": ["Ana"], "role": ["Montador"]})
        jobs = pd.DataFrame({
            "job_id": ["J1"],
            "project_id": ["P1"],
            "job_name": ["Kitchen"],
            "primary_worker_id": ["w1"],
            "secondary_worker_id": ["w9"],
            "primary_share_pct": [70],
            "secondary_share_pct": [40],
        })

        warnings = check_references(workers, jobs)

        assert any("w9" in w for w in warnings)
        assert any("110%" in w for w in warnings)
