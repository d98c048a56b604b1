"""
Snapshot loading from DATA_DIR/processed, cached per Streamlit session.
"""
import logging
import pandas as pd
import streamlit as st
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from teamcap.config import config, TABLE_FILES
from teamcap.data.schema import ensure_column_types, validate_schema
from teamcap.data.snapshot import Job, Worker, jobs_from_frame, workers_from_frame


logger = logging.getLogger(__name__)

READERS = ((".parquet", pd.read_parquet), (".csv", pd.read_csv))


def find_table_file(processed_dir: Path, table_name: str) -> Optional[Path]:
    """Path of a table's parquet file, else its csv, else None."""
    stem = processed_dir / TABLE_FILES[table_name]
    for suffix, _ in READERS:
        if stem.with_suffix(suffix).exists():
            return stem.with_suffix(suffix)
    return None


def read_table_file(path: Path) -> pd.DataFrame:
    """Read a table file with the reader matching its suffix."""
    return dict(READERS)[path.suffix](path)


def load_table(table_name: str, data_dir: Optional[Path] = None) -> Optional[pd.DataFrame]:
    """
    Read, validate and type one snapshot table, or None when absent.

    Raises SchemaValidationError when required columns are missing.
    """
    path = find_table_file((data_dir or config.data_dir) / "processed", table_name)
    if path is None:
        return None

    df = read_table_file(path)
    validate_schema(df, table_name, strict=True)
    logger.info("Loaded %s: %d rows from %s", table_name, len(df), path.name)
    return ensure_column_types(df)


def _load_or_stop(table_name: str) -> pd.DataFrame:
    df = load_table(table_name)
    if df is None:
        st.error(f"No {table_name} table in {config.processed_dir}")
        st.stop()
    return df


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_workers() -> pd.DataFrame:
    return _load_or_stop("workers")


@st.cache_data(ttl=config.cache_ttl_seconds)
def load_jobs() -> pd.DataFrame:
    return _load_or_stop("jobs")


def load_snapshot() -> Tuple[List[Worker], List[Job]]:
    """Workers and jobs as engine records, in file order."""
    return workers_from_frame(load_workers()), jobs_from_frame(load_jobs())


def get_data_status() -> Dict[str, Optional[Path]]:
    """Table name -> file that would be loaded (None when missing)."""
    return {name: find_table_file(config.processed_dir, name) for name in TABLE_FILES}
