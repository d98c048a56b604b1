"""
Column checks and id normalisation for the workers and jobs tables.
"""
import pandas as pd
from typing import Dict, List, Tuple

from teamcap.config import REQUIRED_COLUMNS, OPTIONAL_COLUMNS


ID_COLUMNS = [
    "worker_id", "job_id", "project_id",
    "primary_worker_id", "secondary_worker_id", "helper_worker_id",
]


class SchemaValidationError(Exception):
    """A snapshot table lacks columns the engine cannot do without."""


def _absent(df: pd.DataFrame, columns: List[str]) -> List[str]:
    present = set(df.columns)
    return [col for col in columns if col not in present]


def validate_required_columns(df: pd.DataFrame, table_name: str) -> Tuple[bool, List[str]]:
    """(is_valid, missing). Tables without requirements always pass."""
    missing = _absent(df, REQUIRED_COLUMNS.get(table_name, []))
    return not missing, missing


def check_optional_columns(df: pd.DataFrame, table_name: str) -> List[str]:
    """Optional columns the table does not carry; those features stay off."""
    return _absent(df, OPTIONAL_COLUMNS.get(table_name, []))


def validate_schema(df: pd.DataFrame, table_name: str, strict: bool = True) -> Dict:
    """
    Check a table's columns.

    In strict mode a missing required column raises SchemaValidationError;
    otherwise the problems are only reported in the returned dict.
    """
    is_valid, missing_required = validate_required_columns(df, table_name)
    if strict and not is_valid:
        raise SchemaValidationError(
            f"{table_name} is missing required columns: {missing_required}"
        )

    return {
        "is_valid": is_valid,
        "missing_required": missing_required,
        "missing_optional": check_optional_columns(df, table_name),
        "total_columns": len(df.columns),
        "total_rows": len(df),
    }


def _id_to_str(value):
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    # CSV readers turn integer ids into floats when a column has gaps
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip() or None


def ensure_column_types(df: pd.DataFrame) -> pd.DataFrame:
    """
    Copy of a snapshot table with identifier columns as plain strings.

    Ids become strings (or None) so worker references match across tables.
    Numbers and dates are left as read: record ingestion parses each value on
    its own and logs the ones it has to drop.
    """
    df = df.copy()

    for col in _present(df, ID_COLUMNS):
        df[col] = pd.Series([_id_to_str(v) for v in df[col]], index=df.index, dtype=object)

    return df


def _present(df: pd.DataFrame, columns: List[str]) -> List[str]:
    return [col for col in columns if col in df.columns]
