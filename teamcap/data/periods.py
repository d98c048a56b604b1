"""
Calendar month and day-window helpers.

Months are handled as (year, month) tuples so that comparisons are plain
tuple comparisons. Month keys are "YYYY-MM" strings.
"""
import re
from datetime import datetime, timedelta
from typing import Optional, Tuple

import pandas as pd


MonthKey = Tuple[int, int]

_MONTH_PATTERN = re.compile(r"^\s*(\d{4})-(\d{1,2})\s*$")


# =============================================================================
# MONTHS
# =============================================================================

def parse_month(value: Optional[str]) -> Optional[MonthKey]:
    """
    Parse a "YYYY-MM" string into (year, month).
    
    Returns None for missing or malformed values.
    """
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    match = _MONTH_PATTERN.match(str(value))
    if not match:
        return None
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        return None
    return year, month


def month_key(year: int, month: int) -> str:
    """Format (year, month) as "YYYY-MM"."""
    return f"{year:04d}-{month:02d}"


def next_month(year: int, month: int) -> MonthKey:
    """Calendar month immediately following (year, month)."""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """
    First and last instant of a calendar month.
    
    The end bound is 23:59:59 on the last day.
    """
    start = datetime(year, month, 1)
    ny, nm = next_month(year, month)
    end = datetime(ny, nm, 1) - timedelta(seconds=1)
    return start, end


def month_of(value: Optional[datetime]) -> Optional[MonthKey]:
    """(year, month) of an instant, or None."""
    if value is None:
        return None
    return value.year, value.month


def is_after_month(a: MonthKey, b: MonthKey) -> bool:
    """True when month a is strictly later than month b."""
    return tuple(a) > tuple(b)


# =============================================================================
# DAY WINDOWS
# =============================================================================

def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: datetime) -> datetime:
    return value.replace(hour=23, minute=59, second=59, microsecond=999999)


def day_bounds(start: datetime, end: datetime) -> Tuple[datetime, datetime]:
    """Widen a schedule to whole days: [start@00:00, end@23:59:59.999999]."""
    return start_of_day(start), end_of_day(end)


# =============================================================================
# DISPLAY
# =============================================================================

def format_day(value: Optional[datetime]) -> str:
    """Format as dd/mm, or empty string."""
    if value is None:
        return ""
    return f"{value.day:02d}/{value.month:02d}"


def format_period(start: Optional[datetime], end: Optional[datetime]) -> str:
    """
    Schedule period for report lines.
    
    "---" without a start, "dd/mm" for single-day (or open-ended) jobs,
    "dd/mm to dd/mm" otherwise.
    """
    if start is None:
        return "---"
    period = format_day(start)
    if end is not None and end != start:
        period += f" to {format_day(end)}"
    return period
