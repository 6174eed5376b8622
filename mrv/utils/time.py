"""
Time utility functions.
"""

from datetime import datetime, timezone
from typing import List, Optional, Tuple


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def month_key(year: int, month: int) -> str:
    """Format a calendar month as a trend label, e.g. 'Oct 26'."""
    return datetime(year, month, 1).strftime("%b %y")


def trailing_months(now: Optional[datetime] = None, count: int = 6) -> List[Tuple[int, int]]:
    """
    Return the last `count` calendar months as (year, month), oldest first.

    The month containing `now` is the last entry.
    """
    now = now or utc_now()
    year, month = now.year, now.month
    months = []
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    months.reverse()
    return months
