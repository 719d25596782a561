"""
Local Time Utilities

DESIGN DECISION: Every timestamp and date in MicroSpend is LOCAL time.
Using UTC (e.g. datetime.utcnow().date()) makes an expense logged at
11pm in Toronto land on "tomorrow", which is exactly the bug we avoid.

Timestamps are naive strings: YYYY-MM-DDTHH:mm:ss.sss
Their first 10 characters are the local calendar day, and plain string
comparison orders them chronologically.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union


def current_local_timestamp(now: Optional[datetime] = None) -> str:
    """
    Local timestamp with millisecond precision, no offset.

    Args:
        now: Clock override for tests. Defaults to the system clock.
    """
    now = now or datetime.now()
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}"


def current_local_date(now: Optional[datetime] = None) -> str:
    """Today's local calendar day as YYYY-MM-DD."""
    now = now or datetime.now()
    return now.strftime("%Y-%m-%d")


def previous_local_date(day: Union[str, date]) -> str:
    """
    The calendar day before `day`, as YYYY-MM-DD.

    Handles month and year rollover (2026-03-01 -> 2026-02-28).

    Raises:
        ValueError: If `day` is a string that is not YYYY-MM-DD
    """
    if isinstance(day, str):
        day = date.fromisoformat(day[:10])
    return (day - timedelta(days=1)).isoformat()
