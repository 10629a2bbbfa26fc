"""
Time helpers for trade timestamps and trading-day boundaries.
"""

from datetime import date, datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(ts: datetime) -> datetime:
    """
    Normalize a timestamp to aware UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def trading_day(ts: Optional[datetime] = None) -> date:
    """
    Trading day a timestamp belongs to.

    Args:
        ts: Timestamp to classify, defaults to now

    Returns:
        UTC calendar date
    """
    if ts is None:
        ts = utc_now()
    return ensure_utc(ts).date()


def is_same_trading_day(ts: datetime, reference: Optional[datetime] = None) -> bool:
    """Check whether ``ts`` falls on the same trading day as ``reference``."""
    return trading_day(ts) == trading_day(reference)


def format_timestamp(ts: datetime) -> str:
    """ISO8601 representation used for logging and persistence."""
    return ensure_utc(ts).isoformat()
