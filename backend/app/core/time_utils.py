"""
Time helpers: one source of truth for "now" across models and services.
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def start_of_today() -> datetime:
    return utc_now().replace(hour=0, minute=0, second=0, microsecond=0)


def days_ago(days: int) -> datetime:
    return utc_now() - timedelta(days=days)


def as_utc(value: datetime) -> datetime:
    """Same instant expressed in UTC; naive values are taken to be UTC already.

    SQLite keeps only the wall-clock part of a timestamp, so everything
    written to the store must share one offset.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
