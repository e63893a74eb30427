"""Execution readiness of pending signals"""
from datetime import datetime, time, timedelta
from typing import Any, Optional

from pocket_trader.config import settings


def broker_now(utc_now: Optional[datetime] = None) -> datetime:
    """Current wall-clock time on the broker's server (naive)"""
    utc_now = utc_now or datetime.utcnow()
    return utc_now + timedelta(hours=settings.broker_utc_offset_hours)


def resolve_entry_datetime(entry_time: time, now: datetime) -> datetime:
    """
    Place a time-of-day entry on the calendar day closest to ``now``

    A 23:59:30 entry checked at 00:00:10 resolves to yesterday, not to
    almost a day ahead.
    """
    candidates = [
        datetime.combine(now.date() + timedelta(days=offset), entry_time)
        for offset in (-1, 0, 1)
    ]
    return min(candidates, key=lambda candidate: abs((candidate - now).total_seconds()))


def should_execute_signal(signal: Any, now: datetime, window_seconds: Optional[int] = None) -> bool:
    """
    Whether a pending signal should be sent to the broker tab now

    Args:
        signal: object with an ``entry_time`` attribute (time, datetime or None)
        now: broker-local current time
        window_seconds: allowed distance from the entry time

    Returns:
        True without an entry time, otherwise True iff |now - entry| <= window
    """
    if window_seconds is None:
        window_seconds = settings.autotrade_entry_window_seconds

    entry_time = getattr(signal, "entry_time", None)
    if entry_time is None:
        return True

    if isinstance(entry_time, datetime):
        entry_at = entry_time
    else:
        entry_at = resolve_entry_datetime(entry_time, now)

    return abs((now - entry_at).total_seconds()) <= window_seconds
