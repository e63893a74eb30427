"""Execution readiness tests"""
from datetime import datetime, time
from types import SimpleNamespace
import pytest

from pocket_trader.config import settings
from pocket_trader.services.autotrade import (
    broker_now, resolve_entry_datetime, should_execute_signal
)


def pending(entry_time=None):
    return SimpleNamespace(entry_time=entry_time)


def test_signal_without_entry_time_is_always_ready():
    assert should_execute_signal(pending(), datetime(2026, 3, 2, 3, 17))


@pytest.mark.parametrize(
    "now, ready",
    [
        (datetime(2026, 3, 2, 9, 59, 0), True),
        (datetime(2026, 3, 2, 10, 1, 0), True),
        (datetime(2026, 3, 2, 10, 1, 1), False),
        (datetime(2026, 3, 2, 9, 58, 59), False),
    ],
)
def test_sixty_second_window(now, ready):
    assert should_execute_signal(pending(time(10, 0)), now) is ready


def test_schedule_at_ten_thirty_seconds():
    now = datetime(2026, 3, 2, 10, 0, 30)
    signals = {
        "A": pending(time(10, 0)),
        "B": pending(time(10, 5)),
        "C": pending(),
    }
    
    sent = sorted(name for name, signal in signals.items() if should_execute_signal(signal, now))
    
    assert sent == ["A", "C"]


def test_entry_time_just_before_midnight_resolves_to_yesterday():
    now = datetime(2026, 3, 2, 0, 0, 10)
    
    assert resolve_entry_datetime(time(23, 59, 30), now) == datetime(2026, 3, 1, 23, 59, 30)
    assert should_execute_signal(pending(time(23, 59, 30)), now)


def test_entry_time_just_after_midnight_resolves_to_tomorrow():
    now = datetime(2026, 3, 1, 23, 59, 50)
    
    assert resolve_entry_datetime(time(0, 0, 20), now) == datetime(2026, 3, 2, 0, 0, 20)


def test_full_datetime_entry_is_compared_directly():
    now = datetime(2026, 3, 2, 10, 0, 30)
    
    assert should_execute_signal(pending(datetime(2026, 3, 2, 10, 0)), now)
    assert not should_execute_signal(pending(datetime(2026, 3, 1, 10, 0)), now)


def test_custom_window():
    now = datetime(2026, 3, 2, 10, 0, 30)
    
    assert not should_execute_signal(pending(time(10, 0)), now, window_seconds=10)


def test_broker_now_applies_offset(monkeypatch):
    monkeypatch.setattr(settings, "broker_utc_offset_hours", -3)
    
    assert broker_now(datetime(2026, 3, 2, 13, 0)) == datetime(2026, 3, 2, 10, 0)
