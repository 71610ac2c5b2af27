from __future__ import annotations

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from signage_player.eligibility import is_eligible
from signage_player.models import AbsoluteSchedule
from signage_player.timers import SystemClock, host_timezone


def test_host_timezone_reads_tz_variable(monkeypatch):
    monkeypatch.setenv("TZ", "America/Chicago")

    assert host_timezone() == ZoneInfo("America/Chicago")
    assert SystemClock().now().tzinfo == ZoneInfo("America/Chicago")


def test_unknown_host_timezone_falls_back_to_offset(monkeypatch):
    monkeypatch.setenv("TZ", "Mars/Olympus_Mons")

    tz = host_timezone()

    assert datetime.now(tz).utcoffset() is not None


def test_explicit_zone_wins_over_host(monkeypatch):
    monkeypatch.setenv("TZ", "America/Chicago")

    assert SystemClock(ZoneInfo("Europe/Berlin")).now().tzinfo == ZoneInfo("Europe/Berlin")


def test_naive_window_across_dst_change_uses_zone_rules(monkeypatch, make_item):
    monkeypatch.setenv("TZ", "America/Chicago")
    tz = host_timezone()
    # DST starts on 2025-03-09; the clock is read the day before.
    before_dst = datetime(2025, 3, 8, 12, 0, tzinfo=tz)
    item = make_item(
        "a",
        schedule=AbsoluteSchedule(
            start=datetime(2025, 3, 10, 9, 0), end=datetime(2025, 3, 10, 10, 0)
        ),
    )

    later = before_dst + timedelta(days=1, hours=21)

    assert is_eligible(item, later)
    assert later.utcoffset() == timedelta(hours=-5)
