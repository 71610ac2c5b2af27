from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from signage_player.eligibility import is_eligible
from signage_player.models import (
    AbsoluteSchedule,
    PartialSchedule,
    RecurringSchedule,
    Weekday,
)

TZ = ZoneInfo("America/Chicago")


def _recurring(**overrides: object) -> RecurringSchedule:
    fields: dict[str, object] = {
        "start_date": date(2025, 1, 1),
        "end_date": date(2025, 1, 31),
        "daily_start": 9 * 60,
        "daily_end": 18 * 60,
        "days_of_week": frozenset({Weekday.MON, Weekday.WED}),
    }
    fields.update(overrides)
    return RecurringSchedule(**fields)


def test_absolute_window_is_start_inclusive_end_exclusive(make_item):
    start = datetime(2025, 1, 6, 9, 0, tzinfo=TZ)
    end = datetime(2025, 1, 6, 10, 0, tzinfo=TZ)
    item = make_item("a", schedule=AbsoluteSchedule(start=start, end=end))

    assert is_eligible(item, start)
    assert is_eligible(item, datetime(2025, 1, 6, 9, 59, 59, tzinfo=TZ))
    assert not is_eligible(item, end)
    assert not is_eligible(item, datetime(2025, 1, 6, 8, 59, 59, tzinfo=TZ))


def test_absolute_window_compares_instants_across_zones(make_item):
    start = datetime(2025, 1, 6, 15, 0, tzinfo=timezone.utc)
    end = datetime(2025, 1, 6, 16, 0, tzinfo=timezone.utc)
    item = make_item("a", schedule=AbsoluteSchedule(start=start, end=end))

    # 09:30 in Chicago is 15:30 UTC
    assert is_eligible(item, datetime(2025, 1, 6, 9, 30, tzinfo=TZ))
    assert not is_eligible(item, datetime(2025, 1, 6, 15, 30, tzinfo=TZ))


def test_naive_absolute_window_uses_display_zone(make_item):
    item = make_item(
        "a",
        schedule=AbsoluteSchedule(
            start=datetime(2025, 1, 6, 9, 0), end=datetime(2025, 1, 6, 10, 0)
        ),
    )

    assert is_eligible(item, datetime(2025, 1, 6, 9, 30, tzinfo=TZ))


def test_recurring_window_matches_weekday_and_time(make_item):
    item = make_item("a", schedule=_recurring())

    # 2025-01-06 is a Monday, 2025-01-07 a Tuesday
    assert is_eligible(item, datetime(2025, 1, 6, 9, 0, tzinfo=TZ))
    assert is_eligible(item, datetime(2025, 1, 8, 17, 59, 59, tzinfo=TZ))
    assert not is_eligible(item, datetime(2025, 1, 6, 18, 0, tzinfo=TZ))
    assert not is_eligible(item, datetime(2025, 1, 6, 8, 59, tzinfo=TZ))
    assert not is_eligible(item, datetime(2025, 1, 7, 12, 0, tzinfo=TZ))


@pytest.mark.parametrize(
    "now",
    [
        datetime(2024, 12, 30, 12, 0, tzinfo=TZ),
        datetime(2025, 2, 3, 12, 0, tzinfo=TZ),
    ],
)
def test_recurring_window_respects_date_range(make_item, now):
    item = make_item("a", schedule=_recurring())

    assert not is_eligible(item, now)


def test_recurring_date_range_is_inclusive(make_item):
    item = make_item(
        "a",
        schedule=_recurring(
            start_date=date(2025, 1, 6),
            end_date=date(2025, 1, 6),
        ),
    )

    assert is_eligible(item, datetime(2025, 1, 6, 12, 0, tzinfo=TZ))


def test_recurring_window_uses_display_wall_clock(make_item):
    item = make_item("a", schedule=_recurring())

    # 16:00 UTC on Monday is 10:00 in Chicago
    now = datetime(2025, 1, 6, 16, 0, tzinfo=timezone.utc).astimezone(TZ)
    assert is_eligible(item, now)


def test_overnight_window_never_matches(make_item):
    item = make_item(
        "a",
        schedule=_recurring(
            daily_start=22 * 60,
            daily_end=6 * 60,
            days_of_week=frozenset(Weekday),
        ),
    )

    assert not is_eligible(item, datetime(2025, 1, 6, 23, 0, tzinfo=TZ))
    assert not is_eligible(item, datetime(2025, 1, 7, 2, 0, tzinfo=TZ))


def test_window_ending_at_midnight_covers_last_minute(make_item):
    item = make_item(
        "a",
        schedule=_recurring(daily_start=0, daily_end=1440, days_of_week=frozenset(Weekday)),
    )

    assert is_eligible(item, datetime(2025, 1, 7, 23, 59, 59, tzinfo=TZ))
    assert is_eligible(item, datetime(2025, 1, 7, 0, 0, tzinfo=TZ))


def test_default_and_partial_items_are_never_eligible(make_item):
    now = datetime(2025, 1, 6, 12, 0, tzinfo=TZ)

    assert not is_eligible(make_item("default"), now)
    assert not is_eligible(
        make_item("partial", schedule=PartialSchedule(reason="missing end_time")), now
    )
