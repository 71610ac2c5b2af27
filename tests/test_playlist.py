"""Tests for converting backend rows into playlist items."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from signage_player.models import (
    AbsoluteSchedule,
    MediaKind,
    NoSchedule,
    Orientation,
    PartialSchedule,
    PlaylistRow,
    RecurringSchedule,
    Weekday,
)
from signage_player.playlist import (
    item_from_row,
    log_partial_schedules,
    parse_clock_minutes,
    parse_days_of_week,
    parse_playlist,
    parse_schedule,
)


def _row(**fields: object) -> dict[str, object]:
    base: dict[str, object] = {
        "item_id": 7,
        "file_name": "lobby.jpg",
        "file_path": "screens/lobby.jpg",
        "file_type": "image/jpeg",
    }
    base.update(fields)
    return base


RECURRING = {
    "schedule_start_date": "2025-01-01",
    "schedule_end_date": "2025-01-31",
    "daily_start_time": "09:00",
    "daily_end_time": "17:30:00",
    "days_of_week": "Mon,Wed,Fri",
}


@pytest.mark.parametrize(
    ("value", "expected"),
    [("00:00", 0), ("08:30", 510), ("08:30:59", 510), ("23:59:59", 1439), ("24:00", 1440)],
)
def test_parse_clock_minutes(value, expected):
    assert parse_clock_minutes(value) == expected


@pytest.mark.parametrize("value", ["7", "12:60", "24:01", "25:00", "noon"])
def test_parse_clock_minutes_rejects_invalid_values(value):
    with pytest.raises(ValueError):
        parse_clock_minutes(value)


def test_parse_days_of_week_accepts_mixed_separators_and_names():
    days = parse_days_of_week("Mon, wed Friday,,Funday")

    assert days == frozenset({Weekday.MON, Weekday.WED, Weekday.FRI})


def test_row_without_schedule_fields_is_default():
    row = PlaylistRow.model_validate(_row(start_time="  ", days_of_week=""))

    assert parse_schedule(row) == NoSchedule()


def test_complete_one_time_window():
    row = PlaylistRow.model_validate(
        _row(start_time="2025-01-06T09:00:00+00:00", end_time="2025-01-06T10:00:00+00:00")
    )

    schedule = parse_schedule(row)

    assert schedule == AbsoluteSchedule(
        start=datetime(2025, 1, 6, 9, tzinfo=timezone.utc),
        end=datetime(2025, 1, 6, 10, tzinfo=timezone.utc),
    )


def test_one_time_window_wins_over_recurring_fields():
    row = PlaylistRow.model_validate(
        _row(
            start_time="2025-01-06T09:00:00",
            end_time="2025-01-06T10:00:00",
            **RECURRING,
        )
    )

    assert isinstance(parse_schedule(row), AbsoluteSchedule)


def test_complete_recurring_window():
    row = PlaylistRow.model_validate(_row(**RECURRING))

    schedule = parse_schedule(row)

    assert schedule == RecurringSchedule(
        start_date=date(2025, 1, 1),
        end_date=date(2025, 1, 31),
        daily_start=540,
        daily_end=1050,
        days_of_week=frozenset({Weekday.MON, Weekday.WED, Weekday.FRI}),
    )


@pytest.mark.parametrize(
    "fields",
    [
        {"start_time": "2025-01-06T09:00:00"},
        {"end_time": "2025-01-06T09:00:00"},
        {key: value for key, value in RECURRING.items() if key != "days_of_week"},
        {**RECURRING, "days_of_week": "Funday"},
        {**RECURRING, "daily_start_time": "9am"},
        {"start_time": "not a date", "end_time": "2025-01-06T09:00:00"},
    ],
)
def test_incomplete_schedules_are_partial(fields):
    row = PlaylistRow.model_validate(_row(**fields))

    assert isinstance(parse_schedule(row), PartialSchedule)


def test_partial_reason_names_missing_fields():
    row = PlaylistRow.model_validate(_row(schedule_start_date="2025-01-01"))

    schedule = parse_schedule(row)

    assert isinstance(schedule, PartialSchedule)
    assert "days_of_week" in schedule.reason
    assert "schedule_start_date" not in schedule.reason


def test_item_from_row_normalizes_fields():
    row = PlaylistRow.model_validate(
        _row(duration=0, orientation="Portrait", file_type="video/mp4")
    )

    item = item_from_row(row)

    assert item.id == "7"
    assert item.duration is None
    assert item.orientation is Orientation.PORTRAIT
    assert item.media.kind is MediaKind.VIDEO
    assert item.media.path == "screens/lobby.jpg"
    assert item.is_default


def test_item_from_row_handles_unknown_values():
    row = PlaylistRow.model_validate(
        _row(duration=-4, orientation="sideways", file_type="application/pdf", file_path=None)
    )

    item = item_from_row(row)

    assert item.duration is None
    assert item.orientation is Orientation.AUTO
    assert item.media.kind is MediaKind.OTHER
    assert item.media.path == ""


def test_parse_playlist_skips_invalid_rows_and_keeps_order():
    playlist = parse_playlist(
        [
            _row(item_id="b", duration=8),
            {"file_name": "no id"},
            _row(item_id="a"),
        ]
    )

    assert [item.id for item in playlist] == ["b", "a"]
    assert playlist[0].duration == 8


def test_log_partial_schedules_counts_excluded_items():
    playlist = parse_playlist(
        [_row(item_id=1), _row(item_id=2, start_time="2025-01-06T09:00:00"), _row(item_id=3)]
    )

    assert log_partial_schedules(playlist) == 1
