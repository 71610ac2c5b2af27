"""Convert backend playlist rows into typed playlist items."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from loguru import logger
from pydantic import ValidationError

from .models import (
    AbsoluteSchedule,
    MediaKind,
    MediaRef,
    NoSchedule,
    Orientation,
    PartialSchedule,
    Playlist,
    PlaylistItem,
    PlaylistRow,
    RecurringSchedule,
    ScheduleSpec,
    Weekday,
)

RECURRING_FIELDS = (
    "schedule_start_date",
    "schedule_end_date",
    "daily_start_time",
    "daily_end_time",
    "days_of_week",
)

MINUTES_PER_DAY = 24 * 60

_DAY_SEPARATOR = re.compile(r"[,\s]+")


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def parse_clock_minutes(value: str) -> int:
    """Return minutes since midnight for ``HH:mm`` or ``HH:mm:ss``; seconds are floored."""
    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"invalid time of day: {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    seconds = float(parts[2]) if len(parts) == 3 else 0.0
    if not 0 <= minutes < 60 or not 0 <= seconds < 60:
        raise ValueError(f"invalid time of day: {value!r}")
    total = hours * 60 + minutes
    if not 0 <= total <= MINUTES_PER_DAY or (total == MINUTES_PER_DAY and seconds):
        raise ValueError(f"invalid time of day: {value!r}")
    return total


def parse_days_of_week(value: str, *, item_id: str | None = None) -> frozenset[Weekday]:
    days: set[Weekday] = set()
    for token in _DAY_SEPARATOR.split(value.strip()):
        if not token:
            continue
        day = Weekday.parse(token)
        if day is None:
            logger.bind(item_id=item_id, token=token).warning(
                "Ignoring unknown weekday in schedule"
            )
            continue
        days.add(day)
    return frozenset(days)


def _parse_recurring(row: PlaylistRow, item_id: str) -> ScheduleSpec:
    try:
        start_date = date.fromisoformat(row.schedule_start_date.strip())
        end_date = date.fromisoformat(row.schedule_end_date.strip())
        daily_start = parse_clock_minutes(row.daily_start_time)
        daily_end = parse_clock_minutes(row.daily_end_time)
    except ValueError as exc:
        return PartialSchedule(reason=f"unparseable recurring schedule: {exc}")

    days = parse_days_of_week(row.days_of_week, item_id=item_id)
    if not days:
        return PartialSchedule(reason="days_of_week lists no valid weekday")

    return RecurringSchedule(
        start_date=start_date,
        end_date=end_date,
        daily_start=daily_start,
        daily_end=daily_end,
        days_of_week=days,
    )


def parse_schedule(row: PlaylistRow) -> ScheduleSpec:
    """Classify the schedule columns of a row.

    A complete one-time window wins over recurring fields. A row with no
    schedule columns is a default item. Any other combination is partial and
    keeps the item off the screen until the record is fixed.
    """
    item_id = str(row.item_id)
    has_start = not _blank(row.start_time)
    has_end = not _blank(row.end_time)
    present = [name for name in RECURRING_FIELDS if not _blank(getattr(row, name))]

    if has_start and has_end:
        try:
            start = datetime.fromisoformat(row.start_time.strip())
            end = datetime.fromisoformat(row.end_time.strip())
        except ValueError as exc:
            return PartialSchedule(reason=f"unparseable one-time window: {exc}")
        if present:
            logger.bind(item_id=item_id).debug(
                "Item has one-time and recurring fields; using the one-time window"
            )
        return AbsoluteSchedule(start=start, end=end)

    if len(present) == len(RECURRING_FIELDS):
        return _parse_recurring(row, item_id)

    if not present and not has_start and not has_end:
        return NoSchedule()

    missing = [name for name in RECURRING_FIELDS if name not in present]
    if has_start or has_end:
        missing.append("end_time" if has_start else "start_time")
    return PartialSchedule(reason="missing " + ", ".join(missing))


def item_from_row(row: PlaylistRow) -> PlaylistItem:
    item_id = str(row.item_id)
    duration = row.duration if row.duration and row.duration > 0 else None
    return PlaylistItem(
        id=item_id,
        duration=duration,
        orientation=Orientation.from_value(row.orientation),
        schedule=parse_schedule(row),
        media=MediaRef(
            id=item_id,
            name=row.file_name or "",
            path=row.file_path or "",
            kind=MediaKind.from_mime(row.file_type),
        ),
    )


def parse_playlist(rows: Iterable[Mapping[str, Any]]) -> Playlist:
    """Build a playlist from raw RPC rows, skipping rows that fail validation."""
    items: list[PlaylistItem] = []
    for position, raw in enumerate(rows):
        try:
            row = PlaylistRow.model_validate(raw)
        except ValidationError as exc:
            logger.bind(position=position, errors=exc.error_count()).warning(
                "Skipping invalid playlist row: {}", exc.errors()[0]["msg"]
            )
            continue
        items.append(item_from_row(row))
    return tuple(items)


def log_partial_schedules(playlist: Playlist) -> int:
    """Warn about items excluded because of partial schedules; return their count."""
    count = 0
    for item in playlist:
        if isinstance(item.schedule, PartialSchedule):
            count += 1
            logger.bind(item_id=item.id, reason=item.schedule.reason).warning(
                "Item excluded from playback: incomplete schedule"
            )
        elif item.media.kind is MediaKind.OTHER:
            logger.bind(item_id=item.id, path=item.media.path).debug(
                "Unsupported media kind; renderer will show a placeholder"
            )
    return count


__all__ = [
    "RECURRING_FIELDS",
    "MINUTES_PER_DAY",
    "parse_clock_minutes",
    "parse_days_of_week",
    "parse_schedule",
    "item_from_row",
    "parse_playlist",
    "log_partial_schedules",
]
