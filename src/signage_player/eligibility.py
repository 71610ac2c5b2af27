"""Decide whether a playlist item is scheduled to play at a given instant."""

from __future__ import annotations

from datetime import datetime, tzinfo

from .models import AbsoluteSchedule, PlaylistItem, RecurringSchedule, Weekday
from .timers import host_timezone


def _ensure_timezone(dt: datetime, tz: tzinfo | None) -> datetime:
    """Attach a timezone to naive datetimes or convert to the provided zone."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def _absolute_active(schedule: AbsoluteSchedule, now: datetime) -> bool:
    start = _ensure_timezone(schedule.start, now.tzinfo)
    end = _ensure_timezone(schedule.end, now.tzinfo)
    return start <= now < end


def _recurring_active(schedule: RecurringSchedule, now: datetime) -> bool:
    today = now.date()
    if today < schedule.start_date or today > schedule.end_date:
        return False
    if Weekday.from_date(today) not in schedule.days_of_week:
        return False
    minute_of_day = now.hour * 60 + now.minute
    return schedule.daily_start <= minute_of_day < schedule.daily_end


def is_eligible(item: PlaylistItem, now: datetime) -> bool:
    """Return True when the item's schedule covers ``now``.

    Default items and items with partial schedules are never eligible here;
    default items reach the screen through the fallback partition instead.
    ``now`` should be timezone aware and expressed in the display's zone, since
    recurring windows are evaluated against its wall-clock fields.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=host_timezone())
    schedule = item.schedule
    if isinstance(schedule, AbsoluteSchedule):
        return _absolute_active(schedule, now)
    if isinstance(schedule, RecurringSchedule):
        return _recurring_active(schedule, now)
    return False


__all__ = ["is_eligible"]
