"""Pydantic models for playlist items, schedules, and playback snapshots."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    OTHER = "other"

    @classmethod
    def from_mime(cls, file_type: str | None) -> MediaKind:
        """Classify a backend MIME type such as ``video/mp4``."""
        value = (file_type or "").lower()
        if "image" in value:
            return cls.IMAGE
        if "video" in value:
            return cls.VIDEO
        return cls.OTHER


class Orientation(str, Enum):
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    AUTO = "auto"

    @classmethod
    def from_value(cls, value: str | None) -> Orientation:
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.AUTO


class Weekday(str, Enum):
    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"
    SUN = "Sun"

    @classmethod
    def from_date(cls, value: date) -> Weekday:
        return _WEEKDAYS[value.weekday()]

    @classmethod
    def parse(cls, token: str) -> Weekday | None:
        """Match ``Mon``, ``mon`` or ``Monday``; None for anything else."""
        prefix = token.strip()[:3].lower()
        for member in cls:
            if member.value.lower() == prefix:
                return member
        return None


_WEEKDAYS = list(Weekday)


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class MediaRef(FrozenModel):
    id: str
    name: str = ""
    path: str
    kind: MediaKind


class NoSchedule(FrozenModel):
    kind: Literal["none"] = "none"


class AbsoluteSchedule(FrozenModel):
    kind: Literal["absolute"] = "absolute"
    start: datetime
    end: datetime


class RecurringSchedule(FrozenModel):
    """Daily window in minutes since midnight, start inclusive, end exclusive."""

    kind: Literal["recurring"] = "recurring"
    start_date: date
    end_date: date
    daily_start: int = Field(ge=0, le=1440)
    daily_end: int = Field(ge=0, le=1440)
    days_of_week: frozenset[Weekday]


class PartialSchedule(FrozenModel):
    """Schedule fields were supplied but do not form a complete window."""

    kind: Literal["partial"] = "partial"
    reason: str


ScheduleSpec = Annotated[
    Union[NoSchedule, AbsoluteSchedule, RecurringSchedule, PartialSchedule],
    Field(discriminator="kind"),
]


class PlaylistItem(FrozenModel):
    id: str
    duration: float | None = None
    orientation: Orientation = Orientation.AUTO
    schedule: ScheduleSpec = Field(default_factory=NoSchedule)
    media: MediaRef

    @property
    def is_default(self) -> bool:
        return isinstance(self.schedule, NoSchedule)


Playlist = tuple[PlaylistItem, ...]


class PlaylistRow(BaseModel):
    """One row of the ``get_playlist_for_screen`` RPC response."""

    item_id: int | str
    duration: float | None = None
    start_time: str | None = None
    end_time: str | None = None
    schedule_start_date: str | None = None
    schedule_end_date: str | None = None
    daily_start_time: str | None = None
    daily_end_time: str | None = None
    days_of_week: str | None = None
    file_name: str | None = None
    file_path: str | None = None
    file_type: str | None = None
    orientation: str | None = None


class PlaybackState(BaseModel):
    status: Literal["loading", "error", "waiting", "playing"]
    item: PlaylistItem | None = None
    message: str | None = None
    generation: int = Field(default=0, ge=0)
    queue_ids: list[str] = Field(default_factory=list)


class PlaylistSnapshot(BaseModel):
    items: list[PlaylistItem] = Field(default_factory=list)
    active_queue: list[str] = Field(default_factory=list)
    cursor: int | None = None


__all__ = [
    "MediaKind",
    "Orientation",
    "Weekday",
    "MediaRef",
    "NoSchedule",
    "AbsoluteSchedule",
    "RecurringSchedule",
    "PartialSchedule",
    "ScheduleSpec",
    "PlaylistItem",
    "Playlist",
    "PlaylistRow",
    "PlaybackState",
    "PlaylistSnapshot",
]
