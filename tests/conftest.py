from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from signage_player.config import Settings
from signage_player.engine import PlayerEngine
from signage_player.events import EventAction, EventLog
from signage_player.models import (
    MediaKind,
    MediaRef,
    NoSchedule,
    Orientation,
    PlaylistItem,
)
from signage_player.orientation import OrientationDirective

TZ = ZoneInfo("America/Chicago")


class ManualClock:
    def __init__(self, now: datetime) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


class ManualTimer:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimers:
    def __init__(self) -> None:
        self.created: list[ManualTimer] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(delay, callback)
        self.created.append(timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        return [t for t in self.created if not t.cancelled and not t.fired]

    def fire_next(self) -> ManualTimer:
        timer = self.pending[0]
        timer.fired = True
        timer.callback()
        return timer


class CountingEventLog(EventLog):
    def count(self, action: EventAction) -> int:
        return sum(1 for event in self.list_recent(500) if event.action == action)


class RecordingRenderer:
    def __init__(self) -> None:
        self.shown: list[tuple[str | None, int]] = []

    def show(self, item: PlaylistItem | None, generation: int) -> None:
        self.shown.append((item.id if item else None, generation))


class RecordingOrientationLock:
    def __init__(self) -> None:
        self.directives: list[OrientationDirective] = []

    def lock(self, directive: OrientationDirective) -> None:
        self.directives.append(directive)

    def unlock(self) -> None:
        self.directives.append(OrientationDirective.UNLOCK)


def _make_item(
    item_id: str,
    *,
    kind: MediaKind = MediaKind.IMAGE,
    duration: float | None = None,
    orientation: Orientation = Orientation.AUTO,
    schedule=None,
) -> PlaylistItem:
    return PlaylistItem(
        id=item_id,
        duration=duration,
        orientation=orientation,
        schedule=schedule or NoSchedule(),
        media=MediaRef(id=item_id, name=item_id, path=f"media/{item_id}", kind=kind),
    )


@pytest.fixture
def make_item():
    return _make_item


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(datetime(2025, 1, 6, 9, 0, tzinfo=TZ))


@pytest.fixture
def timers() -> ManualTimers:
    return ManualTimers()


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def orientation_lock() -> RecordingOrientationLock:
    return RecordingOrientationLock()


@pytest.fixture
def exits() -> list[bool]:
    return []


@pytest.fixture
def engine(clock, timers, renderer, orientation_lock, exits) -> PlayerEngine:
    return PlayerEngine(
        clock=clock,
        timers=timers,
        renderer=renderer,
        orientation_lock=orientation_lock,
        on_exit=lambda: exits.append(True),
        events=CountingEventLog(),
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        api_url="https://cms.example",
        api_key="anon-key",
        verify_ssl=True,
        screen_id=None,
        state_path=tmp_path / "screen.json",
        refresh_interval=5.0,
        tick_interval=1.0,
        default_image_seconds=3.0,
        timezone="America/Chicago",
        api_host="127.0.0.1",
        api_port=8080,
        request_timeout=10.0,
    )
