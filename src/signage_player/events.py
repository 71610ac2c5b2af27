"""In-memory log of playback events."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any, Literal

EventAction = Literal[
    "mode_switch",
    "advance",
    "playlist_updated",
    "refresh_failed",
    "refresh_recovered",
    "exit_requested",
]


@dataclass(frozen=True)
class PlaybackEvent:
    """A recorded playback event."""

    id: int | None
    timestamp: datetime
    action: EventAction
    item_id: str | None
    metadata: dict[str, Any] = field(default_factory=dict)


class EventLog:
    """Bounded event store; the oldest entries drop off first."""

    def __init__(self, maxlen: int = 500) -> None:
        self._events: deque[PlaybackEvent] = deque(maxlen=maxlen)
        self._counter = 0

    def record(
        self,
        action: EventAction,
        *,
        item_id: str | None = None,
        metadata: dict[str, Any] | None = None,
        timestamp: datetime | None = None,
    ) -> PlaybackEvent:
        self._counter += 1
        event = PlaybackEvent(
            id=None,
            timestamp=(timestamp or datetime.now(tz=UTC)).astimezone(),
            action=action,
            item_id=item_id,
            metadata=metadata or {},
        )
        stored = replace(event, id=self._counter)
        self._events.append(stored)
        return stored

    def list_recent(self, limit: int = 100) -> list[PlaybackEvent]:
        """Return the most recent events, newest first."""
        if limit <= 0:
            return []
        return list(reversed(list(self._events)[-limit:]))


__all__ = ["EventAction", "PlaybackEvent", "EventLog"]
