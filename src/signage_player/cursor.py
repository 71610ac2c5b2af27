"""Playback cursor over the active queue."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from .models import PlaylistItem


class CursorState(str, Enum):
    EMPTY = "empty"
    PLAYING = "playing"


class PlaybackCursor:
    """Index into the active queue.

    Invariant: ``0 <= index < len(queue)`` whenever the queue is non-empty.
    """

    def __init__(self) -> None:
        self._queue: tuple[PlaylistItem, ...] = ()
        self._index = 0

    @property
    def state(self) -> CursorState:
        return CursorState.PLAYING if self._queue else CursorState.EMPTY

    @property
    def index(self) -> int | None:
        return self._index if self._queue else None

    @property
    def queue(self) -> tuple[PlaylistItem, ...]:
        return self._queue

    @property
    def current(self) -> PlaylistItem | None:
        if not self._queue:
            return None
        return self._queue[self._index]

    def reset(self, queue: Sequence[PlaylistItem]) -> None:
        """Mode switch: adopt a new queue and start from its first item."""
        self._queue = tuple(queue)
        self._index = 0

    def refresh(self, queue: Sequence[PlaylistItem]) -> bool:
        """Adopt updated items for an unchanged queue identity.

        Returns True when the current index fell out of bounds and was clamped
        to 0, which callers treat as an implicit mode switch.
        """
        self._queue = tuple(queue)
        if self._queue and self._index >= len(self._queue):
            self._index = 0
            return True
        if not self._queue:
            self._index = 0
        return False

    def advance(self) -> PlaylistItem | None:
        """Move to the next item, wrapping around; a no-op on an empty queue."""
        if not self._queue:
            return None
        self._index = (self._index + 1) % len(self._queue)
        return self._queue[self._index]


__all__ = ["CursorState", "PlaybackCursor"]
