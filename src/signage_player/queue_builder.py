"""Build the active playback queue from the full playlist."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from .eligibility import is_eligible
from .models import PlaylistItem

QueueIdentity = tuple[str, ...]


def queue_identity(queue: Sequence[PlaylistItem]) -> QueueIdentity:
    return tuple(item.id for item in queue)


def build_queue(
    playlist: Sequence[PlaylistItem], now: datetime
) -> tuple[PlaylistItem, ...]:
    """Return the items that should rotate right now, in playlist order.

    Items scheduled for ``now`` take priority; when none are, the default
    (unscheduled) items play. Items with partial schedules belong to neither
    group.
    """
    scheduled_now = tuple(item for item in playlist if is_eligible(item, now))
    if scheduled_now:
        return scheduled_now
    return tuple(item for item in playlist if item.is_default)


@dataclass(frozen=True)
class QueueUpdate:
    queue: tuple[PlaylistItem, ...]
    identity: QueueIdentity
    mode_switch: bool


@dataclass
class QueueBuilder:
    """Rebuilds the queue each tick and flags changes in its ordered identity."""

    _identity: QueueIdentity | None = field(default=None, init=False)

    @property
    def identity(self) -> QueueIdentity | None:
        return self._identity

    def update(self, playlist: Sequence[PlaylistItem], now: datetime) -> QueueUpdate:
        queue = build_queue(playlist, now)
        identity = queue_identity(queue)
        mode_switch = identity != self._identity
        self._identity = identity
        return QueueUpdate(queue=queue, identity=identity, mode_switch=mode_switch)


__all__ = ["QueueIdentity", "QueueUpdate", "QueueBuilder", "build_queue", "queue_identity"]
