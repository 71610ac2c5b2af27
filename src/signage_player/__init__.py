"""Public package interface for the signage player."""

from __future__ import annotations

from .cli import main as _cli_main
from .client import SignageClient, TransportError
from .config import Settings, get_settings
from .cursor import CursorState, PlaybackCursor
from .eligibility import is_eligible
from .engine import PlayerEngine
from .models import (
    AbsoluteSchedule,
    MediaKind,
    MediaRef,
    NoSchedule,
    Orientation,
    PartialSchedule,
    PlaybackState,
    PlaylistItem,
    RecurringSchedule,
    Weekday,
)
from .orientation import OrientationDirective, derive_orientation
from .playlist import parse_playlist
from .queue_builder import QueueBuilder, build_queue
from .refresh import RefreshDriver
from .timing import compute_hold_time

__all__ = [
    "Settings",
    "get_settings",
    "SignageClient",
    "TransportError",
    "PlayerEngine",
    "RefreshDriver",
    "PlaybackCursor",
    "CursorState",
    "QueueBuilder",
    "build_queue",
    "is_eligible",
    "compute_hold_time",
    "OrientationDirective",
    "derive_orientation",
    "parse_playlist",
    "AbsoluteSchedule",
    "MediaKind",
    "MediaRef",
    "NoSchedule",
    "Orientation",
    "PartialSchedule",
    "PlaybackState",
    "PlaylistItem",
    "RecurringSchedule",
    "Weekday",
    "main",
]


def main(argv: None | list[str] = None) -> None:
    """Entrypoint for the command-line interface."""
    _cli_main(argv)
