"""Hold-time rules for the active item."""

from __future__ import annotations

from .models import MediaKind, PlaylistItem

DEFAULT_IMAGE_HOLD_MS = 3000


def compute_hold_time(
    item: PlaylistItem, *, default_image_ms: int = DEFAULT_IMAGE_HOLD_MS
) -> int:
    """Return how long the item stays on screen, in milliseconds.

    An explicit duration applies to every media kind; the renderer loops a
    video until the timer fires. Without one, images (and unsupported media,
    which render as a placeholder) get the default hold, while a video returns
    0: it plays once and the renderer's finished event advances it.
    """
    if item.duration:
        return int(round(item.duration * 1000))
    if item.media.kind is MediaKind.VIDEO:
        return 0
    return default_image_ms


__all__ = ["DEFAULT_IMAGE_HOLD_MS", "compute_hold_time"]
