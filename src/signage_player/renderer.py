"""Renderer interface consumed by the player engine."""

from __future__ import annotations

from typing import Protocol

from .models import MediaKind, PlaylistItem
from .utils import logger


class Renderer(Protocol):
    """Draws the active item.

    ``generation`` changes on every cursor transition, including a restart of
    the same item, so a renderer keyed on it reloads the surface. When the
    item is a video played without an explicit duration, the renderer reports
    the end of the playthrough through ``PlayerEngine.on_media_end``.
    """

    def show(self, item: PlaylistItem | None, generation: int) -> None:
        ...


class LoggingRenderer:
    """Headless renderer that records what would be on screen."""

    def __init__(self) -> None:
        self.item: PlaylistItem | None = None
        self.generation = 0

    def show(self, item: PlaylistItem | None, generation: int) -> None:
        self.item = item
        self.generation = generation
        if item is None:
            logger.bind(generation=generation).info("Screen cleared; waiting for content")
            return
        if item.media.kind is MediaKind.OTHER:
            logger.bind(item_id=item.id, generation=generation).warning(
                "Unsupported media; showing placeholder"
            )
            return
        logger.bind(
            item_id=item.id,
            kind=item.media.kind.value,
            generation=generation,
        ).info("Rendering {}", item.media.name or item.media.path)


__all__ = ["Renderer", "LoggingRenderer"]
