"""Periodic pull of pairing status and playlist from the backend."""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

from .client import PAIRED_STATUS, TransportError
from .engine import PlayerEngine
from .playlist import parse_playlist
from .utils import logger


class PlaylistSource(Protocol):
    def fetch_status(self, screen_id: str) -> str:
        ...

    def fetch_playlist(self, screen_id: str) -> list[dict[str, Any]]:
        ...


class RefreshDriver:
    """Feeds the engine from the backend on a fixed cadence."""

    def __init__(
        self,
        source: PlaylistSource,
        screen_id: str,
        engine: PlayerEngine,
        *,
        interval: float = 5.0,
    ) -> None:
        self.source = source
        self.screen_id = screen_id
        self.engine = engine
        self.interval = interval

    async def refresh_once(self) -> bool:
        """Pull status and playlist once.

        Network calls run in a worker thread so the scheduling tick keeps its
        cadence; results are applied on the loop. Returns False once the
        backend reports the screen as unpaired.
        """
        try:
            status = await asyncio.to_thread(self.source.fetch_status, self.screen_id)
            if status != PAIRED_STATUS:
                logger.bind(screen_id=self.screen_id, status=status).warning(
                    "Screen status is not paired"
                )
                self.engine.request_exit()
                return False
            rows = await asyncio.to_thread(self.source.fetch_playlist, self.screen_id)
        except TransportError as exc:
            logger.bind(screen_id=self.screen_id).warning(
                "Refresh failed, retrying in {}s: {}", self.interval, exc
            )
            self.engine.record_refresh_error(str(exc))
            return True

        self.engine.clear_refresh_error()
        self.engine.apply_playlist(parse_playlist(rows))
        return True


__all__ = ["PlaylistSource", "RefreshDriver"]
