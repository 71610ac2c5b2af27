"""Clock and single-shot timer abstractions used by the player engine."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .utils import logger


class Clock(Protocol):
    def now(self) -> datetime:
        ...


def host_timezone() -> tzinfo:
    """Return the host's IANA zone from ``TZ`` or ``/etc/localtime``.

    Falls back to the current fixed UTC offset when no zone name can be
    resolved; naive schedule windows across a DST change are then off by the
    DST delta.
    """
    name = os.environ.get("TZ", "").lstrip(":")
    if not name:
        localtime = Path("/etc/localtime")
        if localtime.is_symlink():
            _, found, name = str(localtime.resolve()).partition("zoneinfo/")
            if not found:
                name = ""
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.bind(timezone=name).warning("Unknown host timezone")
    logger.warning("Host timezone name unavailable; using a fixed UTC offset")
    return datetime.now().astimezone().tzinfo


class SystemClock:
    """Wall clock in the display timezone (host zone when None)."""

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz or host_timezone()

    def now(self) -> datetime:
        return datetime.now(self._tz)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Timers(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class LoopTimers:
    """Timers backed by the running asyncio loop."""

    def call_later(
        self, delay: float, callback: Callable[[], None]
    ) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, callback)


__all__ = ["Clock", "SystemClock", "host_timezone", "TimerHandle", "Timers", "LoopTimers"]
