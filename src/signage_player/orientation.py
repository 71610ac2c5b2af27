"""Screen orientation directives derived from the active item."""

from __future__ import annotations

from enum import Enum
from typing import Protocol

from .models import Orientation, PlaylistItem
from .utils import logger


class OrientationDirective(str, Enum):
    LOCK_LANDSCAPE = "lock_landscape"
    LOCK_PORTRAIT = "lock_portrait"
    UNLOCK = "unlock"


_DIRECTIVES = {
    Orientation.LANDSCAPE: OrientationDirective.LOCK_LANDSCAPE,
    Orientation.PORTRAIT: OrientationDirective.LOCK_PORTRAIT,
}


def derive_orientation(item: PlaylistItem | None) -> OrientationDirective:
    if item is None:
        return OrientationDirective.UNLOCK
    return _DIRECTIVES.get(item.orientation, OrientationDirective.UNLOCK)


class OrientationLock(Protocol):
    """Host hook that pins or releases the display orientation."""

    def lock(self, directive: OrientationDirective) -> None:
        ...

    def unlock(self) -> None:
        ...


class LoggingOrientationLock:
    """Orientation hook for hosts without a rotation API; records the directive."""

    def __init__(self) -> None:
        self.current = OrientationDirective.UNLOCK

    def lock(self, directive: OrientationDirective) -> None:
        if directive is not self.current:
            logger.bind(directive=directive.value).info("Orientation locked")
        self.current = directive

    def unlock(self) -> None:
        if self.current is not OrientationDirective.UNLOCK:
            logger.info("Orientation unlocked")
        self.current = OrientationDirective.UNLOCK


def apply_orientation(lock: OrientationLock, item: PlaylistItem | None) -> OrientationDirective:
    """Issue the directive for ``item``; repeating the same directive is harmless."""
    directive = derive_orientation(item)
    if directive is OrientationDirective.UNLOCK:
        lock.unlock()
    else:
        lock.lock(directive)
    return directive


__all__ = [
    "OrientationDirective",
    "OrientationLock",
    "LoggingOrientationLock",
    "derive_orientation",
    "apply_orientation",
]
