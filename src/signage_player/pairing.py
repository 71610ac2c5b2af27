"""Persist the paired screen id between restarts."""

from __future__ import annotations

import json
from pathlib import Path

from .utils import logger


class ScreenIdStore:
    """JSON file holding the id of the screen this device is paired as."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.bind(path=str(self.path)).warning("Unreadable screen id file: {}", exc)
            return None
        screen_id = data.get("screen_id") if isinstance(data, dict) else None
        return str(screen_id) if screen_id else None

    def save(self, screen_id: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps({"screen_id": screen_id}, indent=2), encoding="utf-8"
        )
        logger.bind(path=str(self.path), screen_id=screen_id).info("Saved screen id")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.bind(path=str(self.path)).info("Cleared screen id")


__all__ = ["ScreenIdStore"]
