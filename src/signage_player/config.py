"""Configuration helpers for the signage player."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

from .utils import parse_bool

DEFAULT_STATE_PATH = "~/.signage-player/screen.json"
DEFAULT_REFRESH_SECONDS = 5.0
DEFAULT_TICK_SECONDS = 1.0
DEFAULT_IMAGE_SECONDS = 3.0


def _candidate_env_paths(start: Path) -> Iterable[Path]:
    """Yield plausible .env locations from closest to farthest."""
    override = os.environ.get("SIGNAGE_ENV_FILE")
    if override:
        yield Path(override).expanduser()

    for directory in (start, *start.parents):
        yield directory / ".env"


def _discover_env_path() -> Path | None:
    """Return the first .env path that exists, if any."""
    package_dir = Path(__file__).resolve().parent
    for candidate in _candidate_env_paths(package_dir):
        if candidate.exists():
            return candidate
    return None


def _load_env_file(path: Path | None = None) -> None:
    """Populate os.environ with values from a .env file if present."""
    env_path = path or _discover_env_path()
    if env_path is None or not env_path.exists():
        logger.debug("No .env file discovered for configuration")
        return

    logger.bind(path=str(env_path)).info("Loading environment variables from .env")
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        # Existing environment variables win over the file.
        os.environ.setdefault(key, value)


_load_env_file()


def _required(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise RuntimeError(f"{name} is not set; add it to .env or the environment.")
    return value


def _positive_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}.") from exc
    if value <= 0:
        raise RuntimeError(f"{name} must be greater than zero, got {raw!r}.")
    return value


@dataclass(frozen=True)
class Settings:
    """Typed accessors for configuration derived from the environment."""

    api_url: str
    api_key: str
    verify_ssl: bool
    screen_id: str | None
    state_path: Path
    refresh_interval: float
    tick_interval: float
    default_image_seconds: float
    timezone: str | None
    api_host: str
    api_port: int
    request_timeout: float

    @classmethod
    def from_env(cls) -> Settings:
        api_url = _required("SIGNAGE_API_URL")
        api_key = _required("SIGNAGE_API_KEY")

        verify_ssl_env = os.environ.get("SIGNAGE_VERIFY_SSL")
        verify_ssl = parse_bool(verify_ssl_env) if verify_ssl_env is not None else True

        timezone = os.environ.get("SIGNAGE_TIMEZONE") or None
        if timezone is not None:
            try:
                ZoneInfo(timezone)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise RuntimeError(f"SIGNAGE_TIMEZONE {timezone!r} is unknown.") from exc

        try:
            api_port = int(os.environ.get("SIGNAGE_API_PORT", "8080"))
        except ValueError as exc:
            raise RuntimeError("SIGNAGE_API_PORT must be an integer.") from exc

        settings = cls(
            api_url=api_url,
            api_key=api_key,
            verify_ssl=verify_ssl,
            screen_id=os.environ.get("SIGNAGE_SCREEN_ID") or None,
            state_path=Path(
                os.environ.get("SIGNAGE_STATE_FILE", DEFAULT_STATE_PATH)
            ).expanduser(),
            refresh_interval=_positive_float(
                "SIGNAGE_REFRESH_SECONDS", DEFAULT_REFRESH_SECONDS
            ),
            tick_interval=_positive_float("SIGNAGE_TICK_SECONDS", DEFAULT_TICK_SECONDS),
            default_image_seconds=_positive_float(
                "SIGNAGE_DEFAULT_IMAGE_SECONDS", DEFAULT_IMAGE_SECONDS
            ),
            timezone=timezone,
            api_host=os.environ.get("SIGNAGE_API_HOST", "127.0.0.1"),
            api_port=api_port,
            request_timeout=_positive_float("SIGNAGE_REQUEST_TIMEOUT", 10.0),
        )

        logger.bind(
            api_url=settings.api_url,
            verify_ssl=settings.verify_ssl,
            refresh_interval=settings.refresh_interval,
            timezone=settings.timezone or "local",
        ).info("Configuration loaded from environment")
        return settings

    def tzinfo(self) -> ZoneInfo | None:
        """Return the display timezone, or None for the host's local zone."""
        return ZoneInfo(self.timezone) if self.timezone else None


@lru_cache
def get_settings() -> Settings:
    """Return cached settings."""
    return Settings.from_env()


__all__ = ["Settings", "get_settings"]
