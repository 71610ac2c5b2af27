"""Command-line entry points for pairing, inspecting and running the player."""

from __future__ import annotations

import argparse
import asyncio
import json
from collections.abc import Iterable
from contextlib import suppress
from datetime import datetime

import uvicorn

from .api import create_app
from .client import SignageClient, TransportError
from .config import Settings, get_settings
from .eligibility import is_eligible
from .engine import PlayerEngine
from .pairing import ScreenIdStore
from .playlist import parse_playlist
from .queue_builder import build_queue
from .refresh import RefreshDriver
from .timers import SystemClock, host_timezone
from .timing import compute_hold_time
from .utils import configure_logging, logger

configure_logging()


def _create_client(settings: Settings) -> SignageClient:
    return SignageClient(
        settings.api_url,
        api_key=settings.api_key,
        verify_ssl=settings.verify_ssl,
        timeout=settings.request_timeout,
    )


def _resolve_screen_id(settings: Settings, store: ScreenIdStore) -> str:
    screen_id = settings.screen_id or store.load()
    if not screen_id:
        logger.error("No paired screen id available")
        raise SystemExit("Screen is not paired; run 'signage-player pair CODE' first.")
    return screen_id


def _dump_json(data: object, *, print_fn=print) -> None:
    formatted = json.dumps(data, indent=2, sort_keys=True, default=str)
    print_fn(formatted)


def pair(code: str, *, settings: Settings | None = None, print_fn=print) -> str:
    """Redeem a pairing code and remember the screen id."""
    settings = settings or get_settings()
    if not code.strip():
        raise SystemExit("Pairing code is required.")

    client = _create_client(settings)
    try:
        screen_id = client.pair_screen(code)
    except TransportError as exc:
        logger.exception("Pairing request failed")
        raise SystemExit(f"Pairing error: {exc}") from exc
    finally:
        client.close()

    if screen_id is None:
        logger.bind(code=code.strip().upper()).warning("Pairing code rejected")
        raise SystemExit("Invalid pairing code. Please try again.")

    ScreenIdStore(settings.state_path).save(screen_id)
    print_fn(f"Paired as screen {screen_id}.")
    return screen_id


def unpair(*, settings: Settings | None = None, print_fn=print) -> None:
    settings = settings or get_settings()
    ScreenIdStore(settings.state_path).clear()
    print_fn("Screen id cleared.")


def status(*, settings: Settings | None = None, print_fn=print) -> str:
    """Print the backend's pairing status for this screen."""
    settings = settings or get_settings()
    screen_id = _resolve_screen_id(settings, ScreenIdStore(settings.state_path))
    client = _create_client(settings)
    try:
        screen_status = client.fetch_status(screen_id)
    except TransportError as exc:
        logger.exception("Failed to fetch screen status")
        raise SystemExit(f"Backend error: {exc}") from exc
    finally:
        client.close()
    _dump_json({"screen_id": screen_id, "status": screen_status}, print_fn=print_fn)
    return screen_status


def preview(
    at: datetime | None = None, *, settings: Settings | None = None, print_fn=print
) -> None:
    """Show which items would rotate at the given instant (default: now)."""
    settings = settings or get_settings()
    screen_id = _resolve_screen_id(settings, ScreenIdStore(settings.state_path))
    tz = settings.tzinfo() or host_timezone()
    if at is None:
        at = SystemClock(tz).now()
    elif at.tzinfo is None:
        at = at.replace(tzinfo=tz)

    client = _create_client(settings)
    try:
        rows = client.fetch_playlist(screen_id)
    except TransportError as exc:
        logger.exception("Failed to fetch playlist")
        raise SystemExit(f"Backend error: {exc}") from exc
    finally:
        client.close()

    playlist = parse_playlist(rows)
    queue = build_queue(playlist, at)
    default_ms = int(settings.default_image_seconds * 1000)
    _dump_json(
        {
            "at": at.isoformat(),
            "items": [
                {
                    "id": item.id,
                    "name": item.media.name,
                    "kind": item.media.kind.value,
                    "schedule": item.schedule.kind,
                    "eligible": is_eligible(item, at),
                    "hold_ms": compute_hold_time(item, default_image_ms=default_ms),
                }
                for item in playlist
            ],
            "active_queue": [item.id for item in queue],
        },
        print_fn=print_fn,
    )


async def _serve(
    engine: PlayerEngine,
    driver: RefreshDriver,
    server: uvicorn.Server | None,
) -> None:
    await engine.start(driver)
    exit_task = asyncio.create_task(engine.wait_for_exit())
    waiters = [exit_task]
    if server is not None:
        waiters.append(asyncio.create_task(server.serve()))
    try:
        await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
    finally:
        if server is not None:
            server.should_exit = True
        if not exit_task.done():
            exit_task.cancel()
        for task in waiters:
            with suppress(asyncio.CancelledError):
                await task
        await engine.stop()


def run(*, serve_api: bool = True, settings: Settings | None = None) -> None:
    """Run the player until the screen is unpaired or the process is interrupted."""
    settings = settings or get_settings()
    store = ScreenIdStore(settings.state_path)
    screen_id = _resolve_screen_id(settings, store)

    client = _create_client(settings)
    engine = PlayerEngine(
        clock=SystemClock(settings.tzinfo()),
        on_exit=store.clear,
        tick_interval=settings.tick_interval,
        default_image_ms=int(settings.default_image_seconds * 1000),
    )
    driver = RefreshDriver(
        client, screen_id, engine, interval=settings.refresh_interval
    )
    server = None
    if serve_api:
        server = uvicorn.Server(
            uvicorn.Config(
                create_app(engine),
                host=settings.api_host,
                port=settings.api_port,
                log_level="warning",
            )
        )

    logger.bind(screen_id=screen_id, api=serve_api).info("Starting signage player")
    try:
        asyncio.run(_serve(engine, driver, server))
    except KeyboardInterrupt:
        logger.info("Interrupted; shutting down")
    finally:
        client.close()

    if engine.exit_requested:
        raise SystemExit("Screen was unpaired; pair it again to resume playback.")


def _parse_instant(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid ISO timestamp: {value!r}") from exc


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Play scheduled signage content on an unattended display."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run the player.")
    run_parser.add_argument(
        "--no-api",
        action="store_true",
        help="Do not start the local HTTP API.",
    )

    pair_parser = subparsers.add_parser("pair", help="Pair this device with a code.")
    pair_parser.add_argument("code", help="Pairing code shown in the CMS dashboard.")

    subparsers.add_parser("unpair", help="Forget the stored screen id.")
    subparsers.add_parser("status", help="Show the screen's pairing status.")

    preview_parser = subparsers.add_parser(
        "preview", help="Show the active queue for an instant."
    )
    preview_parser.add_argument(
        "--at",
        type=_parse_instant,
        default=None,
        help="ISO timestamp to evaluate (defaults to now).",
    )

    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.command == "pair":
        pair(args.code)
        return
    if args.command == "unpair":
        unpair()
        return
    if args.command == "status":
        status()
        return
    if args.command == "preview":
        preview(args.at)
        return
    run(serve_api=not args.no_api)


__all__ = ["main", "pair", "unpair", "status", "preview", "run"]
