"""Player engine: shared playlist, queue and cursor state plus its timers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from contextlib import suppress
from datetime import datetime
from functools import partial
from typing import Protocol

from .cursor import PlaybackCursor
from .events import EventLog
from .models import PlaybackState, Playlist, PlaylistItem, PlaylistSnapshot
from .orientation import LoggingOrientationLock, OrientationLock, apply_orientation
from .playlist import log_partial_schedules
from .queue_builder import QueueBuilder
from .renderer import LoggingRenderer, Renderer
from .timers import Clock, LoopTimers, SystemClock, TimerHandle, Timers
from .timing import DEFAULT_IMAGE_HOLD_MS, compute_hold_time
from .utils import logger


class Refresher(Protocol):
    interval: float

    async def refresh_once(self) -> bool:
        """Run one refresh cycle; False once the screen is no longer paired."""
        ...


class PlayerEngine:
    """Owns the playlist snapshot, the active queue and the playback cursor.

    Every mutation happens on the event loop thread: the scheduling tick, the
    duration timer callback, refresh results and renderer events are applied
    one at a time. The duration timer is cancelled before any transition and
    carries the generation it was armed for, so a callback that races with a
    transition is ignored.
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        timers: Timers | None = None,
        renderer: Renderer | None = None,
        orientation_lock: OrientationLock | None = None,
        on_exit: Callable[[], None] | None = None,
        events: EventLog | None = None,
        tick_interval: float = 1.0,
        default_image_ms: int = DEFAULT_IMAGE_HOLD_MS,
    ) -> None:
        self._clock = clock or SystemClock()
        self._timers = timers or LoopTimers()
        self._renderer = renderer or LoggingRenderer()
        self._orientation_lock = orientation_lock or LoggingOrientationLock()
        self._on_exit = on_exit
        self.events = events or EventLog()
        self._tick_interval = tick_interval
        self._default_image_ms = default_image_ms

        self._playlist: Playlist = ()
        self._loaded = False
        self._error: str | None = None
        self._queue_builder = QueueBuilder()
        self._cursor = PlaybackCursor()
        self._generation = 0
        self._timer: TimerHandle | None = None
        self._mode_switches = 0

        self._exit_requested = False
        self._exit_event = asyncio.Event()
        self._running = False
        self._tasks: list[asyncio.Task[None]] = []

    # State accessors ---------------------------------------------------------

    @property
    def playlist(self) -> Playlist:
        return self._playlist

    @property
    def active_queue(self) -> tuple[PlaylistItem, ...]:
        return self._cursor.queue

    @property
    def cursor_index(self) -> int | None:
        return self._cursor.index

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def mode_switches(self) -> int:
        return self._mode_switches

    @property
    def timer_armed(self) -> bool:
        return self._timer is not None

    @property
    def exit_requested(self) -> bool:
        return self._exit_requested

    def get_active_item(self) -> PlaylistItem | None:
        return self._cursor.current

    def get_playback_state(self) -> PlaybackState:
        item = self._cursor.current
        queue_ids = [entry.id for entry in self._cursor.queue]
        if self._error is not None:
            return PlaybackState(
                status="error",
                item=item,
                message=self._error,
                generation=self._generation,
                queue_ids=queue_ids,
            )
        if not self._loaded:
            return PlaybackState(status="loading", generation=self._generation)
        if item is None:
            message = (
                "Content is assigned but the schedule is not active right now."
                if self._playlist
                else "No content assigned to this screen."
            )
            return PlaybackState(
                status="waiting", message=message, generation=self._generation
            )
        return PlaybackState(
            status="playing",
            item=item,
            generation=self._generation,
            queue_ids=queue_ids,
        )

    def snapshot(self) -> PlaylistSnapshot:
        return PlaylistSnapshot(
            items=list(self._playlist),
            active_queue=[item.id for item in self._cursor.queue],
            cursor=self._cursor.index,
        )

    # Inputs --------------------------------------------------------------------

    def apply_playlist(self, playlist: Playlist) -> bool:
        """Replace the playlist snapshot unless it is structurally unchanged.

        Returns True when the snapshot was replaced. A replacement is followed
        by an immediate scheduling tick.
        """
        playlist = tuple(playlist)
        if self._loaded and playlist == self._playlist:
            logger.debug("Playlist unchanged; keeping current snapshot")
            return False

        self._playlist = playlist
        self._loaded = True
        excluded = log_partial_schedules(playlist)
        logger.bind(items=len(playlist), excluded=excluded).info(
            "Playlist data updated"
        )
        self.events.record(
            "playlist_updated",
            metadata={"items": len(playlist), "excluded": excluded},
        )
        self.tick()
        return True

    def record_refresh_error(self, message: str) -> None:
        """Surface a recoverable fetch failure; the last playlist keeps playing."""
        self._error = message
        self.events.record("refresh_failed", metadata={"message": message})

    def clear_refresh_error(self) -> None:
        if self._error is None:
            return
        self._error = None
        logger.info("Backend reachable again")
        self.events.record("refresh_recovered")

    def tick(self, now: datetime | None = None) -> bool:
        """Rebuild the active queue; return True if a mode switch occurred."""
        current = now or self._clock.now()
        update = self._queue_builder.update(self._playlist, current)
        if update.mode_switch:
            self._mode_switches += 1
            self._cursor.reset(update.queue)
            logger.bind(queue=list(update.identity)).info(
                "Switching mode. New queue length: {}", len(update.queue)
            )
            self.events.record(
                "mode_switch",
                item_id=update.identity[0] if update.identity else None,
                metadata={"queue": list(update.identity)},
            )
            self._transition()
            return True

        previous = self._cursor.current
        if self._cursor.refresh(update.queue):
            logger.debug("Cursor out of range after queue refresh; restarting queue")
            self._transition()
            return True
        active = self._cursor.current
        if active != previous:
            # Same queue, new record for the active item.
            logger.bind(item_id=active.id if active else None).info(
                "Active item updated; reloading it"
            )
            self._transition()
        return False

    def on_media_end(self, item_id: str | None = None) -> bool:
        """Handle the renderer's playthrough-finished event.

        Only items without a hold time advance this way; a timed video loops
        until its timer fires. Events for an item that is no longer active are
        dropped. Returns True when the cursor advanced.
        """
        item = self._cursor.current
        if item is None:
            return False
        if item_id is not None and item_id != item.id:
            logger.bind(item_id=item_id, active=item.id).debug(
                "Ignoring media end for inactive item"
            )
            return False
        if compute_hold_time(item, default_image_ms=self._default_image_ms) > 0:
            logger.bind(item_id=item.id).debug(
                "Ignoring media end for timed item; the hold timer advances it"
            )
            return False
        logger.bind(item_id=item.id).info("Video finished. Advancing")
        self._advance("media_end")
        return True

    def request_exit(self) -> None:
        """Signal that the screen is no longer paired."""
        if self._exit_requested:
            return
        self._exit_requested = True
        self._cancel_timer()
        logger.warning("Screen is no longer paired; handing back to pairing flow")
        self.events.record("exit_requested")
        if self._on_exit is not None:
            self._on_exit()
        self._exit_event.set()

    # Transitions ---------------------------------------------------------------

    def _advance(self, trigger: str) -> None:
        if self._cursor.current is None:
            return
        item = self._cursor.advance()
        self.events.record(
            "advance",
            item_id=item.id if item else None,
            metadata={"trigger": trigger, "index": self._cursor.index},
        )
        self._transition()

    def _transition(self) -> None:
        self._cancel_timer()
        self._generation += 1
        item = self._cursor.current
        self._renderer.show(item, self._generation)
        apply_orientation(self._orientation_lock, item)
        if item is not None:
            self._arm_timer(item)

    def _arm_timer(self, item: PlaylistItem) -> None:
        hold_ms = compute_hold_time(item, default_image_ms=self._default_image_ms)
        if hold_ms <= 0:
            logger.bind(item_id=item.id).debug("No hold timer; waiting for media end")
            return
        self._timer = self._timers.call_later(
            hold_ms / 1000, partial(self._on_hold_elapsed, self._generation)
        )

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_hold_elapsed(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._timer = None
        self._advance("duration")

    # Lifecycle -----------------------------------------------------------------

    async def start(self, refresher: Refresher | None = None) -> None:
        if self._running:
            return
        self._running = True
        loop = asyncio.get_running_loop()
        self._tasks.append(loop.create_task(self._tick_loop()))
        if refresher is not None:
            self._tasks.append(loop.create_task(self._refresh_loop(refresher)))
        logger.bind(tick_interval=self._tick_interval).info("Player engine started")

    async def stop(self) -> None:
        self._running = False
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            with suppress(asyncio.CancelledError):
                await task
        self._cancel_timer()
        logger.info("Player engine stopped")

    async def wait_for_exit(self) -> None:
        await self._exit_event.wait()

    async def _tick_loop(self) -> None:
        while self._running:
            if not self._loaded:
                await asyncio.sleep(self._tick_interval)
                continue
            try:
                self.tick()
            except Exception as exc:  # pragma: no cover - logged and retried
                logger.exception("Scheduling tick failed: {}", exc)
            await asyncio.sleep(self._tick_interval)

    async def _refresh_loop(self, refresher: Refresher) -> None:
        while self._running:
            try:
                keep_polling = await refresher.refresh_once()
            except Exception as exc:  # pragma: no cover - logged and retried
                logger.exception("Refresh cycle failed: {}", exc)
                keep_polling = True
            if not keep_polling:
                logger.info("Refresh loop finished")
                return
            await asyncio.sleep(refresher.interval)


__all__ = ["PlayerEngine", "Refresher"]
