from __future__ import annotations

import asyncio
import contextlib
import logging

from .tracker import Tracker

logger = logging.getLogger(__name__)


class StalenessSweeper:
    """Periodic eviction of silent entities, owned by the app lifespan."""

    def __init__(self, tracker: Tracker, *, interval_s: float = 120.0) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self._tracker = tracker
        self.interval_s = float(interval_s)
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="fleetcast-sweeper")
        logger.info(
            "Staleness sweeper started (every %.0fs, threshold %.0fs)",
            self.interval_s,
            self._tracker.stale_after_s,
        )

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("Staleness sweeper stopped")

    def tick(self) -> list[str]:
        return self._tracker.sweep_stale()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_s)
            try:
                self.tick()
            except Exception:
                # A failed sweep must not end the schedule.
                logger.exception("Staleness sweep failed")
