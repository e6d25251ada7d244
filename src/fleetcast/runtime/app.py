from __future__ import annotations

import contextlib

from fastapi import FastAPI

from ..api import create_api_app
from ..config import TrackerSettings
from ..core.sweeper import StalenessSweeper
from ..core.tracker import Tracker
from .hub import ChannelHub


def create_app(
    settings: TrackerSettings | None = None,
    *,
    hub: ChannelHub | None = None,
    tracker: Tracker | None = None,
) -> FastAPI:
    """Create the full app: HTTP routes, the push channel and the staleness sweeper.

    The hub, tracker and sweeper are exposed on `app.state` for embedding code
    and tests.
    """

    settings = settings or TrackerSettings.from_env()
    hub = hub or ChannelHub(queue_size=settings.channel_queue_size)
    tracker = tracker or Tracker(hub, stale_after_s=settings.stale_after_s)
    sweeper = StalenessSweeper(tracker, interval_s=settings.sweep_interval_s)

    @contextlib.asynccontextmanager
    async def lifespan(_app: FastAPI):
        sweeper.start()
        try:
            yield
        finally:
            await sweeper.stop()

    app = create_api_app(tracker, hub, settings, lifespan=lifespan)
    app.state.settings = settings
    app.state.hub = hub
    app.state.tracker = tracker
    app.state.sweeper = sweeper
    return app
