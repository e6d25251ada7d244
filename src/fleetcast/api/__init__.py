from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import TrackerSettings
from ..core.tracker import Tracker
from ..runtime.hub import ChannelHub
from .routes import mount_cars_api, mount_channel_api


def create_api_app(
    tracker: Tracker,
    hub: ChannelHub,
    settings: TrackerSettings | None = None,
    **fastapi_kwargs,
) -> FastAPI:
    settings = settings or TrackerSettings()
    app = FastAPI(title="fleetcast", version="0.1.0", **fastapi_kwargs)

    allow_any = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        # Browsers refuse credentials together with a wildcard origin.
        allow_credentials=not allow_any,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept", "Origin"],
    )

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    mount_cars_api(app, tracker, hub)
    mount_channel_api(app, tracker, hub, path=settings.channel_path)

    return app
