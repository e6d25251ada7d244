from __future__ import annotations

import contextlib
import logging
import os
import socket
import threading
import time
from dataclasses import dataclass, field

import uvicorn

from ..config import TrackerSettings
from ..sdk.client import TrackerClient
from .app import create_app

logger = logging.getLogger(__name__)


@dataclass
class TrackerServer:
    host: str
    port: int
    url: str
    _server: uvicorn.Server | None = field(default=None, repr=False)
    _thread: threading.Thread | None = field(default=None, repr=False)

    def client(self) -> TrackerClient:
        return TrackerClient(self.url.rstrip("/"))

    def stop(self, *, timeout_s: float = 5.0) -> None:
        """Ask uvicorn to exit (runs the lifespan shutdown) and wait for it."""
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout=timeout_s)


def _find_free_port(host: str) -> int:
    with contextlib.closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind((host, 0))
        return int(s.getsockname()[1])


def _normalize_base_url(url: str) -> str:
    url = url.strip()
    if not url:
        return ""
    # Allow passing just host:port.
    if "://" not in url:
        url = "http://" + url
    return url.rstrip("/")


def run(
    *,
    host: str = "127.0.0.1",
    port: int = 0,
    settings: TrackerSettings | None = None,
    log_level: str = "info",
    access_log: bool = False,
    new_server: bool = False,
    connect_timeout_s: float = 0.2,
    startup_timeout_s: float = 10.0,
) -> TrackerServer | TrackerClient:
    """Start the tracker with a single Python call.

    Behavior:
    - If FLEETCAST_URL is set and answers `/healthz`, attach to it and return a
      `TrackerClient` (unless `new_server=True`).
    - Otherwise, if `port != 0` and a server already answers at
      http://{host}:{port}, attach to that one.
    - Otherwise start uvicorn in a daemon thread and return a `TrackerServer`.

    `port=0` picks a free port, so there is nothing to attach to.
    """

    env_url = _normalize_base_url(os.getenv("FLEETCAST_URL", ""))

    # 1) Explicitly provided server.
    if env_url and not new_server:
        client = TrackerClient(env_url)
        if client.ping(timeout_s=connect_timeout_s):
            logger.info("Attached to running server at %s", env_url)
            return client

    # 2) Something already listening on the requested host/port.
    if port != 0 and not new_server:
        default_url = _normalize_base_url(f"http://{host}:{port}")
        client = TrackerClient(default_url)
        if client.ping(timeout_s=connect_timeout_s):
            logger.info("Attached to running server at %s", default_url)
            return client

    # 3) Fresh server.
    if port == 0:
        port = _find_free_port(host)

    app = create_app(settings)
    config = uvicorn.Config(app, host=host, port=port, log_level=log_level, access_log=access_log)
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, name="fleetcast-uvicorn", daemon=True)
    thread.start()

    deadline = time.monotonic() + startup_timeout_s
    while not server.started:
        if not thread.is_alive():
            raise RuntimeError(f"Server on {host}:{port} exited during startup")
        if time.monotonic() > deadline:
            raise RuntimeError(f"Server on {host}:{port} did not start within {startup_timeout_s}s")
        time.sleep(0.01)

    url = f"http://{host}:{port}/"
    logger.info("Car tracking server listening on %s", url)
    return TrackerServer(host=host, port=port, url=url, _server=server, _thread=thread)
