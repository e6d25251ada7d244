from __future__ import annotations

from .app import create_app
from .hub import ChannelHub, WebSocketChannel
from .server import TrackerServer, run

__all__ = ["create_app", "ChannelHub", "WebSocketChannel", "TrackerServer", "run"]
