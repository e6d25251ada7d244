from __future__ import annotations

from .config import TrackerSettings
from .core import LocationUpdate, Outcome, PositionRecord, StalenessSweeper, Tracker, TrackerEvent
from .runtime import ChannelHub, TrackerServer, create_app, run
from .sdk import TrackerClient

__all__ = [
    "run",
    "create_app",
    "TrackerSettings",
    "Tracker",
    "TrackerEvent",
    "Outcome",
    "LocationUpdate",
    "PositionRecord",
    "StalenessSweeper",
    "ChannelHub",
    "TrackerServer",
    "TrackerClient",
]
