from __future__ import annotations

from .events import TrackerEvent
from .fanout import Channel, ChannelSet, broadcast
from .normalize import json_float, normalize_heading, parse_float
from .records import HTTP_ONLY, ChannelBinding, LocationUpdate, PositionRecord, utc_now_iso
from .registry import ChannelRegistry, LocationRegistry
from .sweeper import StalenessSweeper
from .tracker import MSG_SUCCESS, Outcome, Tracker

__all__ = [
    "HTTP_ONLY",
    "MSG_SUCCESS",
    "TrackerEvent",
    "Channel",
    "ChannelSet",
    "broadcast",
    "json_float",
    "normalize_heading",
    "parse_float",
    "ChannelBinding",
    "LocationUpdate",
    "PositionRecord",
    "utc_now_iso",
    "ChannelRegistry",
    "LocationRegistry",
    "StalenessSweeper",
    "Outcome",
    "Tracker",
]
