from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

# `produced_via` value for records that arrived without a push channel.
HTTP_ONLY = "http_only"


def utc_now_iso() -> str:
    """Wall-clock timestamp in the `2026-01-01T00:00:00.000Z` form browsers emit."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class LocationUpdate:
    """A validated update as it reaches the core.

    Presence of every field is guaranteed by the request validator; the values
    themselves are whatever the peer sent.
    """

    entity_id: str
    latitude: Any
    longitude: Any
    heading_degrees: Any


@dataclass(frozen=True)
class PositionRecord:
    entity_id: str
    latitude: float
    longitude: float
    heading_degrees: float
    last_active_at: float  # monotonic, staleness only
    produced_via: str = HTTP_ONLY
    last_update_ms: int = 0  # wall clock epoch millis, reported as `lastUpdate`
    joined_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True)
class ChannelBinding:
    entity_id: str
    channel_id: str
    bound_at: str
