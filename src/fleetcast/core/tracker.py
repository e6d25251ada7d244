from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal

from .events import TrackerEvent
from .fanout import ChannelSet, broadcast
from .normalize import normalize_heading, parse_float
from .records import LocationUpdate, PositionRecord, utc_now_iso
from .registry import ChannelRegistry, LocationRegistry

logger = logging.getLogger(__name__)

UpdateVariant = Literal["join", "update"]

MSG_SUCCESS = "successfully"

_FAILURE_PREFIX: dict[str, str] = {
    "join": "Error processing car join: ",
    "update": "Error processing location update: ",
}


@dataclass(frozen=True)
class Outcome:
    ok: bool
    message: str
    timestamp: str
    record: PositionRecord | None = None
    # Only the join variant carries a snapshot of every tracked entity.
    snapshot: tuple[PositionRecord, ...] | None = None


class Tracker:
    """Live car positions and their propagation to open push channels.

    Every mutation of the two registries happens under one reentrant lock, and
    the broadcast that follows an upsert is queued before the lock is released,
    so peers observe updates of one entity in the order they were stored.
    Delivery itself never blocks (see `fanout.broadcast`).
    """

    def __init__(
        self,
        channels: ChannelSet,
        *,
        stale_after_s: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        self._lock = threading.RLock()
        self._channels = channels
        self._wall_clock = wall_clock
        self.stale_after_s = float(stale_after_s)
        self.locations = LocationRegistry(lock=self._lock, clock=clock)
        self.bindings = ChannelRegistry(lock=self._lock)

    # ------------------------------------------------------------------
    # Update pipeline
    # ------------------------------------------------------------------

    def join(self, update: LocationUpdate, origin_channel_id: str | None = None) -> Outcome:
        return self.handle_update(update, origin_channel_id, variant="join")

    def update_location(self, update: LocationUpdate, origin_channel_id: str | None = None) -> Outcome:
        return self.handle_update(update, origin_channel_id, variant="update")

    def handle_update(
        self,
        update: LocationUpdate,
        origin_channel_id: str | None = None,
        *,
        variant: UpdateVariant = "update",
    ) -> Outcome:
        origin = origin_channel_id or None
        try:
            with self._lock:
                heading = normalize_heading(update.heading_degrees)
                if heading != parse_float(update.heading_degrees):
                    logger.debug("Fixed invalid heading for %s, set to 0.0", update.entity_id)

                if origin is not None:
                    self.bindings.bind(update.entity_id, origin)

                now_iso = utc_now_iso()
                record = self.locations.upsert(
                    update.entity_id,
                    latitude=parse_float(update.latitude),
                    longitude=parse_float(update.longitude),
                    heading_degrees=heading,
                    produced_via=origin,
                    last_update_ms=int(self._wall_clock() * 1000),
                    joined_at=now_iso if variant == "join" else None,
                    updated_at=now_iso,
                )

                event = TrackerEvent.CAR_JOIN if variant == "join" else TrackerEvent.CAR_UPDATE_LOCATION
                message = {
                    "status": "1",
                    "payload": {
                        "uuid": update.entity_id,
                        "lat": update.latitude,
                        "long": update.longitude,
                        "degree": heading,
                        "timestamp": now_iso,
                    },
                }
                broadcast(self._channels, event.value, message, exclude=origin)

                snapshot = tuple(self.locations.get_all()) if variant == "join" else None
        except Exception as ex:
            logger.exception("Update pipeline failed for %s (%s)", update.entity_id, variant)
            return Outcome(ok=False, message=_FAILURE_PREFIX[variant] + str(ex), timestamp=utc_now_iso())

        logger.debug(
            "%s %s lat=%s long=%s degree=%s (tracking %d)",
            variant,
            update.entity_id,
            update.latitude,
            update.longitude,
            heading,
            len(snapshot) if snapshot is not None else len(self.locations),
        )
        return Outcome(ok=True, message=MSG_SUCCESS, timestamp=now_iso, record=record, snapshot=snapshot)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def snapshot(self) -> list[PositionRecord]:
        return self.locations.get_all()

    def get(self, entity_id: str) -> PositionRecord | None:
        return self.locations.get(entity_id)

    # ------------------------------------------------------------------
    # Channel side
    # ------------------------------------------------------------------

    def bind_channel(self, entity_id: str, channel_id: str) -> None:
        """Associate a push channel with an entity without touching its position."""
        self.bindings.bind(entity_id, channel_id)
        logger.debug("Channel %s bound to %s", channel_id, entity_id)

    def relay_location(self, data: Mapping[str, Any], origin_channel_id: str) -> int:
        """Pass a channel-originated location ping on to every other channel."""
        message = {
            "uuid": data.get("uuid"),
            "latitude": data.get("latitude"),
            "longitude": data.get("longitude"),
            "timestamp": utc_now_iso(),
        }
        return broadcast(self._channels, TrackerEvent.LOCATION_BROADCAST.value, message, exclude=origin_channel_id)

    # ------------------------------------------------------------------
    # Eviction
    # ------------------------------------------------------------------

    def remove(self, entity_id: str) -> bool:
        with self._lock:
            if not self.locations.remove(entity_id):
                return False
            self.bindings.unbind(entity_id)
            broadcast(
                self._channels,
                TrackerEvent.CAR_REMOVED.value,
                {"status": "1", "payload": {"uuid": entity_id, "timestamp": utc_now_iso()}},
            )
        logger.info("Removed car %s", entity_id)
        return True

    def sweep_stale(self, *, now: float | None = None) -> list[str]:
        """Evict every entity silent for longer than `stale_after_s`.

        The removal is announced to all channels, the entity's own included.
        """

        with self._lock:
            stale = self.locations.find_inactive(self.stale_after_s, now=now)
            for entity_id in stale:
                self.locations.remove(entity_id)
                self.bindings.unbind(entity_id)
                broadcast(
                    self._channels,
                    TrackerEvent.CAR_REMOVED.value,
                    {"status": "1", "payload": {"uuid": entity_id}},
                )
        for entity_id in stale:
            logger.info("Removed inactive car %s", entity_id)
        return stale

    def reconcile_disconnect(self, channel_id: str, reason: str | None = None) -> list[str]:
        """Forget everything that was produced via a channel that just closed."""

        with self._lock:
            removed = self.locations.find_by_channel(channel_id)
            for entity_id in removed:
                self.locations.remove(entity_id)
                self.bindings.unbind(entity_id)
                broadcast(
                    self._channels,
                    TrackerEvent.CAR_REMOVED.value,
                    {
                        "status": "1",
                        "payload": {
                            "uuid": entity_id,
                            "reason": "socket_disconnect",
                            "timestamp": utc_now_iso(),
                        },
                    },
                    exclude=channel_id,
                )
            # Bindings made via UpdateSocket alone have no record to remove.
            self.bindings.unbind_channel(channel_id)

        if removed:
            logger.info("Channel %s closed (%s); removed %s", channel_id, reason, ", ".join(removed))
        else:
            logger.debug("Channel %s closed (%s); nothing bound", channel_id, reason)
        return removed
