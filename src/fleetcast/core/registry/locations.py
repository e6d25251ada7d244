from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from ..records import HTTP_ONLY, PositionRecord

logger = logging.getLogger(__name__)


class LocationRegistry:
    """Last known position per entity.

    Records are immutable; every write swaps the whole record so readers never
    see a half-written entry.
    """

    def __init__(
        self,
        *,
        lock: threading.RLock | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._lock = lock if lock is not None else threading.RLock()
        self._clock = clock
        self._records: dict[str, PositionRecord] = {}

    def upsert(
        self,
        entity_id: str,
        *,
        latitude: float,
        longitude: float,
        heading_degrees: float,
        produced_via: str | None = None,
        last_update_ms: int = 0,
        joined_at: str | None = None,
        updated_at: str | None = None,
    ) -> PositionRecord:
        with self._lock:
            prev = self._records.get(entity_id)
            record = PositionRecord(
                entity_id=entity_id,
                latitude=latitude,
                longitude=longitude,
                heading_degrees=heading_degrees,
                last_active_at=self._clock(),
                produced_via=produced_via or HTTP_ONLY,
                last_update_ms=int(last_update_ms),
                joined_at=joined_at or (prev.joined_at if prev is not None else None),
                updated_at=updated_at,
            )
            self._records[entity_id] = record
            logger.debug("Stored position for %s via %s", entity_id, record.produced_via)
            return record

    def get(self, entity_id: str) -> PositionRecord | None:
        with self._lock:
            return self._records.get(entity_id)

    def get_all(self) -> list[PositionRecord]:
        with self._lock:
            return list(self._records.values())

    def remove(self, entity_id: str) -> bool:
        with self._lock:
            return self._records.pop(entity_id, None) is not None

    def find_by_channel(self, channel_id: str) -> list[str]:
        with self._lock:
            return [eid for eid, rec in self._records.items() if rec.produced_via == channel_id]

    def find_inactive(self, threshold_s: float, *, now: float | None = None) -> list[str]:
        with self._lock:
            t = self._clock() if now is None else float(now)
            return [eid for eid, rec in self._records.items() if (t - rec.last_active_at) > threshold_s]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, entity_id: object) -> bool:
        with self._lock:
            return entity_id in self._records
