from __future__ import annotations

import threading

from ..records import ChannelBinding, utc_now_iso


class ChannelRegistry:
    """Where to reach an entity: entity id -> live push channel id.

    Last writer wins. Several entities may share one channel.
    """

    def __init__(self, *, lock: threading.RLock | None = None) -> None:
        self._lock = lock if lock is not None else threading.RLock()
        self._bindings: dict[str, ChannelBinding] = {}

    def bind(self, entity_id: str, channel_id: str) -> ChannelBinding:
        binding = ChannelBinding(entity_id=entity_id, channel_id=channel_id, bound_at=utc_now_iso())
        with self._lock:
            self._bindings[entity_id] = binding
        return binding

    def unbind(self, entity_id: str) -> bool:
        with self._lock:
            return self._bindings.pop(entity_id, None) is not None

    def unbind_channel(self, channel_id: str) -> list[str]:
        """Drop every binding that points at `channel_id`; returns the entity ids."""
        with self._lock:
            gone = [eid for eid, b in self._bindings.items() if b.channel_id == channel_id]
            for eid in gone:
                del self._bindings[eid]
            return gone

    def lookup(self, entity_id: str) -> str | None:
        with self._lock:
            binding = self._bindings.get(entity_id)
            return binding.channel_id if binding is not None else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._bindings)
