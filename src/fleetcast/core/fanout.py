from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Channel(Protocol):
    """One open push channel as seen by the core."""

    channel_id: str

    def send_nowait(self, event: str, data: Any) -> None:
        """Queue `data` under `event` for delivery. Must not block."""
        ...


class ChannelSet(Protocol):
    """The externally owned set of currently open channels."""

    def open_channels(self) -> Sequence[Channel]: ...


def broadcast(channels: ChannelSet, event: str, data: Any, *, exclude: str | None = None) -> int:
    """Deliver `data` to every open channel except `exclude`.

    Fire-and-forget: a failing channel is logged and skipped. Returns how many
    channels accepted the message.
    """

    delivered = 0
    for ch in channels.open_channels():
        if exclude is not None and ch.channel_id == exclude:
            continue
        try:
            ch.send_nowait(event, data)
        except Exception:
            logger.warning("Dropped %s for channel %s", event, ch.channel_id, exc_info=True)
            continue
        delivered += 1
    logger.debug("Broadcast %s to %d channel(s), excluding %s", event, delivered, exclude)
    return delivered
