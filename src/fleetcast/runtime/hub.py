from __future__ import annotations

import asyncio
import json
import logging
import threading
import uuid
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class WebSocketChannel:
    """A push channel backed by a FastAPI WebSocket.

    Outbound frames go through a bounded queue drained by a writer task on the
    socket's own event loop, so `send_nowait` is safe from any thread and a slow
    peer only ever fills its own queue.
    """

    def __init__(self, websocket: WebSocket, *, channel_id: str | None = None, queue_size: int = 256) -> None:
        self.channel_id = channel_id or uuid.uuid4().hex
        self.websocket = websocket
        self._loop = asyncio.get_running_loop()
        self._queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=max(1, int(queue_size)))
        self._writer: asyncio.Task[None] | None = None

    def start(self) -> None:
        if self._writer is None:
            self._writer = self._loop.create_task(self._drain(), name=f"fleetcast-channel-{self.channel_id}")

    def close(self) -> None:
        writer, self._writer = self._writer, None
        if writer is not None:
            writer.cancel()

    def send_nowait(self, event: str, data: Any) -> None:
        frame = {"event": event, "data": data}
        if self._loop.is_closed():
            raise RuntimeError(f"channel {self.channel_id} loop is closed")
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._enqueue(frame)
        else:
            self._loop.call_soon_threadsafe(self._enqueue, frame)

    def _enqueue(self, frame: dict[str, Any]) -> None:
        try:
            self._queue.put_nowait(frame)
        except asyncio.QueueFull:
            logger.warning("Channel %s is not draining; dropped %s", self.channel_id, frame.get("event"))

    async def _drain(self) -> None:
        while True:
            frame = await self._queue.get()
            try:
                await self.websocket.send_text(json.dumps(frame))
            except Exception:
                logger.info("Channel %s stopped accepting frames", self.channel_id, exc_info=True)
                return


class ChannelHub:
    """The set of open push channels, keyed by channel id."""

    def __init__(self, *, queue_size: int = 256) -> None:
        self._lock = threading.Lock()
        self._channels: dict[str, WebSocketChannel] = {}
        self.queue_size = int(queue_size)

    def open(self, websocket: WebSocket) -> WebSocketChannel:
        channel = WebSocketChannel(websocket, queue_size=self.queue_size)
        channel.start()
        with self._lock:
            self._channels[channel.channel_id] = channel
            total = len(self._channels)
        logger.info("New client connected: %s (total %d)", channel.channel_id, total)
        return channel

    def close(self, channel_id: str) -> WebSocketChannel | None:
        with self._lock:
            channel = self._channels.pop(channel_id, None)
            total = len(self._channels)
        if channel is not None:
            channel.close()
            logger.info("Client disconnected: %s (remaining %d)", channel_id, total)
        return channel

    def open_channels(self) -> list[WebSocketChannel]:
        with self._lock:
            return list(self._channels.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)
