from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from ...core.events import TrackerEvent
from ...core.records import utc_now_iso
from ...core.tracker import Tracker
from ...runtime.hub import ChannelHub, WebSocketChannel
from ..parsing import ValidationError, coerce_body, parse_location_update
from ..serializers import failure_body, join_body, update_body

logger = logging.getLogger(__name__)


def _decode_frame(raw: str) -> tuple[str, Any] | None:
    try:
        frame = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
        return None
    return frame["event"], frame.get("data")


def handle_frame(tracker: Tracker, channel: WebSocketChannel, event: str, data: Any) -> None:
    """Dispatch one inbound named event from `channel`."""

    if event == TrackerEvent.UPDATE_SOCKET.value:
        try:
            body = coerce_body(data)
            entity_id = body.get("uuid")
            if entity_id is None:
                raise ValidationError("Missing parameter (uuid)")
        except ValidationError:
            logger.warning("Invalid UpdateSocket payload from %s: %r", channel.channel_id, data)
            channel.send_nowait(
                event,
                {"status": "error", "message": "Invalid data format", "timestamp": utc_now_iso()},
            )
            return
        tracker.bind_channel(str(entity_id), channel.channel_id)
        channel.send_nowait(
            event,
            {
                "status": "success",
                "socketId": channel.channel_id,
                "uuid": entity_id,
                "timestamp": utc_now_iso(),
            },
        )
        return

    if event == TrackerEvent.LOCATION_UPDATE.value:
        try:
            body = coerce_body(data)
        except ValidationError:
            logger.warning("Invalid location_update payload from %s: %r", channel.channel_id, data)
            return
        tracker.relay_location(body, channel.channel_id)
        channel.send_nowait(
            TrackerEvent.LOCATION_CONFIRMED.value,
            {"status": "success", "timestamp": utc_now_iso()},
        )
        return

    if event in (TrackerEvent.CAR_JOIN.value, TrackerEvent.CAR_UPDATE_LOCATION.value):
        try:
            update, _ = parse_location_update(data)
        except ValidationError as ex:
            channel.send_nowait(event, failure_body(str(ex)))
            return
        # The channel itself is the origin; a `socket_id` in the body is ignored.
        if event == TrackerEvent.CAR_JOIN.value:
            reply = join_body(tracker.join(update, channel.channel_id))
        else:
            reply = update_body(tracker.update_location(update, channel.channel_id))
        channel.send_nowait(event, reply)
        return

    logger.debug("Ignoring unknown event %r from %s", event, channel.channel_id)


def mount_channel_api(app: FastAPI, tracker: Tracker, hub: ChannelHub, *, path: str = "/ws") -> None:
    @app.websocket(path)
    async def push_channel(websocket: WebSocket) -> None:
        await websocket.accept()
        channel = hub.open(websocket)
        channel.send_nowait(
            TrackerEvent.CONNECTED.value,
            {
                "socketId": channel.channel_id,
                "message": "Connected to car tracking server",
                "timestamp": utc_now_iso(),
            },
        )

        reason = "server shutdown"
        try:
            while True:
                raw = await websocket.receive_text()
                decoded = _decode_frame(raw)
                if decoded is None:
                    logger.warning("Dropping malformed frame from %s", channel.channel_id)
                    continue
                handle_frame(tracker, channel, *decoded)
        except WebSocketDisconnect as ex:
            reason = getattr(ex, "reason", None) or f"code {ex.code}"
        finally:
            # No awaits here: the handler may already be cancelled.
            hub.close(channel.channel_id)
            tracker.reconcile_disconnect(channel.channel_id, reason)
