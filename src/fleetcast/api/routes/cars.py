from __future__ import annotations

import logging
from typing import Any

from fastapi import Body, FastAPI

from ...core.records import utc_now_iso
from ...core.tracker import Tracker
from ...runtime.hub import ChannelHub
from ..parsing import REMOVE_FIELDS, ValidationError, parse_location_update, require_fields
from ..serializers import failure_body, join_body, locations_body, update_body

logger = logging.getLogger(__name__)


def mount_cars_api(app: FastAPI, tracker: Tracker, hub: ChannelHub) -> None:
    @app.get("/")
    def health() -> dict[str, Any]:
        return {
            "message": "Car tracking backend is running!",
            "timestamp": utc_now_iso(),
            "socketIO": "enabled",
        }

    @app.get("/socket-test")
    def socket_test() -> dict[str, Any]:
        return {
            "message": "Push channel is configured",
            "connectedClients": len(hub),
            "timestamp": utc_now_iso(),
        }

    @app.post("/api/car_join")
    def car_join(body: Any = Body(None)) -> dict[str, Any]:
        try:
            update, socket_id = parse_location_update(body)
        except ValidationError as ex:
            return failure_body(str(ex))
        outcome = tracker.join(update, socket_id)
        if outcome.ok and outcome.snapshot is not None:
            logger.debug("car_join %s answered with %d car(s)", update.entity_id, len(outcome.snapshot))
        return join_body(outcome)

    @app.post("/api/car_update_location")
    def car_update_location(body: Any = Body(None)) -> dict[str, Any]:
        try:
            update, socket_id = parse_location_update(body)
        except ValidationError as ex:
            return failure_body(str(ex))
        return update_body(tracker.update_location(update, socket_id))

    @app.get("/api/car_locations")
    def car_locations() -> dict[str, Any]:
        return locations_body(tracker.snapshot())

    @app.post("/api/car_remove")
    def car_remove(body: Any = Body(None)) -> dict[str, Any]:
        try:
            fields = require_fields(body, REMOVE_FIELDS)
        except ValidationError as ex:
            return failure_body(str(ex))
        try:
            removed = tracker.remove(str(fields["uuid"]))
        except Exception as ex:
            logger.exception("car_remove failed for %s", fields["uuid"])
            return failure_body(f"Error removing car: {ex}")
        if not removed:
            return failure_body("Car not found")
        return {"status": "1", "message": "Car removed successfully"}
