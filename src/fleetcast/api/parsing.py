from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from ..core.records import LocationUpdate

LOCATION_FIELDS: tuple[str, ...] = ("uuid", "lat", "long", "degree")
REMOVE_FIELDS: tuple[str, ...] = ("uuid",)


class ValidationError(ValueError):
    """Raised when a request body cannot reach the core."""


def coerce_body(raw: Any) -> dict[str, Any]:
    """Accept an object or a JSON-encoded object (some peers double-encode)."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as ex:
            raise ValidationError("Invalid request body") from ex
    if not isinstance(raw, Mapping):
        raise ValidationError("Invalid request body")
    return dict(raw)


def missing_fields(body: Mapping[str, Any], required: Iterable[str]) -> list[str]:
    return [name for name in required if body.get(name) is None]


def require_fields(raw: Any, required: Iterable[str]) -> dict[str, Any]:
    body = coerce_body(raw)
    missing = missing_fields(body, required)
    if missing:
        raise ValidationError(f"Missing parameter ({', '.join(missing)})")
    return body


def parse_location_update(raw: Any) -> tuple[LocationUpdate, str | None]:
    """Validate a car_join / car_update_location body.

    Returns the update plus the optional `socket_id` the peer claims to own.
    """

    body = require_fields(raw, LOCATION_FIELDS)
    socket_id = body.get("socket_id")
    socket_id = str(socket_id).strip() if socket_id is not None else ""
    update = LocationUpdate(
        entity_id=str(body["uuid"]),
        latitude=body["lat"],
        longitude=body["long"],
        heading_degrees=body["degree"],
    )
    return update, (socket_id or None)
