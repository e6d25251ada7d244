from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from ..core.normalize import json_float
from ..core.records import PositionRecord, utc_now_iso
from ..core.tracker import Outcome


def record_to_snapshot_item(rec: PositionRecord) -> dict[str, Any]:
    return {
        "uuid": rec.entity_id,
        "lat": json_float(rec.latitude),
        "long": json_float(rec.longitude),
        "degree": json_float(rec.heading_degrees),
        "lastUpdate": int(rec.last_update_ms),
    }


def record_to_payload(rec: PositionRecord) -> dict[str, Any]:
    item = record_to_snapshot_item(rec)
    item.update(
        {
            "socket_id": rec.produced_via,
            "joined_at": rec.joined_at,
            "updated_at": rec.updated_at,
        }
    )
    return item


def failure_body(message: str) -> dict[str, Any]:
    return {"status": "0", "message": str(message)}


def join_body(outcome: Outcome) -> dict[str, Any]:
    if not outcome.ok:
        return failure_body(outcome.message)
    records = outcome.snapshot or ()
    return {
        "status": "1",
        "payload": {rec.entity_id: record_to_snapshot_item(rec) for rec in records},
        "message": outcome.message,
        "total_cars": len(records),
    }


def update_body(outcome: Outcome) -> dict[str, Any]:
    if not outcome.ok:
        return failure_body(outcome.message)
    return {"status": "1", "message": outcome.message, "timestamp": outcome.timestamp}


def locations_body(records: Iterable[PositionRecord]) -> dict[str, Any]:
    payload = {rec.entity_id: record_to_payload(rec) for rec in records}
    return {
        "status": "1",
        "payload": payload,
        "total_cars": len(payload),
        "timestamp": utc_now_iso(),
    }
