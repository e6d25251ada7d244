from __future__ import annotations

from enum import Enum


class TrackerEvent(str, Enum):
    """Event names on the push channel, shared with the mobile and web peers."""

    # outbound broadcasts
    CAR_JOIN = "car_join"
    CAR_UPDATE_LOCATION = "car_update_location"
    CAR_REMOVED = "car_removed"
    LOCATION_BROADCAST = "location_broadcast"

    # unicast replies
    CONNECTED = "connected"
    LOCATION_CONFIRMED = "location_confirmed"

    # inbound (UpdateSocket is also echoed back as the reply)
    UPDATE_SOCKET = "UpdateSocket"
    LOCATION_UPDATE = "location_update"
