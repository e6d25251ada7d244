from __future__ import annotations

from typing import Any

from fleetcast.core.records import LocationUpdate


class FakeChannel:
    def __init__(self, channel_id: str) -> None:
        self.channel_id = channel_id
        self.frames: list[tuple[str, Any]] = []

    def send_nowait(self, event: str, data: Any) -> None:
        self.frames.append((event, data))

    def events(self, name: str) -> list[Any]:
        return [data for event, data in self.frames if event == name]


class FakeChannelSet:
    def __init__(self, *ids: str) -> None:
        self.channels: dict[str, FakeChannel] = {cid: FakeChannel(cid) for cid in ids}

    def __getitem__(self, channel_id: str) -> FakeChannel:
        return self.channels[channel_id]

    def open_channels(self) -> list[FakeChannel]:
        return list(self.channels.values())


class ManualClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = float(now)

    def __call__(self) -> float:
        return self.now


def make_update(entity_id: str = "A", lat: Any = 1.0, long: Any = 2.0, degree: Any = 10) -> LocationUpdate:
    return LocationUpdate(entity_id=entity_id, latitude=lat, longitude=long, heading_degrees=degree)
