from __future__ import annotations

import json

import httpx
import pytest

from fleetcast.sdk.client import TrackerClient


def _transport(seen: list[httpx.Request]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/healthz":
            return httpx.Response(200, json={"ok": True})
        if request.url.path == "/api/car_locations":
            return httpx.Response(200, json={"status": "1", "payload": {}, "total_cars": 0, "timestamp": "t"})
        if request.url.path == "/api/car_remove":
            return httpx.Response(200, json={"status": "0", "message": "Car not found"})
        if request.url.path == "/api/broken":
            return httpx.Response(500, text="nope")
        return httpx.Response(200, json={"status": "1", "message": "successfully", "echo": json.loads(request.content)})

    return httpx.MockTransport(handler)


def test_join_sends_the_wire_field_names() -> None:
    seen: list[httpx.Request] = []
    client = TrackerClient("http://tracker.test/", transport=_transport(seen))

    out = client.join("A", 1.0, 2.0, 10.0, socket_id="sock-1")

    assert seen[0].method == "POST"
    assert seen[0].url.path == "/api/car_join"
    assert out["echo"] == {"uuid": "A", "lat": 1.0, "long": 2.0, "degree": 10.0, "socket_id": "sock-1"}


def test_update_without_socket_id_omits_it() -> None:
    seen: list[httpx.Request] = []
    client = TrackerClient("http://tracker.test", transport=_transport(seen))

    out = client.update_location("A", 1.0, 2.0, 10.0)

    assert seen[0].url.path == "/api/car_update_location"
    assert "socket_id" not in out["echo"]


def test_application_failures_are_returned_not_raised() -> None:
    client = TrackerClient("http://tracker.test", transport=_transport([]))

    assert client.remove("A") == {"status": "0", "message": "Car not found"}
    assert client.locations()["total_cars"] == 0
    assert client.ping() is True


def test_transport_errors_raise() -> None:
    client = TrackerClient("http://tracker.test", transport=_transport([]))

    with pytest.raises(RuntimeError, match="500"):
        client._post("/api/broken", {})


def test_ping_is_false_when_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = TrackerClient("http://tracker.test", transport=httpx.MockTransport(handler))
    assert client.ping(timeout_s=0.1) is False
