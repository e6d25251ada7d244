from __future__ import annotations

from fleetcast.config import TrackerSettings
from fleetcast.runtime.app import create_app


def _skip(msg: str) -> None:  # pragma: no cover
    try:
        import pytest  # type: ignore

        pytest.skip(msg)
    except Exception:
        raise RuntimeError(msg)


def _test_client(app):
    try:
        from fastapi.testclient import TestClient
    except Exception as e:  # pragma: no cover
        _skip(f"TestClient not available ({e!r}); install test extras to run this test")
        return None
    return TestClient(app)


def _hello(ws) -> str:
    frame = ws.receive_json()
    assert frame["event"] == "connected"
    return frame["data"]["socketId"]


def test_http_update_with_socket_id_skips_the_sender_channel() -> None:
    with _test_client(create_app(TrackerSettings())) as client:
        with client.websocket_connect("/ws") as ws_a, client.websocket_connect("/ws") as ws_b:
            a_id = _hello(ws_a)
            _hello(ws_b)

            res = client.post(
                "/api/car_update_location",
                json={"uuid": "car-a", "lat": 1.5, "long": 2.5, "degree": 90, "socket_id": a_id},
            )
            assert res.json()["status"] == "1"

            frame = ws_b.receive_json()
            assert frame["event"] == "car_update_location"
            assert frame["data"]["payload"]["uuid"] == "car-a"
            assert frame["data"]["payload"]["degree"] == 90.0

            # The next thing A hears is the reply to its own request, not the broadcast.
            ws_a.send_json({"event": "UpdateSocket", "data": {"uuid": "car-a"}})
            reply = ws_a.receive_json()
            assert reply["event"] == "UpdateSocket"
            assert reply["data"]["status"] == "success"
            assert reply["data"]["socketId"] == a_id


def test_channel_join_and_disconnect_reconciliation() -> None:
    app = create_app(TrackerSettings())
    with _test_client(app) as client:
        with client.websocket_connect("/ws") as ws_b:
            _hello(ws_b)
            with client.websocket_connect("/ws") as ws_a:
                a_id = _hello(ws_a)
                ws_a.send_json({"event": "car_join", "data": {"uuid": "car-a", "lat": 1, "long": 2, "degree": 3}})

                reply = ws_a.receive_json()
                assert reply["event"] == "car_join"
                assert reply["data"]["total_cars"] == 1

                seen = ws_b.receive_json()
                assert seen["event"] == "car_join"
                assert seen["data"]["payload"]["uuid"] == "car-a"
                assert app.state.tracker.get("car-a").produced_via == a_id

            removed = ws_b.receive_json()
            assert removed["event"] == "car_removed"
            assert removed["data"]["payload"]["uuid"] == "car-a"
            assert removed["data"]["payload"]["reason"] == "socket_disconnect"

        assert app.state.tracker.get("car-a") is None
        assert client.get("/api/car_locations").json()["total_cars"] == 0


def test_location_update_is_relayed_to_other_channels() -> None:
    with _test_client(create_app(TrackerSettings())) as client:
        with client.websocket_connect("/ws") as ws_a, client.websocket_connect("/ws") as ws_b:
            _hello(ws_a)
            _hello(ws_b)

            ws_a.send_json({"event": "location_update", "data": '{"uuid": "car-a", "latitude": 7, "longitude": 8}'})

            confirmed = ws_a.receive_json()
            assert confirmed["event"] == "location_confirmed"
            assert confirmed["data"]["status"] == "success"

            relayed = ws_b.receive_json()
            assert relayed["event"] == "location_broadcast"
            assert (relayed["data"]["uuid"], relayed["data"]["latitude"], relayed["data"]["longitude"]) == ("car-a", 7, 8)


def test_bad_update_socket_payload_gets_an_error_reply() -> None:
    with _test_client(create_app(TrackerSettings())) as client:
        with client.websocket_connect("/ws") as ws:
            _hello(ws)
            ws.send_text("not json at all")
            ws.send_json({"event": "UpdateSocket", "data": "{broken"})

            reply = ws.receive_json()
            assert reply["event"] == "UpdateSocket"
            assert reply["data"] == {
                "status": "error",
                "message": "Invalid data format",
                "timestamp": reply["data"]["timestamp"],
            }
