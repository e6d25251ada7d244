from __future__ import annotations

from typing import Any

import httpx


class TrackerClient:
    """HTTP client for peers that only poll or post.

    Contract:
    - POST /api/car_join              uuid, lat, long, degree (+ socket_id)
    - POST /api/car_update_location   same fields
    - GET  /api/car_locations
    - POST /api/car_remove            uuid

    Application-level failures (`status == "0"`) are returned as-is; only
    transport errors raise.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8080",
        *,
        timeout_s: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = float(timeout_s)
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.timeout_s, transport=self._transport)

    def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        with self._client() as client:
            res = client.post(path, json=body)
        if res.status_code >= 400:
            raise RuntimeError(f"POST {path} failed: {res.status_code} {res.text}")
        return res.json()

    @staticmethod
    def _location_body(uuid: str, lat: float, long: float, degree: float, socket_id: str | None) -> dict[str, Any]:
        body: dict[str, Any] = {"uuid": uuid, "lat": lat, "long": long, "degree": degree}
        if socket_id:
            body["socket_id"] = socket_id
        return body

    def join(self, uuid: str, lat: float, long: float, degree: float, *, socket_id: str | None = None) -> dict[str, Any]:
        """Announce a car; the response lists every car currently tracked."""
        return self._post("/api/car_join", self._location_body(uuid, lat, long, degree, socket_id))

    def update_location(
        self,
        uuid: str,
        lat: float,
        long: float,
        degree: float,
        *,
        socket_id: str | None = None,
    ) -> dict[str, Any]:
        return self._post("/api/car_update_location", self._location_body(uuid, lat, long, degree, socket_id))

    def locations(self) -> dict[str, Any]:
        with self._client() as client:
            res = client.get("/api/car_locations")
        if res.status_code >= 400:
            raise RuntimeError(f"GET /api/car_locations failed: {res.status_code} {res.text}")
        return res.json()

    def remove(self, uuid: str) -> dict[str, Any]:
        return self._post("/api/car_remove", {"uuid": uuid})

    def ping(self, *, timeout_s: float | None = None) -> bool:
        """Best-effort health check against `/healthz`."""
        timeout = self.timeout_s if timeout_s is None else float(timeout_s)
        try:
            with self._client() as client:
                r = client.get("/healthz", timeout=timeout)
                if r.status_code != 200:
                    return False
                return bool(r.json().get("ok"))
        except Exception:
            return False
