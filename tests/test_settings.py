from __future__ import annotations

import pytest

from fleetcast.config import TrackerSettings


def test_defaults_match_deployed_clients() -> None:
    s = TrackerSettings.from_env({})

    assert s.sweep_interval_s == 120.0
    assert s.stale_after_s == 300.0
    assert s.channel_queue_size == 256
    assert s.cors_origins == ("*",)
    assert s.channel_path == "/ws"


def test_environment_overrides() -> None:
    s = TrackerSettings.from_env(
        {
            "FLEETCAST_SWEEP_INTERVAL_S": "5",
            "FLEETCAST_STALE_AFTER_S": "30.5",
            "FLEETCAST_CHANNEL_QUEUE_SIZE": "16",
            "FLEETCAST_CORS_ORIGINS": "https://a.example, https://b.example",
            "FLEETCAST_CHANNEL_PATH": "/socket",
        }
    )

    assert s.sweep_interval_s == 5.0
    assert s.stale_after_s == 30.5
    assert s.channel_queue_size == 16
    assert s.cors_origins == ("https://a.example", "https://b.example")
    assert s.channel_path == "/socket"


@pytest.mark.parametrize("value", ["soon", "-1", "0", "nan", "inf"])
def test_invalid_numbers_name_the_variable(value: str) -> None:
    with pytest.raises(ValueError, match="FLEETCAST_STALE_AFTER_S"):
        TrackerSettings.from_env({"FLEETCAST_STALE_AFTER_S": value})


def test_channel_path_must_be_absolute() -> None:
    with pytest.raises(ValueError, match="FLEETCAST_CHANNEL_PATH"):
        TrackerSettings.from_env({"FLEETCAST_CHANNEL_PATH": "ws"})
