from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

import numpy as np

ENV_PREFIX = "FLEETCAST_"


def _positive_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as ex:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from ex
    if not np.isfinite(value) or value <= 0:
        raise ValueError(f"{ENV_PREFIX}{name} must be a finite positive number, got {raw!r}")
    return value


@dataclass(frozen=True)
class TrackerSettings:
    """Server-side tunables.

    Defaults match the deployed mobile clients: a sweep every two minutes
    evicting cars silent for five.
    """

    sweep_interval_s: float = 120.0
    stale_after_s: float = 300.0
    channel_queue_size: int = 256
    cors_origins: tuple[str, ...] = ("*",)
    channel_path: str = "/ws"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "TrackerSettings":
        env = os.environ if environ is None else environ
        defaults = cls()

        origins_raw = env.get(ENV_PREFIX + "CORS_ORIGINS", "")
        origins = tuple(o.strip() for o in origins_raw.split(",") if o.strip()) or defaults.cors_origins

        path = env.get(ENV_PREFIX + "CHANNEL_PATH", "").strip() or defaults.channel_path
        if not path.startswith("/"):
            raise ValueError(f"{ENV_PREFIX}CHANNEL_PATH must start with '/', got {path!r}")

        return cls(
            sweep_interval_s=_positive_float(env, "SWEEP_INTERVAL_S", defaults.sweep_interval_s),
            stale_after_s=_positive_float(env, "STALE_AFTER_S", defaults.stale_after_s),
            channel_queue_size=int(_positive_float(env, "CHANNEL_QUEUE_SIZE", defaults.channel_queue_size)),
            cors_origins=origins,
            channel_path=path,
        )
