from __future__ import annotations

from .client import TrackerClient

__all__ = ["TrackerClient"]
