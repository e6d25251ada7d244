from __future__ import annotations

from .channels import ChannelRegistry
from .locations import LocationRegistry

__all__ = ["ChannelRegistry", "LocationRegistry"]
