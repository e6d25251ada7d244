from __future__ import annotations

from .cars import mount_cars_api
from .channels import handle_frame, mount_channel_api

__all__ = ["mount_cars_api", "mount_channel_api", "handle_frame"]
