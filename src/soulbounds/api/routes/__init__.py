from __future__ import annotations

from .keys import mount_keys_api
from .souls import mount_souls_api

__all__ = ["mount_keys_api", "mount_souls_api"]
