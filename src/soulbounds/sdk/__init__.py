from __future__ import annotations

from .client import SoulboundsClient
from .handles import SoulHandle, SoulOps

__all__ = ["SoulboundsClient", "SoulHandle", "SoulOps"]
