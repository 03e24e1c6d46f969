from __future__ import annotations

from .app import app, create_app
from .server import SoulboundsServer, run

__all__ = ["app", "create_app", "SoulboundsServer", "run"]
