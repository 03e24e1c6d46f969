from __future__ import annotations

from typing import Any, Callable

from fastapi import Depends, FastAPI

from ...core.registry import InMemorySoulRegistry
from ..serializers import key_to_dict
from ..parsing import key_or_400


def mount_keys_api(app: FastAPI, *, registry: InMemorySoulRegistry, require_admin: Callable[..., None]) -> None:
    """Mount allow-list administration endpoints."""

    admin = [Depends(require_admin)]

    @app.get("/api/metadata-keys")
    def list_allowed_keys() -> list[dict[str, str]]:
        return [key_to_dict(k) for k in registry.allowed_metadata_keys()]

    @app.get("/api/metadata-keys/{key}")
    def get_key_status(key: str) -> dict[str, Any]:
        k = key_or_400(key)
        return {**key_to_dict(k), "allowed": registry.is_metadata_key_allowed(k)}

    @app.put("/api/metadata-keys/{key}", dependencies=admin)
    def allow_key(key: str) -> dict[str, Any]:
        k = key_or_400(key)
        registry.allow_metadata_key(k)
        return {"ok": True, **key_to_dict(k), "allowed": True}

    @app.delete("/api/metadata-keys/{key}", dependencies=admin)
    def disallow_key(key: str) -> dict[str, Any]:
        k = key_or_400(key)
        registry.disallow_metadata_key(k)
        return {"ok": True, **key_to_dict(k), "allowed": False}
