from __future__ import annotations

from typing import Callable

from fastapi import Header

from ..core.access import AdminPolicy, require_admin


def principal_from_headers(x_admin_token: str | None, authorization: str | None) -> str | None:
    if x_admin_token:
        return x_admin_token.strip()
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return None


def admin_guard(policy: AdminPolicy) -> Callable[..., None]:
    """FastAPI dependency that raises `NotAuthorized` for non-admin callers."""

    def _require_admin(
        x_admin_token: str | None = Header(default=None),
        authorization: str | None = Header(default=None),
    ) -> None:
        require_admin(policy, principal_from_headers(x_admin_token, authorization))

    return _require_admin
