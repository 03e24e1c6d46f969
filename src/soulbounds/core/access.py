from __future__ import annotations

import hmac
from typing import Protocol

from .errors import NotAuthorized


class AdminPolicy(Protocol):
    def is_admin(self, principal: str | None) -> bool: ...


class OpenAdminPolicy:
    """Every caller is an administrator. Used when no admin token is configured."""

    def is_admin(self, principal: str | None) -> bool:  # noqa: ARG002
        return True


class TokenAdminPolicy:
    """A caller is an administrator when it presents the configured token."""

    def __init__(self, token: str) -> None:
        token = str(token).strip()
        if not token:
            raise ValueError("admin token cannot be empty")
        self._token = token.encode("utf-8")

    def is_admin(self, principal: str | None) -> bool:
        if not principal:
            return False
        return hmac.compare_digest(principal.strip().encode("utf-8"), self._token)


def policy_from_token(token: str | None) -> AdminPolicy:
    if token is None or not str(token).strip():
        return OpenAdminPolicy()
    return TokenAdminPolicy(token)


def require_admin(policy: AdminPolicy, principal: str | None) -> None:
    if not policy.is_admin(principal):
        raise NotAuthorized("administrator credentials required")
