from __future__ import annotations

from typing import Any, Callable

from fastapi import Depends, FastAPI, HTTPException

from ...core.registry import InMemorySoulRegistry
from ..parsing import account_or_400, include_metadata_or_400, key_or_400, value_from_body_or_400
from ..serializers import key_to_dict, metadata_entry_to_dict, soul_to_dict


def mount_souls_api(app: FastAPI, *, registry: InMemorySoulRegistry, require_admin: Callable[..., None]) -> None:
    """Mount soul lifecycle and metadata endpoints.

    Reads are public. Writes depend on `require_admin`.
    """

    admin = [Depends(require_admin)]

    @app.get("/api/souls")
    def list_souls(includeMetadata: str | None = None) -> list[dict[str, Any]]:  # noqa: N803
        include = include_metadata_or_400(includeMetadata)
        return [soul_to_dict(s, include_metadata=include) for s in registry.souls(include_metadata=include)]

    @app.post("/api/souls", dependencies=admin)
    def mint_soul(body: dict) -> dict[str, Any]:
        for field in ("account", "identity"):
            if field not in body:
                raise HTTPException(status_code=400, detail=f"Missing field: {field}")
        account = account_or_400(str(body.get("account")))
        try:
            info = registry.mint(account, body.get("identity"), str(body.get("url") or ""))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"ok": True, **soul_to_dict(info, include_metadata=False)}

    @app.get("/api/souls/{account}")
    def get_soul(account: str, includeMetadata: str | None = None) -> dict[str, Any]:  # noqa: N803
        include = include_metadata_or_400(includeMetadata)
        info = registry.soul_info(account_or_400(account), include_metadata=include)
        return soul_to_dict(info, include_metadata=include)

    @app.delete("/api/souls/{account}", dependencies=admin)
    def burn_soul(account: str) -> dict[str, Any]:
        acc = account_or_400(account)
        registry.burn(acc)
        return {"ok": True, "account": acc}

    @app.get("/api/identities/{identity:path}")
    def get_identity_owner(identity: str) -> dict[str, Any]:
        account = registry.account_of_identity(identity)
        if account is None:
            raise HTTPException(status_code=404, detail="Unknown identity")
        return {"identity": identity, "account": account}

    @app.get("/api/souls/{account}/metadata/{key}")
    def get_metadata(account: str, key: str) -> dict[str, Any]:
        acc = account_or_400(account)
        k = key_or_400(key)
        return metadata_entry_to_dict(k, registry.get_metadata(acc, k))

    @app.put("/api/souls/{account}/metadata/{key}", dependencies=admin)
    def set_metadata(account: str, key: str, body: dict) -> dict[str, Any]:
        acc = account_or_400(account)
        k = key_or_400(key)
        value = value_from_body_or_400(body)
        registry.set_metadata(acc, k, value)
        return {"ok": True, "account": acc, **metadata_entry_to_dict(k, value)}

    @app.delete("/api/souls/{account}/metadata/{key}", dependencies=admin)
    def delete_metadata(account: str, key: str) -> dict[str, Any]:
        acc = account_or_400(account)
        k = key_or_400(key)
        registry.delete_metadata(acc, k)
        return {"ok": True, "account": acc, **key_to_dict(k)}
