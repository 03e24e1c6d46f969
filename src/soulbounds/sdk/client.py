from __future__ import annotations

from typing import Any
from urllib.parse import quote

from ..core.errors import ERRORS_BY_CODE
from ..core.keys import (
    MetadataKey,
    coerce_value,
    encode_key,
    key_to_hex,
    normalize_account,
    value_from_hex,
    value_to_hex,
)
from ..core.souls import Soul, SoulView
from .handles import SoulHandle


def _key_path(key: str | bytes) -> str:
    # Raw hex keeps the path exact for any label.
    return key_to_hex(encode_key(key))


def _raise_for_status(res: Any, what: str) -> None:
    if res.status_code < 400:
        return

    try:
        data = res.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict):
            cls = ERRORS_BY_CODE.get(str(err.get("code") or ""))
            if cls is not None:
                raise cls(str(err.get("message") or cls.code))
        if res.status_code == 400 and isinstance(data.get("detail"), str):
            raise ValueError(data["detail"])

    raise RuntimeError(f"{what} failed: {res.status_code} {res.text}")


def _view_from_json(data: dict[str, Any]) -> SoulView:
    soul = Soul(identity=str(data.get("identity") or ""), url=str(data.get("url") or ""))
    keys: list[MetadataKey] = []
    values: list[bytes] = []
    for entry in data.get("metadata") or []:
        keys.append(value_from_hex(str(entry.get("keyHex"))))
        values.append(value_from_hex(str(entry.get("valueHex"))))
    return SoulView(soul, keys, values)


class SoulboundsClient:
    """HTTP client for a running soulbounds server.

    Mirrors the in-process `SoulboundsServer` surface. Registry failures come
    back as the same exception classes the core raises (`SoulDoesNotExist`,
    `MetadataKeyNotAllowed`, ...); bad input comes back as `ValueError`.
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8000", *, admin_token: str | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self._admin_token = admin_token

    def _http(self, timeout_s: float) -> Any:
        import httpx

        headers = {"X-Admin-Token": self._admin_token} if self._admin_token else None
        return httpx.Client(base_url=self.base_url, timeout=timeout_s, headers=headers)

    def soul(self, account: str) -> SoulHandle:
        return SoulHandle(normalize_account(account), ops=self)

    # -- lifecycle -----------------------------------------------------------------

    def mint(self, account: str, identity: str, url: str, *, timeout_s: float = 10.0) -> SoulHandle:
        with self._http(timeout_s) as client:
            res = client.post("/api/souls", json={"account": account, "identity": identity, "url": url})
            _raise_for_status(res, "Mint")
            return SoulHandle(str(res.json()["account"]), ops=self)

    def burn(self, account: str, *, timeout_s: float = 10.0) -> None:
        with self._http(timeout_s) as client:
            res = client.delete(f"/api/souls/{account}")
            _raise_for_status(res, "Burn")

    def get_soul(self, account: str, include_metadata: bool = False, *, timeout_s: float = 10.0) -> SoulView:
        with self._http(timeout_s) as client:
            res = client.get(f"/api/souls/{account}", params={"includeMetadata": "1" if include_metadata else "0"})
            _raise_for_status(res, "Get soul")
            return _view_from_json(res.json())

    def get_soul_info(self, account: str, *, timeout_s: float = 10.0) -> dict[str, Any]:
        with self._http(timeout_s) as client:
            res = client.get(f"/api/souls/{account}", params={"includeMetadata": "1"})
            _raise_for_status(res, "Get soul")
            return dict(res.json())

    def has_soul(self, account: str, *, timeout_s: float = 10.0) -> bool:
        with self._http(timeout_s) as client:
            res = client.get(f"/api/souls/{account}")
            if res.status_code == 404:
                return False
            _raise_for_status(res, "Get soul")
            return True

    def list_souls(self, *, timeout_s: float = 10.0) -> list[str]:
        with self._http(timeout_s) as client:
            res = client.get("/api/souls")
            _raise_for_status(res, "List souls")
            return [str(item["account"]) for item in res.json()]

    def account_of_identity(self, identity: str, *, timeout_s: float = 10.0) -> str | None:
        with self._http(timeout_s) as client:
            res = client.get(f"/api/identities/{quote(str(identity), safe='')}")
            if res.status_code == 404:
                return None
            _raise_for_status(res, "Identity lookup")
            return str(res.json()["account"])

    # -- allow-list ----------------------------------------------------------------

    def allow_metadata_key(self, key: str | bytes, *, timeout_s: float = 10.0) -> None:
        with self._http(timeout_s) as client:
            res = client.put(f"/api/metadata-keys/{_key_path(key)}")
            _raise_for_status(res, "Allow metadata key")

    def disallow_metadata_key(self, key: str | bytes, *, timeout_s: float = 10.0) -> None:
        with self._http(timeout_s) as client:
            res = client.delete(f"/api/metadata-keys/{_key_path(key)}")
            _raise_for_status(res, "Disallow metadata key")

    def is_metadata_key_allowed(self, key: str | bytes, *, timeout_s: float = 10.0) -> bool:
        with self._http(timeout_s) as client:
            res = client.get(f"/api/metadata-keys/{_key_path(key)}")
            _raise_for_status(res, "Metadata key status")
            return bool(res.json().get("allowed"))

    def allowed_metadata_keys(self, *, timeout_s: float = 10.0) -> list[MetadataKey]:
        with self._http(timeout_s) as client:
            res = client.get("/api/metadata-keys")
            _raise_for_status(res, "List metadata keys")
            return [value_from_hex(str(item["keyHex"])) for item in res.json()]

    # -- metadata ------------------------------------------------------------------

    def set_metadata(self, account: str, key: str | bytes, value: str | bytes, *, timeout_s: float = 10.0) -> None:
        payload = {"valueHex": value_to_hex(coerce_value(value))}
        with self._http(timeout_s) as client:
            res = client.put(f"/api/souls/{account}/metadata/{_key_path(key)}", json=payload)
            _raise_for_status(res, "Set metadata")

    def get_metadata(self, account: str, key: str | bytes, *, timeout_s: float = 10.0) -> bytes:
        with self._http(timeout_s) as client:
            res = client.get(f"/api/souls/{account}/metadata/{_key_path(key)}")
            _raise_for_status(res, "Get metadata")
            return value_from_hex(str(res.json()["valueHex"]))

    def delete_metadata(self, account: str, key: str | bytes, *, timeout_s: float = 10.0) -> None:
        with self._http(timeout_s) as client:
            res = client.delete(f"/api/souls/{account}/metadata/{_key_path(key)}")
            _raise_for_status(res, "Delete metadata")

    # -- events & housekeeping -----------------------------------------------------

    def events(self, since: int = 0, *, timeout_s: float = 10.0) -> dict[str, Any]:
        with self._http(timeout_s) as client:
            res = client.get("/api/events", params={"since": str(int(since))})
            _raise_for_status(res, "Events")
            return dict(res.json())

    def global_revision(self, *, timeout_s: float = 10.0) -> int:
        return int(self.events(timeout_s=timeout_s).get("globalRevision", 0))

    def reset(self, *, timeout_s: float = 10.0) -> None:
        with self._http(timeout_s) as client:
            res = client.post("/api/reset")
            _raise_for_status(res, "Reset")
