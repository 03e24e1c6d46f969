from __future__ import annotations

from typing import Any

from fastapi import HTTPException

from ..core.keys import MetadataKey, encode_key, normalize_account, value_from_hex


def parse_bool(value: Any, *, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        raise ValueError(f"Missing {field}")
    s = str(value).strip().lower()
    if s in {"1", "true", "yes", "on"}:
        return True
    if s in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid {field}")


def include_metadata_or_400(value: str | None) -> bool:
    if value is None:
        return False
    try:
        return parse_bool(value, field="includeMetadata")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def account_or_400(account: str) -> str:
    try:
        return normalize_account(account)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def key_or_400(key: str) -> MetadataKey:
    try:
        return encode_key(key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def value_from_body_or_400(body: dict) -> bytes:
    # Supported:
    # - value: UTF-8 text
    # - valueHex: 0x-prefixed raw bytes
    if "valueHex" in body:
        try:
            return value_from_hex(str(body.get("valueHex") or ""))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    if "value" in body:
        value = body.get("value")
        if not isinstance(value, str):
            raise HTTPException(status_code=400, detail="value must be a string (use valueHex for raw bytes)")
        return value.encode("utf-8")
    raise HTTPException(status_code=400, detail="Missing field: value or valueHex")


def since_or_400(value: str | None) -> int:
    if value is None:
        return 0
    try:
        since = int(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Invalid since") from e
    if since < 0:
        raise HTTPException(status_code=400, detail="since must be >= 0")
    return since
