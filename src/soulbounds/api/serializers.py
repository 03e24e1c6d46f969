from __future__ import annotations

from typing import Any

from ..core.events import RegistryEvent
from ..core.keys import MetadataKey, decode_key, key_to_hex, value_to_hex, value_to_text
from ..core.souls import SoulInfo


def key_to_dict(key: MetadataKey) -> dict[str, str]:
    return {"key": decode_key(key), "keyHex": key_to_hex(key)}


def metadata_entry_to_dict(key: MetadataKey, value: bytes) -> dict[str, Any]:
    return {
        **key_to_dict(key),
        "value": value_to_text(value),
        "valueHex": value_to_hex(value),
    }


def soul_to_dict(info: SoulInfo, *, include_metadata: bool) -> dict[str, Any]:
    out: dict[str, Any] = {
        "account": info.account,
        "identity": info.identity,
        "url": info.url,
        "mintedAt": float(info.minted_at),
        "updatedAt": float(info.updated_at),
        "revision": int(info.revision),
    }
    if include_metadata:
        out["metadata"] = [metadata_entry_to_dict(k, v) for k, v in zip(info.keys, info.values)]
    return out


def event_to_dict(event: RegistryEvent) -> dict[str, Any]:
    out: dict[str, Any] = {
        "seq": int(event.seq),
        "kind": event.kind,
        "at": float(event.at),
        "account": event.account,
    }
    if event.key is not None:
        out.update(key_to_dict(event.key))
    return out
