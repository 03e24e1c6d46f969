"""Wire-level codecs for accounts, metadata keys and metadata values.

Metadata keys are fixed-width 32-byte labels. Text labels are UTF-8 encoded
and right-padded with zero bytes, so at most 31 bytes of text fit (the last
byte stays a terminator). A `0x`-prefixed string of 64 hex digits is taken
as the raw 32 bytes.

Accounts are 20-byte addresses written as `0x` + 40 hex digits and are
normalized to lowercase.
"""

from __future__ import annotations

import re

KEY_WIDTH = 32
MAX_KEY_TEXT_BYTES = KEY_WIDTH - 1
ACCOUNT_WIDTH = 20

MetadataKey = bytes

_ACCOUNT_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_RAW_KEY_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def normalize_account(account: str) -> str:
    if not isinstance(account, str):
        raise ValueError(f"account must be a string, got {type(account).__name__}")
    acc = account.strip()
    if not _ACCOUNT_RE.match(acc):
        raise ValueError(f"account must be a 0x-prefixed {ACCOUNT_WIDTH}-byte hex address, got {account!r}")
    return acc.lower()


def encode_key(key: str | bytes) -> MetadataKey:
    """Return the 32-byte form of a metadata key."""

    if isinstance(key, (bytes, bytearray, memoryview)):
        raw = bytes(key)
        if len(raw) > KEY_WIDTH:
            raise ValueError(f"metadata key must be at most {KEY_WIDTH} bytes, got {len(raw)}")
        return raw.ljust(KEY_WIDTH, b"\x00")

    if not isinstance(key, str):
        raise ValueError(f"metadata key must be str or bytes, got {type(key).__name__}")

    if _RAW_KEY_RE.match(key):
        return bytes.fromhex(key[2:])

    if not key:
        raise ValueError("metadata key cannot be empty")
    raw = key.encode("utf-8")
    if len(raw) > MAX_KEY_TEXT_BYTES:
        raise ValueError(f"metadata key text must be at most {MAX_KEY_TEXT_BYTES} bytes, got {len(raw)}")
    return raw.ljust(KEY_WIDTH, b"\x00")


def decode_key(key: MetadataKey) -> str:
    """Text form of a key; falls back to hex when the label is not UTF-8."""

    try:
        return key.rstrip(b"\x00").decode("utf-8")
    except UnicodeDecodeError:
        return key_to_hex(key)


def key_to_hex(key: MetadataKey) -> str:
    return "0x" + key.hex()


def coerce_value(value: str | bytes) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise ValueError(f"metadata value must be str or bytes, got {type(value).__name__}")


def value_to_hex(value: bytes) -> str:
    return "0x" + value.hex()


def value_from_hex(text: str) -> bytes:
    s = str(text).strip()
    if s.startswith(("0x", "0X")):
        s = s[2:]
    try:
        return bytes.fromhex(s)
    except ValueError as exc:
        raise ValueError(f"invalid hex value: {text!r}") from exc


def value_to_text(value: bytes) -> str | None:
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError:
        return None
