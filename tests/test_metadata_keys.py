from __future__ import annotations

import pytest

from soulbounds.core import (
    KEY_WIDTH,
    coerce_value,
    decode_key,
    encode_key,
    key_to_hex,
    normalize_account,
    value_from_hex,
    value_to_text,
)


def test_text_key_is_zero_padded_to_32_bytes() -> None:
    k = encode_key("tweets")
    assert len(k) == KEY_WIDTH
    assert k == b"tweets" + b"\x00" * 26
    assert decode_key(k) == "tweets"


def test_text_key_limit_is_31_bytes() -> None:
    assert decode_key(encode_key("x" * 31)) == "x" * 31
    with pytest.raises(ValueError, match="at most 31 bytes"):
        encode_key("x" * 32)
    # multi-byte characters count in bytes
    with pytest.raises(ValueError):
        encode_key("é" * 16)


def test_empty_key_is_rejected() -> None:
    with pytest.raises(ValueError):
        encode_key("")


def test_raw_hex_and_bytes_keys() -> None:
    k = encode_key("likes")
    assert encode_key(key_to_hex(k)) == k
    assert encode_key(b"likes") == k
    assert encode_key(k) == k
    with pytest.raises(ValueError):
        encode_key(b"\x01" * 33)


def test_non_utf8_key_decodes_to_hex() -> None:
    k = encode_key(b"\xff\xfe")
    assert decode_key(k) == key_to_hex(k)


def test_account_normalization() -> None:
    assert normalize_account(" 0xABCDEFabcdef0123456789abcdef0123456789AB ") == "0xabcdefabcdef0123456789abcdef0123456789ab"
    for bad in ("", "0x", "abcdefabcdef0123456789abcdef0123456789ab", "0x" + "g" * 40, "0x" + "a" * 41):
        with pytest.raises(ValueError):
            normalize_account(bad)


def test_value_helpers() -> None:
    assert coerce_value("15") == b"15"
    assert coerce_value(bytearray(b"\x00\x01")) == b"\x00\x01"
    assert value_from_hex("0x0001ff") == b"\x00\x01\xff"
    assert value_from_hex("") == b""
    assert value_to_text(b"\xff") is None
    with pytest.raises(ValueError):
        value_from_hex("0xzz")
    with pytest.raises(ValueError):
        coerce_value(15)  # type: ignore[arg-type]
