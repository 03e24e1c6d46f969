from __future__ import annotations

from .access import AdminPolicy, OpenAdminPolicy, TokenAdminPolicy, policy_from_token, require_admin
from .errors import (
    ERRORS_BY_CODE,
    AccountAlreadyHasSoul,
    IdentityIsNotUnique,
    MetadataKeyNotAllowed,
    MetaKeyNotFound,
    NotAuthorized,
    SoulboundsError,
    SoulDoesNotExist,
)
from .events import EventLog, RegistryEvent
from .keys import (
    KEY_WIDTH,
    MetadataKey,
    coerce_value,
    decode_key,
    encode_key,
    key_to_hex,
    normalize_account,
    value_from_hex,
    value_to_hex,
    value_to_text,
)
from .registry import REGISTRY, InMemorySoulRegistry
from .souls import Soul, SoulInfo, SoulRecord, SoulView

__all__ = [
    "AdminPolicy",
    "OpenAdminPolicy",
    "TokenAdminPolicy",
    "policy_from_token",
    "require_admin",
    "ERRORS_BY_CODE",
    "SoulboundsError",
    "IdentityIsNotUnique",
    "AccountAlreadyHasSoul",
    "SoulDoesNotExist",
    "MetadataKeyNotAllowed",
    "MetaKeyNotFound",
    "NotAuthorized",
    "EventLog",
    "RegistryEvent",
    "KEY_WIDTH",
    "MetadataKey",
    "coerce_value",
    "decode_key",
    "encode_key",
    "key_to_hex",
    "normalize_account",
    "value_from_hex",
    "value_to_hex",
    "value_to_text",
    "REGISTRY",
    "InMemorySoulRegistry",
    "Soul",
    "SoulInfo",
    "SoulRecord",
    "SoulView",
]
