from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from .keys import MetadataKey


@dataclass(frozen=True)
class Soul:
    """The non-transferable identity record bound to one account.

    `identity` and `url` never change after mint.
    """

    identity: str
    url: str


@dataclass
class SoulRecord:
    account: str
    soul: Soul
    minted_at: float
    updated_at: float
    revision: int = 1
    # dicts keep insertion order; overwriting a key leaves it in place.
    metadata: dict[MetadataKey, bytes] = field(default_factory=dict)


class SoulView(NamedTuple):
    soul: Soul
    keys: list[MetadataKey]
    values: list[bytes]


@dataclass(frozen=True)
class SoulInfo:
    """Read-only snapshot of a live soul and its bookkeeping."""

    account: str
    soul: Soul
    minted_at: float
    updated_at: float
    revision: int
    keys: tuple[MetadataKey, ...] = ()
    values: tuple[bytes, ...] = ()

    @property
    def identity(self) -> str:
        return self.soul.identity

    @property
    def url(self) -> str:
        return self.soul.url

    @property
    def metadata_count(self) -> int:
        return len(self.keys)
