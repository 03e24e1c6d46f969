from __future__ import annotations

from typing import Protocol, Self

from ..core.keys import MetadataKey, decode_key
from ..core.souls import Soul, SoulView


class SoulOps(Protocol):
    def get_soul(self, account: str, include_metadata: bool = False, *, timeout_s: float = 10.0) -> SoulView: ...
    def get_metadata(self, account: str, key: str | bytes, *, timeout_s: float = 10.0) -> bytes: ...
    def set_metadata(self, account: str, key: str | bytes, value: str | bytes, *, timeout_s: float = 10.0) -> None: ...
    def delete_metadata(self, account: str, key: str | bytes, *, timeout_s: float = 10.0) -> None: ...
    def burn(self, account: str, *, timeout_s: float = 10.0) -> None: ...


class SoulHandle(str):
    """An account that holds (or held) a soul, bound to the ops that reach it.

    Works the same against an in-process `SoulboundsServer` and a remote
    `SoulboundsClient`. Every property is a fresh read.
    """

    def __new__(cls, account: str, *, ops: SoulOps) -> Self:
        obj = str.__new__(cls, account)
        obj._ops = ops
        return obj

    @property
    def account(self) -> str:
        return str(self)

    def get_soul(self, include_metadata: bool = False, *, timeout_s: float = 10.0) -> SoulView:
        return self._ops.get_soul(self.account, include_metadata, timeout_s=timeout_s)

    @property
    def soul(self) -> Soul:
        return self.get_soul().soul

    @property
    def identity(self) -> str:
        return self.soul.identity

    @property
    def url(self) -> str:
        return self.soul.url

    def metadata(self, *, timeout_s: float = 10.0) -> dict[str, bytes]:
        view = self.get_soul(True, timeout_s=timeout_s)
        return {decode_key(k): v for k, v in zip(view.keys, view.values)}

    def metadata_keys(self, *, timeout_s: float = 10.0) -> list[MetadataKey]:
        return self.get_soul(True, timeout_s=timeout_s).keys

    def get_metadata(self, key: str | bytes, *, timeout_s: float = 10.0) -> bytes:
        return self._ops.get_metadata(self.account, key, timeout_s=timeout_s)

    def get_text(self, key: str | bytes, *, timeout_s: float = 10.0) -> str:
        return self.get_metadata(key, timeout_s=timeout_s).decode("utf-8")

    def set_metadata(self, key: str | bytes, value: str | bytes, *, timeout_s: float = 10.0) -> Self:
        self._ops.set_metadata(self.account, key, value, timeout_s=timeout_s)
        return self

    def delete_metadata(self, key: str | bytes, *, timeout_s: float = 10.0) -> Self:
        self._ops.delete_metadata(self.account, key, timeout_s=timeout_s)
        return self

    def burn(self, *, timeout_s: float = 10.0) -> None:
        self._ops.burn(self.account, timeout_s=timeout_s)
