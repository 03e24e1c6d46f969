from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from ..config import load_settings
from .errors import (
    AccountAlreadyHasSoul,
    IdentityIsNotUnique,
    MetadataKeyNotAllowed,
    MetaKeyNotFound,
    SoulboundsError,
    SoulDoesNotExist,
)
from .events import EventKind, EventLog, RegistryEvent, Subscriber
from .keys import MetadataKey, coerce_value, decode_key, encode_key, normalize_account
from .souls import Soul, SoulInfo, SoulRecord, SoulView

logger = logging.getLogger(__name__)


class InMemorySoulRegistry:
    """Registry of non-transferable souls plus the global metadata allow-list.

    Every public operation runs under one lock and either applies completely
    or raises without touching state. Events are recorded under the lock and
    delivered to subscribers after it is released.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time, event_log_size: int = 1024) -> None:
        self._lock = threading.RLock()
        self._clock = clock
        self._souls: dict[str, SoulRecord] = {}
        # identity -> account; a live identity appears here exactly once.
        self._identities: dict[str, str] = {}
        # Ordered set of allowed keys.
        self._allowed_keys: dict[MetadataKey, None] = {}
        self._events = EventLog(event_log_size)
        self._global_revision = 0

    # -- internals -----------------------------------------------------------------

    def _now(self) -> float:
        return float(self._clock())

    @staticmethod
    def _validate_identity(identity: str) -> str:
        if not isinstance(identity, str):
            raise ValueError(f"identity must be a string, got {type(identity).__name__}")
        if not identity:
            raise ValueError("identity cannot be empty")
        return identity

    @staticmethod
    def _rejected(operation: str, exc: SoulboundsError) -> SoulboundsError:
        logger.info("%s rejected: %s (%s)", operation, exc.code, exc.message)
        return exc

    def _require_soul_locked(self, operation: str, account: str) -> SoulRecord:
        record = self._souls.get(account)
        if record is None:
            raise self._rejected(operation, SoulDoesNotExist(f"No soul for account {account}"))
        return record

    def _commit_locked(
        self,
        kind: EventKind,
        *,
        account: str | None = None,
        key: MetadataKey | None = None,
        at: float | None = None,
    ) -> RegistryEvent:
        self._global_revision += 1
        return self._events.record(kind, at=self._now() if at is None else at, account=account, key=key)

    @staticmethod
    def _info_locked(record: SoulRecord, *, include_metadata: bool) -> SoulInfo:
        keys: tuple[MetadataKey, ...] = ()
        values: tuple[bytes, ...] = ()
        if include_metadata:
            keys = tuple(record.metadata.keys())
            values = tuple(record.metadata.values())
        return SoulInfo(
            account=record.account,
            soul=record.soul,
            minted_at=record.minted_at,
            updated_at=record.updated_at,
            revision=record.revision,
            keys=keys,
            values=values,
        )

    # -- lifecycle -----------------------------------------------------------------

    def mint(self, account: str, identity: str, url: str) -> SoulInfo:
        acc = normalize_account(account)
        identity = self._validate_identity(identity)
        url = str(url)

        with self._lock:
            if identity in self._identities:
                raise self._rejected("mint", IdentityIsNotUnique(f"Identity {identity!r} is already bound to a soul"))
            if acc in self._souls:
                raise self._rejected("mint", AccountAlreadyHasSoul(f"Account {acc} already has a soul"))

            now = self._now()
            record = SoulRecord(account=acc, soul=Soul(identity=identity, url=url), minted_at=now, updated_at=now)
            self._souls[acc] = record
            self._identities[identity] = acc
            self._commit_locked("Mint", account=acc, at=now)
            info = self._info_locked(record, include_metadata=False)

        logger.info("Minted soul for %s", acc)
        self._events.publish()
        return info

    def burn(self, account: str) -> None:
        acc = normalize_account(account)

        with self._lock:
            record = self._require_soul_locked("burn", acc)
            del self._souls[acc]
            self._identities.pop(record.soul.identity, None)
            self._commit_locked("Burn", account=acc)

        logger.info("Burned soul for %s (%d metadata entries dropped)", acc, len(record.metadata))
        self._events.publish()

    def get_soul(self, account: str, include_metadata: bool = False) -> SoulView:
        acc = normalize_account(account)
        with self._lock:
            record = self._require_soul_locked("get_soul", acc)
            if not include_metadata:
                return SoulView(record.soul, [], [])
            return SoulView(record.soul, list(record.metadata.keys()), list(record.metadata.values()))

    def soul_info(self, account: str, *, include_metadata: bool = True) -> SoulInfo:
        acc = normalize_account(account)
        with self._lock:
            record = self._require_soul_locked("soul_info", acc)
            return self._info_locked(record, include_metadata=include_metadata)

    def has_soul(self, account: str) -> bool:
        acc = normalize_account(account)
        with self._lock:
            return acc in self._souls

    def account_of_identity(self, identity: str) -> str | None:
        with self._lock:
            return self._identities.get(str(identity))

    def list_souls(self) -> list[str]:
        with self._lock:
            return list(self._souls.keys())

    def souls(self, *, include_metadata: bool = False) -> list[SoulInfo]:
        with self._lock:
            return [self._info_locked(r, include_metadata=include_metadata) for r in self._souls.values()]

    # -- allow-list ----------------------------------------------------------------

    def allow_metadata_key(self, key: str | bytes) -> None:
        k = encode_key(key)
        with self._lock:
            if k in self._allowed_keys:
                return
            self._allowed_keys[k] = None
            self._commit_locked("MetadataKeyAllowed", key=k)

        logger.info("Allowed metadata key %r", decode_key(k))
        self._events.publish()

    def disallow_metadata_key(self, key: str | bytes) -> None:
        k = encode_key(key)
        with self._lock:
            if k not in self._allowed_keys:
                return
            del self._allowed_keys[k]
            self._commit_locked("MetadataKeyDisallowed", key=k)

        logger.info("Disallowed metadata key %r", decode_key(k))
        self._events.publish()

    def is_metadata_key_allowed(self, key: str | bytes) -> bool:
        k = encode_key(key)
        with self._lock:
            return k in self._allowed_keys

    def allowed_metadata_keys(self) -> list[MetadataKey]:
        with self._lock:
            return list(self._allowed_keys.keys())

    # -- metadata ------------------------------------------------------------------

    def set_metadata(self, account: str, key: str | bytes, value: str | bytes) -> None:
        acc = normalize_account(account)
        k = encode_key(key)
        v = coerce_value(value)

        with self._lock:
            record = self._require_soul_locked("set_metadata", acc)
            if k not in self._allowed_keys:
                raise self._rejected(
                    "set_metadata",
                    MetadataKeyNotAllowed(f"Metadata key {decode_key(k)!r} is not allowed"),
                )
            now = self._now()
            record.metadata[k] = v
            record.updated_at = now
            record.revision += 1
            self._commit_locked("MetadataSet", account=acc, key=k, at=now)

        logger.info("Set metadata %r on %s (%d bytes)", decode_key(k), acc, len(v))
        self._events.publish()

    def get_metadata(self, account: str, key: str | bytes) -> bytes:
        acc = normalize_account(account)
        k = encode_key(key)
        with self._lock:
            record = self._require_soul_locked("get_metadata", acc)
            value = record.metadata.get(k)
            if value is None:
                raise self._rejected("get_metadata", MetaKeyNotFound(f"No metadata {decode_key(k)!r} on {acc}"))
            return value

    def delete_metadata(self, account: str, key: str | bytes) -> None:
        acc = normalize_account(account)
        k = encode_key(key)

        with self._lock:
            record = self._require_soul_locked("delete_metadata", acc)
            if k not in record.metadata:
                raise self._rejected("delete_metadata", MetaKeyNotFound(f"No metadata {decode_key(k)!r} on {acc}"))
            now = self._now()
            del record.metadata[k]
            record.updated_at = now
            record.revision += 1
            self._commit_locked("MetadataDeleted", account=acc, key=k, at=now)

        logger.info("Deleted metadata %r on %s", decode_key(k), acc)
        self._events.publish()

    # -- events & housekeeping -----------------------------------------------------

    def global_revision(self) -> int:
        with self._lock:
            return self._global_revision

    def events(self, since: int = 0) -> list[RegistryEvent]:
        with self._lock:
            return self._events.since(int(since))

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback` for every later event, delivered in `seq` order outside the lock."""

        with self._lock:
            unsubscribe = self._events.subscribe(callback)

        def _locked_unsubscribe() -> None:
            with self._lock:
                unsubscribe()

        return _locked_unsubscribe

    def reset(self) -> None:
        with self._lock:
            self._souls.clear()
            self._identities.clear()
            self._allowed_keys.clear()
            self._events.clear()
            self._global_revision += 1
        logger.info("Registry reset")


REGISTRY = InMemorySoulRegistry(event_log_size=load_settings().event_log_size)
