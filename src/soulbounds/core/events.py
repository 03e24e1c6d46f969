from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Callable, Literal

from .keys import MetadataKey

logger = logging.getLogger(__name__)

EventKind = Literal[
    "Mint",
    "Burn",
    "MetadataSet",
    "MetadataDeleted",
    "MetadataKeyAllowed",
    "MetadataKeyDisallowed",
]


@dataclass(frozen=True)
class RegistryEvent:
    seq: int
    kind: EventKind
    at: float
    account: str | None = None
    key: MetadataKey | None = None


Subscriber = Callable[[RegistryEvent], None]


class EventLog:
    """Bounded history of registry events plus push subscribers.

    `record` must be called under the registry lock. `publish` is called after
    releasing it and hands queued events to subscribers one at a time, in
    `seq` order, even when several writers publish concurrently. A subscriber
    may write to the registry; its events are delivered after the current one.
    """

    def __init__(self, max_size: int = 1024) -> None:
        if int(max_size) <= 0:
            raise ValueError("max_size must be a positive integer")
        self._history: deque[RegistryEvent] = deque(maxlen=int(max_size))
        self._pending: deque[RegistryEvent] = deque()
        self._delivery = threading.Lock()
        self._delivering: int | None = None
        self._subscribers: list[Subscriber] = []
        self._seq = 0

    @property
    def last_seq(self) -> int:
        return self._seq

    def record(
        self,
        kind: EventKind,
        *,
        at: float,
        account: str | None = None,
        key: MetadataKey | None = None,
    ) -> RegistryEvent:
        self._seq += 1
        event = RegistryEvent(seq=self._seq, kind=kind, at=float(at), account=account, key=key)
        self._history.append(event)
        if self._subscribers:
            self._pending.append(event)
        return event

    def since(self, seq: int = 0) -> list[RegistryEvent]:
        return [e for e in self._history if e.seq > seq]

    def clear(self) -> None:
        # seq keeps counting so pollers never see a number twice.
        self._history.clear()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass

        return _unsubscribe

    def publish(self) -> None:
        # A subscriber writing to the registry lands here re-entrantly; the
        # outer loop drains its events once the current one is fully delivered.
        if self._delivering == threading.get_ident():
            return
        with self._delivery:
            self._delivering = threading.get_ident()
            try:
                while self._pending:
                    event = self._pending.popleft()
                    for callback in list(self._subscribers):
                        try:
                            callback(event)
                        except Exception:
                            logger.exception("Event subscriber failed on %s #%d", event.kind, event.seq)
            finally:
                self._delivering = None
