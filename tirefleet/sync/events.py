"""Typed change notifications between the store binding and its mirrors."""

from __future__ import annotations

import enum
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class Collection(str, enum.Enum):
    TIRES = "tires"
    TRANSACTIONS = "transactions"
    VEHICLES = "vehicles"


class ChangeKind(str, enum.Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class ChangeEvent:
    """One committed write. ``record_ids`` is empty when unknown (bulk restore)."""

    collection: Collection
    kind: ChangeKind
    record_ids: tuple[int, ...] = ()


Listener = Callable[[ChangeEvent], Awaitable[None] | None]


class ChangeNotifier:
    """Delivers change events to the listeners registered for a collection.

    Listeners run in registration order and are awaited one after another.
    A listener that raises is logged and skipped; the write that produced the
    event has already been committed.
    """

    def __init__(self) -> None:
        self._listeners: dict[Collection, list[Listener]] = {c: [] for c in Collection}

    def add_listener(self, collection: Collection, listener: Listener) -> Callable[[], None]:
        self._listeners[collection].append(listener)

        def remove() -> None:
            try:
                self._listeners[collection].remove(listener)
            except ValueError:
                pass

        return remove

    def listener_count(self, collection: Collection) -> int:
        return len(self._listeners[collection])

    async def publish(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners[event.collection]):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Change listener failed for %s/%s",
                    event.collection.value, event.kind.value,
                )
