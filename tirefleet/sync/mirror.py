"""Client-side mirrors of the stored collections.

A mirror keeps the last full snapshot of one collection and pushes a fresh
snapshot to every subscriber whenever the store reports a change. Snapshots
are tuples of frozen records; subscribers never see a collection mutate in
place.
"""

from __future__ import annotations

import asyncio
import enum
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from tirefleet.sync.events import ChangeEvent, ChangeNotifier, Collection
from tirefleet.sync.strategies import Fetcher, FullReloadStrategy, RefetchStrategy

logger = logging.getLogger(__name__)

Snapshot = tuple[Any, ...]
Subscriber = Callable[[Snapshot], Awaitable[None] | None]


class MirrorState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    SYNCED = "synced"


class CollectionMirror:
    """Subscribe-and-refetch view of one collection."""

    def __init__(
        self,
        collection: Collection,
        fetch: Fetcher,
        notifier: ChangeNotifier,
        strategy: RefetchStrategy | None = None,
    ) -> None:
        self.collection = collection
        self._fetch = fetch
        self._notifier = notifier
        self._strategy: RefetchStrategy = strategy or FullReloadStrategy()
        self._subscribers: list[Subscriber] = []
        self._snapshot: Snapshot = ()
        self._state = MirrorState.UNINITIALIZED
        self._detach: Callable[[], None] | None = None
        self._lock = asyncio.Lock()
        self._version = 0

    @property
    def state(self) -> MirrorState:
        return self._state

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    async def fetch_all(self) -> Snapshot:
        """One-shot pull; does not touch the mirror or its subscribers."""
        return tuple(await self._fetch())

    async def _load(self, load: Callable[[Snapshot], Awaitable[Snapshot]]) -> tuple[Snapshot, int]:
        """Run one load against the current snapshot and return it with its version.

        Loads run one at a time, so the fetch for the latest change always
        finishes last. A failed load keeps the previous snapshot; there is no
        error channel.
        """
        async with self._lock:
            try:
                snapshot = await load(self._snapshot)
            except SQLAlchemyError:
                logger.exception("Fetching %s failed, keeping last snapshot", self.collection.value)
                return self._snapshot, self._version
            self._snapshot = snapshot
            self._state = MirrorState.SYNCED
            self._version += 1
            return snapshot, self._version

    async def _deliver(self, snapshot: Snapshot, version: int, targets: list[Subscriber]) -> None:
        for callback in targets:
            if version != self._version:
                # A newer snapshot has been loaded and is delivered by its own load
                return
            try:
                result = callback(snapshot)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Subscriber of %s failed", self.collection.value)

    async def _on_change(self, event: ChangeEvent) -> None:
        snapshot, version = await self._load(
            lambda current: self._strategy.next_snapshot(current, event, self._fetch)
        )
        await self._deliver(snapshot, version, list(self._subscribers))

    async def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Deliver the current collection now and again after every change.

        Returns a function that stops future deliveries to ``callback``.
        """
        self._subscribers.append(callback)
        if self._detach is None:
            self._detach = self._notifier.add_listener(self.collection, self._on_change)

        snapshot, version = await self._load(lambda current: self.fetch_all())
        await self._deliver(snapshot, version, [callback])

        def unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                return
            if not self._subscribers and self._detach is not None:
                self._detach()
                self._detach = None

        return unsubscribe

    async def refresh(self) -> Snapshot:
        """Reload the whole collection and push it to every subscriber."""
        snapshot, version = await self._load(lambda current: self.fetch_all())
        await self._deliver(snapshot, version, list(self._subscribers))
        return snapshot

    def close(self) -> None:
        self._subscribers.clear()
        if self._detach is not None:
            self._detach()
            self._detach = None
