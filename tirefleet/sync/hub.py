"""One mirror per collection, wired to a DataService."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from tirefleet.sync.events import ChangeNotifier, Collection
from tirefleet.sync.mirror import CollectionMirror, Snapshot, Subscriber
from tirefleet.sync.strategies import FullReloadStrategy, RefetchStrategy

if TYPE_CHECKING:
    from tirefleet.services.data_service import DataService

logger = logging.getLogger(__name__)


class SyncHub:
    """Owns the tires, transactions and vehicles mirrors.

    ``strategies`` overrides the refetch policy per collection; anything not
    listed reloads in full on every change.
    """

    def __init__(
        self,
        data: DataService,
        notifier: ChangeNotifier,
        strategies: dict[Collection, RefetchStrategy] | None = None,
    ) -> None:
        strategies = strategies or {}
        fetchers = {
            Collection.TIRES: data.fetch_tires,
            Collection.TRANSACTIONS: data.fetch_transactions,
            Collection.VEHICLES: data.fetch_vehicles,
        }
        self._mirrors: dict[Collection, CollectionMirror] = {
            collection: CollectionMirror(
                collection,
                fetch,
                notifier,
                strategies.get(collection, FullReloadStrategy()),
            )
            for collection, fetch in fetchers.items()
        }

    async def fetch_all(self, collection: Collection) -> Snapshot:
        return await self._mirrors[collection].fetch_all()

    async def subscribe(
        self,
        collection: Collection,
        callback: Subscriber,
    ) -> Callable[[], None]:
        return await self._mirrors[collection].subscribe(callback)

    async def refresh(self, collection: Collection) -> Snapshot:
        return await self._mirrors[collection].refresh()

    async def refresh_all(self) -> None:
        for collection in Collection:
            await self._mirrors[collection].refresh()
        logger.debug("Refreshed all collections")

    def close(self) -> None:
        for mirror in self._mirrors.values():
            mirror.close()
