"""How a mirror turns a change event into its next snapshot."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol

from tirefleet.sync.events import ChangeEvent, ChangeKind

Fetcher = Callable[[], Awaitable[Sequence[Any]]]
IdFetcher = Callable[[Sequence[int]], Awaitable[Sequence[Any]]]


class RefetchStrategy(Protocol):
    async def next_snapshot(
        self,
        current: tuple[Any, ...],
        event: ChangeEvent,
        fetch_all: Fetcher,
    ) -> tuple[Any, ...]: ...


class FullReloadStrategy:
    """Reload the whole collection on any change."""

    async def next_snapshot(
        self,
        current: tuple[Any, ...],
        event: ChangeEvent,
        fetch_all: Fetcher,
    ) -> tuple[Any, ...]:
        return tuple(await fetch_all())


class PatchStrategy:
    """Apply a change by re-reading only the touched records.

    Events without record ids fall back to a full reload. ``sort_key`` keeps
    the patched snapshot in the same order a full reload would produce.
    """

    def __init__(
        self,
        fetch_by_ids: IdFetcher,
        sort_key: Callable[[Any], Any] | None = None,
        reverse: bool = False,
    ) -> None:
        self._fetch_by_ids = fetch_by_ids
        self._sort_key = sort_key
        self._reverse = reverse

    async def next_snapshot(
        self,
        current: tuple[Any, ...],
        event: ChangeEvent,
        fetch_all: Fetcher,
    ) -> tuple[Any, ...]:
        if not event.record_ids:
            return tuple(await fetch_all())

        touched = set(event.record_ids)
        kept = [record for record in current if record.id not in touched]
        if event.kind is not ChangeKind.DELETE:
            kept.extend(await self._fetch_by_ids(event.record_ids))
        if self._sort_key is not None:
            kept.sort(key=self._sort_key, reverse=self._reverse)
        return tuple(kept)
