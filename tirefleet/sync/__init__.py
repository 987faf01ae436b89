"""Client-side synchronization: change events, refetch strategies, mirrors."""

from tirefleet.sync.events import ChangeEvent, ChangeKind, ChangeNotifier, Collection
from tirefleet.sync.mirror import CollectionMirror, MirrorState
from tirefleet.sync.strategies import FullReloadStrategy, PatchStrategy, RefetchStrategy

__all__ = [
    "ChangeEvent",
    "ChangeKind",
    "ChangeNotifier",
    "Collection",
    "CollectionMirror",
    "FullReloadStrategy",
    "MirrorState",
    "PatchStrategy",
    "RefetchStrategy",
]
