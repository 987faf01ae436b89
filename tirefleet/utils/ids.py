import threading
import time
from collections.abc import Callable


def now_millis() -> int:
    """Wall clock in epoch milliseconds, the unit used for write timestamps."""
    return time.time_ns() // 1_000_000


class IdGenerator:
    """Process-unique, strictly increasing record ids.

    Ids are the wall clock in ms scaled by 1000, bumped by one whenever two
    requests land in the same tick, so a batch of imports never collides.
    ``observe`` raises the floor above ids already present in the store.
    """

    def __init__(self, clock: Callable[[], int] = now_millis) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            self._last = max(self._clock() * 1000, self._last + 1)
            return self._last

    def observe(self, existing_id: int | None) -> None:
        if existing_id is None:
            return
        with self._lock:
            self._last = max(self._last, existing_id)
