"""Per-driver serialization of anchor computation and order insert."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class DriverLocks:
    """Hands out one lock per driver id.

    Locks are kept for the life of the process, so the map grows to the size of
    the driver fleet and no further.

    Holds only within a single process. Deployments running several workers need
    a store-side guarantee as well (e.g. a unique per-driver sequence column).
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, driver_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(driver_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[driver_id] = lock
            return lock

    @contextmanager
    def hold(self, driver_id: str | None) -> Iterator[None]:
        if not driver_id:
            yield
            return
        with self.lock_for(driver_id):
            yield


driver_locks = DriverLocks()
