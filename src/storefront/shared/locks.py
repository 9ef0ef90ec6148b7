"""Keyed re-entrant locks.

Serializes work on the same product, coupon or order-number allocation
across request threads while unrelated keys proceed in parallel.
"""

import threading
from contextlib import contextmanager


class KeyedLocks:
    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def _lock_for(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, *keys: str):
        """Acquire the locks for ``keys`` in sorted order and release them in reverse.

        Sorting gives every caller the same acquisition order, so two callers
        locking overlapping key sets cannot deadlock.
        """
        ordered = sorted({str(k) for k in keys if k})
        acquired = []
        try:
            for key in ordered:
                lock = self._lock_for(key)
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()


# Process-wide registry shared by the stock ledger, coupon usage and the order pipeline
locks = KeyedLocks()
