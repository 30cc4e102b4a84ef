# backend/core/locks.py

"""
In-process locks keyed by an identifier (customer id, order id).

These serialise work on one key inside a single process. Cross-process
safety comes from row locks in the database.
"""

from contextlib import contextmanager
from typing import Dict, Hashable, Iterator
import threading


class KeyedLock:
    """One mutex per key, dropped again once nobody holds or waits on it"""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._waiters: Dict[Hashable, int] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._waiters[key] = self._waiters.get(key, 0) + 1

        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._waiters[key] -= 1
                if self._waiters[key] == 0:
                    del self._waiters[key]
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
