from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator


class KeyedLock:
    """Per-process lock table keyed by entity id.

    Locks for several keys are always taken in sorted order so two callers
    contending for the same pair cannot deadlock.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._refs: Dict[str, int] = {}

    def _checkout(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            self._refs[key] = self._refs.get(key, 0) + 1
            return lock

    def _release(self, key: str) -> None:
        with self._guard:
            self._refs[key] -= 1
            if self._refs[key] == 0:
                del self._refs[key]
                del self._locks[key]

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        held: list[tuple[str, threading.Lock]] = []
        try:
            for key in sorted(set(keys)):
                lock = self._checkout(key)
                try:
                    lock.acquire()
                except BaseException:
                    self._release(key)
                    raise
                held.append((key, lock))
            yield
        finally:
            for key, lock in reversed(held):
                lock.release()
                self._release(key)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
