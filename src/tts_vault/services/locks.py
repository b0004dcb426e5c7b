"""
Per-key locking.

Serializes work on the same content key within one process. Locks are
reference counted and dropped once no thread holds or waits on them, so
the table does not grow with the number of distinct keys seen.

Usage:
    locks = KeyedLock()
    with locks.hold(key):
        ...  # only one thread per key in here

This only coordinates threads of a single process. Separate workers or
replicas can still race on the same key.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator


@dataclass
class _Entry:
    lock: threading.Lock
    refs: int = 0


class KeyedLock:
    """A lazily populated table of one lock per key."""

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: Dict[str, _Entry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry(lock=threading.Lock())
                self._entries[key] = entry
            entry.refs += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._guard:
                entry.refs -= 1
                if entry.refs == 0:
                    del self._entries[key]
