"""Per-archive exclusive locks."""

import threading
import weakref
from pathlib import Path


class NamedLocks:
    """Hands out one lock per resolved path.

    Writers to the same archive serialize on its lock; writers to different
    archives never contend. Locks are reentrant so a writer can hold the lock
    across nested helpers. The registry only keeps weak references: a lock
    lives as long as some caller holds it.
    """

    def __init__(self):
        self._locks: weakref.WeakValueDictionary[str, threading.RLock] = (
            weakref.WeakValueDictionary()
        )
        self._guard = threading.Lock()

    def get(self, path: Path) -> threading.RLock:
        key = str(path.resolve())
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


# Process-wide registry so separate repository instances pointing at the same
# file still exclude each other.
archive_locks = NamedLocks()
