"""
Process-wide named locks for collection files.

Keys: lock:collection:{resolved file path}. One re-entrant lock per key, so a thread that
already holds a collection (e.g. inside a read-modify-write transaction) can
call back into load/save without deadlocking.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Generator

_registry_lock = threading.Lock()
_locks: Dict[str, threading.RLock] = {}


def get_lock(key: str) -> threading.RLock:
    """Return the lock registered under ``key``, creating it on first use."""
    with _registry_lock:
        lock = _locks.get(key)
        if lock is None:
            lock = threading.RLock()
            _locks[key] = lock
        return lock


@contextmanager
def acquire_lock(key: str) -> Generator[None, None, None]:
    """Hold the named lock for the duration of the block. Blocks until acquired."""
    lock = get_lock(key)
    with lock:
        yield


def lock_key_collection(path: Path) -> str:
    return f"lock:collection:{Path(path).resolve()}"
