"""In-process presence cache for entities that are already synced."""

from __future__ import annotations

import threading
from typing import Hashable, Set


class DedupCache:
    """
    Remembers ids that have already been written to the store.

    Entries never expire. This only saves writes; concurrent duplicate
    writes are resolved by the store's upsert.
    """

    def __init__(self) -> None:
        self._keys: Set[Hashable] = set()
        self._lock = threading.Lock()

    def has(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._keys

    def mark(self, key: Hashable) -> None:
        with self._lock:
            self._keys.add(key)
