"""Thread-safe cache of resolved configuration results."""

from __future__ import annotations

import threading
from typing import Any, Hashable

from ._types import UNDEFINED, Result

CacheKey = tuple[Hashable, Hashable]


class ResolutionCache:
    """In-memory mapping of ``(namespace, key)`` to a resolved result.

    Entries hold either ``Found(value)`` or ``NOT_FOUND``; ``lookup`` returns
    ``UNDEFINED`` when no entry exists at all. One process-wide instance is
    normally shared by every ``Env`` that needs coherent invalidation.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, Result] = {}
        self._lock = threading.RLock()

    def lookup(self, namespace: Hashable, key: Hashable) -> Any:
        with self._lock:
            return self._entries.get((namespace, key), UNDEFINED)

    def store(self, namespace: Hashable, key: Hashable, result: Result) -> Result:
        with self._lock:
            self._entries[(namespace, key)] = result
        return result

    def invalidate(self, namespace: Hashable, key: Hashable) -> None:
        with self._lock:
            self._entries.pop((namespace, key), None)

    def invalidate_namespace(self, namespace: Hashable) -> int:
        """Drop every entry of ``namespace``; returns how many were removed.

        There is no per-namespace index, so this scans the whole cache.
        """
        with self._lock:
            doomed = [entry for entry in self._entries if entry[0] == namespace]
            for entry in doomed:
                del self._entries[entry]
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[CacheKey]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, entry: object) -> bool:
        with self._lock:
            return entry in self._entries

    def __repr__(self) -> str:
        return f"<ResolutionCache entries={len(self)}>"
