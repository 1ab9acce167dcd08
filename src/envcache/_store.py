"""Configuration store protocol and in-memory implementation."""

from __future__ import annotations

from typing import Any, Hashable, Mapping, Protocol, runtime_checkable

from ._types import UNDEFINED


@runtime_checkable
class ConfigStore(Protocol):
    """Abstraction over where raw (unresolved) configuration lives.

    ``read`` returns ``UNDEFINED`` for keys that are not set, so ``None``
    remains a legitimate configuration value.
    """

    def read(self, namespace: Hashable, key: Hashable) -> Any:
        ...

    def write(self, namespace: Hashable, key: Hashable, value: Any) -> None:
        ...


class InMemoryConfigStore:
    """Dict-backed store keyed by namespace, then key.

    >>> store = InMemoryConfigStore({"app": {"port": 4000}})
    >>> store.read("app", "port")
    4000
    >>> store.read("app", "host")
    UNDEFINED
    """

    def __init__(self, data: Mapping[Hashable, Mapping[Hashable, Any]] | None = None) -> None:
        self._data: dict[Hashable, dict[Hashable, Any]] = {}
        if data:
            self.load(data)

    # -- Protocol methods ---------------------------------------------------

    def read(self, namespace: Hashable, key: Hashable) -> Any:
        return self._data.get(namespace, {}).get(key, UNDEFINED)

    def write(self, namespace: Hashable, key: Hashable, value: Any) -> None:
        self._data.setdefault(namespace, {})[key] = value

    # -- Mutation helpers ---------------------------------------------------

    def set(self, namespace: Hashable, key: Hashable, value: Any) -> None:
        self.write(namespace, key, value)

    def unset(self, namespace: Hashable, key: Hashable) -> None:
        entries = self._data.get(namespace)
        if entries is None:
            return
        entries.pop(key, None)
        if not entries:
            del self._data[namespace]

    def load(self, data: Mapping[Hashable, Mapping[Hashable, Any]]) -> None:
        """Merge ``{namespace: {key: value}}`` into the store."""
        for namespace, entries in data.items():
            for key, value in entries.items():
                self.write(namespace, key, value)

    def namespaces(self) -> list[Hashable]:
        return list(self._data)

    def items(self, namespace: Hashable) -> list[tuple[Hashable, Any]]:
        return list(self._data.get(namespace, {}).items())
