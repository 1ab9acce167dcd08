"""Environment variable providers."""

from __future__ import annotations

import os
from collections import Counter
from typing import Protocol, runtime_checkable


@runtime_checkable
class EnvironmentProvider(Protocol):
    """Exact-name, case-sensitive lookup of environment variables."""

    def lookup(self, name: str) -> str | None:
        ...


class OsEnvironment:
    """Reads variables from the live process environment."""

    def lookup(self, name: str) -> str | None:
        return os.environ.get(name)


class FakeEnvironment:
    """Dict-backed environment for tests.

    Every ``lookup`` is counted so tests can assert whether a cached read
    touched the environment again.

    >>> env = FakeEnvironment({"PORT": "8080"})
    >>> env.lookup("PORT")
    '8080'
    >>> env.lookup_count
    1
    """

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(values or {})
        self.lookups: Counter[str] = Counter()

    # -- Protocol methods ---------------------------------------------------

    def lookup(self, name: str) -> str | None:
        self.lookups[name] += 1
        return self._values.get(name)

    # -- Mutation helpers for test setup ------------------------------------

    @property
    def lookup_count(self) -> int:
        return sum(self.lookups.values())

    def set(self, name: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"environment values must be strings, got {type(value).__name__}")
        self._values[name] = value

    def unset(self, name: str) -> None:
        self._values.pop(name, None)

    def snapshot(self) -> dict[str, str]:
        return dict(self._values)
