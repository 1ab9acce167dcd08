"""Foundation types: sentinels, lookup results, and exception classes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Sequence, Union

# ---------------------------------------------------------------------------
# Sentinels
# ---------------------------------------------------------------------------


class _Sentinel:
    """Falsy per-class singleton whose repr is its public name."""

    _instance: _Sentinel | None = None
    _name = ""

    def __init_subclass__(cls, name: str, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._instance = None
        cls._name = name

    def __new__(cls) -> _Sentinel:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return self._name

    def __bool__(self) -> bool:
        return False


class _Undefined(_Sentinel, name="UNDEFINED"):
    """Sentinel for "no value at all" (distinct from ``None``).

    Returned by stores when a key is absent and by the cache when no entry
    exists for a key.
    """


UNDEFINED = _Undefined()


class _NotFound(_Sentinel, name="NOT_FOUND"):
    """Cached outcome of a lookup whose key does not exist in the store."""


NOT_FOUND = _NotFound()


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Found:
    """A successfully resolved configuration value."""

    value: Any

    def __bool__(self) -> bool:
        return True


Result = Union[Found, _NotFound]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Base exception for config-related errors."""


class UnresolvedReferenceError(ConfigError):
    """Raised when a required environment variable is not set."""

    def __init__(self, namespace: Hashable, name: str, path: Sequence[Hashable]) -> None:
        self.namespace = namespace
        self.name = name
        self.path = tuple(path)
        super().__init__(
            f"expected environment variable {name} to be set, as required in "
            f"configuration of namespace {namespace} under path {list(self.path)!r}"
        )


class MissingKeyError(ConfigError, KeyError):
    """Raised by strict fetches when a key has no configuration value."""

    def __init__(self, namespace: Hashable, key: Hashable) -> None:
        self.namespace = namespace
        self.key = key
        super().__init__(f"no configuration value for key {key!r} of {namespace!r}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message.
        return str(self.args[0])
