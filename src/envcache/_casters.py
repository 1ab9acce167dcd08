"""Transforms and cast helpers for environment values.

A *transform* receives the root-to-leaf path of a reference and the raw
string read from the environment. Plain one-argument casters (``int``,
``Csv()``, ``Choices(...)``) are lifted into transforms with :func:`cast` or
dispatched per path with :func:`by_path`.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from pydantic import TypeAdapter, ValidationError


def identity_transform(path: tuple, value: str) -> Any:
    """Default transform: returns the environment string unchanged."""
    return value


# ---------------------------------------------------------------------------
# Bool caster
# ---------------------------------------------------------------------------

_TRUTHY = frozenset({"1", "true", "yes", "on", "t", "y"})
_FALSY = frozenset({"0", "false", "no", "off", "f", "n", ""})


def _cast_bool(value: Any) -> bool:
    """Cast a value to ``bool``, handling common string representations.

    Raises ``ValueError`` for unrecognised strings.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in _TRUTHY:
            return True
        if lower in _FALSY:
            return False
        raise ValueError(f"Cannot cast {value!r} to bool")
    raise ValueError(f"Cannot cast {type(value).__name__} to bool")


def _caster(fn: Callable[[Any], Any] | type) -> Callable[[Any], Any]:
    if fn is bool:
        return _cast_bool
    return fn


# ---------------------------------------------------------------------------
# Transform builders
# ---------------------------------------------------------------------------


def cast(fn: Callable[[Any], Any] | type) -> Callable[[tuple, str], Any]:
    """Apply the same caster to every environment value, ignoring the path.

    >>> cast(int)(("app", "port"), "8080")
    8080
    """
    caster = _caster(fn)

    def transform(path: tuple, value: str) -> Any:
        return caster(value)

    return transform


def typed(tp: Any) -> Callable[[tuple, str], Any]:
    """Validate every environment value into ``tp`` using pydantic.

    >>> typed(list[int])(("app", "ports"), "[1, 2]")
    [1, 2]
    """
    adapter = TypeAdapter(tp)

    def transform(path: tuple, value: str) -> Any:
        try:
            return adapter.validate_strings(value)
        except ValidationError:
            # Containers and models are read as JSON documents.
            return adapter.validate_json(value)

    return transform


def by_path(
    casters: Mapping[Sequence[Any], Callable[[Any], Any] | type],
    fallback: Callable[[tuple, str], Any] = identity_transform,
) -> Callable[[tuple, str], Any]:
    """Dispatch on the exact root-to-leaf path of each reference.

    >>> t = by_path({("repo", "pool_size"): int})
    >>> t(("repo", "pool_size"), "10"), t(("repo", "url"), "ecto://")
    (10, 'ecto://')
    """
    table = {tuple(path): _caster(fn) for path, fn in casters.items()}

    def transform(path: tuple, value: str) -> Any:
        caster = table.get(tuple(path))
        if caster is None:
            return fallback(path, value)
        return caster(value)

    return transform


# ---------------------------------------------------------------------------
# Csv
# ---------------------------------------------------------------------------


class Csv:
    """Split a string into a list, with optional per-element casting.

    >>> Csv()("a, b, c")
    ['a', 'b', 'c']
    >>> Csv(cast=int)("1,2,3")
    [1, 2, 3]
    """

    def __init__(
        self,
        cast: Callable[[str], Any] = str,
        delimiter: str = ",",
        strip: bool = True,
    ) -> None:
        self.cast = _caster(cast)
        self.delimiter = delimiter
        self.strip = strip

    def __call__(self, value: str) -> list[Any]:
        parts = value.split(self.delimiter)
        if self.strip:
            parts = [p.strip() for p in parts]
        return [self.cast(p) for p in parts if p]


# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------


class Choices:
    """Validate that a value is one of a fixed set of choices.

    >>> Choices(["debug", "info", "warning"])("info")
    'info'
    """

    def __init__(
        self,
        choices: Sequence[Any],
        cast: Callable[[Any], Any] = str,
    ) -> None:
        self.choices = choices
        self.cast = _caster(cast)

    def __call__(self, value: Any) -> Any:
        casted = self.cast(value)
        if casted not in self.choices:
            raise ValueError(
                f"{casted!r} is not a valid choice. Must be one of {list(self.choices)}"
            )
        return casted
