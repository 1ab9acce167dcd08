"""The environment reference marker embedded in configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ._types import UNDEFINED, _Undefined


@dataclass(frozen=True)
class SystemRef:
    """Placeholder for a value read from a process environment variable.

    ``SystemRef("PORT")`` is required: resolution fails when ``PORT`` is unset.
    ``SystemRef("PORT", 80)`` falls back to ``80`` (returned as-is, never
    passed through a transform).
    """

    name: str
    default: Any = UNDEFINED

    @property
    def has_default(self) -> bool:
        return not isinstance(self.default, _Undefined)

    def __repr__(self) -> str:
        if self.has_default:
            return f"system({self.name!r}, {self.default!r})"
        return f"system({self.name!r})"


def system(name: str, default: Any = UNDEFINED) -> SystemRef:
    """Build an environment reference.

    >>> system("DATABASE_URL")
    system('DATABASE_URL')
    >>> system("PORT", 4000).default
    4000
    """
    if not isinstance(name, str) or not name:
        raise TypeError(f"environment variable name must be a non-empty string, got {name!r}")
    return SystemRef(name, default)
