"""Serialized form of environment references.

JSON (and similar formats) cannot express ``SystemRef`` directly, so a
reference is written as a single-key object::

    {"$system": ["DATABASE_URL"]}          # required
    {"$system": ["PORT", 4000]}            # with default

Any other shape, including a ``$system`` list of the wrong length, is left
as ordinary data.
"""

from __future__ import annotations

from typing import Any

from ._reference import SystemRef
from ._resolver import is_walkable

MARKER = "$system"


def _as_reference(obj: dict) -> SystemRef | None:
    if len(obj) != 1 or MARKER not in obj:
        return None

    args = obj[MARKER]
    if not isinstance(args, list) or not args or not isinstance(args[0], str):
        return None
    if len(args) == 1:
        return SystemRef(args[0])
    if len(args) == 2:
        return SystemRef(args[0], args[1])
    return None


def decode_references(obj: Any) -> Any:
    """Replace every serialized reference in ``obj`` with a ``SystemRef``.

    >>> decode_references({"port": {"$system": ["PORT", 4000]}})
    {'port': system('PORT', 4000)}
    """
    if isinstance(obj, dict):
        ref = _as_reference(obj)
        if ref is not None:
            return ref
        return {key: decode_references(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [decode_references(item) for item in obj]
    return obj


def encode_references(obj: Any) -> Any:
    """Inverse of :func:`decode_references`."""
    if isinstance(obj, SystemRef):
        if obj.has_default:
            return {MARKER: [obj.name, encode_references(obj.default)]}
        return {MARKER: [obj.name]}
    if isinstance(obj, dict):
        return {key: encode_references(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [encode_references(item) for item in obj]
    return obj


def iter_references(obj: Any, path: tuple = ()) -> list[tuple[tuple, SystemRef]]:
    """List ``(path, ref)`` for every reference that resolution would substitute.

    Follows the resolver: only string-keyed dicts are descended into, so
    references inside lists or other containers are not listed.
    """
    found: list[tuple[tuple, SystemRef]] = []
    if isinstance(obj, SystemRef):
        found.append((path, obj))
    elif is_walkable(obj):
        for key, value in obj.items():
            found.extend(iter_references(value, (*path, key)))
    return found
