"""Recursive resolution of environment references inside configuration values.

Resolution rules, per value:

1. ``SystemRef`` with a default, variable unset: the default, returned as-is
   (not transformed, not resolved further).
2. ``SystemRef``, variable set: ``transform(path, value)``.
3. ``SystemRef`` without a default, variable unset: ``UnresolvedReferenceError``.
4. ``dict`` whose keys are all strings: a new dict with each value resolved.
5. Anything else: returned unchanged. Lists and tuples are opaque.

The path is carried leaf-first (each key is prepended while descending) and
only reversed into root-to-leaf order when a reference is actually resolved.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable

from ._environ import EnvironmentProvider
from ._logging import get_logger
from ._reference import SystemRef
from ._types import UnresolvedReferenceError

logger = get_logger(__name__)

Transform = Callable[[tuple, str], Any]


def is_walkable(value: Any) -> bool:
    """True for string-keyed dicts, the only containers resolution descends into."""
    return isinstance(value, dict) and all(isinstance(key, str) for key in value)


def _resolve_reference(
    ref: SystemRef,
    namespace: Hashable,
    path: tuple,
    transform: Transform,
    environ: EnvironmentProvider,
) -> Any:
    raw = environ.lookup(ref.name)

    if raw is None:
        if ref.has_default:
            return ref.default

        root_to_leaf = tuple(reversed(path))
        logger.warning(
            "env_reference_unresolved",
            namespace=namespace,
            variable=ref.name,
            path=list(root_to_leaf),
        )
        raise UnresolvedReferenceError(namespace, ref.name, root_to_leaf)

    return transform(tuple(reversed(path)), raw)


def resolve(
    value: Any,
    namespace: Hashable,
    path: tuple,
    transform: Transform,
    environ: EnvironmentProvider,
) -> Any:
    """Return ``value`` with every environment reference substituted.

    Parameters
    ----------
    value:
        Raw configuration value, possibly containing ``SystemRef`` markers.
    namespace:
        Owning namespace, used only for error reporting.
    path:
        Leaf-first key path to ``value``. Callers resolving a top-level entry
        pass ``(key,)``.
    transform:
        ``(path, raw_string) -> value`` applied to every string read from the
        environment. Defaults are never passed through it.
    environ:
        Environment provider consulted for each reference.
    """
    if isinstance(value, SystemRef):
        return _resolve_reference(value, namespace, tuple(path), transform, environ)

    if is_walkable(value):
        return {
            key: resolve(item, namespace, (key, *path), transform, environ)
            for key, item in value.items()
        }

    return value
