"""The ``Env`` facade: cached reads of environment-resolved configuration.

Read path::

    fetch ──► cache hit? ──yes──► cached result
                 │no
                 ▼
              refresh: store.read ──► resolve ──► cache.store ──► result
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Mapping

from ._cache import ResolutionCache
from ._environ import EnvironmentProvider, OsEnvironment
from ._logging import get_logger
from ._options import ResolveOptions, coerce_options
from ._resolver import resolve
from ._store import ConfigStore, InMemoryConfigStore
from ._types import (
    NOT_FOUND,
    UNDEFINED,
    Found,
    MissingKeyError,
    Result,
    UnresolvedReferenceError,
    _Undefined,
)

logger = get_logger(__name__)

Options = ResolveOptions | Mapping[str, Any] | None


class Env:
    """Reads configuration from a store, resolving ``SystemRef`` markers.

    Parameters
    ----------
    store:
        Where raw configuration lives. Defaults to an empty
        ``InMemoryConfigStore``.
    environ:
        Environment variable provider. Defaults to ``OsEnvironment``.
    cache:
        Resolved-value cache. Pass a shared ``ResolutionCache`` to make several
        facades observe the same invalidations.

    Every reading operation accepts ``opts`` (a ``ResolveOptions`` or a
    mapping) and/or keyword overrides; the only recognised option is
    ``transform``.
    """

    def __init__(
        self,
        store: ConfigStore | None = None,
        environ: EnvironmentProvider | None = None,
        cache: ResolutionCache | None = None,
    ) -> None:
        self.store: ConfigStore = store if store is not None else InMemoryConfigStore()
        self.environ: EnvironmentProvider = environ if environ is not None else OsEnvironment()
        self.cache = cache if cache is not None else ResolutionCache()

    # -- Reads --------------------------------------------------------------

    def get(
        self,
        namespace: Hashable,
        key: Hashable,
        default: Any = None,
        opts: Options = None,
        **overrides: Any,
    ) -> Any:
        """Return the resolved value, or ``default``. Never raises."""
        try:
            result = self.fetch(namespace, key, opts, **overrides)
        except UnresolvedReferenceError as exc:
            logger.warning(
                "config_get_unresolved",
                namespace=namespace,
                key=key,
                variable=exc.name,
            )
            return default

        if isinstance(result, Found):
            return result.value
        return default

    def fetch(
        self,
        namespace: Hashable,
        key: Hashable,
        opts: Options = None,
        **overrides: Any,
    ) -> Result:
        """Return ``Found(value)`` or ``NOT_FOUND``, consulting the cache first."""
        cached = self.cache.lookup(namespace, key)
        if not isinstance(cached, _Undefined):
            logger.debug("cache_hit", namespace=namespace, key=key)
            return cached

        logger.debug("cache_miss", namespace=namespace, key=key)
        return self.refresh(namespace, key, opts, **overrides)

    def fetch_or_raise(
        self,
        namespace: Hashable,
        key: Hashable,
        opts: Options = None,
        **overrides: Any,
    ) -> Any:
        """Return the plain resolved value; raise ``MissingKeyError`` if unset."""
        result = self.fetch(namespace, key, opts, **overrides)
        if isinstance(result, Found):
            return result.value
        raise MissingKeyError(namespace, key)

    def refresh(
        self,
        namespace: Hashable,
        key: Hashable,
        opts: Options = None,
        **overrides: Any,
    ) -> Result:
        """Re-read ``key`` from the store, resolve it, and cache the result.

        Misses are cached as ``NOT_FOUND``. ``UnresolvedReferenceError``
        propagates and leaves any previous cache entry untouched.
        """
        result = self._load_and_resolve(namespace, key, coerce_options(opts, **overrides))
        self.cache.store(namespace, key, result)
        logger.debug(
            "config_refreshed",
            namespace=namespace,
            key=key,
            found=isinstance(result, Found),
        )
        return result

    # -- Invalidation -------------------------------------------------------

    def clear(self, namespace: Hashable, key: Any = UNDEFINED) -> None:
        """Drop the cached entry for ``key``, or every entry of ``namespace``."""
        if isinstance(key, _Undefined):
            removed = self.cache.invalidate_namespace(namespace)
            logger.debug("namespace_cleared", namespace=namespace, removed=removed)
            return

        self.cache.invalidate(namespace, key)
        logger.debug("cache_cleared", namespace=namespace, key=key)

    # -- Store-side operations ----------------------------------------------

    def resolve_in_place(
        self,
        namespace: Hashable,
        key: Hashable,
        opts: Options = None,
        **overrides: Any,
    ) -> Result:
        """Resolve ``key`` and write the resolved value back into the store.

        For consumers that read the store directly. The cache is not touched.
        """
        result = self._load_and_resolve(namespace, key, coerce_options(opts, **overrides))
        if isinstance(result, Found):
            self.store.write(namespace, key, result.value)
            logger.debug("config_resolved_in_place", namespace=namespace, key=key)
        return result

    def apply_config_change(
        self,
        namespace: Hashable,
        changed: Iterable[tuple[Hashable, Any]] = (),
        new: Iterable[tuple[Hashable, Any]] = (),
        removed: Iterable[Hashable] = (),
        opts: Options = None,
        **overrides: Any,
    ) -> None:
        """Bring the cache in line with a configuration change.

        Removed keys are cleared. Changed and new pairs carry their raw values;
        they are resolved and cached directly, without reading the store.
        Every pair is resolved before the cache is touched, so an
        ``UnresolvedReferenceError`` leaves the cache as it was.
        """
        options = coerce_options(opts, **overrides)

        updated = [
            (key, resolve(raw, namespace, (key,), options.transform, self.environ))
            for key, raw in [*changed, *new]
        ]

        removed = list(removed)
        for key in removed:
            self.clear(namespace, key)

        for key, value in updated:
            self.cache.store(namespace, key, Found(value))

        logger.debug(
            "config_change_applied",
            namespace=namespace,
            updated=len(updated),
            removed=len(removed),
        )

    # -- Lifecycle ----------------------------------------------------------

    def close(self) -> None:
        """Discard every cached result."""
        self.cache.clear()

    def __enter__(self) -> Env:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -- Internals ----------------------------------------------------------

    def _load_and_resolve(
        self,
        namespace: Hashable,
        key: Hashable,
        options: ResolveOptions,
    ) -> Result:
        raw = self.store.read(namespace, key)
        if isinstance(raw, _Undefined):
            return NOT_FOUND
        return Found(resolve(raw, namespace, (key,), options.transform, self.environ))
