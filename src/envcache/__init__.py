"""Cached resolution of environment references in application configuration.

Configuration values may embed ``system("NAME")`` / ``system("NAME", default)``
markers. ``Env`` resolves them against the process environment, caches the
result per ``(namespace, key)``, and lets callers refresh or clear entries
explicitly.
"""

from ._version import __version__
from ._cache import ResolutionCache
from ._casters import Choices, Csv, by_path, cast, identity_transform, typed
from ._codec import decode_references, encode_references, iter_references
from ._env import Env
from ._environ import EnvironmentProvider, FakeEnvironment, OsEnvironment
from ._logging import get_logger, setup_logging
from ._options import ResolveOptions
from ._reference import SystemRef, system
from ._resolver import resolve
from ._store import ConfigStore, InMemoryConfigStore
from ._testing import fake_env, patched_environ
from ._types import (
    NOT_FOUND,
    UNDEFINED,
    ConfigError,
    Found,
    MissingKeyError,
    UnresolvedReferenceError,
)

__all__ = [
    "__version__",
    # Core
    "Env",
    "ResolutionCache",
    "resolve",
    "system",
    "SystemRef",
    # Results
    "Found",
    "NOT_FOUND",
    "UNDEFINED",
    # Errors
    "ConfigError",
    "UnresolvedReferenceError",
    "MissingKeyError",
    # Collaborators
    "ConfigStore",
    "InMemoryConfigStore",
    "EnvironmentProvider",
    "OsEnvironment",
    "FakeEnvironment",
    # Transforms
    "ResolveOptions",
    "identity_transform",
    "cast",
    "typed",
    "by_path",
    "Csv",
    "Choices",
    # Serialization
    "decode_references",
    "encode_references",
    "iter_references",
    # Logging
    "get_logger",
    "setup_logging",
    # Testing
    "fake_env",
    "patched_environ",
]
