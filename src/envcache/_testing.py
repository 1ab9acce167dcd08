"""Test utilities."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Hashable, Iterator, Mapping

from ._environ import FakeEnvironment
from ._env import Env
from ._store import InMemoryConfigStore


@contextmanager
def fake_env(
    *,
    config: Mapping[Hashable, Mapping[Hashable, Any]] | None = None,
    environ: dict[str, str] | None = None,
) -> Iterator[Env]:
    """Yield an ``Env`` backed by an in-memory store and a fake environment.

    Usage::

        with fake_env(config={"app": {"port": system("PORT", 80)}}, environ={"PORT": "8080"}) as env:
            assert env.fetch_or_raise("app", "port") == "8080"
            env.environ.set("PORT", "9090")  # mutate inside context
    """
    env = Env(store=InMemoryConfigStore(config), environ=FakeEnvironment(environ))
    try:
        yield env
    finally:
        env.close()


@contextmanager
def patched_environ(environ: FakeEnvironment, **values: str | None) -> Iterator[FakeEnvironment]:
    """Temporarily set (``str``) or unset (``None``) variables on ``environ``."""
    previous = environ.snapshot()
    for name, value in values.items():
        if value is None:
            environ.unset(name)
        else:
            environ.set(name, value)
    try:
        yield environ
    finally:
        for name in values:
            if name in previous:
                environ.set(name, previous[name])
            else:
                environ.unset(name)
