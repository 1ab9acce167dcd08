"""Tests for _env.py: the Env facade."""

import logging

import pytest

from envcache._cache import ResolutionCache
from envcache._casters import by_path, cast
from envcache._env import Env
from envcache._environ import FakeEnvironment
from envcache._options import ResolveOptions
from envcache._reference import system
from envcache._store import InMemoryConfigStore
from envcache._types import NOT_FOUND, UNDEFINED, Found, MissingKeyError, UnresolvedReferenceError


def _env(config=None, environ=None, cache=None) -> Env:
    return Env(
        store=InMemoryConfigStore(config),
        environ=FakeEnvironment(environ),
        cache=cache,
    )


class TestFetch:
    def test_found_and_not_found(self):
        env = _env({"env": {"bar": "baz"}})
        assert env.fetch("env", "bar") == Found("baz")
        assert env.fetch("env", "baz") is NOT_FOUND

    def test_results_survive_store_changes(self):
        env = _env({"env": {"bar": "baz"}})
        assert env.fetch("env", "bar") == Found("baz")
        assert env.fetch("env", "baz") is NOT_FOUND

        env.store.unset("env", "bar")
        env.store.set("env", "baz", "qux")

        assert env.fetch("env", "bar") == Found("baz")
        assert env.fetch("env", "baz") is NOT_FOUND

    def test_matches_refresh_on_first_read(self):
        config = {"app": {"db": {"url": system("DATABASE_URL", "sqlite://")}}}
        environ = {"DATABASE_URL": "postgres://"}
        assert _env(config, environ).fetch("app", "db") == _env(config, environ).refresh("app", "db")

    def test_second_fetch_does_not_touch_environment(self):
        env = _env({"app": {"port": system("PORT", 80)}}, {"PORT": "8080"})

        first = env.fetch("app", "port")
        assert env.environ.lookup_count == 1

        assert env.fetch("app", "port") == first == Found("8080")
        assert env.environ.lookup_count == 1

    def test_references_beside_hyphenated_keys_are_resolved(self):
        env = _env({"app": {"repo": {"url": system("DB"), "max-conns": 5}}}, {"DB": "pg://"})
        assert env.fetch_or_raise("app", "repo") == {"url": "pg://", "max-conns": 5}

    def test_none_value_is_found(self):
        env = _env({"app": {"optional": None}})
        assert env.fetch("app", "optional") == Found(None)

    def test_unresolved_reference_propagates(self):
        env = _env({"app": {"secret": system("SECRET")}})
        with pytest.raises(UnresolvedReferenceError, match=r"under path \['secret'\]"):
            env.fetch("app", "secret")
        assert env.cache.lookup("app", "secret") is UNDEFINED


class TestFetchOrRaise:
    def test_returns_plain_value(self):
        env = _env({"env": {"bar": "baz"}})
        assert env.fetch_or_raise("env", "bar") == "baz"

    def test_missing_key_raises(self):
        env = _env({"env": {"bar": "baz"}})
        with pytest.raises(MissingKeyError, match="no configuration value for key 'foo' of 'env'") as info:
            env.fetch_or_raise("env", "foo")
        assert info.value.key == "foo"
        assert info.value.namespace == "env"


class TestGet:
    def test_value_and_defaults(self):
        env = _env({"env": {"bar": "baz"}})
        assert env.get("env", "bar") == "baz"
        assert env.get("env", "baz") is None
        assert env.get("env", "foo", False) is False

    def test_unresolved_reference_returns_default(self):
        env = _env({"app": {"secret": system("SECRET")}})
        assert env.get("app", "secret", "fallback") == "fallback"
        assert env.cache.lookup("app", "secret") is UNDEFINED


class TestRefresh:
    def test_ignores_cache(self):
        env = _env()
        assert env.fetch("env", "bar") is NOT_FOUND

        env.store.set("env", "bar", "baz")
        assert env.fetch("env", "bar") is NOT_FOUND
        assert env.refresh("env", "bar") == Found("baz")
        assert env.fetch("env", "bar") == Found("baz")

    def test_caches_misses(self):
        env = _env()
        env.refresh("env", "bar")
        assert env.cache.lookup("env", "bar") is NOT_FOUND

    def test_failed_refresh_keeps_previous_entry(self):
        env = _env({"app": {"secret": system("SECRET")}}, {"SECRET": "s3cr3t"})
        assert env.fetch("app", "secret") == Found("s3cr3t")

        env.environ.unset("SECRET")
        with pytest.raises(UnresolvedReferenceError):
            env.refresh("app", "secret")
        assert env.fetch("app", "secret") == Found("s3cr3t")


class TestClear:
    def test_clear_key_rereads_store(self):
        env = _env({"env": {"bar": "baz"}})
        assert env.fetch("env", "bar") == Found("baz")

        env.store.unset("env", "bar")
        assert env.fetch("env", "bar") == Found("baz")

        env.clear("env", "bar")
        assert env.fetch("env", "bar") is NOT_FOUND

    def test_clear_key_rereads_environment(self):
        env = _env({"app": {"port": system("PORT")}}, {"PORT": "1"})
        env.fetch("app", "port")
        env.clear("app", "port")
        env.environ.set("PORT", "2")

        assert env.fetch("app", "port") == Found("2")
        assert env.environ.lookup_count == 2

    def test_clear_namespace(self):
        env = _env({"env": {"bar": "baz"}, "other": {"bar": "keep"}})
        assert env.fetch("env", "bar") == Found("baz")
        assert env.fetch("env", "foo") is NOT_FOUND
        assert env.fetch("other", "bar") == Found("keep")

        env.store.unset("env", "bar")
        env.store.set("env", "foo", "baz")
        env.store.set("other", "bar", "changed")
        env.clear("env")

        assert env.fetch("env", "bar") is NOT_FOUND
        assert env.fetch("env", "foo") == Found("baz")
        assert env.fetch("other", "bar") == Found("keep")

    def test_clear_missing_is_noop(self):
        env = _env()
        env.clear("env", "nope")
        env.clear("nope")

    def test_none_is_a_key_not_a_namespace_clear(self):
        env = _env({"env": {None: 1, "other": 2}})
        env.fetch("env", None)
        env.fetch("env", "other")

        env.clear("env", None)
        assert env.cache.keys() == [("env", "other")]


class TestResolveInPlace:
    def test_writes_resolved_value_to_store(self):
        env = _env({"app": {"repo": {"url": system("DATABASE_URL")}}}, {"DATABASE_URL": "pg://"})

        assert env.resolve_in_place("app", "repo") == Found({"url": "pg://"})
        assert env.store.read("app", "repo") == {"url": "pg://"}

    def test_bypasses_cache(self):
        env = _env({"app": {"port": system("PORT", 80)}})
        env.resolve_in_place("app", "port")
        assert len(env.cache) == 0

    def test_missing_key_writes_nothing(self):
        env = _env()
        assert env.resolve_in_place("app", "port") is NOT_FOUND
        assert env.store.read("app", "port") is UNDEFINED

    def test_unresolved_reference_propagates(self):
        env = _env({"app": {"secret": system("SECRET")}})
        with pytest.raises(UnresolvedReferenceError):
            env.resolve_in_place("app", "secret")
        assert env.store.read("app", "secret") == system("SECRET")


class TestApplyConfigChange:
    def test_cache_is_authoritative_after_change(self):
        env = _env({"env": {"foo": "foo", "bar": "bar"}})
        assert env.fetch("env", "foo") == Found("foo")
        assert env.fetch("env", "bar") == Found("bar")

        env.apply_config_change("env", [("bar", "baz")], [("baz", "baz")], ["foo"])
        env.store.unset("env", "bar")

        assert env.fetch("env", "bar") == Found("baz")
        assert env.fetch("env", "baz") == Found("baz")
        assert env.fetch("env", "foo") is NOT_FOUND

    def test_changed_values_are_resolved(self):
        env = _env(environ={"PORT": "8080"})
        env.apply_config_change(
            "app",
            changed=[("http", {"port": system("PORT")})],
            transform=cast(int),
        )
        assert env.fetch("app", "http") == Found({"port": 8080})

    def test_unresolved_pair_leaves_cache_untouched(self):
        env = _env({"app": {"old": "old", "a": "cached"}})
        env.fetch("app", "old")
        env.fetch("app", "a")

        with pytest.raises(UnresolvedReferenceError):
            env.apply_config_change(
                "app",
                changed=[("a", "new"), ("b", system("MISSING"))],
                removed=["old"],
            )

        assert env.cache.lookup("app", "a") == Found("cached")
        assert env.cache.lookup("app", "old") == Found("old")
        assert env.cache.lookup("app", "b") is UNDEFINED


class TestOptions:
    def test_transform_by_path(self):
        env = _env(
            {"app": {"key": {"host": {"port": system("PORT")}}}},
            {"PORT": "4000"},
        )
        transform = by_path({("key", "host", "port"): int})
        assert env.fetch_or_raise("app", "key", transform=transform) == {"host": {"port": 4000}}

    def test_options_model_and_mapping(self):
        env = _env({"app": {"port": system("PORT")}}, {"PORT": "4000"})
        assert env.refresh("app", "port", ResolveOptions(transform=cast(int))) == Found(4000)
        assert env.refresh("app", "port", {"transform": cast(str)}) == Found("4000")

    def test_unknown_options_are_ignored(self):
        env = _env({"app": {"port": 1}})
        assert env.fetch("app", "port", {"unknown": True}) == Found(1)


class TestSharedCache:
    def test_facades_share_invalidation(self):
        cache = ResolutionCache()
        config = {"app": {"port": 1}}
        first = _env(config, cache=cache)
        second = _env(config, cache=cache)

        first.fetch("app", "port")
        assert ("app", "port") in second.cache
        second.clear("app")
        assert len(first.cache) == 0


class TestLifecycle:
    def test_context_manager_clears_cache(self):
        with _env({"app": {"port": 1}}) as env:
            env.fetch("app", "port")
            assert len(env.cache) == 1
        assert len(env.cache) == 0

    def test_defaults(self):
        env = Env()
        assert isinstance(env.store, InMemoryConfigStore)
        assert env.fetch("app", "anything") is NOT_FOUND


class TestLogging:
    def test_unconfigured_reads_write_nothing(self, capsys):
        env = _env({"app": {"port": system("PORT", 80)}})
        env.fetch("app", "port")
        env.fetch("app", "port")
        env.clear("app")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "cache_miss" not in captured.err

    def test_events_go_to_stdlib_logging(self, caplog):
        caplog.set_level(logging.DEBUG, logger="envcache")
        env = _env({"app": {"secret": system("SECRET")}})

        env.get("app", "secret")

        events = [r.msg["event"] for r in caplog.records if isinstance(r.msg, dict)]
        assert "cache_miss" in events
        assert "config_get_unresolved" in events
