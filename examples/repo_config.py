"""
Reading database configuration through envcache.

The raw configuration embeds environment references; values are resolved
once, cached, and refreshed explicitly after a deploy changes the environment.
"""

from envcache import Env, InMemoryConfigStore, by_path, setup_logging, system


# ============================================================================
# Raw configuration
# ============================================================================

store = InMemoryConfigStore(
    {
        "my_app": {
            "repo": {
                "url": system("DATABASE_URL"),
                "pool_size": system("POOL_SIZE", 10),
                "ssl": system("DATABASE_SSL", False),
            },
            "http": {"port": system("PORT", 4000)},
        }
    }
)

# Environment strings become typed values; defaults are already typed.
transform = by_path(
    {
        ("repo", "pool_size"): int,
        ("repo", "ssl"): bool,
        ("http", "port"): int,
    }
)


# ============================================================================
# Reads
# ============================================================================


def repo_settings(env: Env) -> dict:
    """Resolved repo settings; raises if DATABASE_URL is unset."""
    return env.fetch_or_raise("my_app", "repo", transform=transform)


def http_port(env: Env) -> int:
    return env.get("my_app", "http", {}, transform=transform).get("port", 4000)


def after_deploy(env: Env) -> None:
    """Pick up a changed environment for the whole app."""
    env.clear("my_app")


if __name__ == "__main__":
    setup_logging(level="DEBUG")
    with Env(store=store) as env:
        print(http_port(env))
        print(repo_settings(env))
