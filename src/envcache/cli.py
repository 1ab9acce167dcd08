"""Command-line inspection of environment-referencing configuration files."""

from __future__ import annotations

import json
import sys
from typing import Any

import click

from ._codec import decode_references, encode_references, iter_references
from ._env import Env
from ._environ import OsEnvironment
from ._logging import setup_logging
from ._store import InMemoryConfigStore
from ._types import ConfigError, Found


def _load_store(path: str) -> InMemoryConfigStore:
    with open(path, encoding="utf-8") as fh:
        data = decode_references(json.load(fh))

    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        raise click.BadParameter(
            "expected a JSON object of the form {namespace: {key: value}}",
            param_hint="FILE",
        )
    return InMemoryConfigStore(data)


def _dump(value: Any) -> str:
    return json.dumps(encode_references(value), indent=2, sort_keys=True, default=str)


@click.group("envcache")
@click.option("--log-level", default="WARNING", show_default=True, help="Minimum log level.")
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default="console",
    show_default=True,
)
def main(log_level: str, log_format: str) -> None:
    """Resolve environment references in configuration files."""
    setup_logging(level=log_level, format=log_format)


@main.command("resolve")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("namespace")
@click.argument("key")
@click.option("--strict/--no-strict", default=False, help="Fail when the key is missing.")
def resolve_command(file: str, namespace: str, key: str, strict: bool) -> None:
    """Print the resolved value of KEY in NAMESPACE as JSON."""
    env = Env(store=_load_store(file), environ=OsEnvironment())

    try:
        if strict:
            click.echo(_dump(env.fetch_or_raise(namespace, key)))
            return
        result = env.fetch(namespace, key)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(_dump(result.value if isinstance(result, Found) else None))


@main.command("refs")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def refs_command(file: str) -> None:
    """List every environment reference in FILE."""
    store = _load_store(file)
    for namespace in store.namespaces():
        for key, value in store.items(namespace):
            for path, ref in iter_references(value, (namespace, key)):
                line = f"{'.'.join(str(p) for p in path)} {ref.name}"
                if ref.has_default:
                    line += f" [default: {json.dumps(encode_references(ref.default), default=str)}]"
                click.echo(line)


if __name__ == "__main__":
    main()
