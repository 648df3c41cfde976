"""flatstore CLI: inspect and edit YAML/JSON flat files from the shell.

Commands:
    flatstore init                      write a default flatstore.toml
    flatstore create PATH               create PATH if missing
    flatstore keys PATH [KEY]           list (nested) keys
    flatstore has PATH KEY              exit 0 if KEY exists, 1 otherwise
    flatstore get PATH KEY              print a value
    flatstore set PATH KEY VALUE        set a value (VALUE is parsed as YAML)
    flatstore remove PATH KEY           remove a key
    flatstore replace PATH OLD NEW      literal text replace on every line
    flatstore watch PATH                print keys whenever the file changes
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click
import yaml

from flatstore.config import StoreConfig, init_config, load_config
from flatstore.errors import FlatStoreError
from flatstore.flatfile import FlatFile
from flatstore.models import ReloadSettings
from flatstore.stores import open_store, resolve_path

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_cfg() -> StoreConfig:
    try:
        return load_config()
    except FlatStoreError as exc:
        raise click.ClickException(str(exc)) from exc


def _open(ctx: click.Context, path: str) -> FlatFile:
    cfg: StoreConfig = ctx.obj["cfg"]
    try:
        return open_store(path, cfg, path_prefix=ctx.obj["prefix"])
    except (FlatStoreError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc


def _open_existing(ctx: click.Context, path: str) -> FlatFile:
    """Like _open, but never creates PATH: read-only commands must not touch the disk."""
    try:
        resolved, _ = resolve_path(path, ctx.obj["cfg"])
    except FlatStoreError as exc:
        raise click.ClickException(str(exc)) from exc
    if not resolved.is_file():
        msg = f"No such file: {resolved}"
        raise click.ClickException(msg)
    return _open(ctx, path)


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return yaml.safe_dump(value, default_flow_style=False, sort_keys=False, allow_unicode=True).rstrip()
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse_value(text: str) -> Any:
    """Interpret text as a YAML scalar or flow collection; fall back to the raw string."""
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="flatstore")
@click.option("--prefix", default=None, help="Key prefix (overrides flatstore.toml)")
@click.pass_context
def cli(ctx: click.Context, prefix: str | None) -> None:
    """flatstore: YAML/JSON flat-file key-value stores."""
    cfg = _load_cfg()
    logging.basicConfig(level=cfg.logging.level, format="%(asctime)s %(name)s %(message)s")
    ctx.obj = {"cfg": cfg, "prefix": prefix}


# ---------------------------------------------------------------------------
# flatstore init / create
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--dir", "root", default=".", show_default=True, help="Project root")
def init(root: str) -> None:
    """Write a default flatstore.toml."""
    root_path = Path(root).resolve()
    try:
        config_path = init_config(root_path)
        click.echo(f"Created {config_path}")
    except FileExistsError:
        click.echo("flatstore.toml already exists, skipping init")


@cli.command()
@click.argument("path")
@click.pass_context
def create(ctx: click.Context, path: str) -> None:
    """Create PATH (and parent directories) if it does not exist."""
    store = _open(ctx, path)
    if store.created:
        click.echo(f"Created {store.file_path}")
    else:
        click.echo(f"Exists  {store.file_path}")


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("path")
@click.argument("key", required=False)
@click.option("--single-layer", is_flag=True, help="Only immediate children, not nested keys")
@click.pass_context
def keys(ctx: click.Context, path: str, key: str | None, single_layer: bool) -> None:
    """List the keys of PATH (or of the section at KEY)."""
    store = _open_existing(ctx, path)
    try:
        found = store.single_layer_key_set(key) if single_layer else store.key_set(key)
    except (FlatStoreError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc
    for k in sorted(found):
        click.echo(k)


@cli.command()
@click.argument("path")
@click.argument("key")
@click.pass_context
def has(ctx: click.Context, path: str, key: str) -> None:
    """Exit 0 if KEY is present in PATH, 1 otherwise."""
    store = _open_existing(ctx, path)
    try:
        present = store.has_key(key)
    except (FlatStoreError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo("true" if present else "false")
    if not present:
        raise SystemExit(1)


@cli.command()
@click.argument("path")
@click.argument("key")
@click.pass_context
def get(ctx: click.Context, path: str, key: str) -> None:
    """Print the value stored at KEY."""
    store = _open_existing(ctx, path)
    try:
        present = store.has_key(key)
        value = store.get(key)
    except (FlatStoreError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc
    if not present:
        click.echo(f"No such key: {key}", err=True)
        raise SystemExit(1)
    click.echo(_format_value(value))


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


@cli.command("set")
@click.argument("path")
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_(ctx: click.Context, path: str, key: str, value: str) -> None:
    """Set KEY to VALUE (parsed as YAML, so `8080` is a number and `[a, b]` a list)."""
    store = _open(ctx, path)
    try:
        store.set(key, _parse_value(value))
    except (FlatStoreError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command()
@click.argument("path")
@click.argument("key")
@click.pass_context
def remove(ctx: click.Context, path: str, key: str) -> None:
    """Remove KEY from PATH."""
    store = _open(ctx, path)
    try:
        store.remove(key)
    except (FlatStoreError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command()
@click.argument("path")
@click.argument("target")
@click.argument("replacement")
@click.pass_context
def replace(ctx: click.Context, path: str, target: str, replacement: str) -> None:
    """Replace every occurrence of TARGET with REPLACEMENT, line by line."""
    store = _open_existing(ctx, path)
    try:
        store.replace(target, replacement)
    except (FlatStoreError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc


# ---------------------------------------------------------------------------
# flatstore watch
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("path")
@click.option("--interval", type=float, default=None, help="Polling interval in seconds")
@click.pass_context
def watch(ctx: click.Context, path: str, interval: float | None) -> None:
    """Print the key set of PATH every time the file changes."""
    from flatstore.watcher import run

    store = _open(ctx, path)
    store.reload_settings = ReloadSettings.MANUAL
    cfg: StoreConfig = ctx.obj["cfg"]

    def _echo_keys(changed: FlatFile) -> None:
        click.echo(", ".join(sorted(changed.key_set())) or "(empty)")

    _echo_keys(store)
    run(store, _echo_keys, interval=interval or cfg.watch.interval)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
