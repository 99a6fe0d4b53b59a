"""ACache CLI tool."""

import asyncio
import json
import logging
from pathlib import Path

import click

from acache.cache.base import MISSING
from acache.core.exceptions import ACacheError
from acache.core.factory import BACKENDS, create_path_key_cache, open_storage
from acache.core.settings import ACacheSettings


def _run(ctx: click.Context, operation):
    """Run an async operation against the configured cache."""
    settings: ACacheSettings = ctx.obj["settings"]

    async def _with_cache():
        async with open_storage(ctx.obj["backend"], settings) as storage:
            return await operation(create_path_key_cache(storage, settings))

    try:
        return asyncio.run(_with_cache())
    except ACacheError as e:
        raise click.ClickException(str(e)) from e


def _namespace(namespace: tuple[str, ...]) -> list[str] | None:
    return list(namespace) or None


namespace_option = click.option(
    "--namespace", "-n", multiple=True, help="Namespace segment (repeat for nested namespaces)"
)


@click.group()
@click.option(
    "--backend",
    type=click.Choice(BACKENDS),
    default="filesystem",
    show_default=True,
    help="Storage backend to use",
)
@click.option("--directory", "-d", type=click.Path(path_type=Path), help="Filesystem cache directory")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, backend, directory, verbose):
    """ACache CLI - Inspect and manage caches."""
    overrides = {"cache_dir": directory} if directory is not None else {}
    settings = ACacheSettings(**overrides)
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"settings": settings, "backend": backend}


@cli.command()
@click.pass_context
def stats(ctx):
    """Show cache statistics."""

    async def _stats(cache):
        return await cache.available(), await cache.get_stats()

    available, data = _run(ctx, _stats)
    click.echo(f"Available: {'yes' if available else 'no'}")
    for name, value in data.items():
        click.echo(f"{name}: {value}")


@cli.command()
@click.argument("id")
@namespace_option
@click.pass_context
def get(ctx, id, namespace):
    """Print a cached value."""

    async def _get(cache):
        return await cache.fetch(id, _namespace(namespace))

    value = _run(ctx, _get)
    if value is MISSING:
        raise click.ClickException(f"No entry for '{id}'")
    click.echo(json.dumps(value, default=str))


@cli.command()
@click.argument("id")
@namespace_option
@click.pass_context
def ttl(ctx, id, namespace):
    """Show the remaining time-to-live of an entry."""

    async def _ttl(cache):
        return await cache.get_time_to_live(id, _namespace(namespace))

    remaining = _run(ctx, _ttl)
    if remaining is None:
        raise click.ClickException(f"No entry for '{id}'")
    click.echo("never expires" if remaining == 0 else f"{remaining}s")


@cli.command("set")
@click.argument("id")
@click.argument("value")
@click.option("--ttl", "lifetime", type=click.IntRange(min=0), help="Time-to-live in seconds (0 = never)")
@click.option("--json", "as_json", is_flag=True, help="Parse VALUE as JSON")
@namespace_option
@click.pass_context
def set_value(ctx, id, value, lifetime, as_json, namespace):
    """Store a value."""
    if as_json:
        try:
            value = json.loads(value)
        except ValueError as e:
            raise click.BadParameter(f"Invalid JSON: {e}", param_hint="VALUE")

    async def _save(cache):
        return await cache.save(id, value, lifetime, _namespace(namespace))

    if not _run(ctx, _save):
        raise click.ClickException(f"Could not store '{id}'")
    click.echo(f"Stored {id}")


@cli.command()
@click.argument("id")
@namespace_option
@click.pass_context
def delete(ctx, id, namespace):
    """Delete an entry."""

    async def _delete(cache):
        return await cache.delete(id, _namespace(namespace))

    if not _run(ctx, _delete):
        raise click.ClickException(f"No entry for '{id}'")
    click.echo(f"Deleted {id}")


@cli.command()
@namespace_option
@click.pass_context
def flush(ctx, namespace):
    """Delete all entries, or all entries of a namespace."""

    async def _flush(cache):
        return await cache.flush(_namespace(namespace))

    if not _run(ctx, _flush):
        raise click.ClickException("Flush failed")
    click.echo("Flushed " + ("/".join(namespace) if namespace else "cache"))


@cli.command()
def version():
    """Show ACache version."""
    from acache import __version__

    click.echo(f"ACache version: {__version__}")


if __name__ == "__main__":
    cli()
