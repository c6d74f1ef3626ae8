"""CLI entry point for browsing sessions.

Allows listing and reading sessions of every supported tool:
    python -m session_lens.cli list
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import click

from session_lens.catalog import (
    SessionCatalog,
    build_resume_command,
    filter_sessions,
    find_session,
    sort_sessions,
)
from session_lens.config import Config, load_config
from session_lens.logging import setup_logging
from session_lens.models import SessionMessage, SessionMeta
from session_lens.providers import SessionLoadError
from session_lens.store import SessionStore

RESUME_EXTRA_ARGS_KEY = "resume.extra_args"


def format_timestamp(ts: int | None) -> str:
    """Format epoch milliseconds for display."""
    if ts is None:
        return "-"
    try:
        return datetime.fromtimestamp(ts / 1000).strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, OverflowError, OSError):
        return str(ts)


def print_session(meta: SessionMeta, alias: str | None, verbose: bool = False) -> None:
    """Print one session line."""
    name = alias or meta.title or meta.session_id
    click.echo(
        f"\033[36m[{format_timestamp(meta.last_active_at)}]\033[0m "
        f"\033[32m{meta.provider_id}\033[0m \033[1m{name}\033[0m"
    )
    click.echo(f"ID: {meta.session_id}")
    if meta.project_dir:
        click.echo(f"Project: {meta.project_dir}")
    if verbose:
        click.echo(f"Path: {meta.source_path}")
        if meta.resume_command:
            click.echo(f"Resume: {meta.resume_command}")
    click.echo("-" * 40)


def print_message(message: SessionMessage) -> None:
    """Print one message."""
    role = message.role
    if message.tool_name:
        role = f"{role}: {message.tool_name}"
    click.echo(f"\033[36m[{format_timestamp(message.ts)}]\033[0m ({role})")
    click.echo(f"\n{message.content}\n")
    click.echo("-" * 40)


def _config(ctx: click.Context) -> Config:
    return ctx.obj["config"]


def _open_store(ctx: click.Context) -> SessionStore:
    return SessionStore(_config(ctx).store_db)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to config.yaml",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """Browse AI coding assistant sessions."""
    config = load_config(config_path)
    setup_logging(
        "cli",
        log_dir=config.log_dir,
        level=logging.DEBUG if verbose else logging.INFO,
        console=verbose,
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command("list")
@click.option("--provider", help="Filter by provider (e.g. claude, codex)")
@click.option("--query", "-q", help="Match alias, title, project or session id")
@click.option("--renamed", is_flag=True, help="Only sessions with an alias")
@click.option("--limit", "-n", default=50, help="Number of results")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.option("--verbose", "-v", is_flag=True, help="Show more details")
@click.pass_context
def list_sessions(
    ctx: click.Context,
    provider: str | None,
    query: str | None,
    renamed: bool,
    limit: int,
    as_json: bool,
    verbose: bool,
) -> None:
    """List discovered sessions, most recent first."""
    catalog = SessionCatalog(config=_config(ctx))
    with _open_store(ctx) as store:
        aliases = store.get_all_aliases()

    sessions = sort_sessions(catalog.scan_all())
    sessions = filter_sessions(
        sessions,
        provider_id=provider,
        query=query,
        aliases=aliases,
        only_aliased=renamed,
    )[:limit]

    if as_json:
        docs = []
        for meta in sessions:
            doc = meta.to_dict()
            doc["alias"] = aliases.get(meta.key)
            docs.append(doc)
        click.echo(json.dumps(docs, indent=2))
        return

    click.echo(f"Found {len(sessions)} sessions:\n")
    for meta in sessions:
        print_session(meta, aliases.get(meta.key), verbose)


@cli.command()
@click.argument("provider")
@click.argument("source_path")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def show(ctx: click.Context, provider: str, source_path: str, as_json: bool) -> None:
    """Print the messages of one session."""
    catalog = SessionCatalog(config=_config(ctx))
    try:
        messages = catalog.load_messages(provider, source_path)
    except SessionLoadError as e:
        click.echo(f"Error loading session: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([m.to_dict() for m in messages], indent=2))
        return

    for message in messages:
        print_message(message)


@cli.command("resume-command")
@click.argument("provider")
@click.argument("session_id")
@click.pass_context
def resume_command(ctx: click.Context, provider: str, session_id: str) -> None:
    """Print the command that resumes a session."""
    catalog = SessionCatalog(config=_config(ctx))
    try:
        sessions = catalog.provider(provider).scan()
    except SessionLoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    meta = find_session(sessions, provider, session_id)
    if meta is None:
        click.echo(f"Session not found: {provider}:{session_id}", err=True)
        sys.exit(1)

    with _open_store(ctx) as store:
        extra_args = store.get_config(RESUME_EXTRA_ARGS_KEY)

    command = build_resume_command(meta, extra_args)
    if command is None:
        click.echo(f"Provider {provider} has no resume command", err=True)
        sys.exit(1)

    click.echo(command)


@cli.command()
@click.pass_context
def providers(ctx: click.Context) -> None:
    """List providers and the roots they scan."""
    catalog = SessionCatalog(config=_config(ctx))
    for provider_id in catalog.provider_ids:
        provider = catalog.provider(provider_id)
        status = "found" if provider.root.exists() else "missing"
        click.echo(f"{provider_id}\t{provider.root}\t{status}")


@cli.group()
def alias() -> None:
    """Manage session aliases."""


@alias.command("set")
@click.argument("session_key")
@click.argument("name")
@click.pass_context
def alias_set(ctx: click.Context, session_key: str, name: str) -> None:
    """Set the alias of SESSION_KEY (provider:session_id)."""
    with _open_store(ctx) as store:
        store.set_alias(session_key, name)


@alias.command("rm")
@click.argument("session_key")
@click.pass_context
def alias_rm(ctx: click.Context, session_key: str) -> None:
    """Remove the alias of SESSION_KEY."""
    with _open_store(ctx) as store:
        store.delete_alias(session_key)


@alias.command("list")
@click.pass_context
def alias_list(ctx: click.Context) -> None:
    """List all aliases."""
    with _open_store(ctx) as store:
        aliases = store.get_all_aliases()
    for session_key, name in sorted(aliases.items()):
        click.echo(f"{session_key}\t{name}")


@cli.group("config")
def config_group() -> None:
    """Read and write stored settings."""


@config_group.command("get")
@click.argument("key")
@click.pass_context
def config_get(ctx: click.Context, key: str) -> None:
    with _open_store(ctx) as store:
        value = store.get_config(key)
    if value is None:
        sys.exit(1)
    click.echo(value)


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    with _open_store(ctx) as store:
        store.set_config(key, value)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
