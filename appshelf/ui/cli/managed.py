"""
CLI commands for the managed set.

Thin wrappers over ``appshelf.core.use_cases.managed``.
"""

from __future__ import annotations

import json

import click

from appshelf.core.use_cases.managed import list_managed, set_pinned
from appshelf.ui.cli.common import fatal_errors, get_session


@click.group()
def managed() -> None:
    """Managed apps — list, pin, unpin."""


@managed.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """Show apps appshelf has installed or tracks."""
    session = get_session(ctx)
    listing = list_managed(session)

    if as_json:
        click.echo(json.dumps(listing.to_dict(), indent=2))
        return

    if not listing.rows:
        click.secho("⚠️  No managed apps yet", fg="yellow")
        return

    click.secho(f"📋 Managed apps ({len(listing.rows)}):", fg="cyan", bold=True)
    status_colors = {
        "installed": "green",
        "upgraded_or_ok": "green",
        "managed": "white",
        "install_failed": "red",
        "upgrade_failed": "red",
    }
    for row in listing.rows:
        pin = " 📌" if row.pinned else ""
        click.echo(f"   {row.display_name:<28} ", nl=False)
        click.secho(f"{row.last_status:<15}", fg=status_colors.get(row.last_status, "white"), nl=False)
        click.echo(f" {row.package_id}{pin}")
    click.echo()


@managed.command()
@click.argument("package_id")
@click.pass_context
def pin(ctx: click.Context, package_id: str) -> None:
    """Exclude PACKAGE_ID from updates."""
    session = get_session(ctx)
    with fatal_errors():
        changed = set_pinned(session, package_id, True)
    if changed:
        click.secho(f"📌 Pinned {package_id}", fg="green")
    else:
        click.echo(f"   {package_id} was already pinned")


@managed.command()
@click.argument("package_id")
@click.pass_context
def unpin(ctx: click.Context, package_id: str) -> None:
    """Include PACKAGE_ID in updates again."""
    session = get_session(ctx)
    with fatal_errors():
        changed = set_pinned(session, package_id, False)
    if changed:
        click.secho(f"✅ Unpinned {package_id}", fg="green")
    else:
        click.echo(f"   {package_id} was not pinned")
