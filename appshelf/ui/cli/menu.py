"""
Interactive menu — the numbered front end shown when appshelf runs
without a subcommand.

Every action persists state through its use case. Invalid input is
reported and control returns to the menu without touching state.
Leaving the menu (0, Ctrl-C or end of input) persists once more.
"""

from __future__ import annotations

import logging
from typing import Literal

import click

from appshelf.core.models.catalog import CatalogEntry
from appshelf.core.services.selection import resolve_selection
from appshelf.core.session import Session
from appshelf.core.use_cases.install import install_apps, install_bundle
from appshelf.core.use_cases.managed import list_managed
from appshelf.core.use_cases.update import apply_updates, check_updates
from appshelf.errors import SelectionError
from appshelf.ui.cli.common import fatal_errors, print_report

logger = logging.getLogger(__name__)

Answer = Literal["yes", "no", "back"]

MENU_ITEMS = (
    ("1", "Install a bundle"),
    ("2", "Browse & install apps"),
    ("3", "Check / apply updates for managed apps"),
    ("4", "Show managed apps"),
    ("0", "Exit"),
)


def ask_confirm(question: str) -> Answer:
    """Ask a Y/N/0 question until the answer is one of those."""
    while True:
        raw = click.prompt(f"{question} [Y/N/0=back]", default="", show_default=False)
        answer = raw.strip().casefold()
        if answer in ("y", "yes"):
            return "yes"
        if answer in ("n", "no"):
            return "no"
        if answer == "0":
            return "back"
        click.secho("   Please answer Y, N or 0.", fg="yellow")


def run_menu(session: Session) -> None:
    """Main loop; returns when the user chooses Exit."""
    handlers = {
        "1": _bundle_flow,
        "2": _browse_flow,
        "3": _update_flow,
        "4": _show_managed,
    }

    try:
        while True:
            _print_menu(session)
            choice = click.prompt("Choose", default="", show_default=False).strip()
            if choice == "0":
                break
            handler = handlers.get(choice)
            if handler is None:
                click.secho(f"   Invalid choice '{choice}'.", fg="yellow")
                continue
            with fatal_errors():
                handler(session)
    except click.Abort:
        click.echo()
    finally:
        with fatal_errors():
            session.persist()

    click.secho("👋 Bye", fg="cyan")


# ── Screens ─────────────────────────────────────────────────────


def _print_menu(session: Session) -> None:
    click.echo()
    click.secho("📦 appshelf", fg="cyan", bold=True)
    click.echo(f"   Managed apps: {len(session.state.managed_apps)}")
    click.echo()
    for key, label in MENU_ITEMS:
        click.echo(f"   {key}  {label}")
    click.echo()


def _bundle_flow(session: Session) -> None:
    bundles = list(session.catalog.bundles.values())
    if not bundles:
        click.secho("   No bundles defined in the catalog.", fg="yellow")
        return

    click.echo()
    click.secho("🎁 Bundles", fg="cyan", bold=True)
    for i, bundle in enumerate(bundles, start=1):
        click.echo(f"   {i}  {bundle.name:<14} {bundle.description}")
    click.echo("   0  Back")

    raw = click.prompt("Bundle", default="", show_default=False).strip()
    if raw == "0":
        return
    if not raw.isdigit() or not 1 <= int(raw) <= len(bundles):
        click.secho(f"   Invalid bundle '{raw}'.", fg="yellow")
        return

    bundle = bundles[int(raw) - 1]
    click.echo()
    for package_id in bundle.apps:
        click.echo(f"   • {session.catalog.display_name(package_id)}  ({package_id})")
    if ask_confirm(f"Install bundle '{bundle.name}'?") != "yes":
        return

    result = install_bundle(session, bundle.name)
    if result.error:
        click.secho(f"   ❌ {result.error}", fg="red")
        return
    assert result.report is not None
    click.echo()
    print_report(result.report)


def _browse_flow(session: Session) -> None:
    click.echo()
    for category in session.catalog.categories():
        click.secho(f"   {category}", fg="white", bold=True)
        for entry in session.catalog.in_category(category):
            click.echo(_catalog_line(session, entry))
    click.echo()

    raw = click.prompt("Apps to install (e.g. 1,3,7-10; 0=back)", default="", show_default=False).strip()
    if raw == "0":
        return
    try:
        entries = resolve_selection(raw, session.catalog)
    except SelectionError as e:
        click.secho(f"   ❌ {e}", fg="red")
        return

    for entry in entries:
        click.echo(f"   • {entry.display_name}  ({entry.package_id})")
    if ask_confirm(f"Install {len(entries)} app(s)?") != "yes":
        return

    result = install_apps(session, [e.package_id for e in entries])
    if result.error:
        click.secho(f"   ❌ {result.error}", fg="red")
        return
    assert result.report is not None
    click.echo()
    print_report(result.report)


def _update_flow(session: Session) -> None:
    if not session.state.managed_apps:
        click.secho("   No managed apps yet. Install something first.", fg="yellow")
        return

    click.echo("   Checking for updates...")
    result = check_updates(session)
    if not result.candidates:
        click.secho("   ✅ All managed apps are up to date", fg="green")
        return

    click.secho(f"   ⬆ Updates available ({len(result.candidates)}):", fg="yellow", bold=True)
    for c in result.candidates:
        click.echo(f"   • {c.display_name}  ({c.package_id})")
    if ask_confirm("Apply these updates?") != "yes":
        return

    applied = apply_updates(session, result.candidate_ids)
    assert applied.report is not None
    click.echo()
    print_report(applied.report)


def _show_managed(session: Session) -> None:
    listing = list_managed(session)
    click.echo()
    if not listing.rows:
        click.secho("   No managed apps yet.", fg="yellow")
        return

    click.secho(f"📋 Managed apps ({len(listing.rows)})", fg="cyan", bold=True)
    for row in listing.rows:
        pin = " 📌" if row.pinned else ""
        click.echo(f"   {row.display_name:<28} {row.last_status:<15} {row.package_id}{pin}")


def _catalog_line(session: Session, entry: CatalogEntry) -> str:
    marker = " ✓" if session.state.get(entry.package_id) else ""
    return f"     {entry.local_id:>3}  {entry.display_name}{marker}"
