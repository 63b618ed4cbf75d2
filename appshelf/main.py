"""
appshelf — CLI entrypoint.

Usage:
    python -m appshelf.main             # interactive menu
    python -m appshelf.main install 1,3,7-10
    python -m appshelf.main update --check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from appshelf import __version__
from appshelf.core.config.session import SessionConfig
from appshelf.core.observability.logging_config import setup_logging
from appshelf.core.use_cases.install import InstallResult
from appshelf.errors import SelectionError
from appshelf.ui.cli.common import fatal_errors, get_session, print_report


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="appshelf")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to catalog.yml (default: bundled catalog).",
)
@click.option(
    "--state-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding state.json (default: ./.appshelf).",
)
@click.option("--mock", is_flag=True, help="Use mock backend (no real installs).")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait for each winget call (default: no limit).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    catalog_path: Path | None,
    state_dir: Path | None,
    mock: bool,
    timeout: float | None,
) -> None:
    """appshelf — install and update curated desktop apps via winget."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    # Flags win over APPSHELF_LOG_LEVEL; None lets the env var decide
    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    elif quiet:
        log_level = "ERROR"
    else:
        log_level = None

    config = SessionConfig.from_env(
        state_dir=state_dir,
        catalog_path=catalog_path,
        backend_timeout=timeout,
        mock=mock,
        log_level=log_level,
    )

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(config)
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is None:
        ctx.invoke(menu)


@cli.command()
@click.pass_context
def menu(ctx: click.Context) -> None:
    """Open the interactive menu."""
    from appshelf.ui.cli.menu import run_menu

    run_menu(get_session(ctx))


@cli.command()
@click.argument("selection", required=False)
@click.option(
    "--package", "-p", "packages", multiple=True, help="Install by winget package id."
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    selection: str | None,
    packages: tuple[str, ...],
    as_json: bool,
) -> None:
    """Install apps by catalog number, e.g. ``install 1,3,7-10``.

    Examples:

        appshelf install 2

        appshelf install 1,3,7-10

        appshelf install -p Mozilla.Firefox
    """
    from appshelf.core.services.selection import resolve_selection
    from appshelf.core.use_cases.install import install_apps

    if not selection and not packages:
        raise click.UsageError("Give a SELECTION like 1,3,7-10 or --package ID.")

    session = get_session(ctx)
    package_ids = list(packages)
    if selection:
        try:
            entries = resolve_selection(selection, session.catalog)
        except SelectionError as e:
            raise click.BadParameter(str(e), param_hint="SELECTION") from e
        package_ids = [e.package_id for e in entries] + package_ids

    with fatal_errors():
        result = install_apps(session, package_ids)

    _finish_install(ctx, result, as_json)


@cli.command()
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def bundle(ctx: click.Context, name: str, as_json: bool) -> None:
    """Install every app in bundle NAME."""
    from appshelf.core.use_cases.install import install_bundle

    session = get_session(ctx)
    with fatal_errors():
        result = install_bundle(session, name)

    _finish_install(ctx, result, as_json)


def _finish_install(ctx: click.Context, result: InstallResult, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error or (result.report and result.report.failed > 0):
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    assert report is not None
    title = f"bundle {result.bundle}" if result.bundle else "install"
    click.secho(f"\n📦 {title} — {report.total} app(s)", fg="cyan", bold=True)
    print_report(report, verbose=ctx.obj.get("verbose", False))

    if report.failed > 0:
        click.echo()
        sys.exit(1)
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def bundles(ctx: click.Context, as_json: bool) -> None:
    """List the bundles defined in the catalog."""
    catalog = get_session(ctx).catalog

    if as_json:
        data = {name: b.model_dump() for name, b in catalog.bundles.items()}
        click.echo(json.dumps(data, indent=2))
        return

    if not catalog.bundles:
        click.secho("⚠️  No bundles defined", fg="yellow")
        return

    click.secho("🎁 Bundles:", fg="cyan", bold=True)
    for b in catalog.bundles.values():
        click.secho(f"   {b.name}", fg="white", bold=True, nl=False)
        click.echo(f"  — {b.description}" if b.description else "")
        for package_id in b.apps:
            click.echo(f"      • {catalog.display_name(package_id)}")
    click.echo()


@cli.command("catalog")
@click.option("--category", default=None, help="Only show one category.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def catalog_cmd(ctx: click.Context, category: str | None, as_json: bool) -> None:
    """List installable apps with their numbers."""
    session = get_session(ctx)
    catalog = session.catalog
    entries = catalog.in_category(category) if category else catalog.apps

    if as_json:
        click.echo(json.dumps([e.model_dump() for e in entries], indent=2))
        return

    if not entries:
        click.secho(f"⚠️  No apps in category '{category}'", fg="yellow")
        return

    categories = [category] if category else catalog.categories()
    for cat in categories:
        click.secho(f"\n   {cat}", fg="cyan", bold=True)
        for entry in catalog.in_category(cat):
            marker = " ✓" if session.state.get(entry.package_id) else ""
            click.echo(f"     {entry.local_id:>3}  {entry.display_name:<28} {entry.package_id}{marker}")
    click.echo()


@cli.command()
@click.option("--check", "check_only", is_flag=True, help="Only list available updates.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def update(ctx: click.Context, check_only: bool, as_json: bool) -> None:
    """Check and apply updates for managed apps (pinned apps are skipped)."""
    from appshelf.core.use_cases.update import apply_updates, check_updates

    session = get_session(ctx)
    with fatal_errors():
        result = check_updates(session) if check_only else apply_updates(session)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.report and result.report.failed > 0:
            sys.exit(1)
        return

    if not session.state.managed_apps:
        click.secho("⚠️  No managed apps yet. Install something first.", fg="yellow")
        return

    pinned = f", {result.pinned} pinned" if result.pinned else ""
    click.secho(f"\n⬆ Updates — {result.checked} checked{pinned}", fg="cyan", bold=True)

    if not result.candidates:
        click.secho("   ✅ All managed apps are up to date", fg="green")
        click.echo()
        return

    if check_only:
        for c in result.candidates:
            click.echo(f"   • {c.display_name}  ({c.package_id})")
        click.echo()
        return

    report = result.report
    assert report is not None
    print_report(report, verbose=ctx.obj.get("verbose", False))
    if report.failed > 0:
        click.echo()
        sys.exit(1)
    click.echo()


@cli.command()
@click.option("--limit", "-n", default=20, show_default=True, type=click.IntRange(min=1),
              help="Number of entries to show.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def history(ctx: click.Context, limit: int, as_json: bool) -> None:
    """Show recent installs, updates and pin changes."""
    from appshelf.core.persistence.audit import AuditWriter

    entries = AuditWriter(ctx.obj["config"].audit_path).read_recent(limit)

    if as_json:
        click.echo(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return

    if not entries:
        click.secho("⚠️  No history yet", fg="yellow")
        return

    status_colors = {"ok": "green", "partial": "yellow", "failed": "red"}
    click.secho(f"🕘 Last {len(entries)} action(s):", fg="cyan", bold=True)
    for entry in reversed(entries):
        when = entry.timestamp[:19].replace("T", " ")
        click.echo(f"   {when}  {entry.operation_type:<8} ", nl=False)
        click.secho(f"{entry.status:<8}", fg=status_colors.get(entry.status, "white"), nl=False)
        click.echo(f" {entry.succeeded}/{len(entry.packages)}  {', '.join(entry.packages)}")
        for error in entry.errors:
            click.secho(f"      ✗ {error}", fg="red")
    click.echo()


@cli.command()
@click.option("--bootstrap", is_flag=True, help="Try to register winget if it is missing.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def doctor(ctx: click.Context, bootstrap: bool, as_json: bool) -> None:
    """Check that the package backend is installed and working."""
    from appshelf.adapters import create_backend
    from appshelf.core.services.bootstrap import bootstrap_backend, check_backend

    backend = ctx.obj.get("backend") or create_backend(ctx.obj["config"])
    status = bootstrap_backend(backend) if bootstrap else check_backend(backend)

    if as_json:
        click.echo(json.dumps(status.to_dict(), indent=2))
        sys.exit(0 if status.available else 1)

    if status.available:
        version = f" {status.version}" if status.version else ""
        click.secho(f"✅ {status.name}{version} — {status.message}", fg="green")
        return

    click.secho(f"❌ {status.message}", fg="red")
    if not bootstrap:
        click.echo("   Run 'appshelf doctor --bootstrap' to try registering it.")
    sys.exit(1)


# ── Register sub-command groups from appshelf/ui/cli/ ──────────────

from appshelf.ui.cli.managed import managed  # noqa: E402

cli.add_command(managed)


def main() -> None:
    """Console-script entry point."""
    with fatal_errors():
        cli()


if __name__ == "__main__":
    main()
