"""
Shared CLI helpers — session access, fatal error handling, report printing.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import click

from appshelf.adapters import create_backend
from appshelf.core.config.session import SessionConfig
from appshelf.core.engine.report import OperationReport
from appshelf.core.session import Session, open_session
from appshelf.errors import AppshelfError

logger = logging.getLogger(__name__)


@contextmanager
def fatal_errors() -> Iterator[None]:
    """Turn session-ending errors into a red message and exit status 1."""
    try:
        yield
    except AppshelfError as e:
        logger.error("Fatal: %s", e, exc_info=logger.isEnabledFor(logging.DEBUG))
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def get_session(ctx: click.Context) -> Session:
    """Open (once per process) the session described by ctx.obj['config']."""
    session = ctx.obj.get("session")
    if session is not None:
        return session

    config: SessionConfig = ctx.obj["config"]
    with fatal_errors():
        session = open_session(config, ctx.obj.get("backend") or create_backend(config))
    ctx.obj["session"] = session
    return session


def print_report(report: OperationReport, verbose: bool = False) -> None:
    """Per-package lines plus a colored summary."""
    for outcome in report.outcomes:
        label = outcome.display_name or outcome.package_id
        if outcome.ok:
            click.secho(f"   ✓ {label}", fg="green", nl=False)
            click.echo(f"  ({outcome.package_id})")
        elif outcome.failed:
            click.secho(f"   ✗ {label}", fg="red", nl=False)
            click.echo(f"  (exit {outcome.exit_code})")
            for line in outcome.message.splitlines()[: 10 if verbose else 3]:
                click.echo(f"     │ {line}")
        else:
            click.secho(f"   ⊘ {label} ", fg="yellow", nl=False)
            click.echo(f"({outcome.message})")

    click.echo()
    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(
        report.status, "white"
    )
    click.secho(
        f"   Result: {report.succeeded}/{report.total} succeeded",
        fg=status_color,
        bold=True,
    )
