"""
Winget backend — drive the Windows Package Manager CLI.

Every call is non-interactive: silent installers, package and source
agreements accepted up front, interactivity disabled. Winget has no
dry-run for ``upgrade``, so the check mode asks ``winget list`` for the
package filtered to upgradable entries; when nothing is pending winget
prints "No installed package found matching input criteria."
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable

from appshelf.adapters.base import PackageBackend
from appshelf.adapters.shell.command import CommandOutput, run_command
from appshelf.core.models.result import BackendResult

logger = logging.getLogger(__name__)

WINGET = "winget"

_AGREEMENTS = ["--accept-package-agreements", "--accept-source-agreements"]
_NON_INTERACTIVE = ["--disable-interactivity"]


def install_args(package_id: str) -> list[str]:
    return [
        WINGET, "install", "--id", package_id, "--exact", "--silent",
        *_AGREEMENTS, *_NON_INTERACTIVE,
    ]


def upgrade_args(package_id: str) -> list[str]:
    return [
        WINGET, "upgrade", "--id", package_id, "--exact", "--silent",
        *_AGREEMENTS, *_NON_INTERACTIVE,
    ]


def check_args(package_id: str) -> list[str]:
    return [
        WINGET, "list", "--id", package_id, "--exact", "--upgrade-available",
        "--accept-source-agreements", *_NON_INTERACTIVE,
    ]


class WingetBackend(PackageBackend):
    """Package backend backed by the ``winget`` executable.

    Args:
        timeout: Seconds per call; None (default) waits forever.
        runner: Process runner, injectable for tests.
    """

    def __init__(
        self,
        timeout: float | None = None,
        runner: Callable[..., CommandOutput] = run_command,
    ):
        self._timeout = timeout
        self._runner = runner

    @property
    def name(self) -> str:
        return "winget"

    def is_available(self) -> bool:
        return shutil.which(WINGET) is not None

    def version(self) -> str | None:
        if not self.is_available():
            return None
        out = self._runner([WINGET, "--version"], timeout=self._timeout)
        if out.exit_code != 0:
            return None
        return out.stdout.strip() or None

    def install(self, package_id: str) -> BackendResult:
        logger.info("Installing %s", package_id)
        out = self._runner(install_args(package_id), timeout=self._timeout)
        return _to_result(package_id, "install", "apply", out)

    def upgrade(self, package_id: str, *, check: bool = False) -> BackendResult:
        if check:
            logger.debug("Checking %s for updates", package_id)
            out = self._runner(check_args(package_id), timeout=self._timeout)
            return _to_result(package_id, "upgrade", "check", out)

        logger.info("Upgrading %s", package_id)
        out = self._runner(upgrade_args(package_id), timeout=self._timeout)
        return _to_result(package_id, "upgrade", "apply", out)


def _to_result(package_id: str, operation: str, mode: str, out: CommandOutput) -> BackendResult:
    return BackendResult(
        package_id=package_id,
        operation=operation,
        mode=mode,
        exit_code=out.exit_code,
        stdout=out.stdout,
        stderr=out.stderr,
        duration_ms=out.duration_ms,
    )
