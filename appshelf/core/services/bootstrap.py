"""
Backend bootstrap — check for winget and register it when missing.

On Windows, winget ships inside the "App Installer" package. When the
package is present but not registered for the current user, asking
Appx to register it by family name makes ``winget`` appear on PATH.
Anything beyond that (downloading dependencies) is left to the user.
"""

from __future__ import annotations

import logging
import platform
from collections.abc import Callable
from dataclasses import dataclass

from appshelf.adapters.base import PackageBackend
from appshelf.adapters.shell.command import CommandOutput, run_command
from appshelf.errors import BackendUnavailableError

logger = logging.getLogger(__name__)

APP_INSTALLER_FAMILY = "Microsoft.DesktopAppInstaller_8wekyb3d8bbwe"

REGISTER_COMMAND = [
    "powershell",
    "-NoProfile",
    "-NonInteractive",
    "-ExecutionPolicy",
    "Bypass",
    "-Command",
    f"Add-AppxPackage -RegisterByFamilyName -MainPackage {APP_INSTALLER_FAMILY}",
]


@dataclass
class BackendStatus:
    """Availability report for the package backend."""

    name: str
    available: bool = False
    version: str | None = None
    message: str = ""
    attempted_bootstrap: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "available": self.available,
            "version": self.version,
            "message": self.message,
            "attempted_bootstrap": self.attempted_bootstrap,
        }


def check_backend(backend: PackageBackend) -> BackendStatus:
    """Report whether the backend can be used right now."""
    status = BackendStatus(name=backend.name)
    try:
        status.available = backend.is_available()
    except Exception as e:
        logger.debug("Availability check for %s raised: %s", backend.name, e)
        status.available = False

    if not status.available:
        status.message = f"{backend.name} was not found on PATH"
        return status

    try:
        status.version = backend.version()
    except BackendUnavailableError as e:
        status.available = False
        status.message = str(e)
        return status

    status.message = f"{backend.name} is ready"
    return status


def bootstrap_backend(
    backend: PackageBackend,
    runner: Callable[..., CommandOutput] = run_command,
    system: str | None = None,
) -> BackendStatus:
    """Make the backend available if possible, then re-check it."""
    status = check_backend(backend)
    if status.available:
        return status

    system = system or platform.system()
    if system != "Windows":
        status.message = f"{backend.name} bootstrap is only supported on Windows (this is {system})"
        return status

    logger.info("Registering App Installer to provide %s", backend.name)
    try:
        out = runner(REGISTER_COMMAND, timeout=300)
    except BackendUnavailableError as e:
        status.attempted_bootstrap = True
        status.message = f"Cannot run PowerShell: {e}"
        return status

    if out.exit_code != 0:
        logger.warning("App Installer registration failed: %s", out.stderr.strip())

    after = check_backend(backend)
    after.attempted_bootstrap = True
    if not after.available:
        detail = out.stderr.strip() or out.stdout.strip() or f"exit code {out.exit_code}"
        after.message = (
            f"{backend.name} is still unavailable after registering App Installer ({detail}). "
            "Install 'App Installer' from the Microsoft Store."
        )
    return after
