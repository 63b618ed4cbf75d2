"""
Mock backend — universal test double for backend operations.

Used by tests and by ``--mock`` to simulate winget without touching the
machine. Returns success for everything by default; responses can be
scripted per operation, mode and package id.
"""

from __future__ import annotations

from appshelf.adapters.base import PackageBackend
from appshelf.core.models.result import BackendResult
from appshelf.errors import BackendUnavailableError

NO_UPDATE_OUTPUT = "No applicable update found."

# (operation, mode, package_id)
CallKey = tuple[str, str, str]


class MockBackend(PackageBackend):
    """Scriptable in-memory backend.

    By default installs and upgrades succeed with empty output and
    update checks report nothing to do.
    """

    def __init__(self, available: bool = True, backend_name: str = "mock"):
        self._name = backend_name
        self._available = available
        self._responses: dict[CallKey, BackendResult] = {}
        self._call_log: list[CallKey] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[CallKey]:
        """Every (operation, mode, package_id) this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def is_available(self) -> bool:
        return self._available

    def version(self) -> str | None:
        return "v0.0.0-mock" if self._available else None

    # ── Scripting ────────────────────────────────────────────────

    def set_install(self, package_id: str, exit_code: int = 0, stdout: str = "", stderr: str = "") -> None:
        self._responses[("install", "apply", package_id)] = BackendResult(
            package_id=package_id, operation="install", mode="apply",
            exit_code=exit_code, stdout=stdout, stderr=stderr,
        )

    def set_check(self, package_id: str, stdout: str, exit_code: int = 0, stderr: str = "") -> None:
        self._responses[("upgrade", "check", package_id)] = BackendResult(
            package_id=package_id, operation="upgrade", mode="check",
            exit_code=exit_code, stdout=stdout, stderr=stderr,
        )

    def set_upgrade(self, package_id: str, exit_code: int = 0, stdout: str = "", stderr: str = "") -> None:
        self._responses[("upgrade", "apply", package_id)] = BackendResult(
            package_id=package_id, operation="upgrade", mode="apply",
            exit_code=exit_code, stdout=stdout, stderr=stderr,
        )

    def calls_for(self, operation: str, mode: str = "apply") -> list[str]:
        """Package ids passed to one kind of call, in call order."""
        return [pid for op, m, pid in self._call_log if op == operation and m == mode]

    def reset(self) -> None:
        """Clear call log and scripted responses."""
        self._call_log.clear()
        self._responses.clear()

    # ── Backend protocol ─────────────────────────────────────────

    def install(self, package_id: str) -> BackendResult:
        return self._respond(("install", "apply", package_id))

    def upgrade(self, package_id: str, *, check: bool = False) -> BackendResult:
        return self._respond(("upgrade", "check" if check else "apply", package_id))

    def _respond(self, key: CallKey) -> BackendResult:
        if not self._available:
            raise BackendUnavailableError(f"{self._name} is not available")
        self._call_log.append(key)

        if key in self._responses:
            return self._responses[key]

        operation, mode, package_id = key
        stdout = NO_UPDATE_OUTPUT if mode == "check" else ""
        return BackendResult(
            package_id=package_id, operation=operation, mode=mode, stdout=stdout,
        )
