"""
Tests for backend checks and the winget bootstrap.
"""

from appshelf.adapters.mock import MockBackend
from appshelf.adapters.shell.command import CommandOutput
from appshelf.core.services.bootstrap import (
    REGISTER_COMMAND,
    bootstrap_backend,
    check_backend,
)
from appshelf.errors import BackendUnavailableError


class ToggleBackend(MockBackend):
    """Becomes available once the registration command has run."""

    def __init__(self):
        super().__init__(available=False, backend_name="winget")

    def make_available(self):
        self._available = True


class TestCheckBackend:
    def test_available(self):
        status = check_backend(MockBackend())
        assert status.available
        assert status.version == "v0.0.0-mock"
        assert "ready" in status.message

    def test_missing(self):
        status = check_backend(MockBackend(available=False))
        assert not status.available
        assert "not found" in status.message

    def test_version_fault(self):
        class Broken(MockBackend):
            def version(self):
                raise BackendUnavailableError("cannot start")

        status = check_backend(Broken())
        assert not status.available
        assert status.message == "cannot start"


class TestBootstrapBackend:
    def test_already_available_runs_nothing(self):
        calls = []
        status = bootstrap_backend(MockBackend(), runner=lambda *a, **k: calls.append(a), system="Windows")
        assert status.available
        assert calls == []

    def test_non_windows_unsupported(self):
        status = bootstrap_backend(MockBackend(available=False), system="Linux")
        assert not status.available
        assert "only supported on Windows" in status.message
        assert not status.attempted_bootstrap

    def test_registers_and_rechecks(self):
        backend = ToggleBackend()
        seen = []

        def runner(args, timeout=None):
            seen.append(args)
            backend.make_available()
            return CommandOutput(args=args, exit_code=0)

        status = bootstrap_backend(backend, runner=runner, system="Windows")
        assert seen == [REGISTER_COMMAND]
        assert status.available
        assert status.attempted_bootstrap

    def test_registration_fails(self):
        def runner(args, timeout=None):
            return CommandOutput(args=args, exit_code=1, stderr="Deployment failed")

        status = bootstrap_backend(ToggleBackend(), runner=runner, system="Windows")
        assert not status.available
        assert status.attempted_bootstrap
        assert "Deployment failed" in status.message
        assert "Microsoft Store" in status.message

    def test_powershell_missing(self):
        def runner(args, timeout=None):
            raise BackendUnavailableError("powershell not found")

        status = bootstrap_backend(ToggleBackend(), runner=runner, system="Windows")
        assert not status.available
        assert "Cannot run PowerShell" in status.message

    def test_to_dict(self):
        d = check_backend(MockBackend()).to_dict()
        assert d["name"] == "mock"
        assert d["available"] is True
