"""
Tests for CLI commands — install, bundles, updates, managed set, doctor, menu.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from appshelf.adapters.mock import MockBackend
from appshelf.main import cli


@pytest.fixture
def run(tmp_path: Path, catalog_file: Path, backend: MockBackend):
    """Invoke the CLI against a temp state dir and the mock backend."""

    def _run(*args: str, input: str | None = None):
        runner = CliRunner()
        return runner.invoke(
            cli,
            ["--catalog", str(catalog_file), "--state-dir", str(tmp_path / ".appshelf"), *args],
            obj={"backend": backend},
            input=input,
        )

    return _run


def _state(tmp_path: Path) -> dict:
    return json.loads((tmp_path / ".appshelf" / "state.json").read_text())


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "winget" in result.output
        for command in ("install", "bundle", "update", "managed", "doctor"):
            assert command in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_corrupt_state_exits_1(self, run, tmp_path: Path):
        state_dir = tmp_path / ".appshelf"
        state_dir.mkdir()
        (state_dir / "state.json").write_text("not json")
        result = run("managed", "list")
        assert result.exit_code == 1
        assert "invalid JSON" in result.output

    def test_missing_catalog_exits_1(self, tmp_path: Path):
        result = CliRunner().invoke(
            cli,
            ["--catalog", str(tmp_path / "nope.yml"), "--state-dir", str(tmp_path), "bundles"],
            obj={"backend": MockBackend()},
        )
        assert result.exit_code == 1
        assert "not found" in result.output


class TestInstallCommand:
    def test_install_selection(self, run, tmp_path: Path, backend: MockBackend):
        result = run("install", "1,3")
        assert result.exit_code == 0, result.output
        assert "Result: 2/2 succeeded" in result.output
        assert backend.calls_for("install") == ["Mozilla.Firefox", "Git.Git"]

        state = _state(tmp_path)
        assert state["version"] == "0.1.0"
        assert [a["packageId"] for a in state["managedApps"]] == ["Mozilla.Firefox", "Git.Git"]

    def test_install_by_package_id(self, run, backend: MockBackend):
        result = run("install", "-p", "Some.Tool")
        assert result.exit_code == 0
        assert backend.calls_for("install") == ["Some.Tool"]

    def test_nothing_given(self, run):
        result = run("install")
        assert result.exit_code == 2
        assert "SELECTION" in result.output

    def test_bad_selection(self, run, backend: MockBackend):
        result = run("install", "4-2")
        assert result.exit_code == 2
        assert backend.call_count == 0

    def test_unknown_id(self, run):
        result = run("install", "9")
        assert result.exit_code == 2
        assert "Unknown app id" in result.output

    def test_failure_exits_1(self, run, backend: MockBackend):
        backend.set_install("Git.Git", exit_code=5, stderr="boom")
        result = run("install", "3")
        assert result.exit_code == 1
        assert "(exit 5)" in result.output
        assert "Result: 0/1 succeeded" in result.output

    def test_json(self, run):
        result = run("install", "4", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["requested"] == ["VideoLAN.VLC"]
        assert data["report"]["status"] == "ok"


class TestBundleCommands:
    def test_bundle_install(self, run, backend: MockBackend):
        result = run("bundle", "essentials")
        assert result.exit_code == 0
        assert "bundle essentials" in result.output
        assert backend.calls_for("install") == ["Mozilla.Firefox", "7zip.7zip", "VideoLAN.VLC"]

    def test_unknown_bundle(self, run):
        result = run("bundle", "nope")
        assert result.exit_code == 1
        assert "Unknown bundle" in result.output

    def test_bundles_list(self, run):
        result = run("bundles")
        assert result.exit_code == 0
        assert "essentials" in result.output
        assert "Basics" in result.output
        assert "7-Zip" in result.output

    def test_bundles_json(self, run):
        data = json.loads(run("bundles", "--json").output)
        assert data["dev"]["apps"] == ["Git.Git"]


class TestCatalogCommand:
    def test_lists_by_category(self, run):
        result = run("catalog")
        assert result.exit_code == 0
        assert "Browsers" in result.output
        assert "Google Chrome" in result.output

    def test_category_filter(self, run):
        result = run("catalog", "--category", "media")
        assert "VLC" in result.output
        assert "Git.Git" not in result.output

    def test_marks_managed(self, run):
        run("install", "3")
        line = next(l for l in run("catalog").output.splitlines() if "Git.Git" in l)
        assert "✓" in line

    def test_json(self, run):
        data = json.loads(run("catalog", "--json").output)
        assert len(data) == 5
        assert data[0]["package_id"] == "Mozilla.Firefox"


class TestUpdateCommand:
    def test_nothing_managed(self, run, backend: MockBackend):
        result = run("update")
        assert result.exit_code == 0
        assert "No managed apps yet" in result.output
        assert backend.call_count == 0

    def test_all_up_to_date(self, run):
        run("install", "3")
        result = run("update")
        assert result.exit_code == 0
        assert "All managed apps are up to date" in result.output

    def test_check_only(self, run, backend: MockBackend):
        run("install", "3,4")
        backend.set_check("VideoLAN.VLC", "3.0.20 -> 3.0.21")
        result = run("update", "--check")
        assert result.exit_code == 0
        assert "VideoLAN.VLC" in result.output
        assert backend.calls_for("upgrade") == []

    def test_apply(self, run, tmp_path: Path, backend: MockBackend):
        run("install", "3,4")
        backend.set_check("VideoLAN.VLC", "3.0.20 -> 3.0.21")
        result = run("update")
        assert result.exit_code == 0
        assert "Result: 1/1 succeeded" in result.output
        statuses = {a["packageId"]: a["lastStatus"] for a in _state(tmp_path)["managedApps"]}
        assert statuses == {"Git.Git": "installed", "VideoLAN.VLC": "upgraded_or_ok"}

    def test_apply_failure_exits_1(self, run, backend: MockBackend):
        run("install", "4")
        backend.set_check("VideoLAN.VLC", "newer")
        backend.set_upgrade("VideoLAN.VLC", exit_code=2)
        result = run("update")
        assert result.exit_code == 1
        assert "(exit 2)" in result.output

    def test_json(self, run, backend: MockBackend):
        run("install", "3")
        backend.set_check("Git.Git", "newer")
        data = json.loads(run("update", "--check", "--json").output)
        assert data["checked"] == 1
        assert data["candidates"] == [{"package_id": "Git.Git", "display_name": "Git"}]

    def test_unavailable_backend_exits_1(self, tmp_path: Path, catalog_file: Path):
        runner = CliRunner()
        args = ["--catalog", str(catalog_file), "--state-dir", str(tmp_path / ".appshelf")]
        runner.invoke(cli, [*args, "install", "3"], obj={"backend": MockBackend()})
        result = runner.invoke(cli, [*args, "update"], obj={"backend": MockBackend(available=False)})
        assert result.exit_code == 1
        assert "not available" in result.output


class TestManagedCommands:
    def test_empty_list(self, run):
        result = run("managed", "list")
        assert result.exit_code == 0
        assert "No managed apps yet" in result.output

    def test_list_after_install(self, run):
        run("install", "1")
        result = run("managed", "list")
        assert "Firefox" in result.output
        assert "installed" in result.output

    def test_pin_unpin(self, run, tmp_path: Path):
        run("install", "1")

        result = run("managed", "pin", "Mozilla.Firefox")
        assert result.exit_code == 0
        assert "Pinned Mozilla.Firefox" in result.output
        assert _state(tmp_path)["managedApps"][0]["pinned"] is True

        assert "already pinned" in run("managed", "pin", "Mozilla.Firefox").output

        result = run("managed", "unpin", "Mozilla.Firefox")
        assert "Unpinned" in result.output
        assert _state(tmp_path)["managedApps"][0]["pinned"] is False

    def test_pin_unknown(self, run):
        result = run("managed", "pin", "Nope.Nope")
        assert result.exit_code == 1
        assert "not managed" in result.output

    def test_pinned_skipped_by_update(self, run, backend: MockBackend):
        run("install", "1")
        run("managed", "pin", "Mozilla.Firefox")
        backend.set_check("Mozilla.Firefox", "newer")
        result = run("update")
        assert "1 pinned" in result.output
        assert backend.calls_for("upgrade", "check") == []

    def test_list_json(self, run):
        run("install", "5")
        data = json.loads(run("managed", "list", "--json").output)
        assert data["count"] == 1
        assert data["managed"][0]["display_name"] == "7-Zip"


class TestDoctorCommand:
    def test_available(self, run):
        result = run("doctor")
        assert result.exit_code == 0
        assert "v0.0.0-mock" in result.output

    def test_missing(self, tmp_path: Path):
        result = CliRunner().invoke(
            cli,
            ["--state-dir", str(tmp_path / ".appshelf"), "doctor"],
            obj={"backend": MockBackend(available=False)},
        )
        assert result.exit_code == 1
        assert "--bootstrap" in result.output

    def test_json(self, run):
        result = run("doctor", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output)["available"] is True


class TestMenu:
    def test_exit_immediately(self, run):
        result = run(input="0\n")
        assert result.exit_code == 0
        assert "Install a bundle" in result.output
        assert "Bye" in result.output

    def test_invalid_choice(self, run):
        result = run("menu", input="7\n0\n")
        assert "Invalid choice '7'" in result.output
        assert result.exit_code == 0

    def test_browse_and_install(self, run, tmp_path: Path, backend: MockBackend):
        result = run(input="2\n1,3\ny\n0\n")
        assert result.exit_code == 0, result.output
        assert backend.calls_for("install") == ["Mozilla.Firefox", "Git.Git"]
        assert len(_state(tmp_path)["managedApps"]) == 2

    def test_browse_bad_selection_returns_to_menu(self, run, backend: MockBackend):
        result = run(input="2\n1-x\n0\n")
        assert "Invalid" in result.output
        assert backend.call_count == 0

    def test_declined_confirmation(self, run, backend: MockBackend):
        run(input="1\n2\nn\n0\n")
        assert backend.call_count == 0

    def test_bundle_install(self, run, backend: MockBackend):
        result = run(input="1\n2\ny\n0\n")
        assert result.exit_code == 0
        assert backend.calls_for("install") == ["Git.Git"]

    def test_update_flow(self, run, backend: MockBackend):
        run("install", "4")
        backend.set_check("VideoLAN.VLC", "newer")
        result = run(input="3\ny\n0\n")
        assert "Updates available (1)" in result.output
        assert backend.calls_for("upgrade") == ["VideoLAN.VLC"]

    def test_end_of_input_exits_cleanly(self, run, tmp_path: Path):
        result = run(input="")
        assert result.exit_code == 0
        assert (tmp_path / ".appshelf" / "state.json").is_file()


class TestHistoryCommand:
    def test_empty(self, run):
        result = run("history")
        assert result.exit_code == 0
        assert "No history yet" in result.output

    def test_lists_actions_newest_first(self, run, backend: MockBackend):
        backend.set_install("Git.Git", exit_code=1, stderr="denied")
        run("install", "1")
        run("install", "3")
        result = run("history")
        assert result.exit_code == 0
        lines = result.output.splitlines()
        git_line = next(i for i, l in enumerate(lines) if "Git.Git" in l and "install" in l)
        firefox_line = next(i for i, l in enumerate(lines) if "Mozilla.Firefox" in l)
        assert git_line < firefox_line
        assert "Git.Git: denied" in result.output

    def test_json_limit(self, run):
        run("install", "1")
        run("install", "3")
        data = json.loads(run("history", "-n", "1", "--json").output)
        assert len(data) == 1
        assert data[0]["packages"] == ["Git.Git"]


class TestLogFile:
    def test_actions_logged_under_state_dir(self, run, tmp_path: Path):
        run("install", "3")
        log_file = tmp_path / ".appshelf" / "appshelf.log"
        assert "Now managing Git.Git" in log_file.read_text(encoding="utf-8")

    def test_unwritable_log_file_does_not_abort(self, tmp_path: Path, catalog_file: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        result = CliRunner().invoke(
            cli,
            ["--catalog", str(catalog_file), "--state-dir", str(tmp_path / ".appshelf"), "bundles"],
            obj={"backend": MockBackend()},
            env={"APPSHELF_LOG_FILE": str(blocker / "sub" / "a.log")},
        )
        assert result.exit_code == 0, result.output
        assert "essentials" in result.output
        assert "logging to console only" in result.output
