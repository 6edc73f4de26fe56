"""
Tests for CLI commands — global options and every command group, with
services swapped for fakes.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from jcli.core.models.action import ActionResult
from jcli.core.models.catalog import CheckResult
from jcli.core.models.remote import RemoteStatus
from jcli.core.models.status import ItemKind, StatusItem
from jcli.core.services import probes
from jcli.core.services.remote import lifecycle
from jcli.core.services.status import loader as loader_mod
from jcli.core.services.tool_install import cleaner, installer, upgrader
from jcli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestCLIGlobal:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("status", "install", "upgrade", "clean", "setup", "run", "sync", "remote", "skills"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestStatusCommand:
    @pytest.fixture(autouse=True)
    def small_loader(self, monkeypatch):
        rows = [
            StatusItem(id="header-tools-ai", kind=ItemKind.HEADER, name="AI", section="Tools", loaded=True),
            StatusItem(id="tool-claude", kind=ItemKind.TOOL, name="claude", section="Tools", method="brew"),
            StatusItem(id="header-disk", kind=ItemKind.HEADER, name="Disk", section="Disk", loaded=True),
        ]
        original = loader_mod.StatusLoader

        def probe(item):
            return item.with_check(CheckResult(installed=True, version="2.0.76"))

        monkeypatch.setattr(loader_mod, "StatusLoader", lambda: original(rows, probe=probe))

    def test_json(self, runner):
        result = runner.invoke(cli, ["status", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        claude = next(d for d in data if d["id"] == "tool-claude")
        assert claude["version"] == "2.0.76"
        assert claude["loaded"] is True

    def test_table_skips_empty_sections(self, runner):
        result = runner.invoke(cli, ["status"])
        assert result.exit_code == 0
        assert "claude" in result.output
        assert "2.0.76" in result.output
        assert "Disk" not in result.output


class TestInstallCommand:
    def test_unknown_tool_exits_1(self, runner, monkeypatch):
        monkeypatch.setattr(
            installer, "install_with_dependencies",
            lambda names: [ActionResult.failure("nope", "Unknown tool: nope")],
        )
        result = runner.invoke(cli, ["install", "nope"])
        assert result.exit_code == 1
        assert "Unknown tool: nope" in result.output

    def test_success(self, runner, monkeypatch):
        monkeypatch.setattr(
            installer, "install_with_dependencies",
            lambda names: [ActionResult.success(n, f"{n} installed") for n in names],
        )
        result = runner.invoke(cli, ["install", "bun", "go"])
        assert result.exit_code == 0
        assert "bun installed" in result.output
        assert "go installed" in result.output


class TestUpgradeCommand:
    def test_no_args_lists_targets(self, runner, monkeypatch):
        monkeypatch.setattr(probes, "command_exists", lambda name: name == "brew")
        result = runner.invoke(cli, ["upgrade"])
        assert result.exit_code == 0
        assert "--brew" in result.output
        assert "--npm" in result.output

    def test_package_manager_flags(self, runner, monkeypatch):
        seen = []

        def fake(flags=None):
            seen.append(flags)
            return [ActionResult.skip("npm", "npm not installed, skipping")]

        monkeypatch.setattr(upgrader, "upgrade_package_managers", fake)
        result = runner.invoke(cli, ["upgrade", "--npm"])
        assert result.exit_code == 0
        assert seen == [["npm"]]
        assert "npm not installed, skipping" in result.output

    def test_tool_failure_exits_1(self, runner, monkeypatch):
        monkeypatch.setattr(
            upgrader, "upgrade_tools",
            lambda names: [ActionResult.failure("go", "go is not installed. Run: j install go")],
        )
        result = runner.invoke(cli, ["upgrade", "go"])
        assert result.exit_code == 1
        assert "j install go" in result.output


class TestCleanCommand:
    def test_all(self, runner, monkeypatch):
        monkeypatch.setattr(
            cleaner, "clean_all",
            lambda: [
                ActionResult.success("trash", "trash cleaned (1.0 KB freed)"),
                ActionResult.skip("docker", "docker not installed, skipping docker"),
            ],
        )
        result = runner.invoke(cli, ["clean", "--all"])
        assert result.exit_code == 0
        assert "trash cleaned" in result.output
        assert "skipping docker" in result.output


class TestRunCommand:
    def test_missing_message_shows_usage(self, runner):
        result = runner.invoke(cli, ["run", "git", "feat"])
        assert result.exit_code == 1
        assert "Usage: j run git feat <message>" in result.output

    def test_unknown_subcommand(self, runner):
        result = runner.invoke(cli, ["run", "git", "nope"])
        assert result.exit_code != 0

    def test_group_lists_subcommands(self, runner):
        result = runner.invoke(cli, ["run", "docker", "--help"])
        assert result.exit_code == 0
        for name in ("rm", "rmi", "clean", "reset"):
            assert name in result.output


class TestSyncCommand:
    def test_status_unlinked(self, runner, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(cli, ["sync", "status"])
        assert result.exit_code == 0
        assert "Not linked" in result.output

    def test_status_json(self, runner, tmp_path: Path, monkeypatch):
        (tmp_path / ".copier-answers.yml").write_text("language: go\n")
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(cli, ["sync", "status", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["answers"] == {"language": "go"}

    def test_update_unlinked_hint(self, runner, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(cli, ["sync"])
        assert result.exit_code == 0
        assert "j sync init" in result.output


class TestRemoteCommand:
    def test_status_json(self, runner, fake_home, monkeypatch):
        monkeypatch.setattr(
            lifecycle, "remote_status",
            lambda settings: RemoteStatus(backend_state="Running", hostname="worker", ip="100.64.0.1", connected=True),
        )
        result = runner.invoke(cli, ["remote", "status", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["connected"] is True
        assert data["mode"] == "userspace"

    def test_bare_group_shows_status(self, runner, fake_home, monkeypatch):
        monkeypatch.setattr(
            lifecycle, "remote_status",
            lambda settings: RemoteStatus(backend_state="Running", hostname="worker", ip="100.64.0.1", connected=True),
        )
        result = runner.invoke(cli, ["remote"])
        assert result.exit_code == 0
        assert "100.64.0.1" in result.output
        assert "Usage:" not in result.output

    def test_status_unreachable_falls_back_to_config(self, runner, fake_home: Path, monkeypatch):
        path = fake_home / ".config" / "jterrazz" / "jrc.json"
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"remote": {"mode": "userspace", "auth_method": "oauth", "hostname": "worker"}}))
        monkeypatch.setattr(
            lifecycle, "remote_status",
            lambda settings: RemoteStatus(error="tailscale is not running (run: j remote up)"),
        )
        result = runner.invoke(cli, ["remote", "status"])
        assert result.exit_code == 0
        assert "Unable to query remote runtime status" in result.output
        assert "tailscale is not running" in result.output
        assert "userspace" in result.output
        assert "oauth" in result.output
        assert "worker" in result.output

    def test_up_error_exits_1(self, runner, fake_home, monkeypatch):
        monkeypatch.setattr(probes, "command_exists", lambda name: False)
        result = runner.invoke(cli, ["remote", "up"])
        assert result.exit_code == 1
        assert "j install tailscale" in result.output

    def test_broken_config_exits_1(self, runner, fake_home: Path):
        path = fake_home / ".config" / "jterrazz" / "jrc.json"
        path.parent.mkdir(parents=True)
        path.write_text("{")
        result = runner.invoke(cli, ["remote", "status"])
        assert result.exit_code == 1
        assert "failed to parse config" in result.output

    def test_setup_authkey(self, runner, fake_home: Path):
        result = runner.invoke(cli, ["remote", "setup"], input="userspace\nauthkey\ntskey-abc\nworker\n")
        assert result.exit_code == 0, result.output
        data = json.loads((fake_home / ".config" / "jterrazz" / "jrc.json").read_text())
        assert data["remote"] == {
            "mode": "userspace", "auth_method": "authkey", "secret": "tskey-abc", "hostname": "worker",
        }

    def test_setup_oauth_clears_secret(self, runner, fake_home: Path):
        runner.invoke(cli, ["remote", "setup"], input="userspace\nauthkey\ntskey-abc\n\n")
        result = runner.invoke(cli, ["remote", "setup"], input="\noauth\n\n")
        assert result.exit_code == 0, result.output
        data = json.loads((fake_home / ".config" / "jterrazz" / "jrc.json").read_text())
        assert data["remote"]["auth_method"] == "oauth"
        assert data["remote"]["secret"] == ""


class TestSkillsCommand:
    def test_requires_cli(self, runner, monkeypatch):
        monkeypatch.setattr(probes, "command_exists", lambda name: False)
        result = runner.invoke(cli, ["skills", "list"])
        assert result.exit_code == 1
        assert "j install skills" in result.output

    def test_list_json_marks_favorites(self, runner, monkeypatch):
        from jcli.core.services import skills_ops

        monkeypatch.setattr(probes, "command_exists", lambda name: True)
        monkeypatch.setattr(skills_ops, "list_installed", lambda: ["frontend-design", "custom"])
        result = runner.invoke(cli, ["skills", "list", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {"name": "frontend-design", "favorite": True},
            {"name": "custom", "favorite": False},
        ]

    def test_install_refreshes_list(self, runner, monkeypatch):
        from jcli.core.services import skills_ops

        installed: list[str] = []
        monkeypatch.setattr(probes, "command_exists", lambda name: True)
        monkeypatch.setattr(
            skills_ops, "install",
            lambda repo, name: installed.append(name) or {"ok": True},
        )
        monkeypatch.setattr(skills_ops, "list_installed", lambda: list(installed))
        result = runner.invoke(cli, ["skills", "install", "expo/skills", "expo-dev-client"])
        assert result.exit_code == 0
        assert "expo-dev-client installed" in result.output
        assert "Installed skills (1)" in result.output

    def test_repos(self, runner):
        result = runner.invoke(cli, ["skills", "repos"])
        assert result.exit_code == 0
        assert "anthropics/skills" in result.output
