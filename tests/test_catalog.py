"""
Tests for the static catalog — integrity of names and references, plus
the pure output parsers the checks rely on.
"""

from pathlib import Path

from jcli.core.models.catalog import InstallMethod, Style, ToolCategory
from jcli.core.services import catalog, probes
from jcli.core.services.catalog import resources
from jcli.core.services.catalog.identity import parse_gh_account
from jcli.core.services.catalog.scripts import parse_gpg_key_id


class TestCatalogIntegrity:
    """Every cross-reference in the catalog resolves."""

    def test_tool_names_unique(self):
        names = [t.name for t in catalog.all_tools()]
        assert len(names) == len(set(names))

    def test_script_names_unique(self):
        names = [s.name for s in catalog.all_scripts()]
        assert len(names) == len(set(names))

    def test_cleanable_names_unique(self):
        names = [c.name for c in catalog.all_cleanables()]
        assert len(names) == len(set(names))

    def test_dependencies_exist(self):
        for tool in catalog.all_tools():
            for dep in tool.dependencies:
                assert catalog.tool_by_name(dep) is not None, f"{tool.name} → {dep}"

    def test_post_install_scripts_exist(self):
        for tool in catalog.all_tools():
            for script in tool.scripts:
                assert catalog.script_by_name(script) is not None, f"{tool.name} → {script}"

    def test_script_required_tools_exist(self):
        for script in catalog.all_scripts():
            if script.requires_tool:
                assert catalog.tool_by_name(script.requires_tool) is not None

    def test_every_tool_is_detectable(self):
        for tool in catalog.all_tools():
            assert tool.command or tool.check_fn is not None, tool.name

    def test_every_category_has_tools(self):
        for category in ToolCategory:
            assert catalog.tools_by_category(category), category

    def test_package_manager_flags_unique(self):
        flags = [pm.flag for pm in catalog.all_package_managers()]
        assert len(flags) == len(set(flags))
        assert catalog.package_manager_by_flag("brew").name == "homebrew"


class TestInstallability:
    def test_homebrew_is_not_installable(self):
        homebrew = catalog.tool_by_name("homebrew")
        assert homebrew.method is InstallMethod.MANUAL
        assert not homebrew.installable
        assert homebrew.upgrade_fn is not None

    def test_claude_depends_on_homebrew(self):
        claude = catalog.tool_by_name("claude")
        assert claude.dependencies == ("homebrew",)
        assert claude.installable

    def test_nvm_uses_custom_detection(self):
        nvm = catalog.tool_by_name("nvm")
        assert nvm.command == ""
        assert nvm.check_fn is not None

    def test_installable_tools_all_installable(self):
        assert all(t.installable for t in catalog.installable_tools())

    def test_method_labels(self):
        assert InstallMethod.BREW_CASK.label == "brew"
        assert InstallMethod.MANUAL.label == "sh"
        assert InstallMethod.NPM.label == "npm"


class TestLookups:
    def test_unknown_names(self):
        assert catalog.tool_by_name("nope") is None
        assert catalog.script_by_name("nope") is None
        assert catalog.cleanable_by_name("nope") is None
        assert catalog.run_command_by_name("nope") is None

    def test_run_command_subcommand(self):
        git = catalog.run_command_by_name("git")
        feat = git.subcommand("feat")
        assert feat.min_args == 1
        assert git.subcommand("missing") is None

    def test_favorite_skill(self):
        assert catalog.is_favorite_skill("frontend-design")
        assert catalog.is_favorite_skill("frontend-design", "anthropics/skills")
        assert not catalog.is_favorite_skill("frontend-design", "other/repo")
        assert catalog.skill_repo_by_name("expo/skills") is not None


class TestResourceParsers:
    def test_vpn_connected_name(self):
        text = '* (Connected)   ABC  PPP  --> IPSec  "Office VPN"  [IPSec]\n* (Disconnected) DEF "Home"'
        assert resources.parse_vpn_list(text) == "Office VPN"

    def test_vpn_none_connected(self):
        assert resources.parse_vpn_list('* (Disconnected) DEF "Home"') is None

    def test_dns_servers_dedup_and_skip_loopback(self):
        text = "\n".join([
            "  nameserver[0] : 1.1.1.1",
            "  nameserver[1] : 127.0.0.1",
            "  nameserver[0] : 1.1.1.1",
            "  nameserver[1] : 8.8.8.8",
        ])
        assert resources.parse_dns_servers(text) == ["1.1.1.1", "8.8.8.8"]

    def test_listening_ports(self):
        text = "\n".join([
            "COMMAND PID USER FD TYPE DEVICE SIZE/OFF NODE NAME",
            "sshd 1 root 3u IPv4 0x1 0t0 TCP *:22 (LISTEN)",
            "node 2 jb 20u IPv4 0x2 0t0 TCP 127.0.0.1:3000 (LISTEN)",
        ])
        summary = resources.parse_listening_ports(text)
        assert summary.startswith("ssh:22")
        assert ":3000" in summary

    def test_listening_ports_none(self):
        assert resources.parse_listening_ports("COMMAND PID\n") == "none"

    def test_df(self):
        text = (
            "Filesystem 1024-blocks Used Available Capacity iused ifree %iused Mounted on\n"
            "/dev/disk3s1 1048576 524288 524288 50% 1 2 0% /\n"
        )
        result = resources.parse_df(text)
        assert result.available
        assert result.value == "512.0 MB free of 1.0 GB"
        assert result.style is Style.MUTED

    def test_df_nearly_full_warns(self):
        text = "Filesystem 1024-blocks Used Available Capacity\n/dev/x 1000 950 50 95% /\n"
        assert resources.parse_df(text).style is Style.WARNING

    def test_df_garbage(self):
        assert not resources.parse_df("nonsense").available

    def test_tailscale_backend(self):
        assert resources.parse_tailscale_backend('{"BackendState": "Running"}')
        assert not resources.parse_tailscale_backend('{"BackendState": "Stopped"}')
        assert not resources.parse_tailscale_backend("not json")


class TestIdentityParsers:
    def test_gh_account(self):
        text = "github.com\n  ✓ Logged in to github.com account jdoe (keyring)"
        assert parse_gh_account(text) == "jdoe"

    def test_gh_account_missing(self):
        assert parse_gh_account("You are not logged into any GitHub hosts") == ""

    def test_gpg_key_id(self):
        listing = "sec   ed25519/ABCDEF0123456789 2024-01-01 [SC]\n      FINGERPRINT\nuid  me"
        assert parse_gpg_key_id(listing) == "ABCDEF0123456789"


class TestRepeatedChecks:
    """A check reads state without changing it: the second call agrees."""

    def test_nvm_filesystem_detection(self, fake_home: Path, monkeypatch):
        monkeypatch.setattr(
            probes, "capture",
            lambda *a, **kw: {"ok": True, "output": "nvm 0.39.7\n", "returncode": 0, "error": ""},
        )
        nvm = catalog.tool_by_name("nvm")
        assert nvm.check() == nvm.check()
        assert not nvm.check().installed

        (fake_home / ".nvm" / "versions" / "node" / "v20.11.0").mkdir(parents=True)
        first = nvm.check()
        assert first.installed
        assert first.status == "1 versions"
        assert nvm.check() == first

    def test_file_backed_script(self, fake_home: Path):
        ssh = catalog.script_by_name("ssh")
        assert ssh.check() == ssh.check()
        assert not ssh.check().installed

        (fake_home / ".ssh").mkdir()
        (fake_home / ".ssh" / "id_ed25519").write_text("key")
        first = ssh.check()
        assert first.installed
        assert ssh.check() == first
        assert (fake_home / ".ssh" / "id_ed25519").read_text() == "key"

    def test_command_backed_tool(self, tool_factory):
        state = {"installed": True, "version": "1.2.3"}
        tool = tool_factory("bat", state=state, method=InstallMethod.BREW_FORMULA, formula="bat")
        assert tool.check() == tool.check()
