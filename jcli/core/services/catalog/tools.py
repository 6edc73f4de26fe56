"""
Tool catalog — every developer tool ``j`` knows how to detect and install.

One record per tool.  Tools with a plain ``command`` are detected by a
PATH lookup plus a version probe; tools that live outside PATH (apps,
``~/.nvm``, ``~/.oh-my-zsh``) carry a custom ``check_fn``.
"""

from __future__ import annotations

import os

from jcli.core.models.catalog import (
    NOT_INSTALLED,
    CheckResult,
    InstallMethod,
    Tool,
    ToolCategory,
)
from jcli.core.services import probes
from jcli.core.services import version_parsers as vp
from jcli.core.services.tool_install.subprocess_runner import run_or_raise

# ── Custom checks ───────────────────────────────────────────────


def _check_homebrew() -> CheckResult:
    if not probes.command_exists("brew"):
        return NOT_INSTALLED
    version = vp.parse_brew_version(probes.capture("brew", "--version")["output"])
    formulae = probes.count_lines(probes.read_command_output_line("brew", "list", "--formula", "-1"))
    casks = probes.count_lines(probes.read_command_output_line("brew", "list", "--cask", "-1"))
    return CheckResult(
        installed=True,
        version=version,
        status=f"{formulae} formulae, {casks} casks",
    )


def _check_npm() -> CheckResult:
    if not probes.command_exists("npm"):
        return NOT_INSTALLED
    version = vp.trim_version(probes.read_command_output_line("npm", "--version"))
    listing = probes.read_command_output_line("npm", "list", "-g", "--depth=0", "--parseable")
    # First line of --parseable is the global prefix itself
    count = max(probes.count_lines(listing) - 1, 0)
    return CheckResult(installed=True, version=version, status=f"{count} global")


def _check_nvm() -> CheckResult:
    nvm_dir = probes.home_dir() / ".nvm"
    if not nvm_dir.is_dir():
        return NOT_INSTALLED
    status = ""
    versions_dir = nvm_dir / "versions" / "node"
    if versions_dir.is_dir():
        count = sum(
            1 for entry in versions_dir.iterdir()
            if entry.is_dir() and entry.name.startswith("v")
        )
        if count:
            status = f"{count} versions"
    version = probes.version_from_brew_formula("nvm")()
    return CheckResult(installed=True, version=version, status=status)


_BREW_JAVA = "/opt/homebrew/opt/openjdk/bin/java"


def _check_openjdk() -> CheckResult:
    if os.path.exists(_BREW_JAVA):
        out = probes.capture(_BREW_JAVA, "-version")["output"]
        return CheckResult(installed=True, version=vp.parse_java_version(out))
    if not probes.command_succeeds("/usr/libexec/java_home"):
        return NOT_INSTALLED
    out = probes.capture("java", "-version")["output"]
    return CheckResult(installed=True, version=vp.parse_java_version(out))


def _app_check(app: str, cask: str = "", running_probe: list[str] | None = None):
    """Check for ``/Applications/<app>.app``, version from brew cask or plist."""

    def _check() -> CheckResult:
        if not os.path.exists(f"/Applications/{app}.app"):
            return NOT_INSTALLED
        if cask:
            version = probes.version_from_brew_cask(cask)()
        else:
            version = probes.version_from_app_plist(app)()
        status = ""
        if running_probe:
            status = "running" if probes.command_succeeds(*running_probe) else "stopped"
        return CheckResult(installed=True, version=version, status=status)

    return _check


def _check_ohmyzsh() -> CheckResult:
    omz = probes.home_dir() / ".oh-my-zsh"
    if not omz.is_dir():
        return NOT_INSTALLED
    version = probes.read_command_output_line("git", "-C", str(omz), "rev-parse", "--short", "HEAD")
    return CheckResult(installed=True, version=version)


# ── Custom installs ─────────────────────────────────────────────


def _install_ohmyzsh() -> None:
    run_or_raise([
        "sh", "-c",
        "$(curl -fsSL https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh)",
    ])


def _upgrade_ohmyzsh() -> None:
    run_or_raise(["git", "-C", str(probes.home_dir() / ".oh-my-zsh"), "pull", "--rebase", "--quiet"])


def _upgrade_homebrew() -> None:
    run_or_raise(["brew", "update"])


# ── Catalog ─────────────────────────────────────────────────────

_BREW = ("homebrew",)

TOOLS: tuple[Tool, ...] = (
    # ── Package Managers ──
    Tool(
        name="homebrew",
        description="macOS package manager",
        category=ToolCategory.PACKAGE_MANAGERS,
        command="brew",
        method=InstallMethod.MANUAL,
        check_fn=_check_homebrew,
        upgrade_fn=_upgrade_homebrew,
    ),
    Tool(
        name="bun",
        description="JavaScript runtime and package manager",
        category=ToolCategory.PACKAGE_MANAGERS,
        command="bun",
        method=InstallMethod.BREW_FORMULA,
        formula="bun",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("bun", ["--version"], vp.trim_version),
    ),
    Tool(
        name="cocoapods",
        description="iOS dependency manager",
        category=ToolCategory.PACKAGE_MANAGERS,
        command="pod",
        method=InstallMethod.BREW_FORMULA,
        formula="cocoapods",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("pod", ["--version"], vp.trim_version),
    ),
    Tool(
        name="mas",
        description="Mac App Store CLI",
        category=ToolCategory.PACKAGE_MANAGERS,
        command="mas",
        method=InstallMethod.BREW_FORMULA,
        formula="mas",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("mas", ["version"], vp.trim_version),
    ),
    Tool(
        name="nvm",
        description="Node version manager",
        category=ToolCategory.PACKAGE_MANAGERS,
        command="",
        method=InstallMethod.BREW_FORMULA,
        formula="nvm",
        dependencies=_BREW,
        check_fn=_check_nvm,
    ),
    Tool(
        name="npm",
        description="Node package manager",
        category=ToolCategory.PACKAGE_MANAGERS,
        command="npm",
        method=InstallMethod.NVM,
        dependencies=("node",),
        check_fn=_check_npm,
    ),
    Tool(
        name="pnpm",
        description="Fast, disk-efficient package manager",
        category=ToolCategory.PACKAGE_MANAGERS,
        command="pnpm",
        method=InstallMethod.BREW_FORMULA,
        formula="pnpm",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("pnpm", ["--version"], vp.trim_version),
    ),
    # ── Runtimes ──
    Tool(
        name="go",
        description="Go toolchain",
        category=ToolCategory.RUNTIMES,
        command="go",
        method=InstallMethod.BREW_FORMULA,
        formula="go",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("go", ["version"], vp.parse_go_version),
    ),
    Tool(
        name="node",
        description="Node.js runtime",
        category=ToolCategory.RUNTIMES,
        command="node",
        method=InstallMethod.NVM,
        dependencies=("nvm",),
        version_fn=probes.version_from_cmd("node", ["--version"], vp.trim_version),
    ),
    Tool(
        name="openjdk",
        description="Java development kit",
        category=ToolCategory.RUNTIMES,
        command="java",
        method=InstallMethod.BREW_FORMULA,
        formula="openjdk",
        dependencies=_BREW,
        scripts=("java-symlink",),
        check_fn=_check_openjdk,
    ),
    Tool(
        name="python",
        description="Python 3 interpreter",
        category=ToolCategory.RUNTIMES,
        command="python3",
        method=InstallMethod.BREW_FORMULA,
        formula="python",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("python3", ["--version"], vp.parse_python_version),
    ),
    Tool(
        name="rust",
        description="Rust compiler and cargo",
        category=ToolCategory.RUNTIMES,
        command="rustc",
        method=InstallMethod.BREW_FORMULA,
        formula="rust",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("rustc", ["--version"], vp.parse_rust_version),
    ),
    # ── DevOps ──
    Tool(
        name="ansible",
        description="Configuration management",
        category=ToolCategory.DEVOPS,
        command="ansible",
        method=InstallMethod.BREW_FORMULA,
        formula="ansible",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("ansible", ["--version"], vp.parse_ansible_version),
    ),
    Tool(
        name="ansible-lint",
        description="Ansible playbook linter",
        category=ToolCategory.DEVOPS,
        command="ansible-lint",
        method=InstallMethod.BREW_FORMULA,
        formula="ansible-lint",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("ansible-lint", ["--version"], vp.parse_ansible_lint_version),
    ),
    Tool(
        name="eas",
        description="Expo Application Services CLI",
        category=ToolCategory.DEVOPS,
        command="eas",
        method=InstallMethod.NPM,
        formula="eas-cli",
        dependencies=("npm",),
        version_fn=probes.version_from_cmd("eas", ["--version"], vp.parse_eas_version),
    ),
    Tool(
        name="kubectl",
        description="Kubernetes CLI",
        category=ToolCategory.DEVOPS,
        command="kubectl",
        method=InstallMethod.BREW_FORMULA,
        formula="kubernetes-cli",
        dependencies=_BREW,
        version_fn=probes.version_from_brew_formula("kubernetes-cli"),
    ),
    Tool(
        name="multipass",
        description="Ubuntu VMs on demand",
        category=ToolCategory.DEVOPS,
        command="multipass",
        method=InstallMethod.BREW_CASK,
        formula="multipass",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("multipass", ["--version"], vp.parse_multipass_version),
    ),
    Tool(
        name="pulumi",
        description="Infrastructure as code",
        category=ToolCategory.DEVOPS,
        command="pulumi",
        method=InstallMethod.BREW_FORMULA,
        formula="pulumi/tap/pulumi",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("pulumi", ["version"], vp.parse_pulumi_version),
    ),
    Tool(
        name="tailscale",
        description="Mesh VPN client",
        category=ToolCategory.DEVOPS,
        command="tailscale",
        method=InstallMethod.BREW_FORMULA,
        formula="tailscale",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("tailscale", ["version"], vp.parse_tailscale_version),
    ),
    Tool(
        name="terraform",
        description="Infrastructure as code",
        category=ToolCategory.DEVOPS,
        command="terraform",
        method=InstallMethod.BREW_FORMULA,
        formula="hashicorp/tap/terraform",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("terraform", ["--version"], vp.parse_terraform_version),
    ),
    # ── AI ──
    Tool(
        name="claude",
        description="Claude Code agent",
        category=ToolCategory.AI,
        command="claude",
        method=InstallMethod.BREW_CASK,
        formula="claude-code",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("claude", ["--version"], vp.parse_claude_version),
    ),
    Tool(
        name="codex",
        description="OpenAI Codex CLI",
        category=ToolCategory.AI,
        command="codex",
        method=InstallMethod.BREW_CASK,
        formula="codex",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("codex", ["--version"], vp.parse_codex_version),
    ),
    Tool(
        name="gemini",
        description="Gemini CLI",
        category=ToolCategory.AI,
        command="gemini",
        method=InstallMethod.BREW_FORMULA,
        formula="gemini-cli",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("gemini", ["--version"], vp.trim_version),
    ),
    Tool(
        name="happy-coder",
        description="Mobile client for coding agents",
        category=ToolCategory.AI,
        command="happy",
        method=InstallMethod.NPM,
        formula="happy-coder",
        dependencies=("npm",),
        version_fn=probes.version_from_cmd("happy", ["--version"], vp.parse_happy_coder_version),
    ),
    Tool(
        name="ollama",
        description="Local LLM runner",
        category=ToolCategory.AI,
        command="ollama",
        method=InstallMethod.BREW_CASK,
        formula="ollama-app",
        dependencies=_BREW,
        check_fn=_app_check("Ollama", cask="ollama-app", running_probe=["pgrep", "-x", "ollama"]),
    ),
    Tool(
        name="opencode",
        description="Terminal coding agent",
        category=ToolCategory.AI,
        command="opencode",
        method=InstallMethod.BREW_FORMULA,
        formula="opencode",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("opencode", ["--version"], vp.trim_version),
    ),
    Tool(
        name="qmd",
        description="Local search engine for docs",
        category=ToolCategory.AI,
        command="qmd",
        method=InstallMethod.BUN,
        formula="https://github.com/tobi/qmd",
        dependencies=("bun",),
        version_fn=probes.version_from_cmd("qmd", ["--version"], vp.trim_version),
    ),
    Tool(
        name="skills",
        description="AI agent skills manager",
        category=ToolCategory.AI,
        command="skills",
        method=InstallMethod.NPM,
        formula="skills",
        dependencies=("npm",),
        version_fn=probes.version_from_cmd("skills", ["--version"], vp.trim_version),
    ),
    # ── Terminal & Git ──
    Tool(
        name="gh",
        description="GitHub CLI",
        category=ToolCategory.TERMINAL_GIT,
        command="gh",
        method=InstallMethod.BREW_FORMULA,
        formula="gh",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("gh", ["--version"], vp.parse_gh_version),
    ),
    Tool(
        name="git",
        description="Version control",
        category=ToolCategory.TERMINAL_GIT,
        command="git",
        method=InstallMethod.XCODE,
        version_fn=probes.version_from_cmd("git", ["--version"], vp.parse_git_version),
    ),
    Tool(
        name="gpg",
        description="GNU Privacy Guard for encryption and signing",
        category=ToolCategory.TERMINAL_GIT,
        command="gpg",
        method=InstallMethod.BREW_FORMULA,
        formula="gnupg",
        dependencies=_BREW,
        scripts=("gpg-setup",),
        version_fn=probes.version_from_brew_formula("gnupg"),
    ),
    Tool(
        name="mole",
        description="Mac cleanup and optimization",
        category=ToolCategory.TERMINAL_GIT,
        command="mo",
        method=InstallMethod.BREW_FORMULA,
        formula="tw93/tap/mole",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("mo", ["--version"], vp.parse_mole_version),
    ),
    Tool(
        name="ohmyzsh",
        description="Oh My Zsh shell framework",
        category=ToolCategory.TERMINAL_GIT,
        command="",
        method=InstallMethod.MANUAL,
        check_fn=_check_ohmyzsh,
        install_fn=_install_ohmyzsh,
        upgrade_fn=_upgrade_ohmyzsh,
    ),
    Tool(
        name="tmux",
        description="Terminal multiplexer",
        category=ToolCategory.TERMINAL_GIT,
        command="tmux",
        method=InstallMethod.BREW_FORMULA,
        formula="tmux",
        dependencies=_BREW,
        version_fn=probes.version_from_cmd("tmux", ["-V"], vp.parse_tmux_version),
    ),
    # ── GUI Apps ──
    Tool(
        name="docker",
        description="Docker Desktop",
        category=ToolCategory.GUI_APPS,
        command="docker",
        method=InstallMethod.BREW_CASK,
        formula="docker",
        dependencies=_BREW,
        check_fn=_app_check("Docker", cask="docker", running_probe=["docker", "info"]),
    ),
    Tool(
        name="ghostty",
        description="GPU-accelerated terminal",
        category=ToolCategory.GUI_APPS,
        method=InstallMethod.BREW_CASK,
        formula="ghostty",
        dependencies=_BREW,
        scripts=("ghostty-config",),
        check_fn=_app_check("Ghostty", cask="ghostty"),
    ),
    Tool(
        name="zed",
        description="Zed code editor",
        category=ToolCategory.GUI_APPS,
        method=InstallMethod.BREW_CASK,
        formula="zed",
        dependencies=_BREW,
        scripts=("zed-config",),
        check_fn=_app_check("Zed"),
    ),
    # ── Mac App Store (check-only) ──
    Tool(
        name="xcode",
        description="Apple IDE and SDKs",
        category=ToolCategory.MAC_APP_STORE,
        method=InstallMethod.MAS,
        formula="497799835",
        dependencies=("mas",),
        check_fn=_app_check("Xcode"),
    ),
    Tool(
        name="testflight",
        description="Beta builds from App Store Connect",
        category=ToolCategory.MAC_APP_STORE,
        method=InstallMethod.MAS,
        formula="899247664",
        dependencies=("mas",),
        check_fn=_app_check("TestFlight"),
    ),
)


# ── Accessors ───────────────────────────────────────────────────

_BY_NAME: dict[str, Tool] = {t.name: t for t in TOOLS}


def all_tools() -> list[Tool]:
    return list(TOOLS)


def tool_by_name(name: str) -> Tool | None:
    """Case-exact lookup.  The ``brew`` alias is handled by the installer."""
    return _BY_NAME.get(name)


def tools_by_category(category: ToolCategory) -> list[Tool]:
    return [t for t in TOOLS if t.category == category]


def installable_tools() -> list[Tool]:
    return [t for t in TOOLS if t.installable]
