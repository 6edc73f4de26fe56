"""
Script catalog — setup and configuration tasks.

Scripts can stand alone (``j setup ssh``) or run after a tool install
(``Tool.scripts``).  Each one returns a completion message; external
commands it needs (ssh-keygen, gpg, sudo) run attached to the terminal
so they can prompt.
"""

from __future__ import annotations

import logging
import os
import shutil

from jcli.core.models.catalog import NOT_INSTALLED, CheckResult, Script, ScriptCategory
from jcli.core.services import probes
from jcli.core.services.catalog.user import USER_EMAIL, USER_NAME, repo_config_path
from jcli.core.services.tool_install.subprocess_runner import (
    ActionError,
    run_interactive,
    run_or_raise,
)

logger = logging.getLogger(__name__)

JAVA_HOMEBREW_JDK = "/opt/homebrew/opt/openjdk/libexec/openjdk.jdk"
JAVA_SYSTEM_LINK = "/Library/Java/JavaVirtualMachines/openjdk.jdk"

_SSH_CONFIG_BLOCK = """
Host *
  AddKeysToAgent yes
  UseKeychain yes
  IdentityFile ~/.ssh/id_ed25519
"""

_GPG_BATCH = """%no-protection
Key-Type: eddsa
Key-Curve: ed25519
Name-Real: {name}
Name-Email: {email}
Expire-Date: 0
%commit
"""


def _file_check(relative: str):
    """Configured when ``~/<relative>`` exists."""

    def _check() -> CheckResult:
        if (probes.home_dir() / relative).exists():
            return CheckResult(installed=True, detail=f"~/{relative}")
        return NOT_INSTALLED

    return _check


# ── Terminal ────────────────────────────────────────────────────


def run_hushlogin() -> str:
    path = probes.home_dir() / ".hushlogin"
    if path.exists():
        return ".hushlogin already exists"
    try:
        path.touch()
    except OSError as e:
        raise ActionError(f"failed to create .hushlogin: {e}") from e
    return "Terminal login message silenced"


def _install_repo_config(relative_src: str, target_relative: str) -> None:
    """Copy a config file shipped in the repository into ``~``."""
    target = probes.home_dir() / target_relative
    try:
        source = repo_config_path(relative_src)
    except FileNotFoundError as e:
        raise ActionError(f"failed to find repo config: {e}") from e
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
    except OSError as e:
        raise ActionError(f"failed to write config file {target}: {e}") from e
    logger.info("Installed %s -> %s", source, target)


def run_ghostty_config() -> str:
    _install_repo_config("configuration/applications/ghostty/config", ".config/ghostty/config")
    return "Ghostty config installed at ~/.config/ghostty/config"


# ── Security ────────────────────────────────────────────────────


def _check_gpg_signing() -> CheckResult:
    value = probes.read_command_output_line("git", "config", "--global", "commit.gpgsign")
    if value == "true":
        return CheckResult(installed=True, detail="commit.gpgsign=true")
    return NOT_INSTALLED


def parse_gpg_key_id(listing: str) -> str:
    """Key id from ``gpg --list-secret-keys --keyid-format long`` output.

    ``sec   ed25519/ABCDEF0123456789 2024-01-01 [SC]`` → ``ABCDEF0123456789``.
    """
    for line in listing.split("\n"):
        if "ed25519/" in line or "rsa" in line:
            parts = line.split("/", 1)
            if len(parts) == 2 and parts[1].split():
                return parts[1].split()[0]
    return ""


def _configure_git_signing(email: str) -> None:
    listing = probes.capture("gpg", "--list-secret-keys", "--keyid-format", "long", email)
    if not listing["ok"]:
        raise ActionError("failed to list GPG keys")
    key_id = parse_gpg_key_id(listing["output"])
    if not key_id:
        raise ActionError("could not find GPG key ID")

    for key, value in (
        ("user.signingkey", key_id),
        ("commit.gpgsign", "true"),
        ("gpg.program", "gpg"),
    ):
        run_or_raise(["git", "config", "--global", key, value])

    # Public key goes straight to the terminal for copy/paste
    run_interactive(["gpg", "--armor", "--export", email])


def run_gpg_setup() -> str:
    if not probes.command_exists("gpg"):
        raise ActionError("GPG not installed. Run: j install gpg")

    existing = probes.capture("gpg", "--list-secret-keys", "--keyid-format", "long", USER_EMAIL)
    if not (existing["ok"] and existing["output"].strip()):
        batch = _GPG_BATCH.format(name=USER_NAME, email=USER_EMAIL)
        result = run_interactive(["gpg", "--batch", "--generate-key"], input_text=batch)
        if not result["ok"]:
            raise ActionError(f"failed to generate GPG key: {result['error']}")

    _configure_git_signing(USER_EMAIL)
    return (
        "Git configured for commit signing\n"
        "Add the public key above at: https://github.com/settings/gpg/new"
    )


def run_ssh_setup() -> str:
    ssh_dir = probes.home_dir() / ".ssh"
    key = ssh_dir / "id_ed25519"
    try:
        ssh_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as e:
        raise ActionError(f"failed to create .ssh directory: {e}") from e

    if not key.exists():
        result = run_interactive(["ssh-keygen", "-t", "ed25519", "-C", USER_EMAIL, "-f", str(key)])
        if not result["ok"]:
            raise ActionError(f"failed to generate SSH key: {result['error']}")

    config = ssh_dir / "config"
    try:
        existing = config.read_text(encoding="utf-8") if config.exists() else ""
        if "AddKeysToAgent yes" not in existing:
            fd = os.open(config, os.O_APPEND | os.O_CREAT | os.O_WRONLY, 0o600)
            with os.fdopen(fd, "a", encoding="utf-8") as f:
                f.write(_SSH_CONFIG_BLOCK)
    except OSError as e:
        raise ActionError(f"failed to update SSH config: {e}") from e

    result = run_interactive(["ssh-add", "--apple-use-keychain", str(key)])
    if not result["ok"]:
        raise ActionError(f"failed to add key to SSH agent: {result['error']}")

    pub = key.with_suffix(".pub")
    try:
        public_key = pub.read_text(encoding="utf-8").strip()
    except OSError:
        public_key = ""
    return (
        f"SSH key ready at {key}\n{public_key}\n"
        "Add it at: https://github.com/settings/ssh/new"
    )


# ── Editor ──────────────────────────────────────────────────────


def run_zed_config() -> str:
    _install_repo_config("configuration/applications/zed/settings.json", ".config/zed/settings.json")
    return "Zed config installed at ~/.config/zed/settings.json"


# ── System ──────────────────────────────────────────────────────


def _check_java_symlink() -> CheckResult:
    if os.path.lexists(JAVA_SYSTEM_LINK):
        return CheckResult(installed=True, detail=JAVA_SYSTEM_LINK)
    return NOT_INSTALLED


def run_java_symlink() -> str:
    if not os.path.exists(JAVA_HOMEBREW_JDK):
        raise ActionError("OpenJDK not installed. Run: j install openjdk")
    if os.path.lexists(JAVA_SYSTEM_LINK):
        return "Java symlink already exists"
    # /Library/Java is root-owned
    result = run_interactive(["sudo", "ln", "-sfn", JAVA_HOMEBREW_JDK, JAVA_SYSTEM_LINK])
    if not result["ok"]:
        raise ActionError(f"failed to create symlink: {result['error']}")
    return "Java configured for macOS"


def run_dock_reset() -> str:
    run_interactive(["defaults", "delete", "com.apple.dock"])
    run_interactive(["killall", "Dock"])
    return "Dock reset to defaults"


def run_dock_spacer() -> str:
    run_or_raise([
        "defaults", "write", "com.apple.dock", "persistent-apps",
        "-array-add", '{"tile-type"="small-spacer-tile";}',
    ])
    run_interactive(["killall", "Dock"])
    return "Dock spacer added"


# ── Catalog ─────────────────────────────────────────────────────

SCRIPTS: tuple[Script, ...] = (
    Script(
        name="hushlogin",
        description="Silence terminal login message",
        category=ScriptCategory.TERMINAL,
        check_fn=_file_check(".hushlogin"),
        run_fn=run_hushlogin,
    ),
    Script(
        name="ghostty-config",
        description="Install Ghostty terminal config",
        category=ScriptCategory.TERMINAL,
        requires_tool="ghostty",
        check_fn=_file_check(".config/ghostty/config"),
        run_fn=run_ghostty_config,
    ),
    Script(
        name="gpg-setup",
        description="Configure GPG for commit signing",
        category=ScriptCategory.SECURITY,
        requires_tool="gpg",
        check_fn=_check_gpg_signing,
        run_fn=run_gpg_setup,
    ),
    Script(
        name="ssh",
        description="Generate SSH key with Keychain integration",
        category=ScriptCategory.SECURITY,
        check_fn=_file_check(".ssh/id_ed25519"),
        run_fn=run_ssh_setup,
    ),
    Script(
        name="zed-config",
        description="Install Zed editor config",
        category=ScriptCategory.EDITOR,
        requires_tool="zed",
        check_fn=_file_check(".config/zed/settings.json"),
        run_fn=run_zed_config,
    ),
    Script(
        name="java-symlink",
        description="Configure Java runtime symlink for macOS",
        category=ScriptCategory.SYSTEM,
        requires_tool="openjdk",
        check_fn=_check_java_symlink,
        run_fn=run_java_symlink,
    ),
    Script(
        name="dock-reset",
        description="Reset dock to system defaults",
        category=ScriptCategory.SYSTEM,
        run_fn=run_dock_reset,
    ),
    Script(
        name="dock-spacer",
        description="Add a small spacer tile to the dock",
        category=ScriptCategory.SYSTEM,
        run_fn=run_dock_spacer,
    ),
)

_BY_NAME: dict[str, Script] = {s.name: s for s in SCRIPTS}


def all_scripts() -> list[Script]:
    return list(SCRIPTS)


def script_by_name(name: str) -> Script | None:
    return _BY_NAME.get(name)


def checkable_scripts() -> list[Script]:
    """Scripts with an idempotency probe (shown in ``status``)."""
    return [s for s in SCRIPTS if s.check_fn is not None]
