"""
Identity checks — git author, signing, keys and GitHub login.
"""

from __future__ import annotations

from jcli.core.models.catalog import NOT_INSTALLED, CheckResult, IdentityCheck
from jcli.core.services import probes
from jcli.core.services.catalog.user import USER_EMAIL


def _git_config(key: str) -> str:
    return probes.read_command_output_line("git", "config", "--global", key)


def _check_git_email() -> CheckResult:
    email = _git_config("user.email")
    return CheckResult(installed=email == USER_EMAIL, detail=email)


def _check_git_name() -> CheckResult:
    name = _git_config("user.name")
    return CheckResult(installed=bool(name), detail=name)


def _check_git_signing() -> CheckResult:
    return CheckResult(installed=_git_config("commit.gpgsign") == "true")


def _check_gpg_key() -> CheckResult:
    if not probes.read_command_output_line("gpg", "--list-secret-keys", "--keyid-format", "long"):
        return NOT_INSTALLED
    return CheckResult(installed=True, detail="~/.gnupg")


def parse_gh_account(text: str) -> str:
    """``"Logged in to github.com account jdoe (keyring)"`` → ``"jdoe"``."""
    idx = text.find("account ")
    if idx < 0:
        return ""
    rest = text[idx + len("account "):]
    sp = rest.find(" ")
    return rest[:sp] if sp > 0 else ""


def _check_github() -> CheckResult:
    if not probes.command_exists("gh"):
        return NOT_INSTALLED
    result = probes.capture("gh", "auth", "status")
    if not result["ok"]:
        return NOT_INSTALLED
    return CheckResult(installed=True, detail=parse_gh_account(result["output"]))


def _check_ssh_key() -> CheckResult:
    if (probes.home_dir() / ".ssh" / "id_ed25519").exists():
        return CheckResult(installed=True, detail="~/.ssh/id_ed25519")
    return NOT_INSTALLED


IDENTITY_CHECKS: tuple[IdentityCheck, ...] = (
    IdentityCheck(name="git-email", description="Git commit email", check_fn=_check_git_email),
    IdentityCheck(name="git-name", description="Git commit author name", check_fn=_check_git_name),
    IdentityCheck(name="git-signing", description="Git commit signature", check_fn=_check_git_signing),
    IdentityCheck(name="gpg-key", description="GPG key for signing", check_fn=_check_gpg_key),
    IdentityCheck(name="github", description="GitHub CLI authentication", check_fn=_check_github),
    IdentityCheck(name="ssh-key", description="SSH key for authentication", check_fn=_check_ssh_key),
)


def all_identity_checks() -> list[IdentityCheck]:
    return list(IDENTITY_CHECKS)
