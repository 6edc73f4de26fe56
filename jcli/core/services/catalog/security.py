"""
Security posture checks — all healthy when ``installed`` is true.
"""

from __future__ import annotations

from jcli.core.models.catalog import CheckResult, SecurityCheck
from jcli.core.services import probes


def _output_contains(needle: str, *argv: str):
    def _check() -> CheckResult:
        return CheckResult(installed=needle in probes.capture(*argv)["output"])

    return _check


def _check_remote_login_off() -> CheckResult:
    services = probes.capture("launchctl", "list")["output"]
    return CheckResult(installed="com.openssh.sshd" not in services)


SECURITY_CHECKS: tuple[SecurityCheck, ...] = (
    SecurityCheck(
        name="filevault",
        description="Full disk encryption",
        check_fn=_output_contains("FileVault is On", "fdesetup", "status"),
    ),
    SecurityCheck(
        name="firewall",
        description="Block incoming connections",
        check_fn=_output_contains(
            "enabled", "/usr/libexec/ApplicationFirewall/socketfilterfw", "--getglobalstate"
        ),
    ),
    SecurityCheck(
        name="sip",
        description="System Integrity Protection",
        check_fn=_output_contains("enabled", "csrutil", "status"),
    ),
    SecurityCheck(
        name="gatekeeper",
        description="App signature verification",
        check_fn=_output_contains("enabled", "spctl", "--status"),
    ),
    SecurityCheck(
        name="remote-login",
        description="SSH server disabled",
        check_fn=_check_remote_login_off,
    ),
)


def all_security_checks() -> list[SecurityCheck]:
    return list(SECURITY_CHECKS)
