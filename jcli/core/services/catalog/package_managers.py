"""
Package managers refreshed by ``j upgrade --<flag>``.

Adding an entry here adds the matching ``--<flag>`` option to
``j upgrade`` automatically.
"""

from __future__ import annotations

from jcli.core.models.catalog import PackageManager
from jcli.core.services.tool_install.subprocess_runner import run_or_raise


def _upgrade_brew() -> None:
    run_or_raise(["brew", "update"])
    run_or_raise(["brew", "upgrade"])


def _upgrade_npm() -> None:
    run_or_raise(["npm", "update", "-g"])


def _upgrade_bun() -> None:
    run_or_raise(["bun", "update", "-g"])


PACKAGE_MANAGERS: tuple[PackageManager, ...] = (
    PackageManager(name="homebrew", flag="brew", requires_command="brew", upgrade_fn=_upgrade_brew),
    PackageManager(name="npm", flag="npm", requires_command="npm", upgrade_fn=_upgrade_npm),
    PackageManager(name="bun", flag="bun", requires_command="bun", upgrade_fn=_upgrade_bun),
)


def all_package_managers() -> list[PackageManager]:
    return list(PACKAGE_MANAGERS)


def package_manager_by_flag(flag: str) -> PackageManager | None:
    for pm in PACKAGE_MANAGERS:
        if pm.flag == flag:
            return pm
    return None
