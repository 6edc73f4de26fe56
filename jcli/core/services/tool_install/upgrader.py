"""
Upgrade executor — ``j upgrade [tool…] [--<package-manager>…] [--all]``.

Tools upgrade through their install method (or a custom ``upgrade_fn``);
package managers refresh all their global packages.  Post-install
scripts are not re-run on upgrade.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from jcli.core.models.action import ActionResult
from jcli.core.models.catalog import InstallMethod, PackageManager, Tool
from jcli.core.services import probes
from jcli.core.services.catalog.package_managers import all_package_managers
from jcli.core.services.catalog.tools import tool_by_name
from jcli.core.services.tool_install.installer import resolve_alias
from jcli.core.services.tool_install.subprocess_runner import ActionError, run_interactive

logger = logging.getLogger(__name__)


def upgrade_command(tool: Tool) -> list[str] | None:
    method = tool.method
    if method is InstallMethod.BREW_FORMULA:
        return ["brew", "upgrade", tool.formula]
    if method is InstallMethod.BREW_CASK:
        return ["brew", "upgrade", "--cask", tool.formula]
    if method is InstallMethod.NPM:
        return ["npm", "update", "-g", tool.formula]
    if method is InstallMethod.BUN:
        return ["bun", "update", "-g", tool.formula]
    return None


def upgrade_tool(name: str) -> ActionResult:
    """Upgrade one tool.

    Names outside the catalog fall back to ``brew upgrade <name>`` when
    brew is available, so any formula can be upgraded through ``j``.
    """
    name = resolve_alias(name)
    tool = tool_by_name(name)

    if tool is None:
        if not probes.command_exists("brew"):
            return ActionResult.failure(name, f"Unknown tool: {name}")
        return _run_upgrade(name, ["brew", "upgrade", name])

    before = tool.check()
    if not before.installed:
        return ActionResult.failure(name, f"{name} is not installed. Run: j install {name}")

    if tool.upgrade_fn is not None:
        logger.info("Upgrading %s via custom action", name)
        try:
            tool.upgrade_fn()
        except (ActionError, OSError) as e:
            return ActionResult.failure(name, f"failed to upgrade {name}: {e}")
        return _upgraded(tool, before.version)

    cmd = upgrade_command(tool)
    if cmd is None:
        return ActionResult.failure(
            name, f"cannot auto-upgrade {name} (method: {tool.method.value})",
        )
    result = _run_upgrade(name, cmd)
    if not result.ok:
        return result
    return _upgraded(tool, before.version)


def _run_upgrade(name: str, cmd: list[str]) -> ActionResult:
    logger.info("Upgrading %s: %s", name, " ".join(cmd))
    result = run_interactive(cmd)
    if not result["ok"]:
        return ActionResult.failure(name, f"failed to upgrade {name}: {result['error']}")
    return ActionResult.success(name, f"{name} upgraded")


def _upgraded(tool: Tool, version_before: str) -> ActionResult:
    version_after = tool.check().version
    if version_before and version_after and version_before == version_after:
        return ActionResult.success(
            tool.name, f"{tool.name} is already at the latest version ({version_after})",
        )
    if version_before and version_after:
        change = f"{version_before} → {version_after}"
    elif version_after:
        change = f"updated to {version_after}"
    else:
        change = "updated"
    return ActionResult.success(tool.name, f"{tool.name} upgraded: {change}")


def upgrade_tools(names: Iterable[str]) -> list[ActionResult]:
    return [upgrade_tool(name) for name in names]


def upgrade_package_manager(pm: PackageManager) -> ActionResult:
    """Refresh every global package of *pm*; skipped when its command is absent."""
    if pm.requires_command and not probes.command_exists(pm.requires_command):
        logger.debug("Skipping %s: %s not on PATH", pm.name, pm.requires_command)
        return ActionResult.skip(pm.name, f"{pm.name} not installed, skipping")

    logger.info("Upgrading %s packages", pm.name)
    try:
        pm.upgrade_fn()
    except (ActionError, OSError) as e:
        return ActionResult.failure(pm.name, f"failed to upgrade {pm.name}: {e}")
    return ActionResult.success(pm.name, f"{pm.name} packages upgraded")


def upgrade_package_managers(flags: Iterable[str] | None = None) -> list[ActionResult]:
    """Upgrade the package managers selected by *flags* (all when ``None``)."""
    wanted = None if flags is None else set(flags)
    return [
        upgrade_package_manager(pm)
        for pm in all_package_managers()
        if wanted is None or pm.flag in wanted
    ]
