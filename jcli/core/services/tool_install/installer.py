"""
Install executor — ``j install <tool…>``.

One tool at a time: alias, catalog lookup, already-installed check,
prerequisite checks, install (custom action or method dispatch), then
the tool's post-install scripts.  Lists are installed strictly in
sequence; brew holds a single-process lock.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from jcli.core.models.action import ActionResult
from jcli.core.models.catalog import InstallMethod, Tool
from jcli.core.services.catalog.tools import tool_by_name
from jcli.core.services.tool_install.resolver import resolve_install_order
from jcli.core.services.tool_install.script_runner import run_script
from jcli.core.services.tool_install.subprocess_runner import ActionError, run_interactive

logger = logging.getLogger(__name__)

TOOL_ALIASES: dict[str, str] = {"brew": "homebrew"}


def resolve_alias(name: str) -> str:
    return TOOL_ALIASES.get(name, name)


def install_command(tool: Tool) -> list[str] | None:
    """Package-manager argv for *tool*'s method, or ``None`` if unsupported."""
    method = tool.method
    if method is InstallMethod.BREW_FORMULA:
        return ["brew", "install", tool.formula]
    if method is InstallMethod.BREW_CASK:
        return ["brew", "install", "--cask", tool.formula]
    if method is InstallMethod.NPM:
        return ["npm", "install", "-g", tool.formula]
    if method is InstallMethod.BUN:
        return ["bun", "install", "-g", tool.formula]
    return None


def _missing_dependency(tool: Tool) -> str | None:
    for dep_name in tool.dependencies:
        dep = tool_by_name(dep_name)
        if dep is None or not dep.check().installed:
            return dep_name
    return None


def install_tool(name: str) -> ActionResult:
    """Install one tool and run its post-install scripts.

    Returns:
        ``ActionResult``; ``skipped`` when the tool is already present.
    """
    name = resolve_alias(name)
    tool = tool_by_name(name)
    if tool is None:
        return ActionResult.failure(name, f"Unknown tool: {name}")

    if tool.check().installed:
        return ActionResult.skip(name, f"{name} already installed")

    dep = _missing_dependency(tool)
    if dep is not None:
        return ActionResult.failure(name, f"{dep} required for {name}. Run: j install {dep}")

    logger.info("Installing %s (method=%s)", name, tool.method.value)
    if tool.install_fn is not None:
        try:
            tool.install_fn()
        except (ActionError, OSError) as e:
            return ActionResult.failure(name, f"failed to install {name}: {e}")
    else:
        cmd = install_command(tool)
        if cmd is None:
            return ActionResult.failure(
                name, f"cannot auto-install {name} (method: {tool.method.value})",
            )
        result = run_interactive(cmd)
        if not result["ok"]:
            return ActionResult.failure(name, f"failed to install {name}: {result['error']}")

    script_errors: list[str] = []
    for script_name in tool.scripts:
        script_result = run_script(script_name)
        if not script_result.ok:
            logger.warning("Post-install script %s failed: %s", script_name, script_result.error)
            script_errors.append(f"{script_name}: {script_result.error}")

    if script_errors:
        return ActionResult(
            name=name,
            ok=False,
            message=f"{name} installed",
            error="post-install failed: " + "; ".join(script_errors),
        )
    return ActionResult.success(name, f"{name} installed")


def install_tools(names: Iterable[str]) -> list[ActionResult]:
    """Install every tool in *names* in order, continuing past failures."""
    return [install_tool(name) for name in names]


def install_with_dependencies(names: Iterable[str]) -> list[ActionResult]:
    """Install *names* plus their installable dependencies, dependencies first.

    Dependencies that are already present are left out of the report.
    Requested names the resolver does not emit (unknown or not
    installable) still get a verdict.
    """
    requested = list(dict.fromkeys(resolve_alias(n) for n in names))
    order = [t.name for t in resolve_install_order(requested)]
    leftovers = [n for n in requested if n not in order]

    results: list[ActionResult] = []
    for name in leftovers + order:
        result = install_tool(name)
        if result.skipped and name not in requested:
            continue
        results.append(result)
    return results
