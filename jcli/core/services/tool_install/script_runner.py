"""
Script execution — ``j setup <script>`` and post-install hooks.
"""

from __future__ import annotations

import logging

from jcli.core.models.action import ActionResult
from jcli.core.models.catalog import Script
from jcli.core.services.catalog.scripts import script_by_name
from jcli.core.services.catalog.tools import tool_by_name
from jcli.core.services.tool_install.subprocess_runner import ActionError

logger = logging.getLogger(__name__)


def run_script(name: str) -> ActionResult:
    """Run the script called *name*.

    Scripts with a ``requires_tool`` refuse to run until that tool is
    installed.  Scripts are not skipped when already configured; they
    are responsible for their own idempotency.
    """
    script = script_by_name(name)
    if script is None:
        return ActionResult.failure(name, f"Unknown script: {name}")
    return execute_script(script)


def execute_script(script: Script) -> ActionResult:
    if script.requires_tool:
        tool = tool_by_name(script.requires_tool)
        if tool is not None and not tool.check().installed:
            return ActionResult.failure(
                script.name,
                f"{tool.name} required for {script.name}. Run: j install {tool.name}",
            )

    logger.info("Running script %s", script.name)
    try:
        message = script.run_fn()
    except (ActionError, OSError) as e:
        logger.debug("Script %s failed: %s", script.name, e)
        return ActionResult.failure(script.name, str(e))
    return ActionResult.success(script.name, message)


def missing_scripts() -> list[Script]:
    """Probed scripts that are not configured yet."""
    from jcli.core.services.catalog.scripts import checkable_scripts

    missing = []
    for script in checkable_scripts():
        result = script.check()
        if result is not None and not result.installed:
            missing.append(script)
    return missing
