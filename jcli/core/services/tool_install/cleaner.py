"""
Clean executor — ``j clean [item…] [--all]``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from jcli.core.models.action import ActionResult
from jcli.core.models.catalog import Cleanable
from jcli.core.services import probes
from jcli.core.services.catalog.cleanables import all_cleanables, cleanable_by_name
from jcli.core.services.tool_install.subprocess_runner import ActionError
from jcli.core.services.version_parsers import format_bytes

logger = logging.getLogger(__name__)


def cleanable_size(item: Cleanable) -> int:
    """Bytes the item currently holds, 0 when unknown."""
    if item.size_fn is None:
        return 0
    try:
        return item.size_fn()
    except OSError as e:
        logger.debug("Size probe for %s failed: %s", item.name, e)
        return 0


def clean_item(item: Cleanable) -> ActionResult:
    if item.requires_command and not probes.command_exists(item.requires_command):
        return ActionResult.skip(
            item.name, f"{item.requires_command} not installed, skipping {item.name}",
        )

    size = cleanable_size(item)
    logger.info("Cleaning %s", item.name)
    try:
        item.clean_fn()
    except (ActionError, OSError) as e:
        return ActionResult.failure(item.name, f"failed to clean {item.name}: {e}")

    message = f"{item.name} cleaned"
    if size:
        message += f" ({format_bytes(size)} freed)"
    return ActionResult.success(item.name, message)


def clean(name: str) -> ActionResult:
    item = cleanable_by_name(name)
    if item is None:
        return ActionResult.failure(name, f"Unknown clean item: {name}")
    return clean_item(item)


def clean_items(names: Iterable[str]) -> list[ActionResult]:
    return [clean(name) for name in names]


def clean_all() -> list[ActionResult]:
    """Clean every cleanable in catalog order, skipping unavailable ones."""
    return [clean_item(item) for item in all_cleanables()]
