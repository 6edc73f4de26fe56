"""
Dependency resolver — install order for a set of requested tools.

Depth-first over ``Tool.dependencies``.  Non-installable prerequisites
(``homebrew``, ``mas``-only apps) stay in the graph but are never
emitted; the installer verifies them with their check instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from jcli.core.models.catalog import Tool
from jcli.core.services.catalog.tools import tool_by_name

logger = logging.getLogger(__name__)


def _collect(
    name: str,
    lookup: Callable[[str], Tool | None],
    visited: set[str],
    order: list[Tool],
) -> None:
    """Visit *name*'s dependencies, then append it if installable.

    Args:
        name: Tool to resolve.
        lookup: Catalog accessor.
        visited: Names already processed (cycle guard).
        order: Accumulator, mutated in place.
    """
    if name in visited:
        return
    visited.add(name)

    tool = lookup(name)
    if tool is None:
        logger.warning("Dependency '%s' is not in the catalog", name)
        return

    for dep in tool.dependencies:
        _collect(dep, lookup, visited, order)

    if tool.installable:
        order.append(tool)


def resolve_install_order(
    names: Iterable[str],
    lookup: Callable[[str], Tool | None] | None = None,
) -> list[Tool]:
    """Installable tools for *names*, each after its dependencies.

    Each tool appears at most once.  Unknown names are skipped here;
    the installer reports them.
    """
    lookup = lookup or tool_by_name
    visited: set[str] = set()
    order: list[Tool] = []
    for name in names:
        _collect(name, lookup, visited, order)
    logger.debug("Install order: %s", [t.name for t in order])
    return order
