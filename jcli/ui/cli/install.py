"""
CLI command: ``j install [tool…]``.

Dependencies are resolved first and installed in order; every tool is
reported and a failure does not stop the rest.
"""

from __future__ import annotations

import sys

import click

from jcli.ui.cli import output
from jcli.ui.cli.completion import complete_installable_tools


def _list_tools() -> None:
    """Installable tools by category, with their current state."""
    from jcli.core.models.status import ItemKind
    from jcli.core.services.catalog.tools import installable_tools
    from jcli.core.services.status.loader import StatusLoader, build_items
    from jcli.ui.cli.status import render_items

    names = {t.name for t in installable_tools()}
    rows = [
        item for item in build_items()
        if item.id.startswith("header-tools-")
        or (item.kind is ItemKind.TOOL and item.name in names)
    ]
    render_items(StatusLoader(rows).run())
    output.dim("Run: j install <tool…>  or  j install --all")


@click.command()
@click.argument("tools", nargs=-1, shell_complete=complete_installable_tools)
@click.option("--all", "install_all", is_flag=True, help="Install every missing installable tool.")
def install(tools: tuple[str, ...], install_all: bool) -> None:
    """Install developer tools (dependencies first)."""
    from jcli.core.services.tool_install.installer import install_with_dependencies

    if install_all:
        from jcli.core.services.catalog.tools import installable_tools

        tools = tuple(t.name for t in installable_tools())
    elif not tools:
        _list_tools()
        return

    output.action("📦", "Installing all tools" if install_all else f"Installing {', '.join(tools)}")
    results = install_with_dependencies(tools)
    if not output.report_all(results):
        sys.exit(1)
