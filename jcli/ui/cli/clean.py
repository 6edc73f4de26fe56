"""
CLI command: ``j clean [item…] [--all]``.
"""

from __future__ import annotations

import sys

import click

from jcli.ui.cli import output
from jcli.ui.cli.completion import complete_cleanables


def _list_cleanables() -> None:
    from jcli.core.services.catalog.cleanables import available_cleanables
    from jcli.core.services.tool_install.cleaner import cleanable_size
    from jcli.core.services.version_parsers import format_bytes

    items = available_cleanables()
    if not items:
        output.dim("Nothing to clean")
        return

    click.echo("Available clean targets:")
    output.empty()
    for item in items:
        size = cleanable_size(item)
        size_text = click.style(format_bytes(size), fg="yellow") if size else ""
        click.echo(f"  {item.name:<12} {item.description:<45} {size_text}".rstrip())
    output.empty()
    output.usage("j clean <item> [item…]  or  j clean --all")


@click.command()
@click.argument("items", nargs=-1, shell_complete=complete_cleanables)
@click.option("--all", "clean_everything", is_flag=True, help="Clean every available item.")
def clean(items: tuple[str, ...], clean_everything: bool) -> None:
    """Reclaim disk space (caches, trash, containers)."""
    from jcli.core.services.tool_install.cleaner import clean_all, clean_items

    if clean_everything:
        output.action("🧹", "Cleaning everything...")
        results = clean_all()
    elif items:
        results = clean_items(items)
    else:
        _list_cleanables()
        return

    for result in results:
        if result.skipped:
            output.warning(result.message)
        else:
            output.report(result)

    if not all(r.ok for r in results):
        sys.exit(1)
