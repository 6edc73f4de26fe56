"""
CLI command: ``j status`` — the whole workstation at a glance.

Thin wrapper over ``jcli.core.services.status.loader``.  Probes run in
parallel; a ``loaded/total`` progress bar tracks them, then the rows are
rendered section by section.
"""

from __future__ import annotations

import json

import click

from jcli.core.models.status import AllLoaded, ItemKind, StatusItem
from jcli.ui.cli import output

_NAME_WIDTH = 18


def _tool_value(item: StatusItem) -> str:
    if not item.installed:
        return click.style(item.method, fg="bright_black") if item.method else ""
    parts = [item.version or "installed"]
    if item.status:
        parts.append(click.style(item.status, fg="bright_black"))
    return "  ".join(parts)


def _check_value(item: StatusItem) -> str:
    text = item.detail or item.status or item.description
    return click.style(text, fg="bright_black") if text else ""


def _render_item(item: StatusItem) -> None:
    kind = item.kind
    if kind is ItemKind.SYSINFO:
        click.secho(f"🖥  {item.detail}", bold=True)
    elif kind is ItemKind.TOOL:
        output.row(item.installed, item.name, _tool_value(item), width=_NAME_WIDTH)
    elif kind is ItemKind.SETUP:
        output.row(item.installed, item.name, _check_value(item), width=_NAME_WIDTH)
    elif kind in (ItemKind.SECURITY, ItemKind.IDENTITY):
        output.row(item.healthy, item.name, _check_value(item), width=_NAME_WIDTH)
    elif item.available:
        click.echo(f"  {item.name:<{_NAME_WIDTH}} {output.styled(item.value, item.style)}")
    else:
        click.echo(f"  {item.name:<{_NAME_WIDTH}} " + click.style("—", fg="bright_black"))


def render_items(items: list[StatusItem]) -> None:
    """Sectioned table; a header with no rows under it is not printed."""
    i = 0
    while i < len(items):
        item = items[i]
        if not item.is_header:
            _render_item(item)
            i += 1
            continue

        j = i + 1
        while j < len(items) and not items[j].is_header:
            j += 1
        rows = items[i + 1:j]
        if rows:
            click.echo()
            title = item.name if item.section != item.name else item.section
            click.secho(title, fg="cyan", bold=True)
            for row in rows:
                _render_item(row)
        i = j
    click.echo()


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def status(as_json: bool) -> None:
    """Show system, tools, security, network and disk status."""
    from jcli.core.services.status.loader import StatusLoader

    loader = StatusLoader()
    loader.start()

    if as_json:
        items = loader.run()
        click.echo(json.dumps([item.to_dict() for item in items], indent=2))
        return

    with click.progressbar(length=loader.total_count, label="Probing", show_pos=True) as bar:
        for event in loader.iter_updates():
            if isinstance(event, AllLoaded):
                break
            bar.update(1)

    render_items(loader.items())
