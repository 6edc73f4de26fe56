"""
Terminal output helpers shared by every ``j`` command.

Semantic calls only; colors live here so commands never pick them.
"""

from __future__ import annotations

import click

from jcli.core.models.action import ActionResult
from jcli.core.models.catalog import Style

STYLE_COLORS: dict[Style, str | None] = {
    Style.SUCCESS: "green",
    Style.WARNING: "yellow",
    Style.MUTED: "bright_black",
    Style.SPECIAL: "magenta",
}


def action(icon: str, message: str) -> None:
    click.secho(f"{icon} {message}", fg="cyan", bold=True)


def success(message: str) -> None:
    click.secho(f"✅ {message}", fg="green")


def warning(message: str) -> None:
    click.secho(f"⚠️  {message}", fg="yellow")


def error(message: str) -> None:
    click.secho(f"❌ {message}", fg="red")


def dim(message: str) -> None:
    click.secho(message, fg="bright_black")


def empty() -> None:
    click.echo()


def usage(text: str) -> None:
    click.echo(f"Usage: {text}")


def row(ok: bool, name: str, value: str = "", width: int = 18) -> None:
    """``  ✓ name            value`` with a red ✗ when not ok."""
    mark = click.style("✓", fg="green") if ok else click.style("✗", fg="red")
    click.echo(f"  {mark} {name:<{width}} {value}".rstrip())


def styled(text: str, style: Style) -> str:
    return click.style(text, fg=STYLE_COLORS.get(style))


def report(result: ActionResult) -> None:
    """One line per executor result."""
    if result.skipped:
        dim(f"   {result.message}")
    elif result.ok:
        success(result.message)
    else:
        if result.message:
            success(result.message)
        error(result.error)


def report_all(results: list[ActionResult]) -> bool:
    """Print every result; True when none failed."""
    for result in results:
        report(result)
    return all(r.ok for r in results)
