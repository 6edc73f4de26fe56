"""
CLI command: ``j setup [script] [--missing]``.

Without arguments, lists every setup script with its current state and
asks which one to run.
"""

from __future__ import annotations

import sys

import click

from jcli.ui.cli import output
from jcli.ui.cli.completion import complete_scripts


def _run(name: str) -> bool:
    from jcli.core.services.tool_install.script_runner import run_script

    output.action("🔧", f"Running {name}...")
    result = run_script(name)
    output.report(result)
    return result.ok


def _list_scripts() -> list[str]:
    from jcli.core.services.catalog.scripts import all_scripts

    names: list[str] = []
    category = None
    for script in all_scripts():
        if script.category != category:
            category = script.category
            output.empty()
            click.secho(category.value, fg="cyan", bold=True)
        result = script.check()
        if result is None:
            click.echo(f"  • {script.name:<16} {script.description}")
        else:
            output.row(result.installed, script.name, script.description, width=16)
        names.append(script.name)
    output.empty()
    return names


@click.command()
@click.argument("script", required=False, shell_complete=complete_scripts)
@click.option("--missing", is_flag=True, help="Run every script that is not configured yet.")
def setup(script: str | None, missing: bool) -> None:
    """Configure shell, editor, identity and system settings."""
    if missing:
        from jcli.core.services.tool_install.script_runner import missing_scripts

        pending = missing_scripts()
        if not pending:
            output.success("Everything is configured")
            return
        failed = [s.name for s in pending if not _run(s.name)]
        if failed:
            sys.exit(1)
        return

    if script is None:
        names = _list_scripts()
        script = click.prompt("Script to run", type=click.Choice(names), show_choices=False)

    if not _run(script):
        sys.exit(1)
