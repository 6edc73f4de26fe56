"""
CLI commands: ``j run <group> <command> [args…]``.

The click tree is generated from the run-shortcut catalog, so a new
shortcut only needs a catalog entry.
"""

from __future__ import annotations

import sys

import click

from jcli.core.models.catalog import RunCommand, RunSubcommand
from jcli.core.services.catalog.run_commands import all_run_commands
from jcli.ui.cli import output


def _make_subcommand(group: RunCommand, sub: RunSubcommand) -> click.Command:
    @click.command(name=sub.name, help=sub.description)
    @click.argument("args", nargs=-1)
    def _command(args: tuple[str, ...]) -> None:
        from jcli.core.services.tool_install.subprocess_runner import ActionError

        if len(args) < sub.min_args:
            output.usage(f"j run {group.name} {sub.name} {sub.usage}".rstrip())
            sys.exit(1)
        try:
            message = sub.run_fn(list(args))
        except ActionError as e:
            output.error(str(e))
            sys.exit(1)
        if message:
            output.success(message)

    return _command


def _make_group(cmd: RunCommand) -> click.Group:
    group = click.Group(name=cmd.name, help=cmd.description)
    for sub in cmd.subcommands:
        group.add_command(_make_subcommand(cmd, sub))
    return group


@click.group()
def run() -> None:
    """Run workflow shortcuts (git, docker)."""


for _cmd in all_run_commands():
    run.add_command(_make_group(_cmd))
