"""
CLI command: ``j upgrade [tool…] [--brew] [--npm] [--bun] [--all]``.

One ``--<flag>`` option exists per catalog package manager.
"""

from __future__ import annotations

import sys

import click

from jcli.core.services.catalog.package_managers import all_package_managers
from jcli.ui.cli import output
from jcli.ui.cli.completion import complete_tools


def _package_manager_options(f):
    for pm in reversed(all_package_managers()):
        f = click.option(
            f"--{pm.flag}",
            f"pm_{pm.flag}",
            is_flag=True,
            help=f"Upgrade {pm.name} packages.",
        )(f)
    return f


def _list_options() -> None:
    from jcli.core.services import probes

    click.echo("Available upgrade targets:")
    output.empty()
    for pm in all_package_managers():
        output.row(probes.command_exists(pm.requires_command), pm.name, f"--{pm.flag}")
    output.empty()
    output.usage("j upgrade <tool> [tool…]")
    click.echo("       j upgrade --brew --npm")
    click.echo("       j upgrade --all")


@click.command()
@click.argument("tools", nargs=-1, shell_complete=complete_tools)
@click.option("--all", "-a", "upgrade_all", is_flag=True, help="Upgrade all package managers.")
@_package_manager_options
def upgrade(tools: tuple[str, ...], upgrade_all: bool, **pm_flags: bool) -> None:
    """Upgrade tools or whole package managers."""
    from jcli.core.services.tool_install.upgrader import (
        upgrade_package_managers,
        upgrade_tools,
    )

    selected = [key.removeprefix("pm_") for key, on in pm_flags.items() if on]

    if upgrade_all:
        output.action("🔄", "Upgrading all packages...")
        results = upgrade_package_managers()
    elif selected:
        results = upgrade_package_managers(selected)
    elif tools:
        output.action("🔄", "Upgrading selected packages...")
        results = upgrade_tools(tools)
    else:
        _list_options()
        return

    for result in results:
        if result.skipped:
            output.warning(result.message)
        else:
            output.report(result)

    if not all(r.ok for r in results):
        sys.exit(1)
    output.success("Upgrades completed")
