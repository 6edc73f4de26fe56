"""
j — macOS workstation assistant, CLI entrypoint.

Usage:
    j --help
    j status
    j install claude
"""

from __future__ import annotations

import click

from jcli import __version__
from jcli.core.observability.logging_config import configure_cli_logging


@click.group()
@click.version_option(version=__version__, prog_name="j")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """j — set up, inspect and maintain this Mac."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    configure_cli_logging(debug=debug, verbose=verbose, quiet=quiet)


# ── Register command groups ──────────────────────────────────────

from jcli.ui.cli.status import status  # noqa: E402
from jcli.ui.cli.install import install  # noqa: E402
from jcli.ui.cli.upgrade import upgrade  # noqa: E402
from jcli.ui.cli.clean import clean  # noqa: E402
from jcli.ui.cli.setup import setup  # noqa: E402
from jcli.ui.cli.run import run  # noqa: E402
from jcli.ui.cli.sync import sync  # noqa: E402
from jcli.ui.cli.remote import remote  # noqa: E402
from jcli.ui.cli.skills import skills  # noqa: E402

cli.add_command(status)
cli.add_command(install)
cli.add_command(upgrade)
cli.add_command(clean)
cli.add_command(setup)
cli.add_command(run)
cli.add_command(sync)
cli.add_command(remote)
cli.add_command(skills)


if __name__ == "__main__":
    cli()
