"""
CLI commands: ``j sync [init|status|diff] [--all]``.

Thin wrappers over ``jcli.core.services.sync_ops``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from jcli.ui.cli import output


def _require_copier() -> None:
    from jcli.core.services.sync_ops import copier_available

    if not copier_available():
        output.error("copier not installed. Run: j install copier")
        sys.exit(1)


def _unlinked_hint() -> None:
    output.warning("No .copier-answers.yml found in current directory")
    output.dim("Run 'j sync init' to initialize this project from a template")


@click.group(invoke_without_command=True)
@click.option("--all", "sync_everything", is_flag=True, help="Update every linked project in ~/Developer.")
@click.pass_context
def sync(ctx: click.Context, sync_everything: bool) -> None:
    """Sync projects with the shared copier template."""
    if ctx.invoked_subcommand is not None:
        return

    from jcli.core.services.sync_ops import has_answers, sync_all, sync_update

    if sync_everything:
        _require_copier()
        results = sync_all()
        if not results:
            output.dim("No linked projects found in ~/Developer")
            return
        failed = 0
        for result in results:
            name = Path(result["project"]).name
            if result["ok"]:
                output.success(f"{name} updated")
            else:
                failed += 1
                output.error(f"{name}: {result['error']}")
        if failed:
            sys.exit(1)
        return

    project = Path.cwd()
    if not has_answers(project):
        _unlinked_hint()
        return
    _require_copier()
    output.action("🔄", "Updating project from template...")
    result = sync_update(project)
    if not result["ok"]:
        output.error(f"Update failed: {result['error']}")
        sys.exit(1)
    output.success("Project updated")


@sync.command("init")
def sync_init_cmd() -> None:
    """Initialize the current project from the template."""
    from jcli.core.services.sync_ops import detect_language, has_answers, sync_init

    project = Path.cwd()
    if has_answers(project):
        output.warning("Project already linked to a template (.copier-answers.yml exists)")
        output.dim("Run 'j sync' to update instead")
        return
    _require_copier()

    language = detect_language(project)
    if language:
        output.dim(f"Detected language: {language}")
    output.action("📋", "Initializing project from template...")

    result = sync_init(project)
    if not result["ok"]:
        output.error(f"Init failed: {result['error']}")
        sys.exit(1)
    output.success("Project initialized from template")
    output.dim("Run 'j sync' anytime to pull template updates")


@sync.command("status")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def sync_status_cmd(as_json: bool) -> None:
    """Show the template link and its answers."""
    from jcli.core.services.sync_ops import read_answers

    result = read_answers(Path.cwd())
    if as_json:
        click.echo(json.dumps(result, indent=2, default=str))
        return

    if result.get("unlinked"):
        output.row(False, "Not linked", "no .copier-answers.yml")
        output.empty()
        output.dim("Run 'j sync init' to link this project to a template")
        return
    if not result["ok"]:
        output.error(result["error"])
        sys.exit(1)

    output.row(True, "Linked", ".copier-answers.yml")
    output.empty()
    for key, value in result["answers"].items():
        if str(key).startswith("_"):
            output.dim(f"  {key}: {value}")
        else:
            click.echo(f"  {str(key) + ':':<16} {value}")
    output.empty()


@sync.command("diff")
def sync_diff_cmd() -> None:
    """Preview what the next update would change."""
    from jcli.core.services.sync_ops import has_answers, sync_diff

    project = Path.cwd()
    if not has_answers(project):
        _unlinked_hint()
        return
    _require_copier()
    output.action("🔍", "Previewing template changes...")
    result = sync_diff(project)
    if not result["ok"]:
        output.error(f"Diff failed: {result['error']}")
        sys.exit(1)
