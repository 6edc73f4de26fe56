"""
CLI commands: ``j skills list | repos | available | install | remove | favorites``.

Wraps the ``skills`` CLI for globally installed agent skills.
"""

from __future__ import annotations

import json
import sys

import click

from jcli.ui.cli import output


def _require_skills_cli() -> None:
    from jcli.core.services.skills_ops import is_available

    if not is_available():
        output.error("skills CLI not found. Run: j install skills")
        sys.exit(1)


def _show_installed() -> None:
    from jcli.core.services.catalog.skills import is_favorite_skill
    from jcli.core.services.skills_ops import list_installed

    installed = list_installed()
    output.empty()
    if not installed:
        output.dim("No skills installed")
        return
    click.echo(f"Installed skills ({len(installed)}):")
    for name in installed:
        star = click.style(" ★", fg="yellow") if is_favorite_skill(name) else ""
        click.echo(f"  • {name}{star}")


@click.group()
def skills() -> None:
    """Manage agent skills."""


@skills.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def skills_list(as_json: bool) -> None:
    """Show installed skills (favorites marked ★)."""
    from jcli.core.services.catalog.skills import is_favorite_skill
    from jcli.core.services.skills_ops import list_installed

    _require_skills_cli()
    if as_json:
        data = [{"name": n, "favorite": is_favorite_skill(n)} for n in list_installed()]
        click.echo(json.dumps(data, indent=2))
        return
    _show_installed()


@skills.command("repos")
def skills_repos() -> None:
    """Show recommended skill repositories."""
    from jcli.core.services.catalog.skills import recommended_repos

    for repo in recommended_repos():
        click.echo(f"  {repo.repo:<40} ", nl=False)
        output.dim(repo.description)


@skills.command("favorites")
def skills_favorites() -> None:
    """Install every favorite skill that is missing."""
    from jcli.core.services import skills_ops
    from jcli.core.services.catalog.skills import favorite_skills

    _require_skills_cli()
    installed = set(skills_ops.list_installed())
    for fav in favorite_skills():
        output.row(fav.skill_name in installed, fav.skill_name, fav.repo, width=28)

    missing = [f for f in favorite_skills() if f.skill_name not in installed]
    if not missing:
        output.empty()
        output.success("All favorite skills installed")
        return

    output.empty()
    output.action("⭐", f"Installing {len(missing)} favorite skill(s)...")
    failed = _report(
        [(f.skill_name, skills_ops.install(f.repo, f.skill_name)) for f in missing],
        "installed",
    )
    _show_installed()
    if failed:
        sys.exit(1)


@skills.command("available")
@click.argument("repo")
def skills_available(repo: str) -> None:
    """List the skills published by REPO (owner/name)."""
    from jcli.core.services.catalog.skills import is_favorite_skill
    from jcli.core.services.skills_ops import list_from_repo, list_installed

    _require_skills_cli()
    output.action("🔍", f"Fetching skills from {repo}...")
    result = list_from_repo(repo)
    if not result["ok"]:
        output.error(result["error"])
        sys.exit(1)
    if not result["skills"]:
        output.dim(f"No skills found in {repo}")
        return

    installed = set(list_installed())
    for name in result["skills"]:
        star = click.style(" ★", fg="yellow") if is_favorite_skill(name, repo) else ""
        output.row(name in installed, name + star, width=28)


@skills.command("install")
@click.argument("repo")
@click.argument("names", nargs=-1)
@click.option("--all", "install_everything", is_flag=True, help="Install every skill in REPO.")
def skills_install(repo: str, names: tuple[str, ...], install_everything: bool) -> None:
    """Install skills from REPO."""
    from jcli.core.services import skills_ops

    _require_skills_cli()
    if install_everything:
        results = [(repo, skills_ops.install_all(repo))]
    elif names:
        results = [(name, skills_ops.install(repo, name)) for name in names]
    else:
        output.usage("j skills install <repo> <skill> [skill…]  or  j skills install <repo> --all")
        sys.exit(1)

    failed = _report(results, "installed")
    _show_installed()
    if failed:
        sys.exit(1)


@skills.command("remove")
@click.argument("names", nargs=-1)
@click.option("--all", "remove_everything", is_flag=True, help="Remove every installed skill.")
def skills_remove(names: tuple[str, ...], remove_everything: bool) -> None:
    """Remove installed skills."""
    from jcli.core.services import skills_ops

    _require_skills_cli()
    if remove_everything:
        results = [("all skills", skills_ops.remove_all())]
    elif names:
        results = [(name, skills_ops.remove(name)) for name in names]
    else:
        output.usage("j skills remove <skill> [skill…]  or  j skills remove --all")
        sys.exit(1)

    failed = _report(results, "removed")
    _show_installed()
    if failed:
        sys.exit(1)


def _report(results: list[tuple[str, dict]], verb: str) -> int:
    failed = 0
    for label, result in results:
        if result["ok"]:
            output.success(f"{label} {verb}")
        else:
            failed += 1
            output.error(result["error"])
    return failed
