"""
Run shortcuts — ``j run <group> <command> [args]``.

Each subcommand returns an optional message for the user and raises
``ActionError`` when the underlying command fails.
"""

from __future__ import annotations

from jcli.core.models.catalog import RunCommand, RunSubcommand
from jcli.core.services import probes
from jcli.core.services.tool_install.subprocess_runner import ActionError, run_interactive, run_or_raise

# ── docker ──────────────────────────────────────────────────────


def _docker_ids(*args: str) -> list[str]:
    result = probes.capture("docker", *args)
    if not result["ok"]:
        return []
    return result["output"].split()


def _docker_rm(_args: list[str]) -> str | None:
    containers = _docker_ids("ps", "-aq")
    if not containers:
        return "No containers to remove"
    run_or_raise(["docker", "rm", "-vf", *containers])
    return None


def _docker_rmi(_args: list[str]) -> str | None:
    images = _docker_ids("images", "-aq")
    if not images:
        return "No images to remove"
    run_or_raise(["docker", "rmi", "-f", *images])
    return None


def _docker_clean(_args: list[str]) -> str | None:
    run_or_raise(["docker", "system", "prune", "-af"])
    return None


def _docker_reset(_args: list[str]) -> str | None:
    containers = _docker_ids("ps", "-aq")
    if containers:
        run_interactive(["docker", "rm", "-vf", *containers])
    images = _docker_ids("images", "-aq")
    if images:
        run_interactive(["docker", "rmi", "-f", *images])
    return None


# ── git ─────────────────────────────────────────────────────────


def _git(*args: str) -> None:
    run_or_raise(["git", *args])


def _git_commit(prefix: str):
    def _run(args: list[str]) -> str | None:
        try:
            _git("add", ".")
        except ActionError as e:
            raise ActionError(f"git add failed: {e}") from e
        _git("commit", "-m", f"{prefix}: {' '.join(args)}")
        return None

    return _run


def _git_push(_args: list[str]) -> str | None:
    _git("push", "-u", "origin", "HEAD")
    return None


def _git_sync(_args: list[str]) -> str | None:
    # A failed prune-fetch still lets pull report the real problem
    run_interactive(["git", "fetch", "-p"])
    _git("pull")
    return None


def _git_wip(_args: list[str]) -> str | None:
    try:
        _git("add", "--all")
    except ActionError as e:
        raise ActionError(f"git add failed: {e}") from e
    _git("commit", "-m", "WIP")
    return None


def _git_unwip(_args: list[str]) -> str | None:
    try:
        _git("reset", "--soft", "HEAD~1")
    except ActionError as e:
        raise ActionError(f"git reset failed: {e}") from e
    _git("reset", "HEAD")
    return None


def _git_passthrough(*git_args: str):
    def _run(_args: list[str]) -> str | None:
        _git(*git_args)
        return None

    return _run


RUN_COMMANDS: tuple[RunCommand, ...] = (
    RunCommand(
        name="docker",
        description="Docker container and image management",
        subcommands=(
            RunSubcommand("rm", "Remove all containers", _docker_rm),
            RunSubcommand("rmi", "Remove all images", _docker_rmi),
            RunSubcommand("clean", "Clean up Docker system (prune)", _docker_clean),
            RunSubcommand("reset", "Remove all containers and images", _docker_reset),
        ),
    ),
    RunCommand(
        name="git",
        description="Git workflow shortcuts",
        subcommands=(
            RunSubcommand("feat", "Add all and commit with 'feat:' prefix", _git_commit("feat"), 1, "<message>"),
            RunSubcommand("fix", "Add all and commit with 'fix:' prefix", _git_commit("fix"), 1, "<message>"),
            RunSubcommand("chore", "Add all and commit with 'chore:' prefix", _git_commit("chore"), 1, "<message>"),
            RunSubcommand("push", "Push current branch to origin", _git_push),
            RunSubcommand("sync", "Fetch and pull from remote", _git_sync),
            RunSubcommand("wip", "Add all and commit as 'WIP'", _git_wip),
            RunSubcommand("unwip", "Undo last commit and unstage", _git_unwip),
            RunSubcommand("status", "Show git status", _git_passthrough("status")),
            RunSubcommand("log", "Show recent commits", _git_passthrough("log", "--oneline", "-10")),
            RunSubcommand("branches", "List local branches", _git_passthrough("branch")),
        ),
    ),
)


def all_run_commands() -> list[RunCommand]:
    return list(RUN_COMMANDS)


def run_command_by_name(name: str) -> RunCommand | None:
    for cmd in RUN_COMMANDS:
        if cmd.name == name:
            return cmd
    return None
