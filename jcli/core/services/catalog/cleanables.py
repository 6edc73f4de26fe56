"""
Cleanable catalog — reclaimable storage with a size probe and a clean action.
"""

from __future__ import annotations

import shutil

from jcli.core.models.catalog import Cleanable
from jcli.core.services import probes
from jcli.core.services.tool_install.subprocess_runner import ActionError, run_interactive, run_or_raise

_DOCKER_PRUNES = (
    ["docker", "container", "prune", "-f"],
    ["docker", "image", "prune", "-f"],
    ["docker", "volume", "prune", "-f"],
    ["docker", "network", "prune", "-f"],
    ["docker", "builder", "prune", "-f"],
)


def _home_size(relative: str):
    def _size() -> int:
        return probes.directory_size(probes.home_dir() / relative)

    return _size


def _clean_brew() -> None:
    run_or_raise(["brew", "cleanup"])


def _clean_docker() -> None:
    # One failing prune (daemon quirk, nothing to prune) must not stop the rest
    for argv in _DOCKER_PRUNES:
        run_interactive(argv)


def _clean_multipass() -> None:
    run_interactive(["multipass", "delete", "--all"])
    run_or_raise(["multipass", "purge"])


def _clean_trash() -> None:
    trash = probes.home_dir() / ".Trash"
    shutil.rmtree(trash, ignore_errors=True)
    try:
        trash.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as e:
        raise ActionError(f"failed to recreate {trash}: {e}") from e


CLEANABLES: tuple[Cleanable, ...] = (
    Cleanable(
        name="brew",
        description="Clean Homebrew cache",
        requires_command="brew",
        clean_fn=_clean_brew,
        size_fn=_home_size("Library/Caches/Homebrew"),
    ),
    Cleanable(
        name="docker",
        description="Clean Docker containers, images, volumes",
        requires_command="docker",
        clean_fn=_clean_docker,
    ),
    Cleanable(
        name="multipass",
        description="Remove all Multipass instances",
        requires_command="multipass",
        clean_fn=_clean_multipass,
        size_fn=_home_size("Library/Application Support/multipassd"),
    ),
    Cleanable(
        name="trash",
        description="Empty system trash",
        clean_fn=_clean_trash,
        size_fn=_home_size(".Trash"),
    ),
)

_BY_NAME: dict[str, Cleanable] = {c.name: c for c in CLEANABLES}


def all_cleanables() -> list[Cleanable]:
    return list(CLEANABLES)


def cleanable_by_name(name: str) -> Cleanable | None:
    return _BY_NAME.get(name)


def available_cleanables() -> list[Cleanable]:
    """Cleanables whose required command is present."""
    return [
        c for c in CLEANABLES
        if not c.requires_command or probes.command_exists(c.requires_command)
    ]
