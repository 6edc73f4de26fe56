"""Remote access errors.  All of them propagate to the CLI as exit code 1."""

from __future__ import annotations


class RemoteError(Exception):
    """Base for every remote lifecycle failure."""


class ConfigError(RemoteError):
    """``jrc.json`` is unreadable, unwritable or fails validation."""


class DaemonNotReadyError(RemoteError):
    """The userspace tailscaled did not answer on its socket in time."""

    def __init__(self, log_path: str) -> None:
        super().__init__(f"userspace tailscaled did not become ready (check {log_path})")
        self.log_path = log_path


class RemoteCommandError(RemoteError):
    """A ``tailscale`` / ``tailscaled`` invocation failed."""
