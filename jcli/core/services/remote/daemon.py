"""
Detached helper processes — userspace ``tailscaled`` and ``caffeinate``.

Both outlive ``j``: they start in their own session with stdio
redirected, and their PID files under ``~/.config/jterrazz/tailscale``
are the only record of them.  Liveness is re-checked with signal 0 on
every access and stale PID files are removed.
"""

from __future__ import annotations

import errno
import logging
import os
import signal
import subprocess
import time
from pathlib import Path

from jcli.core.models.remote import RemoteMode
from jcli.core.services import probes
from jcli.core.services.remote import tailscale
from jcli.core.services.remote.errors import DaemonNotReadyError, RemoteError

logger = logging.getLogger(__name__)

DIR_MODE = 0o700
FILE_MODE = 0o600

READY_TIMEOUT = 4.0
READY_POLL_INTERVAL = 0.25


# ── PID files ───────────────────────────────────────────────────


def read_pid(path: Path) -> int | None:
    """PID stored in *path*, ``None`` when missing or not a positive int."""
    try:
        raw = path.read_text(encoding="utf-8").strip()
    except OSError:
        return None
    try:
        pid = int(raw)
    except ValueError:
        return None
    return pid if pid > 0 else None


def write_pid(path: Path, pid: int) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(str(pid))


def process_running(pid: int) -> bool:
    """Signal-0 liveness; a process we may not signal still counts as alive."""
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True
    except OSError as e:
        return e.errno == errno.EPERM
    return True


def _terminate(pid: int) -> None:
    try:
        os.kill(pid, signal.SIGTERM)
    except OSError as e:
        logger.debug("SIGTERM %d: %s", pid, e)


def _ensure_dir() -> Path:
    directory = tailscale.userspace_dir()
    try:
        directory.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    except OSError as e:
        raise RemoteError(f"failed to create userspace directory: {e}") from e
    return directory


# ── Userspace tailscaled ────────────────────────────────────────


def daemon_ready() -> bool:
    return tailscale.tailscale_status(RemoteMode.USERSPACE) is not None


def ensure_userspace_daemon(
    *,
    timeout: float = READY_TIMEOUT,
    interval: float = READY_POLL_INTERVAL,
) -> None:
    """Start ``tailscaled --tun=userspace-networking`` unless it already answers.

    Raises:
        RemoteError: ``tailscaled`` missing or failed to start.
        DaemonNotReadyError: Socket not answering within *timeout*.
    """
    if daemon_ready():
        logger.debug("Userspace tailscaled already running")
        return

    if not probes.command_exists("tailscaled"):
        raise RemoteError("tailscaled is required for userspace mode")

    _ensure_dir()
    log = tailscale.log_path()
    try:
        log_fd = os.open(log, os.O_APPEND | os.O_CREAT | os.O_WRONLY, FILE_MODE)
    except OSError as e:
        raise RemoteError(f"failed to open tailscaled log file: {e}") from e

    argv = [
        "tailscaled",
        "--tun=userspace-networking",
        f"--state={tailscale.state_path()}",
        f"--socket={tailscale.socket_path()}",
    ]
    logger.info("Starting userspace tailscaled")
    try:
        proc = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=log_fd,
            stderr=log_fd,
            start_new_session=True,
        )
    except OSError as e:
        raise RemoteError(f"failed to start userspace tailscaled: {e}") from e
    finally:
        os.close(log_fd)

    try:
        write_pid(tailscale.daemon_pid_path(), proc.pid)
    except OSError as e:
        logger.warning("Could not record tailscaled pid: %s", e)
    # Detached for good; dropping the handle leaves it running after exit
    del proc

    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if daemon_ready():
            logger.debug("Userspace tailscaled is ready")
            return
        time.sleep(interval)

    raise DaemonNotReadyError(str(log))


def is_daemon_running() -> bool:
    """Recorded userspace daemon is alive (PID file only, no socket check)."""
    pid = read_pid(tailscale.daemon_pid_path())
    return pid is not None and process_running(pid)


def stop_userspace_daemon() -> None:
    """SIGTERM the recorded daemon and drop its PID file; silent if none."""
    path = tailscale.daemon_pid_path()
    pid = read_pid(path)
    if pid is None:
        return
    logger.info("Stopping userspace tailscaled (pid %d)", pid)
    _terminate(pid)
    path.unlink(missing_ok=True)


# ── Keep-awake ──────────────────────────────────────────────────


def is_keep_awake_running() -> bool:
    path = tailscale.keep_awake_pid_path()
    pid = read_pid(path)
    if pid is None:
        return False
    if process_running(pid):
        return True
    logger.debug("Removing stale keep-awake pid file (pid %d)", pid)
    path.unlink(missing_ok=True)
    return False


def ensure_keep_awake() -> None:
    """Run ``caffeinate -i`` in the background while the tailnet is up.

    No-op where ``caffeinate`` does not exist (non-macOS).
    """
    if not probes.command_exists("caffeinate"):
        return
    if is_keep_awake_running():
        return

    _ensure_dir()
    try:
        proc = subprocess.Popen(
            ["caffeinate", "-i"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        raise RemoteError(f"failed to start caffeinate: {e}") from e

    try:
        write_pid(tailscale.keep_awake_pid_path(), proc.pid)
    except OSError as e:
        _terminate(proc.pid)
        raise RemoteError(f"failed to persist caffeinate pid: {e}") from e
    logger.info("Keep-awake started (pid %d)", proc.pid)


def stop_keep_awake() -> None:
    path = tailscale.keep_awake_pid_path()
    pid = read_pid(path)
    if pid is not None:
        _terminate(pid)
    path.unlink(missing_ok=True)
