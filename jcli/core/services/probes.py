"""
Probe primitives — read-only access to the local machine.

Everything the catalog needs to inspect the workstation goes through
this module: PATH lookups, captured command output, directory sizes.
Catalog entries call these through the module (``probes.capture``) so
tests can swap them with ``monkeypatch.setattr``.

None of these functions raise for a missing binary, a non-zero exit
or a missing path; they degrade to ``ok=False`` / ``""`` / ``0``.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any

from jcli.core.services.version_parsers import strip_ansi

logger = logging.getLogger(__name__)

# Probes are local binaries; this only guards against a wedged process.
DEFAULT_PROBE_TIMEOUT = 30


def command_exists(name: str) -> bool:
    """True iff *name* resolves on ``PATH``."""
    if not name:
        return False
    return shutil.which(name) is not None


def capture(
    cmd: str,
    *args: str,
    timeout: float | None = DEFAULT_PROBE_TIMEOUT,
    input_text: str | None = None,
    merge_stderr: bool = True,
) -> dict[str, Any]:
    """Run a command with stdout and stderr merged and captured.

    With ``merge_stderr=False`` stderr is discarded, for commands whose
    stdout is machine-readable (``tailscale status --json``).

    Returns:
        ``{"ok": bool, "output": str, "returncode": int, "error": str}``.
        ``output`` has terminal escapes stripped.
    """
    argv = [cmd, *args]
    try:
        proc = subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_stderr else subprocess.DEVNULL,
            input=input_text,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError:
        return {"ok": False, "output": "", "returncode": 127, "error": f"{cmd}: command not found"}
    except subprocess.TimeoutExpired:
        logger.debug("Probe timed out after %ss: %s", timeout, argv)
        return {"ok": False, "output": "", "returncode": -1, "error": f"timed out after {timeout}s"}
    except OSError as e:
        logger.debug("Probe failed to start: %s (%s)", argv, e)
        return {"ok": False, "output": "", "returncode": -1, "error": str(e)}

    output = strip_ansi(proc.stdout or "")
    result: dict[str, Any] = {
        "ok": proc.returncode == 0,
        "output": output,
        "returncode": proc.returncode,
        "error": "",
    }
    if proc.returncode != 0:
        result["error"] = f"exit status {proc.returncode}"
    return result


def read_command_output_line(cmd: str, *args: str, timeout: float | None = DEFAULT_PROBE_TIMEOUT) -> str:
    """Trimmed output of a successful command, ``""`` otherwise."""
    result = capture(cmd, *args, timeout=timeout)
    if not result["ok"]:
        return ""
    return result["output"].strip()


def command_succeeds(cmd: str, *args: str, timeout: float | None = DEFAULT_PROBE_TIMEOUT) -> bool:
    return bool(capture(cmd, *args, timeout=timeout)["ok"])


def count_lines(text: str) -> int:
    """Number of non-empty lines in *text*."""
    return sum(1 for line in text.strip().split("\n") if line.strip())


# ── Filesystem ──────────────────────────────────────────────────


def home_dir() -> Path:
    """The user's home, honouring ``HOME`` first."""
    home = os.environ.get("HOME")
    return Path(home) if home else Path.home()


def expand_home(path: str) -> str:
    """Leading ``~/`` becomes the home directory; other paths are untouched."""
    if path.startswith("~/"):
        return str(home_dir() / path[2:])
    return path


def path_exists(path: str) -> bool:
    return os.path.lexists(expand_home(path))


def directory_size(path: str | Path) -> int:
    """Recursive sum of regular-file sizes under *path* (0 if missing)."""
    total = 0
    for root, _dirs, files in os.walk(path, onerror=lambda _e: None):
        for name in files:
            try:
                st = os.lstat(os.path.join(root, name))
            except OSError:
                continue
            if stat.S_ISREG(st.st_mode):
                total += st.st_size
    return total


# ── Version helpers ─────────────────────────────────────────────


def version_from_cmd(cmd: str, args: list[str], parser: Callable[[str], str]) -> Callable[[], str]:
    """Build a version probe: run ``cmd args`` and parse its output."""

    def _version() -> str:
        result = capture(cmd, *args)
        if not result["ok"]:
            return ""
        return parser(result["output"])

    return _version


def _second_field(text: str) -> str:
    parts = text.split()
    return parts[1] if len(parts) >= 2 else ""


def version_from_brew_formula(formula: str) -> Callable[[], str]:
    """``brew list --versions <formula>`` → ``"<formula> 1.2.3"`` → ``"1.2.3"``."""

    def _version() -> str:
        result = capture("brew", "list", "--versions", formula)
        return _second_field(result["output"]) if result["ok"] else ""

    return _version


def version_from_brew_cask(cask: str) -> Callable[[], str]:
    def _version() -> str:
        result = capture("brew", "list", "--cask", "--versions", cask)
        return _second_field(result["output"]) if result["ok"] else ""

    return _version


def version_from_app_plist(app_name: str) -> Callable[[], str]:
    """Read ``CFBundleShortVersionString`` of ``/Applications/<app>.app``."""

    def _version() -> str:
        plist = f"/Applications/{app_name}.app/Contents/Info.plist"
        return read_command_output_line("defaults", "read", plist, "CFBundleShortVersionString")

    return _version
