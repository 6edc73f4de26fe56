"""
Execution — the one place actions spawn external commands.

Actions (install, upgrade, clean, scripts, run shortcuts) stream their
output straight to the terminal, so the child inherits our stdio.
Read-only probes use ``jcli.core.services.probes.capture`` instead.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import time
from typing import Any

logger = logging.getLogger(__name__)


class ActionError(Exception):
    """Raised by catalog actions (custom install, script, clean) on failure."""


_SECRET_FLAGS = frozenset({"--auth-key", "--authkey"})


def redact_argv(cmd: list[str]) -> list[str]:
    """Copy of *cmd* safe to log: values of secret flags are masked."""
    out: list[str] = []
    mask_next = False
    for token in cmd:
        if mask_next:
            out.append("***")
            mask_next = False
            continue
        key, sep, _value = token.partition("=")
        if key in _SECRET_FLAGS:
            if sep:
                out.append(f"{key}=***")
            else:
                out.append(token)
                mask_next = True
            continue
        out.append(token)
    return out


def run_interactive(
    cmd: list[str],
    *,
    cwd: str | None = None,
    input_text: str | None = None,
    env_overrides: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Run *cmd* attached to the terminal.

    Args:
        cmd: Argument vector.
        cwd: Working directory.
        input_text: When set, fed to stdin instead of the terminal.
        env_overrides: Extra environment variables.

    Returns:
        ``{"ok": True, "returncode": 0, "elapsed_ms": N}`` on success,
        ``{"ok": False, "error": "...", ...}`` on failure.
    """
    env = None
    if env_overrides:
        env = os.environ.copy()
        env.update(env_overrides)

    logger.info("exec: %s", " ".join(redact_argv(cmd)))
    start = time.monotonic()
    try:
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            env=env,
            input=input_text,
            text=input_text is not None,
            check=False,
        )
    except FileNotFoundError:
        return {"ok": False, "returncode": 127, "error": f"{cmd[0]}: command not found"}
    except OSError as e:
        logger.exception("Subprocess error: %s", redact_argv(cmd))
        return {"ok": False, "returncode": -1, "error": str(e)}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    if proc.returncode == 0:
        return {"ok": True, "returncode": 0, "elapsed_ms": elapsed_ms}

    logger.debug("exec failed (exit %d, %dms): %s", proc.returncode, elapsed_ms, redact_argv(cmd))
    return {
        "ok": False,
        "returncode": proc.returncode,
        "error": f"{cmd[0]} exited with status {proc.returncode}",
        "elapsed_ms": elapsed_ms,
    }


def run_or_raise(cmd: list[str], **kwargs: Any) -> None:
    """``run_interactive`` that raises ``ActionError`` on failure."""
    result = run_interactive(cmd, **kwargs)
    if not result["ok"]:
        raise ActionError(result["error"])


def run_tee(cmd: list[str]) -> dict[str, Any]:
    """Run *cmd* with output both shown live and captured.

    stdin stays attached so the child can prompt (``tailscale up``
    prints its login URL and waits).  stderr is folded into stdout.

    Returns:
        ``{"ok": bool, "output": str, "returncode": int, "error": str}``.
    """
    logger.info("exec: %s", " ".join(redact_argv(cmd)))
    try:
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
        )
    except FileNotFoundError:
        return {"ok": False, "output": "", "returncode": 127, "error": f"{cmd[0]}: command not found"}
    except OSError as e:
        return {"ok": False, "output": "", "returncode": -1, "error": str(e)}

    chunks: list[str] = []
    for line in proc.stdout or ():
        sys.stdout.write(line)
        sys.stdout.flush()
        chunks.append(line)
    proc.wait()

    output = "".join(chunks)
    if proc.returncode == 0:
        return {"ok": True, "output": output, "returncode": 0, "error": ""}
    return {
        "ok": False,
        "output": output,
        "returncode": proc.returncode,
        "error": f"{cmd[0]} exited with status {proc.returncode}",
    }
