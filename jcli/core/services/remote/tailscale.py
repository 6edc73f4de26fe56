"""
Tailscale CLI wrapper — argument building, invocation and the
"non-default flags" retry.

``tailscale up`` refuses a partial preference update when the node was
previously brought up with other non-default flags, and prints the full
command it would accept::

    Error: changing settings via 'tailscale up' requires mentioning all
    non-default flags. To proceed, either re-run your command with
    --reset or use the command below to explicitly mention the current
    value of all non-default settings:

            tailscale up --ssh --accept-routes --hostname=worker-old

``merge_up_args`` folds the user's flags into that suggestion so the
retry keeps unrelated preferences and applies the requested ones.
Output shapes other than the one above are not retried.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jcli.core.models.remote import RemoteAuthMethod, RemoteMode, RemoteSettings
from jcli.core.persistence.jrc_file import config_dir
from jcli.core.services import probes
from jcli.core.services.remote.errors import RemoteCommandError
from jcli.core.services.tool_install.subprocess_runner import run_tee

logger = logging.getLogger(__name__)

TAILSCALE = "tailscale"

_NON_DEFAULT_FLAGS = re.compile(r"requires mentioning all\s+non-default flags")
_SUGGESTED_PREFIX = "tailscale up "

# Readiness probes must not hang if the socket is wedged
STATUS_TIMEOUT = 5


# ── Paths ───────────────────────────────────────────────────────


def userspace_dir() -> Path:
    """``~/.config/jterrazz/tailscale``."""
    return config_dir() / "tailscale"


def socket_path() -> Path:
    return userspace_dir() / "tailscaled.sock"


def state_path() -> Path:
    return userspace_dir() / "tailscaled.state"


def log_path() -> Path:
    return userspace_dir() / "tailscaled.log"


def daemon_pid_path() -> Path:
    return userspace_dir() / "tailscaled.pid"


def keep_awake_pid_path() -> Path:
    return userspace_dir() / "caffeinate.pid"


# ── Invocation ──────────────────────────────────────────────────


def tailscale_args(mode: RemoteMode, *args: str) -> list[str]:
    """Prefix *args* with the userspace socket when *mode* needs it."""
    if mode is RemoteMode.USERSPACE:
        return ["--socket", str(socket_path()), *args]
    return list(args)


def run_tailscale(mode: RemoteMode, *args: str) -> dict[str, Any]:
    """Run ``tailscale`` attached to the terminal, output also captured."""
    return run_tee([TAILSCALE, *tailscale_args(mode, *args)])


def tailscale_status(mode: RemoteMode) -> dict[str, Any] | None:
    """Parsed ``tailscale status --json``, or ``None`` when unreachable."""
    result = probes.capture(
        TAILSCALE, *tailscale_args(mode, "status", "--json"),
        timeout=STATUS_TIMEOUT, merge_stderr=False,
    )
    if not result["ok"]:
        return None
    try:
        data = json.loads(result["output"])
    except ValueError as e:
        logger.debug("Unparseable tailscale status: %s", e)
        return None
    return data if isinstance(data, dict) else None


def format_command_error(output: str, fallback: str) -> str:
    """Message of the first ``Error:`` line in *output*, else *fallback*."""
    for line in output.split("\n"):
        trimmed = line.strip()
        if trimmed.startswith("Error:"):
            return trimmed[len("Error:"):].strip()
    return fallback


# ── up arguments ────────────────────────────────────────────────


def build_up_args(settings: RemoteSettings) -> list[str]:
    args = ["up", "--ssh"]
    if settings.hostname:
        args += ["--hostname", settings.hostname]
    if settings.auth_method is RemoteAuthMethod.AUTHKEY:
        args += ["--auth-key", settings.secret]
    return args


def should_retry_with_suggested_flags(output: str) -> bool:
    return _NON_DEFAULT_FLAGS.search(output.lower()) is not None


def parse_suggested_up_flags(output: str) -> list[str]:
    """Flags of the first ``tailscale up …`` line in *output*."""
    for line in output.split("\n"):
        trimmed = line.strip()
        if trimmed.startswith(_SUGGESTED_PREFIX):
            fields = trimmed.split()
            if len(fields) > 2:
                return fields[2:]
    return []


@dataclass(frozen=True)
class CliFlag:
    key: str
    tokens: tuple[str, ...]


def parse_cli_flags(tokens: list[str]) -> list[CliFlag]:
    """Group ``--k=v``, ``--k v`` and bare ``--k`` tokens by flag name.

    Tokens that are neither a flag nor a flag's value are dropped.
    """
    flags: list[CliFlag] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if not token.startswith("--"):
            i += 1
            continue
        eq = token.find("=")
        if eq > 0:
            flags.append(CliFlag(token[:eq], (token,)))
        elif i + 1 < len(tokens) and not tokens[i + 1].startswith("--"):
            flags.append(CliFlag(token, (token, tokens[i + 1])))
            i += 1
        else:
            flags.append(CliFlag(token, (token,)))
        i += 1
    return flags


def merge_up_args(desired_up_args: list[str], suggested_flags: list[str]) -> list[str]:
    """Argv for the retry: desired values win, suggested-only flags are kept.

    Suggested order is preserved; desired flags the suggestion does not
    mention are appended at the end.
    """
    desired_tokens = desired_up_args[1:] if desired_up_args[:1] == ["up"] else desired_up_args
    desired = parse_cli_flags(desired_tokens)
    suggested = parse_cli_flags(suggested_flags)

    desired_by_key = {f.key: f for f in desired}
    suggested_keys = {f.key for f in suggested}

    merged: list[str] = []
    for flag in suggested:
        chosen = desired_by_key.get(flag.key, flag)
        merged.extend(chosen.tokens)
    for flag in desired:
        if flag.key not in suggested_keys:
            merged.extend(flag.tokens)
    return ["up", *merged]


def tailscale_up(mode: RemoteMode, settings: RemoteSettings) -> None:
    """``tailscale up`` with one merge-and-retry on the non-default-flags refusal.

    Raises:
        RemoteCommandError: With the client's ``Error:`` message.
    """
    up_args = build_up_args(settings)
    result = run_tailscale(mode, *up_args)
    if result["ok"]:
        return

    output = result["output"]
    if should_retry_with_suggested_flags(output):
        suggested = parse_suggested_up_flags(output)
        if suggested:
            retry_args = merge_up_args(up_args, suggested)
            logger.info("Retrying tailscale up with current non-default flags")
            retry = run_tailscale(mode, *retry_args)
            if retry["ok"]:
                return
            raise RemoteCommandError(format_command_error(retry["output"], retry["error"]))

    raise RemoteCommandError(format_command_error(output, result["error"]))
