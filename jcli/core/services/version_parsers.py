"""
Version parsers — one pure function per tool output format.

Every parser strips terminal escape sequences first, so feeding a
colorized ``--version`` output gives the same answer as the plain one.
Parsers never raise; unrecognized output yields ``""``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")


def strip_ansi(s: str) -> str:
    """Remove ``ESC [ params final`` color/cursor sequences."""
    return _ANSI_RE.sub("", s)


def _first_line_field(s: str, index: int, *, strip_v: bool = False) -> str:
    lines = strip_ansi(s).split("\n")
    parts = lines[0].split() if lines else []
    if len(parts) <= index:
        return ""
    value = parts[index]
    if strip_v:
        value = value.removeprefix("v")
    return value


# ── Generic ─────────────────────────────────────────────────────


def trim_version(s: str) -> str:
    """``"v1.2.3\\n"`` → ``"1.2.3"``."""
    return strip_ansi(s).strip().removeprefix("v").strip()


def first_line(s: str) -> str:
    """First non-empty line, trimmed."""
    for line in strip_ansi(s).split("\n"):
        line = line.strip()
        if line:
            return line
    return ""


# ── Per-tool parsers ────────────────────────────────────────────


def parse_brew_version(s: str) -> str:
    """``"Homebrew 4.2.0\\n..."`` → ``"4.2.0"``."""
    return _first_line_field(s, 1)


def parse_git_version(s: str) -> str:
    """``"git version 2.39.0 (Apple Git-145)"`` → ``"2.39.0"``."""
    v = strip_ansi(s).strip().removeprefix("git version ")
    idx = v.find(" (")
    if idx != -1:
        v = v[:idx]
    return v


def parse_go_version(s: str) -> str:
    """``"go version go1.21.0 darwin/arm64"`` → ``"1.21.0"``."""
    parts = strip_ansi(s).split()
    if len(parts) >= 3:
        return parts[2].removeprefix("go")
    return ""


def parse_java_version(s: str) -> str:
    """``'openjdk version "21.0.1" 2023-10-17'`` → ``"21.0.1"``."""
    for line in strip_ansi(s).split("\n"):
        if "version" not in line:
            continue
        start = line.find('"')
        end = line.rfind('"')
        if start != -1 and end > start:
            return line[start + 1:end]
    return ""


def parse_python_version(s: str) -> str:
    """``"Python 3.12.0"`` → ``"3.12.0"``."""
    return strip_ansi(s).strip().removeprefix("Python ")


def parse_rust_version(s: str) -> str:
    """``"rustc 1.75.0 (82e1608df 2023-12-21)"`` → ``"1.75.0"``."""
    return _first_line_field(s, 1)


def parse_terraform_version(s: str) -> str:
    """``"Terraform v1.5.7\\non darwin_arm64"`` → ``"1.5.7"``."""
    return _first_line_field(s, 1, strip_v=True)


def parse_ansible_version(s: str) -> str:
    """``"ansible [core 2.15.0]"`` → ``"2.15.0"``."""
    lines = strip_ansi(s).split("\n")
    line = lines[0] if lines else ""
    start = line.find("[core ")
    end = line.find("]")
    if start != -1 and end > start:
        return line[start + len("[core "):end]
    parts = line.split()
    if len(parts) >= 2:
        return parts[1]
    return ""


def parse_ansible_lint_version(s: str) -> str:
    """``"ansible-lint 25.12.2 using ansible-core:2.20.1"`` → ``"25.12.2"``."""
    return _first_line_field(s, 1)


def parse_multipass_version(s: str) -> str:
    """``"multipass   1.12.0+mac\\nmultipassd 1.12.0+mac"`` → ``"1.12.0+mac"``."""
    return _first_line_field(s, 1)


def parse_codex_version(s: str) -> str:
    """``"codex-cli 0.1.0"`` → ``"0.1.0"``; a bare ``"0.1.0"`` is kept."""
    v = _first_line_field(s, 1)
    if v:
        return v
    return strip_ansi(s).strip()


def parse_mole_version(s: str) -> str:
    """Finds ``"Mole version 1.14.5"`` anywhere in the banner."""
    for line in strip_ansi(s).split("\n"):
        if line.startswith("Mole version"):
            parts = line.split()
            if len(parts) >= 3:
                return parts[2]
    return ""


def parse_claude_version(s: str) -> str:
    """``"2.0.76 (Claude Code)"`` → ``"2.0.76"``."""
    parts = strip_ansi(s).strip().split()
    return parts[0] if parts else ""


def parse_pulumi_version(s: str) -> str:
    """``"v3.100.0"`` → ``"3.100.0"``."""
    return strip_ansi(s).strip().removeprefix("v")


def parse_happy_coder_version(s: str) -> str:
    """``"happy version: 0.13.0\\n..."`` → ``"0.13.0"``."""
    lines = strip_ansi(s).split("\n")
    line = lines[0] if lines else ""
    if line.startswith("happy version:"):
        return line.removeprefix("happy version:").strip()
    return ""


def parse_tailscale_version(s: str) -> str:
    """``"1.76.1\\n  tailscale commit: ..."`` → ``"1.76.1"``."""
    return first_line(s)


def parse_tmux_version(s: str) -> str:
    """``"tmux 3.4"`` → ``"3.4"``."""
    return _first_line_field(s, 1)


def parse_gh_version(s: str) -> str:
    """``"gh version 2.40.1 (2023-12-13)\\nhttps://..."`` → ``"2.40.1"``."""
    for line in strip_ansi(s).split("\n"):
        parts = line.split()
        if len(parts) >= 3 and parts[0] == "gh" and parts[1] == "version":
            return parts[2]
    return ""


def parse_eas_version(s: str) -> str:
    return _first_line_field(s, 1)


# ── Formatters ──────────────────────────────────────────────────


def format_bytes(size: int) -> str:
    """Human-readable size with 1024 steps: ``1024`` → ``"1.0 KB"``."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def filter_strings(values: Iterable[str], exclude: Iterable[str]) -> list[str]:
    """Values not in *exclude*, order preserved (used by completion)."""
    skip = set(exclude)
    return [v for v in values if v not in skip]
