"""
Skills operations — wrappers around the external ``skills`` CLI.

Installs are global (``-g``) and non-interactive (``-y``).  Listing
parses the CLI's human output, so the parsers are deliberately strict
about what counts as a skill name.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from jcli.core.services import probes
from jcli.core.services.version_parsers import strip_ansi

logger = logging.getLogger(__name__)

SKILLS = "skills"

_BOX_CHARS = re.compile(r"[│├└┌◇]")
_VALID_NAME = re.compile(r"[a-z0-9_-]+")
_MAX_INDENT = 5

_BANNER_PHRASES = ("No global skills", "Global", "Skills")


def is_available() -> bool:
    return probes.command_exists(SKILLS)


def is_valid_skill_name(name: str) -> bool:
    """Lowercase letters, digits, ``-`` and ``_`` only; never empty."""
    return bool(name) and _VALID_NAME.fullmatch(name) is not None


# ── Parsers ─────────────────────────────────────────────────────


def parse_installed(output: str) -> list[str]:
    """Skill names from ``skills list -g``.

    Only lines starting at column 0 name skills; indented lines are
    descriptions and paths.
    """
    installed: list[str] = []
    for raw in strip_ansi(output).split("\n"):
        if raw[:1] in (" ", "\t"):
            continue
        line = raw.strip()
        if not line or line.startswith("Try "):
            continue
        if any(phrase in line for phrase in _BANNER_PHRASES):
            continue
        name = line.split()[0]
        if name.startswith(("/", "~")) or ":" in name:
            continue
        installed.append(name)
    return installed


def parse_repo_skills(output: str) -> list[str]:
    """Skill names from ``skills add <repo> --list``."""
    skills: list[str] = []
    in_section = False
    for line in strip_ansi(output).split("\n"):
        if "Available Skills" in line:
            in_section = True
            continue
        if not in_section:
            continue
        if "Use --skill" in line:
            break

        cleaned = _BOX_CHARS.sub("", line)
        indent = len(cleaned) - len(cleaned.lstrip(" "))
        name = cleaned.strip()
        if not name or indent > _MAX_INDENT or " " in name:
            continue
        if is_valid_skill_name(name):
            skills.append(name)
    return skills


# ── Operations ──────────────────────────────────────────────────


def list_installed() -> list[str]:
    """Globally installed skills; empty when the CLI is missing or fails."""
    result = probes.capture(SKILLS, "list", "-g", merge_stderr=False)
    if not result["ok"]:
        logger.debug("skills list failed: %s", result["error"])
        return []
    return parse_installed(result["output"])


def list_from_repo(repo: str) -> dict[str, Any]:
    """``{"ok": True, "skills": [...]}`` or ``{"ok": False, "error": ...}``."""
    result = probes.capture(SKILLS, "add", repo, "--list", timeout=120)
    if not result["ok"]:
        return {"ok": False, "error": f"failed to list skills in {repo}: {result['error']}"}
    return {"ok": True, "skills": parse_repo_skills(result["output"])}


def _run(args: list[str], failure: str) -> dict[str, Any]:
    logger.info("skills %s", " ".join(args))
    result = probes.capture(SKILLS, *args, timeout=300)
    if result["ok"]:
        return {"ok": True}
    detail = result["output"].strip() or result["error"]
    return {"ok": False, "error": f"{failure}: {detail}"}


def install(repo: str, skill: str) -> dict[str, Any]:
    return _run(["add", repo, "-g", "-y", "--skill", skill], f"failed to install {skill}")


def install_all(repo: str) -> dict[str, Any]:
    return _run(["add", repo, "-g", "-y", "--all"], f"failed to install skills from {repo}")


def remove(skill: str) -> dict[str, Any]:
    return _run(["remove", "-g", "-y", skill], f"failed to remove {skill}")


def remove_all() -> dict[str, Any]:
    return _run(["remove", "-g", "-y", "--all"], "failed to remove all skills")
